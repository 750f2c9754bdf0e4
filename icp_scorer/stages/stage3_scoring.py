"""
Stage 3: Weighted Scoring
=========================
Deterministic ICP fit score on a 0-10 scale.

Each enabled factor yields a fit percent (0-100) which is scaled by the
factor weight:

    contribution = percent / 100 * weight
    score        = round(sum(contributions), 1)

The score stays within 0-10 only when the enabled weights add up to 10.
That is left to whoever builds the configuration; nothing is clamped here.
"""

import logging
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from ..models.schemas import Business, FactorBreakdown, ScoreResult
from ..models.icp_config import FactorName, ICPConfig, ICPType, LocationFactorSpec
from .stage2_categories import CategoryClassificationStage

logger = logging.getLogger(__name__)

WEBSITE_FACTORS = (
    FactorName.POOR_SEO,
    FactorName.HAS_WHATSAPP,
    FactorName.HAS_RESERVATION,
    FactorName.HAS_DIRECT_ORDERING,
)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round halves up, unlike the built-in round() which rounds them to even"""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


class WeightedScoringStage:
    """
    Stage 3: Calculate the weighted ICP score for one business.
    """

    def __init__(self, categories: Optional[CategoryClassificationStage] = None):
        self.categories = categories or CategoryClassificationStage()

    def process(self, business: Optional[Business], config: Optional[ICPConfig]) -> ScoreResult:
        """
        Score a business against an ICP configuration.

        Args:
            business: Business to score
            config: ICP configuration with factor weights

        Returns:
            ScoreResult with the 0-10 score and a per-factor breakdown.
            Missing business or config gives a result with score None.
        """
        if business is None or config is None:
            logger.debug("Missing config or business data, returning empty score")
            return ScoreResult(score=None, breakdown={})

        logger.debug("Scoring %s with %s profile", business.name, config.name)

        breakdown: Dict[FactorName, FactorBreakdown] = {}
        total = 0.0

        for name, factor in config.factors.items():
            if not factor.enabled:
                continue

            scored = self._score_factor(name, business, config)
            if scored is None:
                continue

            percent, value = scored
            contribution = (percent / 100) * factor.weight
            breakdown[name] = FactorBreakdown(
                score_percent=percent,
                weight=factor.weight,
                contribution=contribution,
                value=value,
            )
            total += contribution
            logger.debug("  %s: %r -> %s%% -> +%.2f", name.value, value, percent, contribution)

        score = round_half_up(total, 1)
        logger.debug(
            "Final score for %s: %s/10 (%s)",
            business.name,
            score,
            ", ".join(f"{k.value}: {v.contribution:.2f}" for k, v in breakdown.items()),
        )

        return ScoreResult(
            score=score,
            breakdown=breakdown,
            calculated_at=datetime.utcnow(),
        )

    def _score_factor(
        self, name: FactorName, business: Business, config: ICPConfig
    ) -> Optional[Tuple[float, Any]]:
        """Fit percent and reported value for one factor, or None when it does not apply"""
        if name == FactorName.NUM_LOCATIONS:
            ideal: LocationFactorSpec = config.factors.num_locations
            percent = score_locations(business.num_locations, ideal.min_ideal, ideal.max_ideal, config.type)
            return percent, business.num_locations

        if name == FactorName.NO_WEBSITE:
            if config.type != ICPType.INDEPENDENT:
                return None
            has_no_website = not business.website
            return (100 if has_no_website else 0), has_no_website

        if name in WEBSITE_FACTORS:
            if business.website_analysis is None:
                return None
            return self._score_website_factor(name, business)

        if name == FactorName.GEOGRAPHY:
            in_target = is_in_target_country(business, config.target_countries)
            return (100 if in_target else 0), business.country

        if name == FactorName.DELIVERY_INTENSIVE_CATEGORY:
            category = self.categories.delivery_category(business)
            return self.categories.delivery_score(category), category.value

        if name == FactorName.BOOKING_INTENSIVE_CATEGORY:
            category = self.categories.booking_category(business)
            return self.categories.booking_score(category), category.value

        return None

    def _score_website_factor(self, name: FactorName, business: Business) -> Tuple[float, Any]:
        analysis = business.website_analysis

        if name == FactorName.POOR_SEO:
            # Rewards good on-page SEO; unknown sits in the middle
            if analysis.has_seo is True:
                percent = 100
            elif analysis.has_seo is False:
                percent = 0
            else:
                percent = 50
            return percent, analysis.has_seo

        if name == FactorName.HAS_WHATSAPP:
            return (100 if analysis.has_whatsapp is True else 0), analysis.has_whatsapp

        if name == FactorName.HAS_RESERVATION:
            return (100 if analysis.has_reservation is True else 0), analysis.has_reservation

        # Direct ordering scores fully even when third-party delivery is also present
        percent = 100 if analysis.has_direct_ordering is True else 0
        return percent, {
            "has_direct_ordering": analysis.has_direct_ordering,
            "has_third_party_delivery": analysis.has_third_party_delivery,
        }


# =========================================================================
# Factor rules
# =========================================================================

def score_locations(
    num_locations: Optional[int],
    min_ideal: float,
    max_ideal: Optional[float],
    icp_type: str,
) -> float:
    """Fit percent for the number of locations"""
    if not num_locations or num_locations < 1:
        return 0

    if icp_type == ICPType.MIDMARKET:
        if num_locations >= min_ideal:
            return 100
        if num_locations >= min_ideal / 2:
            return round_half_up(num_locations / min_ideal * 100)
        return round_half_up(num_locations / min_ideal * 50)

    if icp_type == ICPType.INDEPENDENT:
        too_many = max_ideal is not None and num_locations > max_ideal
        if num_locations >= min_ideal and not too_many:
            return 100
        if num_locations == 1:
            return 70
        if too_many:
            return max(0, 100 - (num_locations - max_ideal) * 10)
        return 30

    return 50


def is_in_target_country(business: Business, target_countries: List[str]) -> bool:
    """
    Check the country field, then the address, then the location names.
    Address and location names match on a case-insensitive substring.
    """
    if not target_countries:
        return False

    if business.country and business.country in target_countries:
        return True

    targets = [country.lower() for country in target_countries if country]

    if business.address:
        address = business.address.lower()
        if any(country in address for country in targets):
            return True

    for location in business.location_names:
        location = location.lower()
        if any(country in location for country in targets):
            return True

    return False


_default_stage = WeightedScoringStage()


def calculate_icp_score(business: Optional[Business], config: Optional[ICPConfig]) -> ScoreResult:
    """Score a business against an ICP configuration (see WeightedScoringStage.process)"""
    return _default_stage.process(business, config)
