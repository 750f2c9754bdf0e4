"""
ICP Lead Scorer - Main Orchestrator
===================================
Orchestrates the three-stage pipeline over the stored businesses:
  Stage 1: Website Analysis → Stage 2: Category Classification →
  Stage 3: Weighted Scoring

Key behaviours:
- Stale or missing website analyses are refreshed before single scoring
- A failed refresh never blocks scoring; existing data is used instead
- Bulk scoring runs in parallel and isolates failures per business
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Dict, List, Optional, Union

from .models.schemas import Business, BusinessScore, BulkScoreSummary, BulkTarget
from .models.icp_config import ICPConfig, ICPType
from .stages.stage1_website import WebsiteAnalysisStage
from .stages.stage3_scoring import WeightedScoringStage
from .storage import BusinessStore, ICPConfigStore
from .config.settings import BULK_MAX_WORKERS
from .exceptions import WebsiteFetchError

logger = logging.getLogger(__name__)


class ICPScoringEngine:
    """
    Main ICP Scoring Engine that ties stores and stages together.
    """

    def __init__(
        self,
        config_store: Optional[ICPConfigStore] = None,
        business_store: Optional[BusinessStore] = None,
        website_stage: Optional[WebsiteAnalysisStage] = None,
        scoring_stage: Optional[WeightedScoringStage] = None,
    ):
        """
        Initialize the scoring engine.

        Args:
            config_store: ICP configuration store (seeded with defaults when empty)
            business_store: Business store
            website_stage: Website analysis stage, used for refreshing stale analyses
            scoring_stage: Weighted scoring stage
        """
        self.configs = config_store or ICPConfigStore()
        self.businesses = business_store or BusinessStore()
        self.website_stage = website_stage or WebsiteAnalysisStage()
        self.scoring_stage = scoring_stage or WeightedScoringStage()

        self._stats_lock = threading.Lock()
        self.configs.ensure_defaults()
        self.reset_stats()

    def score_business(
        self,
        business_id: str,
        icp_type: ICPType,
        refresh_analysis: bool = True,
    ) -> BusinessScore:
        """
        Score one stored business and save the result on it.

        Args:
            business_id: ID of the stored business
            icp_type: Which ICP configuration to score against
            refresh_analysis: Re-analyze the website first when the stored analysis is stale

        Returns:
            BusinessScore with the score and per-factor breakdown

        Raises:
            NotFoundError: unknown business or no configuration for icp_type
        """
        business = self.businesses.get(business_id)
        config = self.configs.get_by_type(icp_type)

        refreshed = False
        if refresh_analysis and self.website_stage.needs_refresh(business):
            business, refreshed = self._refresh_analysis(business)

        result = self.scoring_stage.process(business, config)
        self.businesses.save_scores(business_id, {config.type: result})
        self._count(businesses_scored=1)

        logger.info(
            "Scored %s (%s) with %s: %s/10",
            business.name, business_id, config.name, result.score,
        )

        return BusinessScore(
            business_id=business_id,
            icp_type=config.type,
            config_name=config.name,
            score=result.score,
            breakdown=result.breakdown,
            calculated_at=result.calculated_at,
            analysis_refreshed=refreshed,
        )

    def score_batch(
        self,
        target: Union[BulkTarget, ICPType, str],
        max_workers: int = BULK_MAX_WORKERS,
    ) -> BulkScoreSummary:
        """
        Score every stored business against one or both ICP types.

        Stored website analyses are used as they are; nothing is fetched.

        Args:
            target: "midmarket", "independent" or "both"
            max_workers: Number of parallel workers

        Returns:
            BulkScoreSummary with processed / error counts

        Raises:
            NotFoundError: a single ICP type was requested and no configuration exists for it
        """
        start_time = time.time()
        target = BulkTarget(target)

        if target == BulkTarget.BOTH:
            configs = self.configs.list()
        else:
            configs = [self.configs.get_by_type(ICPType(target.value))]

        businesses = self.businesses.list()
        processed = 0
        errors = 0

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            futures = {
                executor.submit(self._score_with_configs, business, configs): business
                for business in businesses
            }
            for future in as_completed(futures):
                business = futures[future]
                try:
                    future.result()
                    processed += 1
                except Exception:
                    logger.exception("Error processing business %s", business.business_id)
                    errors += 1

        total_time = (time.time() - start_time) * 1000
        self._count(bulk_runs=1, businesses_scored=processed, errors=errors)

        logger.info(
            "Bulk ICP calculation (%s): %d processed, %d errors, %d total",
            target.value, processed, errors, len(businesses),
        )

        return BulkScoreSummary(
            icp_types=[c.type for c in configs],
            processed=processed,
            errors=errors,
            total=len(businesses),
            processing_time_ms=round(total_time, 2),
        )

    def get_stats(self) -> Dict[str, Any]:
        """Get engine statistics"""
        with self._stats_lock:
            stats = self.stats.copy()
        stats["stored_businesses"] = len(self.businesses.list())
        stats["stored_configs"] = len(self.configs.list())
        return stats

    def reset_stats(self):
        """Reset engine statistics"""
        with self._stats_lock:
            self.stats = {
                "businesses_scored": 0,
                "bulk_runs": 0,
                "analyses_refreshed": 0,
                "errors": 0,
            }

    # =========================================================================
    # Helper Methods
    # =========================================================================

    def _score_with_configs(self, business: Business, configs: List[ICPConfig]) -> None:
        # all scores or none are stored
        results = {config.type: self.scoring_stage.process(business, config) for config in configs}
        self.businesses.save_scores(business.business_id, results)

    def _count(self, **increments: int) -> None:
        with self._stats_lock:
            for key, value in increments.items():
                self.stats[key] += value

    def _refresh_analysis(self, business: Business):
        """Re-analyze the website; on failure keep the existing analysis"""
        logger.info("Website analysis missing or outdated, analyzing %s", business.website)
        try:
            analysis = self.website_stage.fetch_and_analyze(business.website)
        except WebsiteFetchError as e:
            logger.warning("Could not refresh website analysis for %s: %s", business.business_id, e)
            self._count(errors=1)
            return business, False

        self._count(analyses_refreshed=1)
        return self.businesses.set_website_analysis(business.business_id, analysis), True
