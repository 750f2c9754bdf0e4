"""
Stage 1: Website Analysis
=========================
Extracts the homepage signals used by the website factors.

Signals:
- SEO: title, meta description, h1 and JSON-LD (3 of 4 required)
- WhatsApp contact links
- Reservation CTAs and booking platforms (EN/ES/IT/PT)
- Third-party delivery platforms
- Direct ordering (carts, checkout, owned ordering systems)
"""

import logging
import re
from datetime import datetime, timedelta, timezone
from typing import Optional, Pattern, Tuple

import httpx
from bs4 import BeautifulSoup

from ..models.schemas import Business, WebsiteAnalysis
from ..exceptions import WebsiteFetchError
from ..config.settings import (
    ANALYSIS_MAX_AGE_DAYS,
    CART_SELECTORS,
    HTTP_CONFIG,
    SEO_MIN_SIGNALS,
    WEBSITE_PATTERNS,
)

logger = logging.getLogger(__name__)


def _compile(patterns: Tuple[str, ...]) -> Tuple[Pattern, ...]:
    return tuple(re.compile(p, re.IGNORECASE) for p in patterns)


class WebsiteAnalysisStage:
    """
    Stage 1: Analyze a business homepage for ICP signals.
    """

    def __init__(self, max_age_days: int = ANALYSIS_MAX_AGE_DAYS):
        self.max_age = timedelta(days=max_age_days)
        self.whatsapp = _compile(WEBSITE_PATTERNS["whatsapp"])
        self.reservation = _compile(WEBSITE_PATTERNS["reservation"])
        self.reservation_false_positive = _compile(WEBSITE_PATTERNS["reservation_false_positive"])
        self.reservation_strong = _compile(WEBSITE_PATTERNS["reservation_strong"])
        self.third_party = _compile(WEBSITE_PATTERNS["third_party_delivery"])
        self.direct_ordering = _compile(WEBSITE_PATTERNS["direct_ordering"])
        self.order_form_text = re.compile(WEBSITE_PATTERNS["order_form_text"], re.IGNORECASE)

    def analyze(self, html: str, website: Optional[str] = None) -> WebsiteAnalysis:
        """
        Analyze homepage HTML.

        Args:
            html: Raw homepage HTML
            website: URL the HTML came from, used for logging only

        Returns:
            WebsiteAnalysis with every signal set and analyzed_at = now
        """
        soup = BeautifulSoup(html, "html.parser")
        text = html.lower()

        analysis = WebsiteAnalysis(
            has_seo=self._check_seo(soup),
            has_whatsapp=self._any(self.whatsapp, text),
            has_reservation=self._check_reservation(text),
            has_third_party_delivery=self._any(self.third_party, text),
            has_direct_ordering=self._check_direct_ordering(soup, text),
            analyzed_at=datetime.utcnow(),
        )
        logger.info(
            "Website analysis for %s: seo=%s whatsapp=%s reservation=%s "
            "direct_ordering=%s third_party=%s",
            website or "<html>",
            analysis.has_seo,
            analysis.has_whatsapp,
            analysis.has_reservation,
            analysis.has_direct_ordering,
            analysis.has_third_party_delivery,
        )
        return analysis

    def needs_refresh(self, business: Business, now: Optional[datetime] = None) -> bool:
        """True when the business has a website and its analysis is missing, incomplete or stale"""
        if not business.website:
            return False

        analysis = business.website_analysis
        if analysis is None or analysis.analyzed_at is None or analysis.has_seo is None:
            return True

        analyzed_at = analysis.analyzed_at
        if analyzed_at.tzinfo is not None:
            analyzed_at = analyzed_at.astimezone(timezone.utc).replace(tzinfo=None)

        now = now or datetime.utcnow()
        return now - analyzed_at > self.max_age

    def fetch(self, website: str) -> str:
        """Download homepage HTML, following redirects"""
        try:
            with httpx.Client(
                timeout=httpx.Timeout(HTTP_CONFIG["timeout"]),
                headers={"User-Agent": HTTP_CONFIG["user_agent"]},
                follow_redirects=True,
            ) as client:
                response = client.get(website)
                response.raise_for_status()
                return response.text
        except httpx.HTTPError as e:
            raise WebsiteFetchError(website, f"{type(e).__name__}: {e}") from e

    def fetch_and_analyze(self, website: str) -> WebsiteAnalysis:
        return self.analyze(self.fetch(website), website)

    # =========================================================================
    # Individual checks
    # =========================================================================

    @staticmethod
    def _any(patterns: Tuple[Pattern, ...], text: str) -> bool:
        return any(p.search(text) for p in patterns)

    def _check_seo(self, soup: BeautifulSoup) -> bool:
        title = soup.find("title")
        description = soup.find("meta", attrs={"name": "description"})

        signals = [
            bool(title and title.get_text(strip=True)),
            bool(description and (description.get("content") or "").strip()),
            soup.find("h1") is not None,
            soup.find("script", attrs={"type": "application/ld+json"}) is not None,
        ]
        return sum(signals) >= SEO_MIN_SIGNALS

    def _check_reservation(self, text: str) -> bool:
        if not self._any(self.reservation, text):
            return False

        # "Derechos reservados" and friends trip the loose patterns
        if self._any(self.reservation_false_positive, text):
            return self._any(self.reservation_strong, text)
        return True

    def _check_direct_ordering(self, soup: BeautifulSoup, text: str) -> bool:
        if self._any(self.direct_ordering, text):
            return True

        for form in soup.find_all("form"):
            if self.order_form_text.search(form.get_text(" ").lower()):
                return True

        return bool(soup.select(CART_SELECTORS))
