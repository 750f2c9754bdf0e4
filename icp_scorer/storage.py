"""
In-memory storage for businesses and ICP configurations
"""

import logging
import threading
import uuid
from datetime import datetime
from typing import Any, Dict, List

from .models.schemas import Business, ScoreResult, StoredScore, WebsiteAnalysis
from .models.icp_config import ICPConfig, ICPType, get_default_icp_configs
from .config.settings import TARGET_WEIGHT_TOTAL
from .exceptions import DuplicateConfigError, NotFoundError

logger = logging.getLogger(__name__)


def _warn_on_weight_total(config: ICPConfig) -> None:
    total = config.enabled_weight_total()
    if total != TARGET_WEIGHT_TOTAL:
        logger.warning(
            "ICP config '%s' has enabled weights summing to %s (expected %s); "
            "scores will not be on a 0-%s scale",
            config.name, total, TARGET_WEIGHT_TOTAL, TARGET_WEIGHT_TOTAL,
        )


class ICPConfigStore:
    """ICP configurations keyed by config_id"""

    def __init__(self):
        self._configs: Dict[str, ICPConfig] = {}
        self._lock = threading.Lock()

    def list(self) -> List[ICPConfig]:
        with self._lock:
            return list(self._configs.values())

    def get(self, config_id: str) -> ICPConfig:
        with self._lock:
            if config_id not in self._configs:
                raise NotFoundError("ICP configuration", config_id)
            return self._configs[config_id]

    def get_by_type(self, icp_type: ICPType) -> ICPConfig:
        """First configuration of the given type"""
        with self._lock:
            for config in self._configs.values():
                if config.type == icp_type:
                    return config
        raise NotFoundError("ICP configuration", ICPType(icp_type).value)

    def create(self, config: ICPConfig) -> ICPConfig:
        """Add a configuration; a config_id that is already taken gets replaced by a fresh one"""
        with self._lock:
            if any(c.name == config.name for c in self._configs.values()):
                raise DuplicateConfigError(f"ICP configuration '{config.name}' already exists")
            if config.config_id in self._configs:
                now = datetime.utcnow()
                config = config.model_copy(update={
                    "config_id": str(uuid.uuid4()),
                    "created_at": now,
                    "updated_at": now,
                })
            self._configs[config.config_id] = config
        _warn_on_weight_total(config)
        return config

    def update(self, config_id: str, changes: Dict[str, Any]) -> ICPConfig:
        with self._lock:
            if config_id not in self._configs:
                raise NotFoundError("ICP configuration", config_id)
            updated = self._configs[config_id].update(changes)
            if any(
                c.name == updated.name and c.config_id != config_id
                for c in self._configs.values()
            ):
                raise DuplicateConfigError(f"ICP configuration '{updated.name}' already exists")
            self._configs[config_id] = updated
        _warn_on_weight_total(updated)
        return updated

    def reset(self) -> List[ICPConfig]:
        """Drop every configuration and reinstall the defaults"""
        defaults = get_default_icp_configs()
        with self._lock:
            self._configs = {c.config_id: c for c in defaults}
        logger.info("ICP configurations reset to defaults")
        return defaults

    def ensure_defaults(self) -> List[ICPConfig]:
        """Install the defaults when no configuration exists yet"""
        with self._lock:
            if self._configs:
                return list(self._configs.values())
            defaults = get_default_icp_configs()
            self._configs = {c.config_id: c for c in defaults}
        logger.info("No ICP configurations found, created defaults")
        return defaults


class BusinessStore:
    """Businesses keyed by business_id"""

    def __init__(self):
        self._businesses: Dict[str, Business] = {}
        self._lock = threading.Lock()

    def list(self) -> List[Business]:
        with self._lock:
            return list(self._businesses.values())

    def get(self, business_id: str) -> Business:
        with self._lock:
            if business_id not in self._businesses:
                raise NotFoundError("Business", business_id)
            return self._businesses[business_id]

    def upsert(self, business: Business) -> Business:
        with self._lock:
            existing = self._businesses.get(business.business_id)
            if existing is not None and not business.icp_scores:
                business = business.model_copy(update={"icp_scores": existing.icp_scores})
            self._businesses[business.business_id] = business
        return business

    def save_scores(self, business_id: str, results: Dict[ICPType, ScoreResult]) -> Business:
        """Store several ICP scores on a business in one write"""
        stored = {
            ICPType(icp_type): StoredScore(
                score=result.score,
                breakdown=result.breakdown,
                last_calculated=result.calculated_at,
            )
            for icp_type, result in results.items()
        }
        with self._lock:
            if business_id not in self._businesses:
                raise NotFoundError("Business", business_id)
            business = self._businesses[business_id]
            scores = dict(business.icp_scores)
            scores.update(stored)
            business = business.model_copy(update={"icp_scores": scores})
            self._businesses[business_id] = business
        return business

    def set_website_analysis(self, business_id: str, analysis: WebsiteAnalysis) -> Business:
        with self._lock:
            if business_id not in self._businesses:
                raise NotFoundError("Business", business_id)
            business = self._businesses[business_id].model_copy(
                update={"website_analysis": analysis}
            )
            self._businesses[business_id] = business
        return business
