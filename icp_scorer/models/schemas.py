"""
Pydantic schemas for ICP Lead Scorer
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from ..config.settings import MAX_SCORE
from .icp_config import FactorName, ICPConfig, ICPType


# =============================================================================
# ENUMS
# =============================================================================

class DeliveryCategory(str, Enum):
    """How much of a business's trade is delivery"""
    DELIVERY_INTENSIVE = "delivery-intensive"
    MODERATE = "moderate"
    OTHER = "other"
    UNKNOWN = "unknown"


class BookingCategory(str, Enum):
    """How much a business relies on table bookings"""
    BOOKING_INTENSIVE = "booking-intensive"
    NO_BOOKING = "no-booking"
    OTHER = "other"
    UNKNOWN = "unknown"


class BulkTarget(str, Enum):
    """ICP types a bulk run can target"""
    MIDMARKET = "midmarket"
    INDEPENDENT = "independent"
    BOTH = "both"


class FactorBreakdown(BaseModel):
    """Contribution of a single factor to the final score"""
    score_percent: float
    weight: float
    contribution: float
    value: Any = None


# =============================================================================
# INPUT SCHEMAS
# =============================================================================

class WebsiteAnalysis(BaseModel):
    """Signals extracted from a business homepage. None means unknown."""
    has_seo: Optional[bool] = None
    has_whatsapp: Optional[bool] = None
    has_reservation: Optional[bool] = None
    has_direct_ordering: Optional[bool] = None
    has_third_party_delivery: Optional[bool] = None
    analyzed_at: Optional[datetime] = None


class StoredScore(BaseModel):
    """Last score computed for a business under one ICP type"""
    score: Optional[float] = None
    breakdown: Dict[FactorName, FactorBreakdown] = Field(default_factory=dict)
    last_calculated: Optional[datetime] = None


class Business(BaseModel):
    """A local business as collected from the places search"""
    business_id: str
    name: str
    category: Optional[str] = None
    types: List[str] = Field(default_factory=list)
    num_locations: Optional[int] = Field(default=None, ge=0)
    website: Optional[str] = None
    country: Optional[str] = None
    address: Optional[str] = None
    location_names: List[str] = Field(default_factory=list)
    website_analysis: Optional[WebsiteAnalysis] = None
    icp_scores: Dict[ICPType, StoredScore] = Field(default_factory=dict)

    class Config:
        extra = "allow"


# =============================================================================
# RESULT SCHEMAS
# =============================================================================

class ScoreResult(BaseModel):
    """Result of scoring one business against one ICP configuration"""
    score: Optional[float] = None
    breakdown: Dict[FactorName, FactorBreakdown] = Field(default_factory=dict)
    max_score: float = MAX_SCORE
    calculated_at: Optional[datetime] = None


class BusinessScore(BaseModel):
    """Score returned for a stored business"""
    business_id: str
    icp_type: ICPType
    config_name: str
    score: Optional[float]
    breakdown: Dict[FactorName, FactorBreakdown]
    calculated_at: Optional[datetime]
    analysis_refreshed: bool = False


class BulkScoreSummary(BaseModel):
    """Result from bulk scoring"""
    message: str = "Bulk ICP calculation completed"
    icp_types: List[ICPType]
    processed: int
    errors: int
    total: int
    processing_time_ms: float = 0


# =============================================================================
# API REQUEST / RESPONSE SCHEMAS
# =============================================================================

class ScoreRequest(BaseModel):
    """Request to score one stored business"""
    icp_type: ICPType
    refresh_analysis: bool = True


class BulkScoreRequest(BaseModel):
    """Request to score every stored business"""
    icp_type: BulkTarget


class PreviewRequest(BaseModel):
    """Score an ad-hoc business against an ad-hoc configuration, nothing is stored"""
    business: Business
    config: ICPConfig


class WebsiteAnalysisRequest(BaseModel):
    """Analyze raw HTML, or fetch the homepage when only a website is given"""
    html: Optional[str] = None
    website: Optional[str] = None


class ICPConfigResponse(ICPConfig):
    """ICP configuration plus its enabled weight total"""
    weight_total: float

    @classmethod
    def from_config(cls, config: ICPConfig) -> "ICPConfigResponse":
        return cls(**config.model_dump(), weight_total=config.enabled_weight_total())


class ResetResponse(BaseModel):
    message: str = "ICP configurations reset to defaults"
    configs: List[ICPConfigResponse]

