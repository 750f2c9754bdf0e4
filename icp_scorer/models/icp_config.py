"""
ICP Configuration Models
"""

import copy
import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, Field

from ..config.settings import DEFAULT_ICP_CONFIGS


class ICPType(str, Enum):
    """Customer segment an ICP configuration targets"""
    MIDMARKET = "midmarket"
    INDEPENDENT = "independent"


class FactorName(str, Enum):
    """Scoring factors, in the order they are evaluated"""
    NUM_LOCATIONS = "num_locations"
    NO_WEBSITE = "no_website"
    POOR_SEO = "poor_seo"
    HAS_WHATSAPP = "has_whatsapp"
    HAS_RESERVATION = "has_reservation"
    HAS_DIRECT_ORDERING = "has_direct_ordering"
    GEOGRAPHY = "geography"
    DELIVERY_INTENSIVE_CATEGORY = "delivery_intensive_category"
    BOOKING_INTENSIVE_CATEGORY = "booking_intensive_category"


class FactorSpec(BaseModel):
    """Enable flag and weight for a single factor"""
    enabled: bool = True
    weight: float = Field(default=1, ge=0, le=10)

    class Config:
        extra = "forbid"


class LocationFactorSpec(FactorSpec):
    """Number-of-locations factor with its ideal range"""
    min_ideal: float = Field(default=10, gt=0)
    max_ideal: Optional[float] = None  # None = no upper bound


class ICPFactors(BaseModel):
    """
    One entry per FactorName. Unknown keys are rejected so a misspelled
    factor fails validation instead of silently scoring nothing.
    """
    num_locations: LocationFactorSpec = Field(default_factory=LocationFactorSpec)
    no_website: FactorSpec = Field(default_factory=lambda: FactorSpec(enabled=False, weight=0))
    poor_seo: FactorSpec = Field(default_factory=FactorSpec)
    has_whatsapp: FactorSpec = Field(default_factory=FactorSpec)
    has_reservation: FactorSpec = Field(default_factory=FactorSpec)
    has_direct_ordering: FactorSpec = Field(default_factory=FactorSpec)
    geography: FactorSpec = Field(default_factory=FactorSpec)
    delivery_intensive_category: FactorSpec = Field(default_factory=FactorSpec)
    booking_intensive_category: FactorSpec = Field(default_factory=FactorSpec)

    class Config:
        extra = "forbid"

    def get(self, name: FactorName) -> FactorSpec:
        return getattr(self, FactorName(name).value)

    def items(self) -> Iterator[Tuple[FactorName, FactorSpec]]:
        for name in FactorName:
            yield name, self.get(name)


class ICPConfig(BaseModel):
    """Complete ICP Configuration"""
    config_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str
    type: ICPType
    factors: ICPFactors = Field(default_factory=ICPFactors)
    target_countries: List[str] = Field(default_factory=list)

    # Display metadata, not used for scoring
    delivery_categories: List[str] = Field(default_factory=list)
    booking_categories: List[str] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def enabled_weight_total(self) -> float:
        """Sum of the weights of all enabled factors"""
        return sum(f.weight for _, f in self.factors.items() if f.enabled)

    def update(self, changes: Dict[str, Any]) -> "ICPConfig":
        """
        Return a new configuration with `changes` applied and updated_at bumped.

        Factor changes are merged per factor, so {"factors": {"geography":
        {"weight": 2}}} only touches the geography weight.
        """
        data = self.model_dump()
        for key, value in changes.items():
            if key in ("config_id", "created_at", "updated_at") or key not in ICPConfig.model_fields:
                continue
            if key == "factors" and isinstance(value, dict):
                for factor, fields in value.items():
                    if factor in data["factors"] and isinstance(fields, dict):
                        data["factors"][factor].update(fields)
                    else:
                        data["factors"][factor] = fields
            else:
                data[key] = value
        data["updated_at"] = datetime.utcnow()
        return ICPConfig.model_validate(data)


def get_default_icp_configs() -> List[ICPConfig]:
    """
    Build fresh copies of the built-in configurations
    (MidMarket Brands, Independent Restaurants).
    """
    return [ICPConfig.model_validate(copy.deepcopy(data)) for data in DEFAULT_ICP_CONFIGS]
