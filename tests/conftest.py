# tests/conftest.py

import pytest
from datetime import datetime

from icp_scorer.models.schemas import Business, WebsiteAnalysis
from icp_scorer.models.icp_config import ICPConfig, get_default_icp_configs


def make_config(icp_type="independent", enabled=(), weights=None, **kwargs) -> ICPConfig:
    """Config with only the named factors enabled"""
    weights = weights or {}
    factors = {
        name: {"enabled": name in enabled, "weight": weights.get(name, 1)}
        for name in (
            "no_website", "poor_seo", "has_whatsapp", "has_reservation",
            "has_direct_ordering", "geography",
            "delivery_intensive_category", "booking_intensive_category",
        )
    }
    factors["num_locations"] = {
        "enabled": "num_locations" in enabled,
        "weight": weights.get("num_locations", 1),
        "min_ideal": kwargs.pop("min_ideal", 2),
        "max_ideal": kwargs.pop("max_ideal", 9),
    }
    return ICPConfig(
        name=kwargs.pop("name", f"test-{icp_type}"),
        type=icp_type,
        factors=factors,
        target_countries=kwargs.pop("target_countries", ["Argentina"]),
        **kwargs,
    )


@pytest.fixture
def config_factory():
    return make_config


@pytest.fixture
def midmarket_config():
    return get_default_icp_configs()[0]


@pytest.fixture
def independent_config():
    return get_default_icp_configs()[1]


@pytest.fixture
def full_analysis():
    return WebsiteAnalysis(
        has_seo=True,
        has_whatsapp=True,
        has_reservation=True,
        has_direct_ordering=True,
        has_third_party_delivery=False,
        analyzed_at=datetime.utcnow(),
    )


@pytest.fixture
def ideal_independent(full_analysis):
    """Business that hits every factor of the independent profile"""
    return Business(
        business_id="biz-1",
        name="Antares Fine Dining",
        category="Fine Dining",
        types=["restaurant", "pizza"],
        num_locations=4,
        website=None,
        country="Argentina",
        website_analysis=full_analysis,
    )


@pytest.fixture
def pizza_place():
    return Business(
        business_id="biz-2",
        name="Pizzería Güerrín",
        category="Pizza Place",
        num_locations=3,
        website="https://guerrin.com",
        address="Av. Corrientes 1368, Buenos Aires, Argentina",
    )
