# tests/test_api.py
"""
Tests for the FastAPI endpoints

Run with: pytest tests/test_api.py -v
"""

import pytest
from unittest.mock import Mock

from fastapi.testclient import TestClient

from icp_scorer.api import endpoints
from icp_scorer.engine import ICPScoringEngine
from icp_scorer.exceptions import WebsiteFetchError
from icp_scorer.stages.stage1_website import WebsiteAnalysisStage


@pytest.fixture
def engine(monkeypatch):
    website_stage = WebsiteAnalysisStage()
    monkeypatch.setattr(website_stage, "fetch", Mock(side_effect=WebsiteFetchError("https://x.com", "offline")))
    engine = ICPScoringEngine(website_stage=website_stage)
    monkeypatch.setattr(endpoints, "engine", engine)
    return engine


@pytest.fixture
def client(engine):
    return TestClient(endpoints.app)


BUSINESS = {
    "business_id": "place-1",
    "name": "Antares Palermo",
    "category": "Craft Beer Bar",
    "types": ["bar", "restaurant"],
    "num_locations": 6,
    "country": "Argentina",
}


# ============================================================================
# INFO
# ============================================================================

def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root_lists_endpoints(client):
    assert "endpoints" in client.get("/").json()


# ============================================================================
# CONFIGS
# ============================================================================

def test_list_configs_includes_defaults(client):
    configs = client.get("/api/icp-configs").json()

    assert {c["name"] for c in configs} == {"MidMarket Brands", "Independent Restaurants"}
    assert all(c["weight_total"] == 10 for c in configs)


def test_create_and_get_config(client):
    payload = {
        "name": "Uruguay Bars",
        "type": "independent",
        "target_countries": ["Uruguay"],
        "factors": {"geography": {"enabled": True, "weight": 4}},
    }

    created = client.post("/api/icp-configs", json=payload)
    assert created.status_code == 200
    config_id = created.json()["config_id"]

    fetched = client.get(f"/api/icp-configs/{config_id}").json()
    assert fetched["name"] == "Uruguay Bars"
    assert fetched["factors"]["geography"]["weight"] == 4


def test_create_config_with_typo_is_rejected(client):
    payload = {"name": "Typo", "type": "midmarket", "factors": {"geografy": {"enabled": True}}}
    assert client.post("/api/icp-configs", json=payload).status_code == 422


def test_create_duplicate_config_conflicts(client):
    payload = {"name": "MidMarket Brands", "type": "midmarket"}
    assert client.post("/api/icp-configs", json=payload).status_code == 409


def test_posting_existing_config_as_copy_keeps_original(client):
    original = client.get("/api/icp-configs").json()[0]

    response = client.post("/api/icp-configs", json={**original, "name": "My Copy"})

    assert response.status_code == 200
    assert response.json()["config_id"] != original["config_id"]
    names = {c["name"] for c in client.get("/api/icp-configs").json()}
    assert names == {"MidMarket Brands", "Independent Restaurants", "My Copy"}
    assert client.get(f"/api/icp-configs/{original['config_id']}").json()["name"] == "MidMarket Brands"


def test_update_config(client):
    config = client.get("/api/icp-configs").json()[0]

    response = client.put(
        f"/api/icp-configs/{config['config_id']}",
        json={"factors": {"geography": {"weight": 3}}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["factors"]["geography"]["weight"] == 3
    assert body["weight_total"] == 12


def test_update_config_validation_error(client):
    config = client.get("/api/icp-configs").json()[0]
    response = client.put(
        f"/api/icp-configs/{config['config_id']}",
        json={"factors": {"geography": {"weight": -2}}},
    )
    assert response.status_code == 422


def test_missing_config_is_404(client):
    assert client.get("/api/icp-configs/does-not-exist").status_code == 404
    assert client.put("/api/icp-configs/does-not-exist", json={}).status_code == 404


def test_reset_configs(client):
    client.post("/api/icp-configs", json={"name": "Extra", "type": "midmarket"})

    body = client.post("/api/icp-configs/reset").json()

    assert body["message"] == "ICP configurations reset to defaults"
    assert len(body["configs"]) == 2
    assert len(client.get("/api/icp-configs").json()) == 2


# ============================================================================
# SCORING
# ============================================================================

def test_score_business(client):
    client.post("/api/businesses", json=BUSINESS)

    response = client.post("/api/icp-score/place-1", json={"icp_type": "independent"})

    assert response.status_code == 200
    body = response.json()
    assert body["business_id"] == "place-1"
    assert body["icp_type"] == "independent"
    assert 0 <= body["score"] <= 10
    assert body["breakdown"]["booking_intensive_category"]["value"] == "booking-intensive"

    stored = client.get("/api/businesses/place-1").json()
    assert stored["icp_scores"]["independent"]["score"] == body["score"]


def test_score_unknown_business_is_404(client):
    response = client.post("/api/icp-score/nope", json={"icp_type": "midmarket"})
    assert response.status_code == 404


def test_score_invalid_type_is_422(client):
    client.post("/api/businesses", json=BUSINESS)
    response = client.post("/api/icp-score/place-1", json={"icp_type": "enterprise"})
    assert response.status_code == 422


def test_score_survives_fetch_failure(client):
    client.post("/api/businesses", json={**BUSINESS, "website": "https://x.com"})

    response = client.post("/api/icp-score/place-1", json={"icp_type": "midmarket"})

    assert response.status_code == 200
    assert response.json()["analysis_refreshed"] is False


def test_bulk_calculate(client):
    client.post("/api/businesses", json=BUSINESS)
    client.post("/api/businesses", json={**BUSINESS, "business_id": "place-2", "name": "Other"})

    body = client.post("/api/icp-score/bulk-calculate", json={"icp_type": "both"}).json()

    assert body["processed"] == 2
    assert body["errors"] == 0
    assert body["total"] == 2
    stored = client.get("/api/businesses/place-2").json()
    assert set(stored["icp_scores"]) == {"midmarket", "independent"}


def test_preview_does_not_store(client, engine):
    config = client.get("/api/icp-configs").json()[1]

    response = client.post("/api/icp-score/preview", json={"business": BUSINESS, "config": config})

    assert response.status_code == 200
    assert response.json()["max_score"] == 10
    assert engine.businesses.list() == []


# ============================================================================
# WEBSITE ANALYSIS
# ============================================================================

def test_analyze_html(client):
    html = "<html><body><a href='https://wa.me/1'>wa</a> Reservar mesa</body></html>"

    body = client.post("/api/website-analysis", json={"html": html}).json()

    assert body["has_whatsapp"] is True
    assert body["has_reservation"] is True


def test_analyze_requires_input(client):
    assert client.post("/api/website-analysis", json={}).status_code == 422


def test_analyze_fetch_failure_is_502(client):
    response = client.post("/api/website-analysis", json={"website": "https://x.com"})
    assert response.status_code == 502
