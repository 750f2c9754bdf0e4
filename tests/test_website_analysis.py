# tests/test_website_analysis.py
"""
Tests for homepage signal extraction

Coverage:
- SEO signal counting
- WhatsApp / reservation / delivery / direct ordering detection
- "Rights reserved" false positives
- Staleness rules
- httpx fetch errors

Run with: pytest tests/test_website_analysis.py -v
"""

import pytest
from datetime import datetime, timedelta
from unittest.mock import patch

import httpx

from icp_scorer.exceptions import WebsiteFetchError
from icp_scorer.models.schemas import Business, WebsiteAnalysis
from icp_scorer.stages.stage1_website import WebsiteAnalysisStage


@pytest.fixture
def stage():
    return WebsiteAnalysisStage(max_age_days=30)


# ============================================================================
# SIGNALS
# ============================================================================

def test_good_seo_needs_three_signals(stage):
    html = """
    <html><head><title>Parrilla Don Julio</title>
    <meta name="description" content="Parrilla en Palermo"></head>
    <body><h1>Don Julio</h1></body></html>
    """
    assert stage.analyze(html).has_seo is True


def test_poor_seo_with_empty_tags(stage):
    html = """
    <html><head><title>  </title><meta name="description" content=""></head>
    <body><h1>Hola</h1></body></html>
    """
    assert stage.analyze(html).has_seo is False


def test_json_ld_counts_as_seo_signal(stage):
    html = """
    <html><head><title>Café</title>
    <script type="application/ld+json">{"@type": "Restaurant"}</script></head>
    <body><h1>Café</h1></body></html>
    """
    assert stage.analyze(html).has_seo is True


def test_whatsapp_link(stage):
    html = '<a href="https://wa.me/5491112345678">Escribinos</a>'
    assert stage.analyze(html).has_whatsapp is True


def test_plain_page_has_no_signals(stage):
    analysis = stage.analyze("<html><body><p>Bienvenidos</p></body></html>")

    assert analysis.has_whatsapp is False
    assert analysis.has_reservation is False
    assert analysis.has_third_party_delivery is False
    assert analysis.has_direct_ordering is False
    assert analysis.analyzed_at is not None


@pytest.mark.parametrize("snippet", [
    "Reservá tu mesa: reserva tu mesa online",
    "Book a table tonight",
    '<a href="https://www.opentable.com/r/bar">Book</a>',
    "Prenota un tavolo",
])
def test_reservation_phrases(stage, snippet):
    assert stage.analyze(f"<html><body>{snippet}</body></html>").has_reservation is True


def test_rights_reserved_alone_is_not_a_reservation(stage):
    html = "<footer>Reservaciones: 2024 Todos los derechos reservados</footer>"
    assert stage.analyze(html).has_reservation is False


def test_strong_indicator_survives_rights_reserved(stage):
    html = "<p>Reservar mesa</p><footer>Todos los derechos reservados</footer>"
    assert stage.analyze(html).has_reservation is True


def test_third_party_delivery(stage):
    html = '<a href="https://www.pedidosya.com.ar/restaurantes/x">Pedí por PedidosYa</a>'
    analysis = stage.analyze(html)

    assert analysis.has_third_party_delivery is True
    assert analysis.has_direct_ordering is False


def test_direct_ordering_phrase(stage):
    assert stage.analyze("<button>Order online</button>").has_direct_ordering is True


def test_direct_ordering_form(stage):
    html = '<form action="/x"><label>Hacé tu pedido aquí</label><input type="submit"></form>'
    assert stage.analyze(html).has_direct_ordering is True


def test_direct_ordering_cart_element(stage):
    html = '<div id="mini-cart-widget"></div>'
    assert stage.analyze(html).has_direct_ordering is True


# ============================================================================
# STALENESS
# ============================================================================

def test_no_website_never_needs_refresh(stage):
    assert not stage.needs_refresh(Business(business_id="b", name="X"))


def test_missing_analysis_needs_refresh(stage):
    assert stage.needs_refresh(Business(business_id="b", name="X", website="https://x.com"))


def test_unknown_seo_needs_refresh(stage):
    business = Business(
        business_id="b", name="X", website="https://x.com",
        website_analysis=WebsiteAnalysis(has_seo=None, analyzed_at=datetime.utcnow()),
    )
    assert stage.needs_refresh(business)


def test_analysis_age(stage):
    now = datetime(2024, 6, 1)
    fresh = Business(
        business_id="b", name="X", website="https://x.com",
        website_analysis=WebsiteAnalysis(has_seo=True, analyzed_at=now - timedelta(days=29)),
    )
    stale = fresh.model_copy(update={
        "website_analysis": WebsiteAnalysis(has_seo=True, analyzed_at=now - timedelta(days=31)),
    })

    assert not stage.needs_refresh(fresh, now=now)
    assert stage.needs_refresh(stale, now=now)


# ============================================================================
# FETCHING
# ============================================================================

def test_fetch_and_analyze(stage):
    html = "<html><head><title>T</title></head><body><h1>x</h1>wa.me/1</body></html>"
    response = httpx.Response(200, text=html, request=httpx.Request("GET", "https://x.com"))

    with patch("httpx.Client.get", return_value=response) as get:
        analysis = stage.fetch_and_analyze("https://x.com")

    get.assert_called_once_with("https://x.com")
    assert analysis.has_whatsapp is True
    assert analysis.has_seo is False


def test_fetch_http_error_raises_domain_error(stage):
    response = httpx.Response(503, request=httpx.Request("GET", "https://x.com"))

    with patch("httpx.Client.get", return_value=response):
        with pytest.raises(WebsiteFetchError) as exc_info:
            stage.fetch("https://x.com")

    assert exc_info.value.url == "https://x.com"


def test_fetch_transport_error_raises_domain_error(stage):
    with patch("httpx.Client.get", side_effect=httpx.ConnectError("refused")):
        with pytest.raises(WebsiteFetchError):
            stage.fetch("https://down.example")
