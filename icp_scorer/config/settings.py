"""
Configuration settings for ICP Lead Scorer
"""

import logging
import os
from typing import Any, Dict, Tuple

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# RUNTIME CONFIGURATION
# =============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

HTTP_CONFIG = {
    "timeout": float(os.getenv("HTTP_TIMEOUT_SECONDS", "20")),
    "user_agent": os.getenv("HTTP_USER_AGENT", "icp-lead-scorer/1.0"),
}

ANALYSIS_MAX_AGE_DAYS = int(os.getenv("ANALYSIS_MAX_AGE_DAYS", "30"))
BULK_MAX_WORKERS = int(os.getenv("BULK_MAX_WORKERS", "4"))


def configure_logging(level: str = None) -> None:
    """Set up root logging for the CLI and the API server"""
    logging.basicConfig(
        level=getattr(logging, (level or LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )


# =============================================================================
# SCORING CONSTANTS
# =============================================================================

MAX_SCORE = 10
TARGET_WEIGHT_TOTAL = 10

# Fit percent per category type
DELIVERY_CATEGORY_SCORES = {
    "delivery-intensive": 100,
    "moderate": 33.33,
    "other": 0,
    "unknown": 0,
}

BOOKING_CATEGORY_SCORES = {
    "booking-intensive": 100,
    "no-booking": 0,
    "other": 50,
    "unknown": 50,
}

# =============================================================================
# CATEGORY KEYWORDS
# =============================================================================

DELIVERY_INTENSIVE_CATEGORIES: Tuple[str, ...] = (
    "pizza",
    "hamburguesas",
    "sushi",
    "comida mexicana",
    "comida healthy",
    "milanesas",
    "empanadas",
)

# Bar / fine dining / coffee
MODERATE_DELIVERY_CATEGORIES: Tuple[str, ...] = (
    "bar",
    "fine dining",
    "coffee",
    "café",
    "coffee shop",
    "cafetería",
)

BOOKING_INTENSIVE_CATEGORIES: Tuple[str, ...] = (
    "bar",
    "craft beer",
    "cerveza artesanal",
    "fine dining",
    "restaurante gourmet",
)

# Coffee / ice cream
NO_BOOKING_CATEGORIES: Tuple[str, ...] = (
    "coffee",
    "café",
    "coffee shop",
    "cafetería",
    "ice cream",
    "heladería",
    "gelato",
)

# =============================================================================
# WEBSITE ANALYSIS PATTERNS
# =============================================================================

WEBSITE_PATTERNS = {
    "whatsapp": (
        r"wa\.me",
        r"api\.whatsapp\.com",
        r"whatsapp",
    ),
    "reservation": (
        # English
        r"\breservation\b",
        r"\breserve a table\b",
        r"\bbook a table\b",
        r"\bbook now\b",
        r"\bmake a booking\b",
        r"\btable reservation\b",
        # Spanish
        r"\breserva\s+(tu|su|una)\s+mesa\b",
        r"\breservar\s+mesa\b",
        r"\breservas\s+online\b",
        r"\bhacer\s+(una\s+)?reserva\b",
        r"\breservaciones\b",
        # Italian
        r"\bprenotazione\b",
        r"\bprenota\s+(un\s+)?tavolo\b",
        r"\bprenotare\b",
        # Portuguese
        r"\bfazer\s+reserva\b",
        r"\breserva\s+online\b",
        # Platforms
        r"\bopentable\b",
        r"\bresy\b",
        r"\btock\b",
        r"\byelp\s+reservations\b",
        r"\btablein\b",
        r"\bpastarossaonline\b",
        r'href="[^"]*opentable\.com',
        r'href="[^"]*resy\.com',
        r'href="[^"]*exploretock\.com',
        r'href="[^"]*pastarossaonline\.com',
    ),
    # "All rights reserved" in any language
    "reservation_false_positive": (
        r"derechos\s+reservados",
        r"rights\s+reserved",
        r"diritti\s+riservati",
        r"todos\s+os\s+direitos\s+reservados",
    ),
    "reservation_strong": (
        r"\breserva\s+(tu|su|una)\s+mesa\b",
        r"\breservar\s+mesa\b",
        r"\btable\s+reservation\b",
        r"\bbook\s+a\s+table\b",
        r"\bopentable\b",
        r"\bresy\b",
        r'href="[^"]*opentable\.com',
        r'href="[^"]*resy\.com',
    ),
    "third_party_delivery": (
        # North America
        r"ubereats\.com",
        r"doordash\.com",
        r"grubhub\.com",
        r"postmates\.com",
        r"seamless\.com",
        r"uber eats",
        r"door dash",
        # Europe
        r"deliveroo\.",
        r"just-eat\.",
        r"justeat\.",
        r"glovo\.",
        # Latin America
        r"rappi\.",
        r"pedidosya\.",
        r"pedidos ya",
        r"ifood\.",
        # Asia
        r"foodpanda\.",
        r"grab\.",
        r"delivery partner",
        r"third.party.delivery",
    ),
    "direct_ordering": (
        # Cart / checkout
        r"add\s+to\s+cart",
        r"añadir\s+al\s+carrito",
        r"agregar\s+al\s+carrito",
        r"aggiungi\s+al\s+carrello",
        r"adicionar\s+ao\s+carrinho",
        r"\bcheckout\b",
        r"\bcarrito\b.*\bcompra",
        r"shopping\s+cart",
        # Owned online ordering
        r"order\s+online",
        r"pedir\s+online",
        r"pedido\s+online",
        r"ordina\s+online",
        r"online\s+ordering",
        r"place\s+(your\s+)?order",
        r"hacer\s+(tu\s+)?pedido",
        # E-commerce platforms
        r"shopify",
        r"woocommerce",
        r"square\s+online",
        r"toast\s+takeout",
        r"chownow",
        r"slice",
        r"olo\.",
        r"direct\s+order",
        r"own\s+ordering",
    ),
    "order_form_text": r"order|pedir|pedido|ordenar|ordina|checkout|carrito|cart",
}

CART_SELECTORS = (
    ".cart, .shopping-cart, .carrito, .checkout, "
    '[class*="cart"], [class*="carrito"], [class*="checkout"], '
    '[id*="cart"], [id*="carrito"], [id*="checkout"]'
)

# Minimum number of on-page SEO signals (title, description, h1, JSON-LD)
SEO_MIN_SIGNALS = 3

# =============================================================================
# DEFAULT ICP CONFIGURATIONS
# =============================================================================

DEFAULT_DELIVERY_CATEGORIES = (
    "Pizza", "Hamburguesas", "Sushi", "Comida Mexicana",
    "Comida Healthy", "Milanesas", "Empanadas",
)
DEFAULT_BOOKING_CATEGORIES = ("Bar", "Craft Beer", "Fine Dining")

DEFAULT_ICP_CONFIGS: Tuple[Dict[str, Any], ...] = (
    {
        "name": "MidMarket Brands",
        "type": "midmarket",
        "factors": {
            "num_locations": {"enabled": True, "weight": 1, "min_ideal": 10, "max_ideal": None},
            "poor_seo": {"enabled": True, "weight": 1},
            "has_whatsapp": {"enabled": True, "weight": 1},
            "has_reservation": {"enabled": True, "weight": 1},
            "has_direct_ordering": {"enabled": True, "weight": 1},
            "geography": {"enabled": True, "weight": 1},
            "no_website": {"enabled": False, "weight": 0},
            "delivery_intensive_category": {"enabled": True, "weight": 2},
            "booking_intensive_category": {"enabled": True, "weight": 2},
        },
        "delivery_categories": DEFAULT_DELIVERY_CATEGORIES,
        "booking_categories": DEFAULT_BOOKING_CATEGORIES,
        "target_countries": ("Argentina",),
    },
    {
        "name": "Independent Restaurants",
        "type": "independent",
        "factors": {
            "num_locations": {"enabled": True, "weight": 1, "min_ideal": 2, "max_ideal": 9},
            "no_website": {"enabled": True, "weight": 1},
            "poor_seo": {"enabled": True, "weight": 1},
            "has_whatsapp": {"enabled": True, "weight": 1},
            "has_reservation": {"enabled": True, "weight": 1},
            "has_direct_ordering": {"enabled": True, "weight": 1},
            "geography": {"enabled": True, "weight": 1},
            "delivery_intensive_category": {"enabled": True, "weight": 1},
            "booking_intensive_category": {"enabled": True, "weight": 2},
        },
        "delivery_categories": DEFAULT_DELIVERY_CATEGORIES,
        "booking_categories": DEFAULT_BOOKING_CATEGORIES,
        "target_countries": ("Argentina",),
    },
)
