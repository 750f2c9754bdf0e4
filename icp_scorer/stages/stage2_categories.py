"""
Stage 2: Category Classification
================================
Maps a business's category and place types onto the delivery and booking
buckets used by the category factors.

Matching is by substring in either direction, so "pizza" matches the
category "Pizza Place" and the place type "bar" matches the keyword "bar".
"""

from typing import Iterable, List

from ..models.schemas import Business, DeliveryCategory, BookingCategory
from ..config.settings import (
    DELIVERY_INTENSIVE_CATEGORIES,
    MODERATE_DELIVERY_CATEGORIES,
    BOOKING_INTENSIVE_CATEGORIES,
    NO_BOOKING_CATEGORIES,
    DELIVERY_CATEGORY_SCORES,
    BOOKING_CATEGORY_SCORES,
)


def business_categories(business: Business) -> List[str]:
    """Lowercased category plus place types, empty strings dropped"""
    categories = []
    if business.category:
        categories.append(business.category.lower())
    categories.extend(t.lower() for t in business.types if t)
    return categories


def _matches_any(categories: Iterable[str], keywords: Iterable[str]) -> bool:
    keywords = tuple(keywords)
    return any(
        keyword in category or category in keyword
        for category in categories
        for keyword in keywords
    )


class CategoryClassificationStage:
    """
    Stage 2: Classify businesses into delivery and booking categories.
    """

    def delivery_category(self, business: Business) -> DeliveryCategory:
        categories = business_categories(business)
        if not categories:
            return DeliveryCategory.UNKNOWN

        if _matches_any(categories, DELIVERY_INTENSIVE_CATEGORIES):
            return DeliveryCategory.DELIVERY_INTENSIVE
        if _matches_any(categories, MODERATE_DELIVERY_CATEGORIES):
            return DeliveryCategory.MODERATE
        return DeliveryCategory.OTHER

    def booking_category(self, business: Business) -> BookingCategory:
        categories = business_categories(business)
        if not categories:
            return BookingCategory.UNKNOWN

        # Coffee and ice cream never take bookings, even when also tagged "bar"
        if _matches_any(categories, NO_BOOKING_CATEGORIES):
            return BookingCategory.NO_BOOKING
        if _matches_any(categories, BOOKING_INTENSIVE_CATEGORIES):
            return BookingCategory.BOOKING_INTENSIVE
        return BookingCategory.OTHER

    def delivery_score(self, category: DeliveryCategory) -> float:
        """100 for delivery-intensive, 33.33 for moderate, 0 otherwise"""
        return DELIVERY_CATEGORY_SCORES[category.value]

    def booking_score(self, category: BookingCategory) -> float:
        """100 for booking-intensive, 0 for no-booking, 50 otherwise"""
        return BOOKING_CATEGORY_SCORES[category.value]
