"""Service layer exports."""
from bookit.services import (
    booking_service,
    catalog_service,
    notification_service,
    promo_service,
)

__all__ = [
    "booking_service",
    "catalog_service",
    "notification_service",
    "promo_service",
]
