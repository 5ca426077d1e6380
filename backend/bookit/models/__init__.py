"""ORM models package export."""

from bookit.models.booking import Booking
from bookit.models.experience import Experience
from bookit.models.promo_code import DiscountType, PromoCode
from bookit.models.slot import Slot, SlotStatus

__all__ = [
    "Booking",
    "DiscountType",
    "Experience",
    "PromoCode",
    "Slot",
    "SlotStatus",
]
