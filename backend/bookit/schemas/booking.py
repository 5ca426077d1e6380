"""Pydantic schemas for bookings."""
from __future__ import annotations

import datetime
import re
from decimal import Decimal

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    TypeAdapter,
    field_validator,
)
from pydantic.alias_generators import to_camel

from bookit.models import Booking

_EMAIL_ADAPTER = TypeAdapter(EmailStr)
_PHONE_PATTERN = re.compile(r"^\+?[0-9]{7,15}$")
_PHONE_SEPARATORS = re.compile(r"[\s().-]")


def normalize_email(value: str) -> str:
    """Validate an email address and return it lowercased."""
    return _EMAIL_ADAPTER.validate_python(value.strip()).lower()


class BookingCreate(BaseModel):
    """Payload for reserving a slot."""

    experience_id: int = Field(gt=0)
    slot_id: int = Field(gt=0)
    user_name: str = Field(max_length=255)
    user_email: str
    user_phone: str | None = None
    number_of_people: int = Field(ge=1)
    promo_code: str | None = Field(default=None, max_length=64)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("user_name")
    @classmethod
    def _validate_name(cls, value: str) -> str:
        name = value.strip()
        if len(name) < 2:
            raise ValueError("Name must be at least 2 characters")
        return name

    @field_validator("user_email")
    @classmethod
    def _validate_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("user_phone")
    @classmethod
    def _validate_phone(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        phone = _PHONE_SEPARATORS.sub("", value.strip())
        if not _PHONE_PATTERN.match(phone):
            raise ValueError("Valid phone number is required")
        return phone

    @field_validator("promo_code")
    @classmethod
    def _strip_promo(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return value.strip() or None


class BookingRead(BaseModel):
    """Serialized booking record."""

    id: int
    experience_id: int
    slot_id: int
    user_name: str
    user_email: str
    user_phone: str | None = None
    number_of_people: int
    total_price: Decimal
    promo_code: str | None = None
    discount_amount: Decimal
    final_price: Decimal
    created_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class BookingSummaryRead(BookingRead):
    """Booking with the listing details a purchaser sees in their history."""

    experience_title: str
    location: str
    image_url: str | None = None
    date: datetime.date
    time_slot: datetime.time

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingSummaryRead":
        base = BookingRead.model_validate(booking).model_dump()
        return cls(
            **base,
            experience_title=booking.experience.title,
            location=booking.experience.location,
            image_url=booking.experience.image_url,
            date=booking.slot.date,
            time_slot=booking.slot.time_slot,
        )
