"""Promo code validation schemas."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class PromoValidateRequest(BaseModel):
    """Checkout preview of a promo code."""

    code: str = Field(min_length=1, max_length=64)
    order_amount: Decimal = Field(ge=Decimal("0"))

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @field_validator("code")
    @classmethod
    def _strip_code(cls, value: str) -> str:
        code = value.strip()
        if not code:
            raise ValueError("Promo code is required")
        return code


class PromoQuoteRead(BaseModel):
    """Preview of the discount a promo code would give."""

    code: str
    description: str | None
    discount_type: str
    discount_value: str
    discount_amount: str
    original_amount: str
    final_amount: str
    savings: str
