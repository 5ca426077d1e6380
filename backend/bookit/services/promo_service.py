"""Promo code evaluation shared by checkout previews and bookings."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from bookit.core.config import get_settings
from bookit.models import DiscountType, PromoCode
from bookit.services.errors import PromoMinimumNotMetError, PromoNotFoundError

MONEY_PLACES = Decimal("0.01")
ZERO = Decimal("0.00")


class PromoRejection(str, enum.Enum):
    """Reasons a promo code does not apply to an order."""

    INACTIVE = "inactive"
    NOT_STARTED = "not_started"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"
    BELOW_MINIMUM = "below_minimum"


@dataclass(slots=True, frozen=True)
class PromoEvaluation:
    """Outcome of checking one promo code against one order amount."""

    rejection: PromoRejection | None
    discount_amount: Decimal
    final_amount: Decimal

    @property
    def applicable(self) -> bool:
        return self.rejection is None


@dataclass(slots=True)
class PromoQuote:
    """Read-only preview of what a promo code would save."""

    code: str
    description: str | None
    discount_type: DiscountType
    discount_value: Decimal
    discount_amount: Decimal
    original_amount: Decimal
    final_amount: Decimal

    def to_dict(self) -> dict[str, Any]:
        """Serialize the quote with money rendered to two places."""
        return {
            "code": self.code,
            "description": self.description,
            "discount_type": self.discount_type.value,
            "discount_value": to_str(self.discount_value),
            "discount_amount": to_str(self.discount_amount),
            "original_amount": to_str(self.original_amount),
            "final_amount": to_str(self.final_amount),
            "savings": to_str(self.discount_amount),
        }


def to_money(value: Decimal | float | int | str) -> Decimal:
    return Decimal(str(value)).quantize(MONEY_PLACES, rounding=ROUND_HALF_UP)


def to_str(value: Decimal) -> str:
    return f"{to_money(value):.2f}"


def normalize_code(code: str | None) -> str | None:
    """Return the stored (uppercase) form of a code, or None when blank."""
    if code is None:
        return None
    normalized = code.strip().upper()
    return normalized or None


def _coerce_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def evaluate_promo(
    promo: PromoCode, order_amount: Decimal, *, now: datetime | None = None
) -> PromoEvaluation:
    """Apply the applicability rule and discount formula without side effects.

    A code applies when it is active, ``now`` falls inside its validity
    window, its usage limit is not exhausted and the order meets the minimum.
    Percentage discounts are capped by ``max_discount_amount``; every
    discount is capped by the order amount itself.
    """

    amount = to_money(order_amount)
    moment = _coerce_utc(now or datetime.now(UTC))

    rejection: PromoRejection | None = None
    if not promo.is_active:
        rejection = PromoRejection.INACTIVE
    elif moment < _coerce_utc(promo.valid_from):
        rejection = PromoRejection.NOT_STARTED
    elif moment > _coerce_utc(promo.valid_until):
        rejection = PromoRejection.EXPIRED
    elif promo.usage_limit is not None and promo.used_count >= promo.usage_limit:
        rejection = PromoRejection.EXHAUSTED
    elif amount < to_money(promo.min_order_amount):
        rejection = PromoRejection.BELOW_MINIMUM

    if rejection is not None:
        return PromoEvaluation(rejection=rejection, discount_amount=ZERO, final_amount=amount)

    if promo.discount_type is DiscountType.PERCENTAGE:
        discount = amount * Decimal(promo.discount_value) / Decimal("100")
        if promo.max_discount_amount is not None:
            discount = min(discount, Decimal(promo.max_discount_amount))
    else:
        discount = Decimal(promo.discount_value)

    discount = to_money(min(discount, amount))
    return PromoEvaluation(
        rejection=None, discount_amount=discount, final_amount=amount - discount
    )


async def get_promo_by_code(session: AsyncSession, code: str) -> PromoCode | None:
    """Look up a promo code case-insensitively."""
    normalized = normalize_code(code)
    if normalized is None:
        return None
    result = await session.execute(
        select(PromoCode)
        .where(PromoCode.code == normalized)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def claim_usage(session: AsyncSession, promo: PromoCode) -> bool:
    """Increment ``used_count`` inside the caller's transaction.

    The increment is conditional on the usage limit so concurrent bookings in
    different slots cannot push a code past its limit. Returns False when the
    code was exhausted in the meantime.
    """

    result = await session.execute(
        update(PromoCode)
        .where(
            PromoCode.id == promo.id,
            or_(
                PromoCode.usage_limit.is_(None),
                PromoCode.used_count < PromoCode.usage_limit,
            ),
        )
        .values(used_count=PromoCode.used_count + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def validate_promo(
    session: AsyncSession,
    *,
    code: str,
    order_amount: Decimal,
    now: datetime | None = None,
) -> PromoQuote:
    """Preview a promo code for an order amount; never mutates the ledger."""

    promo = await get_promo_by_code(session, code)
    if promo is None:
        raise PromoNotFoundError(code)

    evaluation = evaluate_promo(promo, order_amount, now=now)
    if evaluation.rejection is PromoRejection.BELOW_MINIMUM:
        raise PromoMinimumNotMetError(
            to_money(promo.min_order_amount),
            currency_label=get_settings().promo_currency_label,
        )
    if not evaluation.applicable:
        raise PromoNotFoundError(code)

    return PromoQuote(
        code=promo.code,
        description=promo.description,
        discount_type=promo.discount_type,
        discount_value=Decimal(promo.discount_value),
        discount_amount=evaluation.discount_amount,
        original_amount=to_money(order_amount),
        final_amount=evaluation.final_amount,
    )
