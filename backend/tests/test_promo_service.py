"""Tests for promo code evaluation and validation."""

from __future__ import annotations

import datetime
from decimal import Decimal

import pytest

from bookit.db.session import get_sessionmaker
from bookit.models import DiscountType, PromoCode
from bookit.services import promo_service
from bookit.services.errors import (
    ErrorKind,
    PromoMinimumNotMetError,
    PromoNotFoundError,
)
from bookit.services.promo_service import PromoRejection

NOW = datetime.datetime(2026, 6, 1, 12, tzinfo=datetime.UTC)


def _promo(**overrides: object) -> PromoCode:
    fields: dict[str, object] = {
        "code": "SAVE10",
        "discount_type": DiscountType.PERCENTAGE,
        "discount_value": Decimal("10"),
        "max_discount_amount": None,
        "min_order_amount": Decimal("0"),
        "valid_from": NOW - datetime.timedelta(days=1),
        "valid_until": NOW + datetime.timedelta(days=1),
        "usage_limit": None,
        "used_count": 0,
        "is_active": True,
    }
    fields.update(overrides)
    return PromoCode(**fields)


def test_percentage_discount() -> None:
    evaluation = promo_service.evaluate_promo(_promo(), Decimal("1000"), now=NOW)
    assert evaluation.applicable
    assert evaluation.discount_amount == Decimal("100.00")
    assert evaluation.final_amount == Decimal("900.00")


def test_percentage_discount_is_capped() -> None:
    promo = _promo(max_discount_amount=Decimal("50"))
    evaluation = promo_service.evaluate_promo(promo, Decimal("1000"), now=NOW)
    assert evaluation.discount_amount == Decimal("50.00")
    assert evaluation.final_amount == Decimal("950.00")


def test_fixed_discount_never_exceeds_order() -> None:
    promo = _promo(discount_type=DiscountType.FIXED, discount_value=Decimal("100"))
    assert promo_service.evaluate_promo(
        promo, Decimal("250"), now=NOW
    ).discount_amount == Decimal("100.00")
    small = promo_service.evaluate_promo(promo, Decimal("60"), now=NOW)
    assert small.discount_amount == Decimal("60.00")
    assert small.final_amount == Decimal("0.00")


def test_percentage_rounds_half_up() -> None:
    promo = _promo(discount_value=Decimal("12.5"))
    evaluation = promo_service.evaluate_promo(promo, Decimal("0.99"), now=NOW)
    assert evaluation.discount_amount == Decimal("0.12")
    assert evaluation.final_amount == Decimal("0.87")


@pytest.mark.parametrize(
    ("overrides", "amount", "reason"),
    [
        ({"is_active": False}, "100", PromoRejection.INACTIVE),
        ({"valid_from": NOW + datetime.timedelta(hours=1)}, "100", PromoRejection.NOT_STARTED),
        ({"valid_until": NOW - datetime.timedelta(hours=1)}, "100", PromoRejection.EXPIRED),
        ({"usage_limit": 5, "used_count": 5}, "100", PromoRejection.EXHAUSTED),
        ({"min_order_amount": Decimal("100")}, "99.99", PromoRejection.BELOW_MINIMUM),
    ],
)
def test_inapplicable_codes_give_no_discount(
    overrides: dict[str, object], amount: str, reason: PromoRejection
) -> None:
    evaluation = promo_service.evaluate_promo(_promo(**overrides), Decimal(amount), now=NOW)
    assert evaluation.rejection is reason
    assert evaluation.discount_amount == Decimal("0.00")
    assert evaluation.final_amount == Decimal(amount)


def test_window_bounds_are_inclusive() -> None:
    promo = _promo(valid_from=NOW, valid_until=NOW, min_order_amount=Decimal("100"))
    assert promo_service.evaluate_promo(promo, Decimal("100"), now=NOW).applicable


def test_naive_timestamps_are_treated_as_utc() -> None:
    promo = _promo(
        valid_from=datetime.datetime(2026, 5, 31, 12),
        valid_until=datetime.datetime(2026, 6, 1, 11),
    )
    evaluation = promo_service.evaluate_promo(promo, Decimal("100"), now=NOW)
    assert evaluation.rejection is PromoRejection.EXPIRED


def test_codes_are_stored_uppercase() -> None:
    assert _promo(code="  save10 ").code == "SAVE10"
    assert promo_service.normalize_code("   ") is None


@pytest.mark.asyncio
async def test_validate_promo_matches_case_insensitively(catalog, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        lower = await promo_service.validate_promo(
            session, code="save10", order_amount=Decimal("1000")
        )
        upper = await promo_service.validate_promo(
            session, code="SAVE10", order_amount=Decimal("1000")
        )
    assert lower.code == upper.code == "SAVE10"
    data = lower.to_dict()
    assert data["discount_amount"] == "100.00"
    assert data["final_amount"] == "900.00"
    assert data["original_amount"] == "1000.00"
    assert data["savings"] == "100.00"
    assert data["discount_type"] == "percentage"


@pytest.mark.asyncio
async def test_validate_promo_minimum_gate_does_not_mutate(catalog, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(PromoMinimumNotMetError) as excinfo:
            await promo_service.validate_promo(
                session, code="SAVE10", order_amount=Decimal("50")
            )
    assert excinfo.value.kind is ErrorKind.CONFLICT
    assert "100" in excinfo.value.message

    async with sessionmaker() as session:
        await promo_service.validate_promo(
            session, code="SAVE10", order_amount=Decimal("500")
        )
        promo = await promo_service.get_promo_by_code(session, "SAVE10")
    assert promo is not None
    assert promo.used_count == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("code", ["NOPE", "OLDIES", "ONCE", "PAUSED"])
async def test_validate_promo_not_found(catalog, db_url: str, code: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(PromoNotFoundError) as excinfo:
            await promo_service.validate_promo(
                session, code=code, order_amount=Decimal("1000")
            )
    assert excinfo.value.kind is ErrorKind.NOT_FOUND
    assert excinfo.value.message == "Invalid or expired promo code"


@pytest.mark.parametrize(
    ("minimum", "shown"),
    [(Decimal("100.00"), "Rs. 100 "), (Decimal("99.50"), "Rs. 99.5 "), (Decimal("0.75"), "Rs. 0.75 ")],
)
def test_minimum_message_drops_trailing_zeros(minimum: Decimal, shown: str) -> None:
    error = PromoMinimumNotMetError(minimum)
    assert shown in error.message
    assert error.detail == {"min_order_amount": f"{minimum:.2f}"}
