"""Seed demo experiences, upcoming slots and promo codes."""

from __future__ import annotations

import asyncio
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal

from sqlalchemy import select

from bookit.db.session import get_sessionmaker
from bookit.models import DiscountType, Experience, PromoCode, Slot, SlotStatus

SLOT_DAYS = 7
SLOT_TIMES = (time(7, 0), time(9, 0), time(11, 0), time(13, 0))
SLOT_CAPACITY = 10

EXPERIENCES = [
    {
        "title": "Kayaking",
        "description": "Curated small-group paddle with a certified guide.",
        "location": "Udupi",
        "price": Decimal("999.00"),
        "duration": "3 hours",
        "category": "Water Sports",
        "rating": Decimal("4.8"),
    },
    {
        "title": "Nandi Hills Sunrise",
        "description": "Early-morning trek timed for sunrise over the hills.",
        "location": "Bangalore",
        "price": Decimal("899.00"),
        "duration": "5 hours",
        "category": "Trekking",
        "rating": Decimal("4.6"),
    },
    {
        "title": "Coffee Trail",
        "description": "Plantation walk with tasting and a roastery visit.",
        "location": "Coorg",
        "price": Decimal("1299.00"),
        "duration": "4 hours",
        "category": "Food & Drink",
        "rating": Decimal("4.7"),
    },
]

PROMO_CODES = [
    {
        "code": "SAVE10",
        "description": "10% off, up to Rs. 500",
        "discount_type": DiscountType.PERCENTAGE,
        "discount_value": Decimal("10"),
        "max_discount_amount": Decimal("500"),
        "min_order_amount": Decimal("500"),
    },
    {
        "code": "FLAT100",
        "description": "Rs. 100 off orders above Rs. 1000",
        "discount_type": DiscountType.FIXED,
        "discount_value": Decimal("100"),
        "min_order_amount": Decimal("1000"),
        "usage_limit": 100,
    },
]


async def seed_catalog(start: date | None = None) -> None:
    sessionmaker = get_sessionmaker()
    start = start or date.today()
    async with sessionmaker() as session:
        experiences_created = 0
        slots_created = 0
        promos_created = 0

        for data in EXPERIENCES:
            experience = (
                await session.execute(
                    select(Experience).where(Experience.title == data["title"])
                )
            ).scalar_one_or_none()
            if experience is None:
                experience = Experience(**data)
                session.add(experience)
                await session.flush()
                experiences_created += 1

            existing = {
                (slot.date, slot.time_slot)
                for slot in (
                    await session.execute(
                        select(Slot).where(Slot.experience_id == experience.id)
                    )
                ).scalars()
            }
            for offset in range(SLOT_DAYS):
                day = start + timedelta(days=offset)
                for slot_time in SLOT_TIMES:
                    if (day, slot_time) in existing:
                        continue
                    session.add(
                        Slot(
                            experience_id=experience.id,
                            date=day,
                            time_slot=slot_time,
                            total_capacity=SLOT_CAPACITY,
                            available_capacity=SLOT_CAPACITY,
                            status=SlotStatus.AVAILABLE,
                        )
                    )
                    slots_created += 1

        now = datetime.now(UTC)
        for data in PROMO_CODES:
            promo_exists = (
                await session.execute(
                    select(PromoCode).where(PromoCode.code == data["code"])
                )
            ).scalar_one_or_none()
            if promo_exists is None:
                session.add(
                    PromoCode(
                        valid_from=now,
                        valid_until=now + timedelta(days=365),
                        **data,
                    )
                )
                promos_created += 1

        await session.commit()
        print(
            f"Seeded {experiences_created} experience(s), {slots_created} slot(s) "
            f"and {promos_created} promo code(s)."
        )


def main() -> None:
    asyncio.run(seed_catalog())


if __name__ == "__main__":
    main()
