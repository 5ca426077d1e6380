"""Test fixtures for the BookIt backend."""
from __future__ import annotations

import datetime
import os
from collections.abc import AsyncIterator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from bookit.core.config import get_settings
from bookit.db.base import Base
from bookit.db.session import dispose_engine, get_sessionmaker
from bookit.main import app
from bookit.models import DiscountType, Experience, PromoCode, Slot, SlotStatus


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


def _promo(code: str, **overrides: object) -> PromoCode:
    now = datetime.datetime.now(datetime.UTC)
    fields: dict[str, object] = {
        "code": code,
        "description": f"{code} promotion",
        "discount_type": DiscountType.PERCENTAGE,
        "discount_value": Decimal("10"),
        "max_discount_amount": None,
        "min_order_amount": Decimal("100"),
        "valid_from": now - datetime.timedelta(days=1),
        "valid_until": now + datetime.timedelta(days=30),
        "usage_limit": None,
        "used_count": 0,
        "is_active": True,
    }
    fields.update(overrides)
    return PromoCode(**fields)


@pytest_asyncio.fixture()
async def catalog(reset_database: None, db_url: str) -> dict[str, int]:
    """Seed one experience with a small and a large slot plus promo codes."""
    sessionmaker = get_sessionmaker(db_url)
    tomorrow = datetime.date.today() + datetime.timedelta(days=1)

    async with sessionmaker() as session:
        experience = Experience(
            title="Kayaking",
            description="Guided paddle through the mangroves.",
            location="Udupi",
            price=Decimal("1000.00"),
            duration="3 hours",
            category="Water Sports",
            rating=Decimal("4.8"),
        )
        session.add(experience)
        await session.flush()

        small_slot = Slot(
            experience_id=experience.id,
            date=tomorrow,
            time_slot=datetime.time(9, 0),
            total_capacity=3,
            available_capacity=3,
            status=SlotStatus.AVAILABLE,
        )
        large_slot = Slot(
            experience_id=experience.id,
            date=tomorrow,
            time_slot=datetime.time(13, 0),
            total_capacity=10,
            available_capacity=10,
            status=SlotStatus.AVAILABLE,
        )
        session.add_all([small_slot, large_slot])

        session.add_all(
            [
                _promo("SAVE10"),
                _promo("CAPPED10", max_discount_amount=Decimal("50")),
                _promo(
                    "FLAT100",
                    discount_type=DiscountType.FIXED,
                    discount_value=Decimal("100"),
                    min_order_amount=Decimal("0"),
                ),
                _promo(
                    "OLDIES",
                    valid_from=datetime.datetime.now(datetime.UTC)
                    - datetime.timedelta(days=60),
                    valid_until=datetime.datetime.now(datetime.UTC)
                    - datetime.timedelta(days=1),
                ),
                _promo("ONCE", usage_limit=1, used_count=1),
                _promo("BIGSPENDER", min_order_amount=Decimal("5000")),
                _promo("PAUSED", is_active=False),
            ]
        )
        await session.commit()

        return {
            "experience_id": experience.id,
            "small_slot_id": small_slot.id,
            "large_slot_id": large_slot.id,
        }


@pytest_asyncio.fixture()
async def app_context(
    catalog: dict[str, int], db_url: str
) -> AsyncIterator[dict[str, object]]:
    """Yield an async client alongside the seeded catalog ids."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        context: dict[str, object] = dict(catalog)
        context["client"] = client
        yield context
