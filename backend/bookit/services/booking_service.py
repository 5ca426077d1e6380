"""Reservation engine: turns a booking request into a capacity-safe booking."""
from __future__ import annotations

import asyncio
import logging
import weakref
from collections.abc import AsyncIterator, Sequence
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal

from sqlalchemy import select, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bookit.core.config import get_settings
from bookit.models import Booking, Experience, Slot, SlotStatus
from bookit.services import promo_service
from bookit.services.errors import (
    BookingError,
    ExperienceNotFoundError,
    InsufficientCapacityError,
    SlotLockTimeoutError,
    SlotNotFoundError,
    SlotUnavailableError,
)

logger = logging.getLogger(__name__)

_LOCK_NOT_AVAILABLE = "55P03"

# Per event loop registry of slot locks for engines without row locking.
# An entry lives only while some request holds or awaits the lock.
_slot_locks: weakref.WeakKeyDictionary[
    asyncio.AbstractEventLoop, weakref.WeakValueDictionary[int, asyncio.Lock]
] = weakref.WeakKeyDictionary()


def _supports_row_locks(session: AsyncSession) -> bool:
    return session.get_bind().dialect.name != "sqlite"


def _local_slot_lock(slot_id: int) -> asyncio.Lock:
    loop = asyncio.get_running_loop()
    locks = _slot_locks.get(loop)
    if locks is None:
        locks = _slot_locks[loop] = weakref.WeakValueDictionary()
    lock = locks.get(slot_id)
    if lock is None:
        lock = asyncio.Lock()
        locks[slot_id] = lock
    return lock


@asynccontextmanager
async def _slot_guard(
    session: AsyncSession, slot_id: int, timeout: float
) -> AsyncIterator[None]:
    """Serialize writers of one slot when the database cannot lock rows."""
    if _supports_row_locks(session):
        if session.get_bind().dialect.name == "postgresql":
            await session.execute(
                text(f"SET LOCAL lock_timeout = '{int(timeout * 1000)}ms'")
            )
        yield
        return

    lock = _local_slot_lock(slot_id)
    try:
        await asyncio.wait_for(lock.acquire(), timeout)
    except TimeoutError as exc:
        raise SlotLockTimeoutError(slot_id) from exc
    try:
        yield
    finally:
        lock.release()


def _is_lock_timeout(exc: DBAPIError) -> bool:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == _LOCK_NOT_AVAILABLE:
        return True
    return "database is locked" in str(orig).lower()


async def _lock_slot(session: AsyncSession, *, slot_id: int, experience_id: int) -> Slot:
    result = await session.execute(
        select(Slot)
        .where(Slot.id == slot_id, Slot.experience_id == experience_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    slot = result.scalar_one_or_none()
    if slot is None:
        raise SlotNotFoundError(slot_id, experience_id)
    return slot


def _consume_capacity(slot: Slot, number_of_people: int) -> None:
    slot.available_capacity -= number_of_people
    slot.status = (
        SlotStatus.SOLD_OUT if slot.available_capacity == 0 else SlotStatus.AVAILABLE
    )


async def _reserve(
    session: AsyncSession,
    *,
    experience_id: int,
    slot_id: int,
    user_name: str,
    user_email: str,
    user_phone: str | None,
    number_of_people: int,
    promo_code: str | None,
    now: datetime | None,
) -> Booking:
    slot = await _lock_slot(session, slot_id=slot_id, experience_id=experience_id)

    if slot.available_capacity < number_of_people:
        raise InsufficientCapacityError(slot.available_capacity, number_of_people)
    if slot.status is not SlotStatus.AVAILABLE:
        raise SlotUnavailableError(slot.id)

    experience = await session.get(Experience, experience_id)
    if experience is None:
        raise ExperienceNotFoundError(experience_id)

    total_price = promo_service.to_money(Decimal(experience.price) * number_of_people)
    discount_amount = promo_service.ZERO
    final_price = total_price

    if promo_service.normalize_code(promo_code) is not None:
        promo = await promo_service.get_promo_by_code(session, promo_code or "")
        if promo is not None:
            evaluation = promo_service.evaluate_promo(promo, total_price, now=now)
            if evaluation.applicable and await promo_service.claim_usage(session, promo):
                discount_amount = evaluation.discount_amount
                final_price = evaluation.final_amount
            else:
                logger.info(
                    "Ignoring promo code %s for slot %s: %s",
                    promo.code,
                    slot.id,
                    evaluation.rejection.value if evaluation.rejection else "exhausted",
                )

    booking = Booking(
        experience_id=experience_id,
        slot_id=slot.id,
        user_name=user_name,
        user_email=user_email,
        user_phone=user_phone,
        number_of_people=number_of_people,
        total_price=total_price,
        promo_code=promo_code.strip() if promo_code and promo_code.strip() else None,
        discount_amount=discount_amount,
        final_price=final_price,
    )
    session.add(booking)
    await session.flush()

    _consume_capacity(slot, number_of_people)
    await session.flush()
    return booking


async def create_booking(
    session: AsyncSession,
    *,
    experience_id: int,
    slot_id: int,
    user_name: str,
    user_email: str,
    number_of_people: int,
    user_phone: str | None = None,
    promo_code: str | None = None,
    now: datetime | None = None,
) -> Booking:
    """Reserve slot capacity and record a booking as one atomic unit.

    The slot row stays locked from the capacity check until commit. Any
    failure rolls back the booking insert, the capacity decrement and the
    promo usage increment together.
    """

    timeout = get_settings().booking_lock_timeout_seconds
    async with _slot_guard(session, slot_id, timeout):
        try:
            booking = await _reserve(
                session,
                experience_id=experience_id,
                slot_id=slot_id,
                user_name=user_name,
                user_email=user_email,
                user_phone=user_phone,
                number_of_people=number_of_people,
                promo_code=promo_code,
                now=now,
            )
            await session.commit()
        except BookingError:
            await session.rollback()
            raise
        except DBAPIError as exc:
            await session.rollback()
            if _is_lock_timeout(exc):
                raise SlotLockTimeoutError(slot_id) from exc
            raise
        except Exception:
            await session.rollback()
            raise

    await session.refresh(booking)
    logger.info(
        "Booking %s created for slot %s (%s people, final %s)",
        booking.id,
        slot_id,
        number_of_people,
        booking.final_price,
    )
    return booking


async def get_booking(session: AsyncSession, booking_id: int) -> Booking | None:
    return await session.get(Booking, booking_id)


async def list_bookings_for_email(
    session: AsyncSession, *, email: str
) -> Sequence[Booking]:
    """Return a purchaser's bookings, newest first, with listing details loaded."""
    stmt = (
        select(Booking)
        .options(selectinload(Booking.experience), selectinload(Booking.slot))
        .where(Booking.user_email == email.strip().lower())
        .order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    result = await session.execute(stmt)
    return result.scalars().all()
