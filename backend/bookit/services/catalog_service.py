"""Experience catalog and slot availability reads."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookit.models import Experience, Slot, SlotStatus
from bookit.services.errors import ExperienceNotFoundError


@dataclass(slots=True)
class ExperienceAvailability:
    """An experience with its open slots grouped by date."""

    experience: Experience
    slots_by_date: dict[str, list[Slot]] = field(default_factory=dict)

    @property
    def total_slots(self) -> int:
        return sum(len(slots) for slots in self.slots_by_date.values())


async def list_experiences(session: AsyncSession) -> Sequence[Experience]:
    """Return all experiences, best rated and newest first."""
    result = await session.execute(
        select(Experience).order_by(
            Experience.rating.desc(), Experience.created_at.desc(), Experience.id.desc()
        )
    )
    return result.scalars().all()


async def get_experience(session: AsyncSession, experience_id: int) -> Experience | None:
    return await session.get(Experience, experience_id)


async def get_experience_with_slots(
    session: AsyncSession,
    *,
    experience_id: int,
    as_of: date | None = None,
) -> ExperienceAvailability:
    """Return an experience and its bookable slots from ``as_of`` onward."""

    experience = await get_experience(session, experience_id)
    if experience is None:
        raise ExperienceNotFoundError(experience_id)

    as_of = as_of or date.today()
    result = await session.execute(
        select(Slot)
        .where(
            Slot.experience_id == experience_id,
            Slot.date >= as_of,
            Slot.available_capacity > 0,
            Slot.status == SlotStatus.AVAILABLE,
        )
        .order_by(Slot.date.asc(), Slot.time_slot.asc())
    )

    availability = ExperienceAvailability(experience=experience)
    for slot in result.scalars():
        availability.slots_by_date.setdefault(slot.date.isoformat(), []).append(slot)
    return availability
