"""Experience catalog API."""

from __future__ import annotations

import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from bookit.api import deps
from bookit.schemas.common import Envelope, ListEnvelope
from bookit.schemas.experience import ExperienceDetail, ExperienceRead, SlotRead
from bookit.services import catalog_service

router = APIRouter()


@router.get(
    "", response_model=ListEnvelope[ExperienceRead], summary="List experiences"
)
async def list_experiences(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ListEnvelope[ExperienceRead]:
    experiences = await catalog_service.list_experiences(session)
    data = [ExperienceRead.model_validate(obj) for obj in experiences]
    return ListEnvelope[ExperienceRead](count=len(data), data=data)


@router.get(
    "/{experience_id}",
    response_model=Envelope[ExperienceDetail],
    summary="Get experience with open slots",
)
async def get_experience(
    experience_id: int,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    as_of: Annotated[datetime.date | None, Query()] = None,
) -> Envelope[ExperienceDetail]:
    availability = await catalog_service.get_experience_with_slots(
        session, experience_id=experience_id, as_of=as_of
    )
    detail = ExperienceDetail(
        experience=ExperienceRead.model_validate(availability.experience),
        slots={
            day: [SlotRead.model_validate(slot) for slot in slots]
            for day, slots in availability.slots_by_date.items()
        },
        total_slots=availability.total_slots,
    )
    return Envelope[ExperienceDetail](data=detail)
