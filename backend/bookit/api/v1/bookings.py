"""Booking API."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from bookit.api import deps
from bookit.schemas.booking import (
    BookingCreate,
    BookingRead,
    BookingSummaryRead,
    normalize_email,
)
from bookit.schemas.common import Envelope, ListEnvelope
from bookit.services import booking_service, notification_service
from bookit.services.errors import BookingError, InternalError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=Envelope[BookingRead],
    status_code=status.HTTP_201_CREATED,
    summary="Create booking",
    dependencies=[deps.BOOKING_RATE_DEP],
)
async def create_booking(
    payload: BookingCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    background_tasks: BackgroundTasks,
) -> Envelope[BookingRead]:
    try:
        booking = await booking_service.create_booking(
            session, **payload.model_dump()
        )
    except BookingError:
        raise
    except Exception as exc:
        logger.exception(
            "Error creating booking for slot %s of experience %s",
            payload.slot_id,
            payload.experience_id,
        )
        raise InternalError() from exc
    notification_service.notify_booking_confirmation(booking, background_tasks)
    return Envelope[BookingRead](
        message="Booking created successfully",
        data=BookingRead.model_validate(booking),
    )


@router.get(
    "/user/{email}",
    response_model=ListEnvelope[BookingSummaryRead],
    summary="List bookings for a purchaser email",
)
async def list_bookings_for_email(
    email: str,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ListEnvelope[BookingSummaryRead]:
    try:
        normalized = normalize_email(email)
    except ValueError:
        normalized = email.strip().lower()
    bookings = await booking_service.list_bookings_for_email(session, email=normalized)
    data = [BookingSummaryRead.from_booking(booking) for booking in bookings]
    return ListEnvelope[BookingSummaryRead](count=len(data), data=data)
