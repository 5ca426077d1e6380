"""Booking notification hooks."""

from __future__ import annotations

import logging

from fastapi import BackgroundTasks

from bookit.models import Booking

logger = logging.getLogger(__name__)


def build_booking_confirmation(booking: Booking) -> tuple[str, str]:
    subject = f"Booking #{booking.id} confirmed"
    body = (
        f"Hi {booking.user_name},\n\n"
        f"Your booking for {booking.number_of_people} "
        f"{'person' if booking.number_of_people == 1 else 'people'} is confirmed.\n"
        f"Total charged: {booking.final_price:.2f}\n\n"
        "Thank you for booking with BookIt!"
    )
    return subject, body


def notify_booking_confirmation(
    booking: Booking, background_tasks: BackgroundTasks
) -> None:
    """Queue the confirmation message for a new booking.

    Delivery is not wired to any provider; the message is only logged.
    """
    subject, body = build_booking_confirmation(booking)
    background_tasks.add_task(_log_message_stub, booking.user_email, subject, body)


def _log_message_stub(recipient: str, subject: str, body: str) -> None:
    logger.info("Confirmation to %s: %s", recipient, subject)
    logger.debug("Confirmation body for %s: %s", recipient, body)
