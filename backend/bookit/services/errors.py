"""Business error kinds raised by the booking services."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Stable machine-readable failure kinds."""

    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    VALIDATION_FAILED = "ValidationFailed"
    INTERNAL = "Internal"


class BookingError(Exception):
    """Base business error with a kind and a user-safe message."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, detail: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class NotFoundError(BookingError):
    kind = ErrorKind.NOT_FOUND


class ConflictError(BookingError):
    kind = ErrorKind.CONFLICT


class InternalError(BookingError):
    """Raised when the booking path fails for a non-business reason."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str = "Failed to create booking") -> None:
        super().__init__(message)


class SlotNotFoundError(NotFoundError):
    """Raised when no slot matches the slot and experience ids."""

    def __init__(self, slot_id: int, experience_id: int) -> None:
        super().__init__(
            "Slot not found",
            detail={"slot_id": slot_id, "experience_id": experience_id},
        )
        self.slot_id = slot_id
        self.experience_id = experience_id


class ExperienceNotFoundError(NotFoundError):
    """Raised when an experience does not exist."""

    def __init__(self, experience_id: int) -> None:
        super().__init__("Experience not found", detail={"experience_id": experience_id})
        self.experience_id = experience_id


class PromoNotFoundError(NotFoundError):
    """Raised when a promo code is unknown or not currently applicable."""

    def __init__(self, code: str) -> None:
        super().__init__("Invalid or expired promo code")
        self.code = code


class InsufficientCapacityError(ConflictError):
    """Raised when a slot has fewer spots left than requested."""

    def __init__(self, remaining: int, requested: int) -> None:
        super().__init__(
            f"Only {remaining} spots available. Please reduce number of people.",
            detail={"available_capacity": remaining, "requested": requested},
        )
        self.remaining = remaining
        self.requested = requested


class SlotUnavailableError(ConflictError):
    """Raised when a slot is no longer open for booking."""

    def __init__(self, slot_id: int) -> None:
        super().__init__("This slot is no longer available", detail={"slot_id": slot_id})
        self.slot_id = slot_id


class PromoMinimumNotMetError(ConflictError):
    """Raised when an order is below the promo code's minimum amount."""

    def __init__(self, minimum: Decimal, currency_label: str = "Rs.") -> None:
        # 100.00 reads as "100", 99.50 as "99.5"
        display = f"{minimum.normalize():f}"
        super().__init__(
            f"Minimum order amount of {currency_label} {display} required to use this promo code",
            detail={"min_order_amount": f"{minimum:.2f}"},
        )
        self.minimum = minimum


class SlotLockTimeoutError(ConflictError):
    """Raised when the slot lock could not be acquired in time."""

    def __init__(self, slot_id: int) -> None:
        super().__init__(
            "The slot is busy, please retry",
            detail={"slot_id": slot_id, "retryable": True},
        )
        self.slot_id = slot_id


__all__ = [
    "BookingError",
    "ConflictError",
    "ErrorKind",
    "ExperienceNotFoundError",
    "InsufficientCapacityError",
    "InternalError",
    "NotFoundError",
    "PromoMinimumNotMetError",
    "PromoNotFoundError",
    "SlotLockTimeoutError",
    "SlotNotFoundError",
    "SlotUnavailableError",
]
