"""Slot inventory model."""
from __future__ import annotations

import datetime
import enum
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Enum, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookit.db.base import Base
from bookit.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from bookit.models.experience import Experience


class SlotStatus(str, enum.Enum):
    """Sale status of a slot."""

    AVAILABLE = "available"
    SOLD_OUT = "sold_out"


class Slot(TimestampMixin, Base):
    """A dated, timed instance of an experience with finite capacity."""

    __tablename__ = "slots"
    __table_args__ = (
        UniqueConstraint(
            "experience_id", "date", "time_slot", name="uq_slot_experience_date_time"
        ),
        CheckConstraint("total_capacity >= 0", name="total_capacity_non_negative"),
        CheckConstraint(
            "available_capacity >= 0 AND available_capacity <= total_capacity",
            name="available_capacity_bounds",
        ),
        Index("ix_slots_experience_date", "experience_id", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    experience_id: Mapped[int] = mapped_column(
        ForeignKey("experiences.id", ondelete="CASCADE"), nullable=False
    )
    date: Mapped[datetime.date] = mapped_column(nullable=False)
    time_slot: Mapped[datetime.time] = mapped_column(nullable=False)
    total_capacity: Mapped[int] = mapped_column(Integer(), nullable=False)
    available_capacity: Mapped[int] = mapped_column(Integer(), nullable=False)
    status: Mapped[SlotStatus] = mapped_column(
        Enum(SlotStatus, values_callable=lambda kinds: [kind.value for kind in kinds]),
        default=SlotStatus.AVAILABLE,
        nullable=False,
    )

    experience: Mapped["Experience"] = relationship(
        "Experience", back_populates="slots"
    )

    @property
    def is_bookable(self) -> bool:
        return self.status is SlotStatus.AVAILABLE and self.available_capacity > 0
