"""Booking records."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookit.db.base import Base
from bookit.models.mixins import utcnow

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from bookit.models.experience import Experience
    from bookit.models.slot import Slot


class Booking(Base):
    """A completed reservation of slot capacity with its computed price."""

    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("number_of_people >= 1", name="number_of_people_positive"),
        CheckConstraint("discount_amount >= 0", name="discount_non_negative"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    experience_id: Mapped[int] = mapped_column(
        ForeignKey("experiences.id"), nullable=False
    )
    slot_id: Mapped[int] = mapped_column(ForeignKey("slots.id"), nullable=False)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False)
    user_email: Mapped[str] = mapped_column(String(320), nullable=False, index=True)
    user_phone: Mapped[str | None] = mapped_column(String(32))
    number_of_people: Mapped[int] = mapped_column(Integer(), nullable=False)
    total_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    promo_code: Mapped[str | None] = mapped_column(String(64))
    discount_amount: Mapped[Decimal] = mapped_column(
        Numeric(10, 2), nullable=False, default=Decimal("0.00")
    )
    final_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        server_default=func.now(),
    )

    experience: Mapped["Experience"] = relationship("Experience")
    slot: Mapped["Slot"] = relationship("Slot")
