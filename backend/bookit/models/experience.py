"""Experience catalog model."""
from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from bookit.db.base import Base
from bookit.models.mixins import TimestampMixin

if TYPE_CHECKING:  # pragma: no cover - typing only imports
    from bookit.models.slot import Slot


class Experience(TimestampMixin, Base):
    """A bookable listing with a per-person base price."""

    __tablename__ = "experiences"
    __table_args__ = (CheckConstraint("price > 0", name="price_positive"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    duration: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    image_url: Mapped[str | None] = mapped_column(String(1024))
    category: Mapped[str] = mapped_column(String(100), nullable=False, default="")
    rating: Mapped[Decimal] = mapped_column(
        Numeric(3, 2), nullable=False, default=Decimal("0")
    )

    slots: Mapped[list["Slot"]] = relationship(
        "Slot", back_populates="experience", order_by="[Slot.date, Slot.time_slot]"
    )
