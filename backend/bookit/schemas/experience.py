"""Pydantic schemas for experiences and slots."""
from __future__ import annotations

import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from bookit.models.slot import SlotStatus


class ExperienceRead(BaseModel):
    """Serialized experience listing."""

    id: int
    title: str
    description: str
    location: str
    price: Decimal
    duration: str
    image_url: str | None = None
    category: str
    rating: Decimal
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class SlotRead(BaseModel):
    """Serialized slot with its remaining capacity."""

    id: int
    experience_id: int
    date: datetime.date
    time_slot: datetime.time
    total_capacity: int
    available_capacity: int
    status: SlotStatus
    created_at: datetime.datetime
    updated_at: datetime.datetime

    model_config = ConfigDict(from_attributes=True)


class ExperienceDetail(BaseModel):
    """An experience with bookable slots keyed by ISO date."""

    experience: ExperienceRead
    slots: dict[str, list[SlotRead]]
    total_slots: int
