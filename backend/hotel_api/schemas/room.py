"""Room schemas for CRUD operations."""
from __future__ import annotations

import uuid
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class RoomBase(BaseModel):
    """Shared room fields."""

    room_number: str = Field(min_length=1, max_length=50)
    room_type: str = Field(min_length=1, max_length=50)
    price_per_night: Decimal = Field(gt=Decimal("0"), max_digits=10, decimal_places=2)
    description: str | None = Field(default=None, max_length=500)
    is_available: bool = True


class RoomCreate(RoomBase):
    """Payload for creating a room."""


class RoomUpdate(RoomBase):
    """Replacement payload for an existing room."""


class RoomRead(RoomBase):
    """Serialized room response."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoomBulkResult(BaseModel):
    """Outcome of a best-effort room import."""

    created_rooms: list[RoomRead] = Field(default_factory=list)
    total_requested: int
    total_created: int
    total_skipped: int
    errors: list[str] = Field(default_factory=list)
