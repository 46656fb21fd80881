"""Guest schemas for CRUD operations."""
from __future__ import annotations

import uuid
from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


class GuestBase(BaseModel):
    """Shared guest fields."""

    name: str = Field(min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=1, max_length=20)

    @field_validator("email")
    @classmethod
    def _limit_email_length(cls, value: str) -> str:
        if len(value) > 100:
            raise ValueError("Email must be at most 100 characters")
        return value


class GuestCreate(GuestBase):
    """Payload for creating a guest."""


class GuestUpdate(GuestBase):
    """Replacement payload for an existing guest."""


class GuestRead(GuestBase):
    """Serialized guest response."""

    id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class GuestBulkResult(BaseModel):
    """Outcome of a best-effort guest import."""

    created_guests: list[GuestRead] = Field(default_factory=list)
    total_requested: int
    total_created: int
    total_skipped: int
    errors: list[str] = Field(default_factory=list)
