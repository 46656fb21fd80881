"""Pydantic schemas for reservations."""
from __future__ import annotations

import uuid
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from hotel_api.models.reservation import PaymentStatus, Reservation, ReservationStatus
from hotel_api.schemas.guest import GuestRead
from hotel_api.schemas.room import RoomRead


def _to_utc_date(value: Any) -> Any:
    """Truncate instants to their UTC calendar date."""
    if isinstance(value, str) and len(value) > 10:
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date()
    return value


StayDate = Annotated[date, BeforeValidator(_to_utc_date)]


class ReservationBase(BaseModel):
    """Shared reservation fields."""

    guest_id: uuid.UUID
    room_id: uuid.UUID
    check_in_date: StayDate
    check_out_date: StayDate
    number_of_guests: int = Field(ge=1, le=10)
    special_requests: str | None = Field(default=None, max_length=1000)


class ReservationCreate(ReservationBase):
    """Payload for creating reservations."""


class ReservationReplace(ReservationBase):
    """Full replacement payload; every field is required."""

    status: ReservationStatus
    payment_status: PaymentStatus


class ReservationUpdate(BaseModel):
    """Mutable reservation fields."""

    guest_id: uuid.UUID | None = None
    room_id: uuid.UUID | None = None
    check_in_date: StayDate | None = None
    check_out_date: StayDate | None = None
    number_of_guests: int | None = Field(default=None, ge=1, le=10)
    special_requests: str | None = Field(default=None, max_length=1000)
    status: ReservationStatus | None = None
    payment_status: PaymentStatus | None = None


class ReservationStatusUpdate(BaseModel):
    """Payload for a lifecycle status change."""

    status: ReservationStatus


class PaymentStatusUpdate(BaseModel):
    """Payload for a payment status change."""

    payment_status: PaymentStatus


class ReservationRead(ReservationBase):
    """Serialized reservation representation."""

    id: uuid.UUID
    status: ReservationStatus
    payment_status: PaymentStatus
    total_price: Decimal
    created_at: datetime
    updated_at: datetime
    guest: GuestRead | None = None
    room: RoomRead | None = None

    model_config = ConfigDict(from_attributes=True)


class ReservationSummary(BaseModel):
    """Flattened reservation row for listings."""

    id: uuid.UUID
    guest_name: str
    room_number: str
    room_type: str
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    status: ReservationStatus
    payment_status: PaymentStatus
    total_price: Decimal

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> "ReservationSummary":
        return cls(
            id=reservation.id,
            guest_name=reservation.guest.name,
            room_number=reservation.room.room_number,
            room_type=reservation.room.room_type,
            check_in_date=reservation.check_in_date,
            check_out_date=reservation.check_out_date,
            number_of_guests=reservation.number_of_guests,
            status=reservation.status,
            payment_status=reservation.payment_status,
            total_price=reservation.total_price,
        )


class ReservationBulkResult(BaseModel):
    """Outcome of a best-effort reservation import."""

    created_reservations: list[ReservationSummary] = Field(default_factory=list)
    total_requested: int
    total_created: int
    total_skipped: int
    errors: list[str] = Field(default_factory=list)


class RoomAvailability(BaseModel):
    """Availability of one room for a requested stay."""

    room_id: uuid.UUID
    room_number: str
    room_type: str
    price_per_night: Decimal
    description: str | None = None
    is_available: bool


class DailyAvailability(BaseModel):
    """Room inventory for a single night."""

    date: date
    total_rooms: int
    booked: int
    available: int
