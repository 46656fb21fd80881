"""Room availability checks over half-open stay intervals."""
from __future__ import annotations

import uuid
from datetime import date, timedelta
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.core.errors import NotFoundError, ValidationError
from hotel_api.models.reservation import Reservation, ReservationStatus
from hotel_api.models.room import Room


def intervals_overlap(
    a_start: date, a_end: date, b_start: date, b_end: date
) -> bool:
    """Return True when [a_start, a_end) and [b_start, b_end) intersect."""
    return a_start < b_end and a_end > b_start


def validate_stay_dates(check_in: date, check_out: date) -> None:
    if check_out <= check_in:
        raise ValidationError("Check-out date must be after check-in date")


def _overlapping_reservations(
    check_in: date,
    check_out: date,
    *,
    room_id: uuid.UUID | None = None,
    exclude_reservation_id: uuid.UUID | None = None,
) -> Select[Any]:
    stmt = select(Reservation.room_id).where(
        Reservation.status != ReservationStatus.CANCELLED,
        Reservation.check_in_date < check_out,
        Reservation.check_out_date > check_in,
    )
    if room_id is not None:
        stmt = stmt.where(Reservation.room_id == room_id)
    if exclude_reservation_id is not None:
        stmt = stmt.where(Reservation.id != exclude_reservation_id)
    return stmt


async def has_conflict(
    session: AsyncSession,
    *,
    room_id: uuid.UUID,
    check_in: date,
    check_out: date,
    exclude_reservation_id: uuid.UUID | None = None,
) -> bool:
    """Return whether an active reservation on the room overlaps the stay."""
    stmt = _overlapping_reservations(
        check_in,
        check_out,
        room_id=room_id,
        exclude_reservation_id=exclude_reservation_id,
    ).limit(1)
    result = await session.execute(stmt)
    return result.first() is not None


async def is_room_available(
    session: AsyncSession,
    *,
    room_id: uuid.UUID,
    check_in: date,
    check_out: date,
) -> bool:
    """Combine the manual room flag with the date-overlap check."""
    validate_stay_dates(check_in, check_out)
    room = await session.get(Room, room_id)
    if room is None:
        raise NotFoundError(f"Room {room_id} not found")
    if not room.is_available:
        return False
    return not await has_conflict(
        session, room_id=room_id, check_in=check_in, check_out=check_out
    )


async def list_availability(
    session: AsyncSession,
    *,
    check_in: date,
    check_out: date,
) -> list[dict[str, Any]]:
    """Evaluate availability of every room for the requested stay."""
    validate_stay_dates(check_in, check_out)
    rooms = (
        await session.execute(select(Room).order_by(Room.room_number))
    ).scalars().all()
    booked_ids = set(
        (
            await session.execute(
                _overlapping_reservations(check_in, check_out).distinct()
            )
        ).scalars()
    )
    return [
        {
            "room_id": room.id,
            "room_number": room.room_number,
            "room_type": room.room_type,
            "price_per_night": room.price_per_night,
            "description": room.description,
            "is_available": room.is_available and room.id not in booked_ids,
        }
        for room in rooms
    ]


async def get_daily_availability(
    session: AsyncSession,
    *,
    start_date: date,
    end_date: date,
) -> list[dict[str, object]]:
    """Return room inventory per night for the requested range."""
    if start_date > end_date:
        raise ValidationError("start_date must be on or before end_date")

    total_rooms = (
        await session.execute(select(func.count()).select_from(Room))
    ).scalar_one()

    range_end = end_date + timedelta(days=1)
    stays = (
        await session.execute(
            select(Reservation.check_in_date, Reservation.check_out_date).where(
                Reservation.status != ReservationStatus.CANCELLED,
                Reservation.check_out_date > start_date,
                Reservation.check_in_date < range_end,
            )
        )
    ).all()

    days: list[dict[str, object]] = []
    current = start_date
    while current <= end_date:
        booked = sum(
            1 for check_in, check_out in stays if check_in <= current < check_out
        )
        days.append(
            {
                "date": current,
                "total_rooms": total_rooms,
                "booked": booked,
                "available": max(total_rooms - booked, 0),
            }
        )
        current += timedelta(days=1)

    return days
