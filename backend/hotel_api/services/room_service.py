"""Room management services."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.core.config import get_settings
from hotel_api.core.errors import ConflictError, DuplicateKeyError, ValidationError
from hotel_api.models.reservation import Reservation
from hotel_api.models.room import Room
from hotel_api.schemas.room import RoomCreate, RoomRead, RoomUpdate

logger = logging.getLogger(__name__)


async def list_rooms(
    session: AsyncSession,
    *,
    available_only: bool = False,
    room_type: str | None = None,
    skip: int = 0,
    limit: int = 50,
) -> list[Room]:
    """Return rooms ordered by number."""
    stmt: Select[tuple[Room]] = select(Room)
    if available_only:
        stmt = stmt.where(Room.is_available.is_(True))
    if room_type:
        stmt = stmt.where(Room.room_type == room_type)
    stmt = stmt.order_by(Room.room_number).offset(skip).limit(min(limit, 100))
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_room(session: AsyncSession, *, room_id: uuid.UUID) -> Room | None:
    return await session.get(Room, room_id)


async def _number_taken(
    session: AsyncSession, room_number: str, *, exclude_id: uuid.UUID | None = None
) -> bool:
    stmt = select(Room.id).where(Room.room_number == room_number)
    if exclude_id is not None:
        stmt = stmt.where(Room.id != exclude_id)
    return (await session.execute(stmt.limit(1))).first() is not None


async def create_room(session: AsyncSession, payload: RoomCreate) -> Room:
    """Create a new room."""
    if await _number_taken(session, payload.room_number):
        raise DuplicateKeyError(f"Room {payload.room_number} already exists")
    room = Room(**payload.model_dump())
    session.add(room)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateKeyError(f"Room {payload.room_number} already exists") from exc
    await session.refresh(room)
    return room


async def update_room(
    session: AsyncSession,
    room: Room,
    payload: RoomUpdate,
) -> Room:
    """Replace the mutable fields on a room."""
    if await _number_taken(session, payload.room_number, exclude_id=room.id):
        raise DuplicateKeyError(f"Room {payload.room_number} already exists")
    for field, value in payload.model_dump().items():
        setattr(room, field, value)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateKeyError(f"Room {payload.room_number} already exists") from exc
    await session.refresh(room)
    return room


async def delete_room(session: AsyncSession, room: Room) -> None:
    """Delete a room that no reservation references."""
    referenced = await session.execute(
        select(Reservation.id).where(Reservation.room_id == room.id).limit(1)
    )
    if referenced.first() is not None:
        raise ConflictError("Room has existing reservations and cannot be deleted")
    await session.delete(room)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ConflictError(
            "Room has existing reservations and cannot be deleted"
        ) from exc


async def bulk_create_rooms(
    session: AsyncSession, payloads: Sequence[RoomCreate]
) -> dict[str, Any]:
    """Create each room independently, recording duplicates as errors."""
    if not payloads:
        raise ValidationError("No rooms provided for bulk creation")
    max_items = get_settings().bulk_max_items
    if len(payloads) > max_items:
        raise ValidationError(f"At most {max_items} items per bulk request")

    created: list[RoomRead] = []
    errors: list[str] = []
    for payload in payloads:
        try:
            created.append(RoomRead.model_validate(await create_room(session, payload)))
        except DuplicateKeyError as exc:
            errors.append(str(exc))

    if errors:
        logger.warning(
            "Bulk room import rejected %d of %d item(s)", len(errors), len(payloads)
        )
    return {
        "created_rooms": created,
        "total_requested": len(payloads),
        "total_created": len(created),
        "total_skipped": len(payloads) - len(created),
        "errors": errors,
    }
