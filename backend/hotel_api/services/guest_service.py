"""Guest management services."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.core.config import get_settings
from hotel_api.core.errors import ConflictError, DuplicateKeyError, ValidationError
from hotel_api.models.guest import Guest
from hotel_api.models.reservation import Reservation
from hotel_api.schemas.guest import GuestCreate, GuestRead, GuestUpdate

logger = logging.getLogger(__name__)


async def list_guests(
    session: AsyncSession,
    *,
    search: str | None = None,
    skip: int = 0,
    limit: int = 50,
) -> list[Guest]:
    """Return guests ordered by name, optionally filtered by name or email."""
    stmt: Select[tuple[Guest]] = select(Guest)
    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(
            or_(func.lower(Guest.name).like(pattern), func.lower(Guest.email).like(pattern))
        )
    stmt = stmt.order_by(Guest.name, Guest.email).offset(skip).limit(min(limit, 100))
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_guest(session: AsyncSession, *, guest_id: uuid.UUID) -> Guest | None:
    return await session.get(Guest, guest_id)


async def _email_taken(
    session: AsyncSession, email: str, *, exclude_id: uuid.UUID | None = None
) -> bool:
    stmt = select(Guest.id).where(Guest.email == email)
    if exclude_id is not None:
        stmt = stmt.where(Guest.id != exclude_id)
    return (await session.execute(stmt.limit(1))).first() is not None


async def create_guest(session: AsyncSession, payload: GuestCreate) -> Guest:
    """Create a new guest."""
    if await _email_taken(session, payload.email):
        raise DuplicateKeyError(f"Guest with email {payload.email} already exists")
    guest = Guest(**payload.model_dump())
    session.add(guest)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateKeyError(
            f"Guest with email {payload.email} already exists"
        ) from exc
    await session.refresh(guest)
    return guest


async def update_guest(
    session: AsyncSession,
    guest: Guest,
    payload: GuestUpdate,
) -> Guest:
    """Replace the mutable fields on a guest."""
    if await _email_taken(session, payload.email, exclude_id=guest.id):
        raise DuplicateKeyError(f"Guest with email {payload.email} already exists")
    for field, value in payload.model_dump().items():
        setattr(guest, field, value)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise DuplicateKeyError(
            f"Guest with email {payload.email} already exists"
        ) from exc
    await session.refresh(guest)
    return guest


async def delete_guest(session: AsyncSession, guest: Guest) -> None:
    """Delete a guest that no reservation references."""
    referenced = await session.execute(
        select(Reservation.id).where(Reservation.guest_id == guest.id).limit(1)
    )
    if referenced.first() is not None:
        raise ConflictError("Guest has existing reservations and cannot be deleted")
    await session.delete(guest)
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ConflictError(
            "Guest has existing reservations and cannot be deleted"
        ) from exc


async def bulk_create_guests(
    session: AsyncSession, payloads: Sequence[GuestCreate]
) -> dict[str, Any]:
    """Create each guest independently, recording duplicates as errors."""
    if not payloads:
        raise ValidationError("No guests provided for bulk creation")
    max_items = get_settings().bulk_max_items
    if len(payloads) > max_items:
        raise ValidationError(f"At most {max_items} items per bulk request")

    created: list[GuestRead] = []
    errors: list[str] = []
    for payload in payloads:
        try:
            created.append(GuestRead.model_validate(await create_guest(session, payload)))
        except DuplicateKeyError as exc:
            errors.append(str(exc))

    if errors:
        logger.warning(
            "Bulk guest import rejected %d of %d item(s)", len(errors), len(payloads)
        )
    return {
        "created_guests": created,
        "total_requested": len(payloads),
        "total_created": len(created),
        "total_skipped": len(payloads) - len(created),
        "errors": errors,
    }
