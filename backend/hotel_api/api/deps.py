"""Common API dependencies."""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime, timedelta
from typing import Annotated
from collections.abc import AsyncGenerator

from fastapi import Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.core.config import get_settings
from hotel_api.db.session import get_session
from hotel_api.models.guest import Guest
from hotel_api.models.reservation import Reservation
from hotel_api.models.room import Room
from hotel_api.services import guest_service, reservation_service, room_service


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide an async database session."""
    async for session in get_session():
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_db_session)]


def today_utc() -> date:
    return datetime.now(UTC).date()


def report_window(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
) -> tuple[date, date]:
    """Inclusive report range, defaulting to the trailing configured window."""
    settings = get_settings()
    end = end_date or today_utc()
    start = start_date or end - timedelta(days=settings.report_default_days)
    return start, end


ReportWindow = Annotated[tuple[date, date], Depends(report_window)]


async def get_guest_or_404(guest_id: uuid.UUID, session: SessionDep) -> Guest:
    guest = await guest_service.get_guest(session, guest_id=guest_id)
    if guest is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Guest not found"
        )
    return guest


async def get_room_or_404(room_id: uuid.UUID, session: SessionDep) -> Room:
    room = await room_service.get_room(session, room_id=room_id)
    if room is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Room not found"
        )
    return room


async def get_reservation_or_404(
    reservation_id: uuid.UUID, session: SessionDep
) -> Reservation:
    reservation = await reservation_service.get_reservation(
        session, reservation_id=reservation_id
    )
    if reservation is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Reservation not found"
        )
    return reservation
