"""Room administration API endpoints."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.api import deps
from hotel_api.api.errors import to_http_exception
from hotel_api.models.room import Room
from hotel_api.schemas.room import RoomBulkResult, RoomCreate, RoomRead, RoomUpdate
from hotel_api.services import room_service

router = APIRouter()


@router.get("", response_model=list[RoomRead], summary="List rooms")
async def list_rooms(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    room_type: str | None = Query(default=None, max_length=50),
    available_only: bool = False,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1),
) -> list[RoomRead]:
    rooms = await room_service.list_rooms(
        session,
        available_only=available_only,
        room_type=room_type,
        skip=skip,
        limit=limit,
    )
    return [RoomRead.model_validate(obj) for obj in rooms]


@router.get(
    "/available",
    response_model=list[RoomRead],
    summary="List rooms flagged as available",
)
async def list_available_rooms(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> list[RoomRead]:
    rooms = await room_service.list_rooms(session, available_only=True, limit=100)
    return [RoomRead.model_validate(obj) for obj in rooms]


@router.post(
    "",
    response_model=RoomRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create room",
)
async def create_room(
    payload: RoomCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RoomRead:
    try:
        room = await room_service.create_room(session, payload)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return RoomRead.model_validate(room)


@router.post("/bulk", response_model=RoomBulkResult, summary="Create rooms in bulk")
async def bulk_create_rooms(
    payload: list[RoomCreate],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RoomBulkResult:
    try:
        result = await room_service.bulk_create_rooms(session, payload)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return RoomBulkResult.model_validate(result)


@router.get("/{room_id}", response_model=RoomRead, summary="Get room")
async def read_room(
    room: Annotated[Room, Depends(deps.get_room_or_404)],
) -> RoomRead:
    return RoomRead.model_validate(room)


@router.put("/{room_id}", response_model=RoomRead, summary="Replace room")
async def update_room(
    payload: RoomUpdate,
    room: Annotated[Room, Depends(deps.get_room_or_404)],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> RoomRead:
    try:
        updated = await room_service.update_room(session, room, payload)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return RoomRead.model_validate(updated)


@router.delete(
    "/{room_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete room",
)
async def delete_room(
    room: Annotated[Room, Depends(deps.get_room_or_404)],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> None:
    try:
        await room_service.delete_room(session, room)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
