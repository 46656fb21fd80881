"""Guest administration API endpoints."""
from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.api import deps
from hotel_api.api.errors import to_http_exception
from hotel_api.models.guest import Guest
from hotel_api.schemas.guest import GuestBulkResult, GuestCreate, GuestRead, GuestUpdate
from hotel_api.services import guest_service

router = APIRouter()


@router.get("", response_model=list[GuestRead], summary="List guests")
async def list_guests(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    search: str | None = Query(default=None, max_length=100),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1),
) -> list[GuestRead]:
    guests = await guest_service.list_guests(
        session, search=search, skip=skip, limit=limit
    )
    return [GuestRead.model_validate(obj) for obj in guests]


@router.post(
    "",
    response_model=GuestRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create guest",
)
async def create_guest(
    payload: GuestCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> GuestRead:
    try:
        guest = await guest_service.create_guest(session, payload)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return GuestRead.model_validate(guest)


@router.post("/bulk", response_model=GuestBulkResult, summary="Create guests in bulk")
async def bulk_create_guests(
    payload: list[GuestCreate],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> GuestBulkResult:
    try:
        result = await guest_service.bulk_create_guests(session, payload)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return GuestBulkResult.model_validate(result)


@router.get("/{guest_id}", response_model=GuestRead, summary="Get guest")
async def read_guest(
    guest: Annotated[Guest, Depends(deps.get_guest_or_404)],
) -> GuestRead:
    return GuestRead.model_validate(guest)


@router.put("/{guest_id}", response_model=GuestRead, summary="Replace guest")
async def update_guest(
    payload: GuestUpdate,
    guest: Annotated[Guest, Depends(deps.get_guest_or_404)],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> GuestRead:
    try:
        updated = await guest_service.update_guest(session, guest, payload)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return GuestRead.model_validate(updated)


@router.delete(
    "/{guest_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete guest",
)
async def delete_guest(
    guest: Annotated[Guest, Depends(deps.get_guest_or_404)],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> None:
    try:
        await guest_service.delete_guest(session, guest)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
