"""Reservation management API."""

from __future__ import annotations

import uuid
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.api import deps
from hotel_api.api.errors import to_http_exception
from hotel_api.models.reservation import PaymentStatus, Reservation, ReservationStatus
from hotel_api.schemas.reservation import (
    DailyAvailability,
    PaymentStatusUpdate,
    ReservationBulkResult,
    ReservationCreate,
    ReservationRead,
    ReservationReplace,
    ReservationStatusUpdate,
    ReservationSummary,
    ReservationUpdate,
    RoomAvailability,
    StayDate,
)
from hotel_api.services import availability_service, reservation_service

router = APIRouter()


@router.get("", response_model=list[ReservationSummary], summary="List reservations")
async def list_reservations(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    status_filter: ReservationStatus | None = Query(default=None, alias="status"),
    payment_status: PaymentStatus | None = Query(default=None),
    room_id: uuid.UUID | None = Query(default=None),
    guest_id: uuid.UUID | None = Query(default=None),
    check_in_from: date | None = Query(default=None),
    check_in_to: date | None = Query(default=None),
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1),
) -> list[ReservationSummary]:
    reservations = await reservation_service.list_reservations(
        session,
        skip=skip,
        limit=limit,
        status=status_filter,
        payment_status=payment_status,
        room_id=room_id,
        guest_id=guest_id,
        check_in_from=check_in_from,
        check_in_to=check_in_to,
    )
    return [ReservationSummary.from_reservation(obj) for obj in reservations]


@router.post(
    "",
    response_model=ReservationRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create reservation",
)
async def create_reservation(
    payload: ReservationCreate,
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    try:
        reservation = await reservation_service.create_reservation(
            session, **payload.model_dump()
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return ReservationRead.model_validate(reservation)


@router.post(
    "/bulk",
    response_model=ReservationBulkResult,
    summary="Create reservations in bulk",
)
async def bulk_create_reservations(
    payload: list[ReservationCreate],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationBulkResult:
    try:
        result = await reservation_service.bulk_create_reservations(session, payload)
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return ReservationBulkResult.model_validate(result)


@router.get(
    "/check-availability",
    response_model=list[RoomAvailability],
    summary="Room availability for a stay",
)
async def check_availability(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    check_in_date: StayDate = Query(...),
    check_out_date: StayDate = Query(...),
) -> list[RoomAvailability]:
    try:
        rooms = await availability_service.list_availability(
            session, check_in=check_in_date, check_out=check_out_date
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return [RoomAvailability.model_validate(entry) for entry in rooms]


@router.get(
    "/availability/daily",
    response_model=list[DailyAvailability],
    summary="Nightly room inventory",
)
async def daily_availability(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
    start_date: date = Query(...),
    end_date: date = Query(...),
) -> list[DailyAvailability]:
    try:
        days = await availability_service.get_daily_availability(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return [DailyAvailability.model_validate(day) for day in days]


@router.get(
    "/{reservation_id}", response_model=ReservationRead, summary="Get reservation"
)
async def get_reservation(
    reservation: Annotated[Reservation, Depends(deps.get_reservation_or_404)],
) -> ReservationRead:
    return ReservationRead.model_validate(reservation)


@router.put(
    "/{reservation_id}", response_model=ReservationRead, summary="Replace reservation"
)
async def replace_reservation(
    payload: ReservationReplace,
    reservation: Annotated[Reservation, Depends(deps.get_reservation_or_404)],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    try:
        updated = await reservation_service.update_reservation(
            session, reservation=reservation, **payload.model_dump()
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return ReservationRead.model_validate(updated)


@router.patch(
    "/{reservation_id}", response_model=ReservationRead, summary="Update reservation"
)
async def update_reservation(
    payload: ReservationUpdate,
    reservation: Annotated[Reservation, Depends(deps.get_reservation_or_404)],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    try:
        updated = await reservation_service.update_reservation(
            session,
            reservation=reservation,
            **payload.model_dump(exclude_unset=True),
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return ReservationRead.model_validate(updated)


@router.patch(
    "/{reservation_id}/status",
    response_model=ReservationRead,
    summary="Change reservation status",
)
async def update_reservation_status(
    payload: ReservationStatusUpdate,
    reservation: Annotated[Reservation, Depends(deps.get_reservation_or_404)],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    try:
        updated = await reservation_service.update_status(
            session, reservation=reservation, status=payload.status
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return ReservationRead.model_validate(updated)


@router.patch(
    "/{reservation_id}/payment-status",
    response_model=ReservationRead,
    summary="Change payment status",
)
async def update_payment_status(
    payload: PaymentStatusUpdate,
    reservation: Annotated[Reservation, Depends(deps.get_reservation_or_404)],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> ReservationRead:
    try:
        updated = await reservation_service.update_payment_status(
            session, reservation=reservation, payment_status=payload.payment_status
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return ReservationRead.model_validate(updated)


@router.delete(
    "/{reservation_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete reservation",
)
async def delete_reservation(
    reservation: Annotated[Reservation, Depends(deps.get_reservation_or_404)],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> None:
    await reservation_service.delete_reservation(session, reservation=reservation)
