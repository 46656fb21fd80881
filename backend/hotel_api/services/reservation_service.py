"""Reservation lifecycle service helpers."""
from __future__ import annotations

import logging
import uuid
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_api.core.config import get_settings
from hotel_api.core.errors import (
    ConflictError,
    HotelError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from hotel_api.models.guest import Guest
from hotel_api.models.reservation import PaymentStatus, Reservation, ReservationStatus
from hotel_api.models.room import Room
from hotel_api.schemas.reservation import ReservationCreate, ReservationSummary
from hotel_api.services.availability_service import has_conflict, validate_stay_dates

logger = logging.getLogger(__name__)

ALLOWED_STATUS_TRANSITIONS: dict[ReservationStatus, frozenset[ReservationStatus]] = {
    ReservationStatus.PENDING: frozenset(
        {ReservationStatus.CONFIRMED, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.CONFIRMED: frozenset(
        {ReservationStatus.CHECKED_IN, ReservationStatus.CANCELLED}
    ),
    ReservationStatus.CHECKED_IN: frozenset({ReservationStatus.CHECKED_OUT}),
    ReservationStatus.CHECKED_OUT: frozenset(),
    ReservationStatus.CANCELLED: frozenset(
        {ReservationStatus.PENDING, ReservationStatus.CONFIRMED}
    ),
}

ALLOWED_PAYMENT_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.PAID, PaymentStatus.FAILED}),
    PaymentStatus.PAID: frozenset({PaymentStatus.REFUNDED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING, PaymentStatus.PAID}),
    PaymentStatus.REFUNDED: frozenset(),
}

MIN_GUESTS = 1
MAX_GUESTS = 10

# Sentinel for optional fields where None is a meaningful value.
UNCHANGED: Any = object()


def validate_status_transition(
    current: ReservationStatus, target: ReservationStatus
) -> None:
    """Reject lifecycle changes outside the transition table.

    Re-submitting the current status is accepted as a no-op so that full
    replacement payloads can carry an unchanged status.
    """
    if target == current:
        return
    if target not in ALLOWED_STATUS_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(current, target)


def validate_payment_transition(
    current: PaymentStatus,
    target: PaymentStatus,
    *,
    allow_unchanged: bool = False,
) -> None:
    """Reject payment-status changes outside the transition table.

    The dedicated payment endpoint is strict: a payment status never
    transitions to itself, so ``Refunded`` rejects every request.
    """
    if allow_unchanged and target == current:
        return
    if target not in ALLOWED_PAYMENT_TRANSITIONS.get(current, frozenset()):
        raise InvalidTransitionError(current, target, label="payment status")


def calculate_total_price(
    price_per_night: Decimal, check_in: date, check_out: date
) -> Decimal:
    nights = (check_out - check_in).days
    return (Decimal(price_per_night) * nights).quantize(Decimal("0.01"))


def _validate_guest_count(number_of_guests: int) -> None:
    if not MIN_GUESTS <= number_of_guests <= MAX_GUESTS:
        raise ValidationError(
            f"Number of guests must be between {MIN_GUESTS} and {MAX_GUESTS}"
        )


def _base_reservation_query():
    return (
        select(Reservation)
        .options(selectinload(Reservation.guest), selectinload(Reservation.room))
        .order_by(Reservation.check_in_date.desc(), Reservation.created_at.desc())
    )


async def list_reservations(
    session: AsyncSession,
    *,
    skip: int = 0,
    limit: int = 50,
    status: ReservationStatus | None = None,
    payment_status: PaymentStatus | None = None,
    room_id: uuid.UUID | None = None,
    guest_id: uuid.UUID | None = None,
    check_in_from: date | None = None,
    check_in_to: date | None = None,
) -> Sequence[Reservation]:
    stmt = _base_reservation_query()
    if status is not None:
        stmt = stmt.where(Reservation.status == status)
    if payment_status is not None:
        stmt = stmt.where(Reservation.payment_status == payment_status)
    if room_id is not None:
        stmt = stmt.where(Reservation.room_id == room_id)
    if guest_id is not None:
        stmt = stmt.where(Reservation.guest_id == guest_id)
    if check_in_from is not None:
        stmt = stmt.where(Reservation.check_in_date >= check_in_from)
    if check_in_to is not None:
        stmt = stmt.where(Reservation.check_in_date <= check_in_to)
    stmt = stmt.offset(skip).limit(min(limit, 100))
    result = await session.execute(stmt)
    return result.scalars().unique().all()


async def get_reservation(
    session: AsyncSession,
    *,
    reservation_id: uuid.UUID,
) -> Reservation | None:
    stmt = (
        _base_reservation_query()
        .where(Reservation.id == reservation_id)
        .execution_options(populate_existing=True)
    )
    result = await session.execute(stmt)
    return result.scalars().unique().one_or_none()


async def _require_guest(session: AsyncSession, guest_id: uuid.UUID) -> Guest:
    guest = await session.get(Guest, guest_id)
    if guest is None:
        raise NotFoundError(f"Guest {guest_id} not found")
    return guest


async def _lock_room(session: AsyncSession, room_id: uuid.UUID) -> Room:
    """Load the room row with a write lock held until commit."""
    result = await session.execute(
        select(Room).where(Room.id == room_id).with_for_update()
    )
    room = result.scalar_one_or_none()
    if room is None:
        raise NotFoundError(f"Room {room_id} not found")
    return room


async def _commit(session: AsyncSession, message: str) -> None:
    try:
        await session.commit()
    except IntegrityError as exc:
        await session.rollback()
        raise ConflictError(message) from exc


async def _reload(session: AsyncSession, reservation_id: uuid.UUID) -> Reservation:
    reservation = await get_reservation(session, reservation_id=reservation_id)
    if reservation is None:
        raise NotFoundError(f"Reservation {reservation_id} not found")
    return reservation


async def create_reservation(
    session: AsyncSession,
    *,
    guest_id: uuid.UUID,
    room_id: uuid.UUID,
    check_in_date: date,
    check_out_date: date,
    number_of_guests: int,
    special_requests: str | None = None,
) -> Reservation:
    validate_stay_dates(check_in_date, check_out_date)
    _validate_guest_count(number_of_guests)
    await _require_guest(session, guest_id)
    room = await _lock_room(session, room_id)
    # Rolling back expires the room, so read the number first.
    room_number = room.room_number
    if not room.is_available:
        await session.rollback()
        raise ConflictError(f"Room {room_number} is not available for booking")
    if await has_conflict(
        session, room_id=room_id, check_in=check_in_date, check_out=check_out_date
    ):
        await session.rollback()
        raise ConflictError(
            f"Room {room_number} is already booked for the selected dates"
        )

    reservation = Reservation(
        guest_id=guest_id,
        room_id=room_id,
        check_in_date=check_in_date,
        check_out_date=check_out_date,
        number_of_guests=number_of_guests,
        special_requests=special_requests,
        status=ReservationStatus.PENDING,
        payment_status=PaymentStatus.PENDING,
        total_price=calculate_total_price(
            room.price_per_night, check_in_date, check_out_date
        ),
    )
    session.add(reservation)
    await _commit(
        session, f"Room {room_id} was booked by another request for the selected dates"
    )
    logger.info(
        "Created reservation %s for room %s (%s to %s)",
        reservation.id,
        room_id,
        check_in_date,
        check_out_date,
    )
    return await _reload(session, reservation.id)


async def update_reservation(
    session: AsyncSession,
    *,
    reservation: Reservation,
    guest_id: uuid.UUID | None = None,
    room_id: uuid.UUID | None = None,
    check_in_date: date | None = None,
    check_out_date: date | None = None,
    number_of_guests: int | None = None,
    special_requests: str | None = UNCHANGED,
    status: ReservationStatus | None = None,
    payment_status: PaymentStatus | None = None,
) -> Reservation:
    """Apply edits, re-validating dates, overlaps and state transitions.

    The total price is recomputed whenever the room or the stay dates change.
    """
    new_guest_id = guest_id or reservation.guest_id
    if new_guest_id != reservation.guest_id:
        await _require_guest(session, new_guest_id)

    new_status = status or reservation.status
    validate_status_transition(reservation.status, new_status)
    reactivating = (
        reservation.status == ReservationStatus.CANCELLED
        and new_status != ReservationStatus.CANCELLED
    )

    new_room_id = room_id or reservation.room_id
    room = await _lock_room(session, new_room_id)
    if (new_room_id != reservation.room_id or reactivating) and not room.is_available:
        raise ConflictError(f"Room {room.room_number} is not available for booking")

    new_check_in = check_in_date or reservation.check_in_date
    new_check_out = check_out_date or reservation.check_out_date
    validate_stay_dates(new_check_in, new_check_out)

    if number_of_guests is not None:
        _validate_guest_count(number_of_guests)

    new_payment_status = payment_status or reservation.payment_status
    validate_payment_transition(
        reservation.payment_status, new_payment_status, allow_unchanged=True
    )

    if new_status != ReservationStatus.CANCELLED and await has_conflict(
        session,
        room_id=new_room_id,
        check_in=new_check_in,
        check_out=new_check_out,
        exclude_reservation_id=reservation.id,
    ):
        raise ConflictError(
            f"Room {room.room_number} is already booked for the selected dates"
        )

    if (new_room_id, new_check_in, new_check_out) != (
        reservation.room_id,
        reservation.check_in_date,
        reservation.check_out_date,
    ):
        reservation.total_price = calculate_total_price(
            room.price_per_night, new_check_in, new_check_out
        )
    reservation.guest_id = new_guest_id
    reservation.room_id = new_room_id
    reservation.check_in_date = new_check_in
    reservation.check_out_date = new_check_out
    if number_of_guests is not None:
        reservation.number_of_guests = number_of_guests
    if special_requests is not UNCHANGED:
        reservation.special_requests = special_requests
    reservation.status = new_status
    reservation.payment_status = new_payment_status

    session.add(reservation)
    await _commit(session, "Unable to update reservation")
    logger.info("Updated reservation %s", reservation.id)
    return await _reload(session, reservation.id)


async def update_status(
    session: AsyncSession,
    *,
    reservation: Reservation,
    status: ReservationStatus,
) -> Reservation:
    previous = reservation.status
    updated = await update_reservation(session, reservation=reservation, status=status)
    logger.info(
        "Reservation %s status %s -> %s", reservation.id, previous.value, status.value
    )
    return updated


async def update_payment_status(
    session: AsyncSession,
    *,
    reservation: Reservation,
    payment_status: PaymentStatus,
) -> Reservation:
    previous = reservation.payment_status
    validate_payment_transition(previous, payment_status)
    reservation.payment_status = payment_status
    session.add(reservation)
    await session.commit()
    logger.info(
        "Reservation %s payment %s -> %s",
        reservation.id,
        previous.value,
        payment_status.value,
    )
    return await _reload(session, reservation.id)


async def delete_reservation(
    session: AsyncSession,
    *,
    reservation: Reservation,
) -> None:
    await session.delete(reservation)
    await session.commit()
    logger.info("Deleted reservation %s", reservation.id)


async def bulk_create_reservations(
    session: AsyncSession,
    requests: Sequence[ReservationCreate],
) -> dict[str, Any]:
    """Attempt every request independently, collecting per-item failures.

    Created rows are captured as summaries straight away because a later
    failed item rolls the session back and expires loaded instances.
    """
    if not requests:
        raise ValidationError("No reservations provided")
    max_items = get_settings().bulk_max_items
    if len(requests) > max_items:
        raise ValidationError(f"At most {max_items} items per bulk request")

    created: list[ReservationSummary] = []
    errors: list[str] = []
    for request in requests:
        try:
            reservation = await create_reservation(session, **request.model_dump())
        except ConflictError:
            errors.append(
                f"Room {request.room_id} not available for dates "
                f"{request.check_in_date.isoformat()} to {request.check_out_date.isoformat()}"
            )
        except NotFoundError as exc:
            errors.append(str(exc))
        except HotelError as exc:
            errors.append(f"Error creating reservation: {exc}")
        else:
            created.append(ReservationSummary.from_reservation(reservation))

    if errors:
        logger.warning(
            "Bulk reservation import skipped %d of %d item(s)", len(errors), len(requests)
        )
    logger.info("Bulk reservation import created %d reservation(s)", len(created))
    return {
        "created_reservations": created,
        "total_requested": len(requests),
        "total_created": len(created),
        "total_skipped": len(requests) - len(created),
        "errors": errors,
    }
