"""Tests for reservation transitions, pricing and booking rules."""

from __future__ import annotations

import asyncio
import uuid
from datetime import date
from decimal import Decimal

import pytest

from hotel_api.core.errors import (
    ConflictError,
    InvalidTransitionError,
    ValidationError,
)
from hotel_api.db.session import get_sessionmaker
from hotel_api.models import Guest, PaymentStatus, ReservationStatus, Room
from hotel_api.schemas.reservation import ReservationCreate
from hotel_api.services import reservation_service

RS = ReservationStatus
PS = PaymentStatus


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (RS.PENDING, RS.CONFIRMED),
        (RS.PENDING, RS.CANCELLED),
        (RS.CONFIRMED, RS.CHECKED_IN),
        (RS.CONFIRMED, RS.CANCELLED),
        (RS.CHECKED_IN, RS.CHECKED_OUT),
        (RS.CANCELLED, RS.PENDING),
        (RS.CANCELLED, RS.CONFIRMED),
        (RS.CHECKED_OUT, RS.CHECKED_OUT),
    ],
)
def test_allowed_status_transitions(current, target) -> None:
    reservation_service.validate_status_transition(current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (RS.PENDING, RS.CHECKED_IN),
        (RS.PENDING, RS.CHECKED_OUT),
        (RS.CONFIRMED, RS.PENDING),
        (RS.CHECKED_IN, RS.CANCELLED),
        (RS.CHECKED_OUT, RS.PENDING),
        (RS.CHECKED_OUT, RS.CANCELLED),
        (RS.CANCELLED, RS.CHECKED_IN),
    ],
)
def test_rejected_status_transitions(current, target) -> None:
    with pytest.raises(InvalidTransitionError) as excinfo:
        reservation_service.validate_status_transition(current, target)
    assert str(excinfo.value) == (
        f"Invalid status transition from {current.value} to {target.value}"
    )


def test_checked_out_is_terminal() -> None:
    for target in RS:
        if target is RS.CHECKED_OUT:
            continue
        with pytest.raises(InvalidTransitionError):
            reservation_service.validate_status_transition(RS.CHECKED_OUT, target)


def test_payment_transitions_are_strict() -> None:
    reservation_service.validate_payment_transition(PS.PENDING, PS.PAID)
    reservation_service.validate_payment_transition(PS.FAILED, PS.PENDING)
    reservation_service.validate_payment_transition(PS.PAID, PS.REFUNDED)

    for target in PS:
        with pytest.raises(InvalidTransitionError):
            reservation_service.validate_payment_transition(PS.REFUNDED, target)
    with pytest.raises(InvalidTransitionError, match="payment status"):
        reservation_service.validate_payment_transition(PS.PAID, PS.PAID)
    with pytest.raises(InvalidTransitionError):
        reservation_service.validate_payment_transition(PS.PAID, PS.PENDING)


def test_unchanged_payment_status_allowed_when_requested() -> None:
    reservation_service.validate_payment_transition(
        PS.REFUNDED, PS.REFUNDED, allow_unchanged=True
    )
    with pytest.raises(InvalidTransitionError):
        reservation_service.validate_payment_transition(
            PS.REFUNDED, PS.PAID, allow_unchanged=True
        )


def test_calculate_total_price() -> None:
    assert reservation_service.calculate_total_price(
        Decimal("100.00"), date(2030, 1, 1), date(2030, 1, 4)
    ) == Decimal("300.00")
    assert reservation_service.calculate_total_price(
        Decimal("99.99"), date(2030, 1, 30), date(2030, 2, 2)
    ) == Decimal("299.97")


async def _seed(session) -> tuple[uuid.UUID, uuid.UUID]:
    guest = Guest(name="Grace Guest", email="grace@example.com", phone="555-0102")
    room = Room(room_number="305", room_type="Suite", price_per_night=Decimal("180.00"))
    session.add_all([guest, room])
    await session.commit()
    return guest.id, room.id


@pytest.mark.asyncio
async def test_create_and_reject_overlap(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        guest_id, room_id = await _seed(session)

        created = await reservation_service.create_reservation(
            session,
            guest_id=guest_id,
            room_id=room_id,
            check_in_date=date(2030, 5, 1),
            check_out_date=date(2030, 5, 3),
            number_of_guests=2,
        )
        assert created.total_price == Decimal("360.00")
        assert created.status is RS.PENDING
        assert created.payment_status is PS.PENDING
        assert created.room.room_number == "305"
        assert created.nights == 2

        with pytest.raises(ConflictError, match="already booked"):
            await reservation_service.create_reservation(
                session,
                guest_id=guest_id,
                room_id=room_id,
                check_in_date=date(2030, 5, 2),
                check_out_date=date(2030, 5, 4),
                number_of_guests=1,
            )

        with pytest.raises(ValidationError, match="Number of guests"):
            await reservation_service.create_reservation(
                session,
                guest_id=guest_id,
                room_id=room_id,
                check_in_date=date(2030, 6, 1),
                check_out_date=date(2030, 6, 2),
                number_of_guests=0,
            )


@pytest.mark.asyncio
async def test_status_change_keeps_other_fields(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        guest_id, room_id = await _seed(session)
        reservation = await reservation_service.create_reservation(
            session,
            guest_id=guest_id,
            room_id=room_id,
            check_in_date=date(2030, 5, 1),
            check_out_date=date(2030, 5, 2),
            number_of_guests=1,
            special_requests="Quiet room",
        )

        confirmed = await reservation_service.update_status(
            session, reservation=reservation, status=RS.CONFIRMED
        )
        assert confirmed.status is RS.CONFIRMED
        assert confirmed.special_requests == "Quiet room"
        assert confirmed.total_price == Decimal("180.00")

        with pytest.raises(InvalidTransitionError):
            await reservation_service.update_status(
                session, reservation=confirmed, status=RS.CHECKED_OUT
            )

        paid = await reservation_service.update_payment_status(
            session, reservation=confirmed, payment_status=PS.PAID
        )
        assert paid.payment_status is PS.PAID
        assert paid.status is RS.CONFIRMED


@pytest.mark.asyncio
async def test_bulk_create_reservations_collects_errors(
    reset_database, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        guest_id, room_id = await _seed(session)
        requests = [
            ReservationCreate(
                guest_id=guest_id,
                room_id=room_id,
                check_in_date=date(2030, 7, 1),
                check_out_date=date(2030, 7, 3),
                number_of_guests=1,
            ),
            ReservationCreate(
                guest_id=guest_id,
                room_id=room_id,
                check_in_date=date(2030, 7, 2),
                check_out_date=date(2030, 7, 5),
                number_of_guests=1,
            ),
            ReservationCreate(
                guest_id=guest_id,
                room_id=room_id,
                check_in_date=date(2030, 7, 9),
                check_out_date=date(2030, 7, 8),
                number_of_guests=1,
            ),
        ]
        result = await reservation_service.bulk_create_reservations(session, requests)

    assert result["total_requested"] == 3
    assert result["total_created"] == 1
    assert result["total_skipped"] == 2
    assert result["created_reservations"][0].room_number == "305"
    assert result["errors"] == [
        f"Room {room_id} not available for dates 2030-07-02 to 2030-07-05",
        "Error creating reservation: Check-out date must be after check-in date",
    ]


@pytest.mark.asyncio
async def test_bulk_create_requires_items(reset_database, db_url: str) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        with pytest.raises(ValidationError, match="No reservations provided"):
            await reservation_service.bulk_create_reservations(session, [])


@pytest.mark.asyncio
async def test_unavailable_room_rejected_with_room_number(
    reset_database, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        guest_id, room_id = await _seed(session)
        room = await session.get(Room, room_id)
        room.is_available = False
        await session.commit()

        with pytest.raises(ConflictError, match="Room 305 is not available"):
            await reservation_service.create_reservation(
                session,
                guest_id=guest_id,
                room_id=room_id,
                check_in_date=date(2030, 5, 1),
                check_out_date=date(2030, 5, 2),
                number_of_guests=1,
            )


@pytest.mark.asyncio
async def test_concurrent_creates_allow_one_booking(
    reset_database, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        guest_id, room_id = await _seed(session)

    async def book() -> str:
        async with sessionmaker() as session:
            try:
                await reservation_service.create_reservation(
                    session,
                    guest_id=guest_id,
                    room_id=room_id,
                    check_in_date=date(2030, 1, 3),
                    check_out_date=date(2030, 1, 5),
                    number_of_guests=1,
                )
            except ConflictError:
                return "conflict"
        return "created"

    outcomes = await asyncio.gather(book(), book())
    assert sorted(outcomes) == ["conflict", "created"]

    async with sessionmaker() as session:
        stays = await reservation_service.list_reservations(session, room_id=room_id)
    assert len(stays) == 1


@pytest.mark.asyncio
async def test_reactivation_requires_room_open_for_booking(
    reset_database, db_url: str
) -> None:
    sessionmaker = get_sessionmaker(db_url)
    async with sessionmaker() as session:
        guest_id, room_id = await _seed(session)
        reservation = await reservation_service.create_reservation(
            session,
            guest_id=guest_id,
            room_id=room_id,
            check_in_date=date(2030, 8, 1),
            check_out_date=date(2030, 8, 3),
            number_of_guests=1,
        )
        cancelled = await reservation_service.update_status(
            session, reservation=reservation, status=RS.CANCELLED
        )
        room = await session.get(Room, room_id)
        room.is_available = False
        await session.commit()

        with pytest.raises(ConflictError, match="not available for booking"):
            await reservation_service.update_status(
                session, reservation=cancelled, status=RS.PENDING
            )
