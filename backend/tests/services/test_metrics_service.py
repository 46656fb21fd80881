"""Tests for the pure hospitality metric aggregations."""

from __future__ import annotations

import uuid
from datetime import date
from decimal import Decimal

import pytest

from hotel_api.core.errors import ValidationError
from hotel_api.models import Guest, PaymentStatus, Reservation, ReservationStatus, Room
from hotel_api.schemas.reporting import TrendDirection
from hotel_api.services import metrics_service


def _room(number: str, room_type: str, price: str) -> Room:
    return Room(
        id=uuid.uuid4(),
        room_number=number,
        room_type=room_type,
        price_per_night=Decimal(price),
        is_available=True,
    )


def _guest(name: str, email: str) -> Guest:
    return Guest(id=uuid.uuid4(), name=name, email=email, phone="555-0199")


def _stay(
    guest: Guest,
    room: Room,
    check_in: date,
    check_out: date,
    *,
    status: ReservationStatus = ReservationStatus.CONFIRMED,
    payment_status: PaymentStatus = PaymentStatus.PAID,
) -> Reservation:
    nights = (check_out - check_in).days
    return Reservation(
        id=uuid.uuid4(),
        guest=guest,
        guest_id=guest.id,
        room=room,
        room_id=room.id,
        check_in_date=check_in,
        check_out_date=check_out,
        number_of_guests=1,
        status=status,
        payment_status=payment_status,
        total_price=room.price_per_night * nights,
    )


@pytest.fixture()
def hotel() -> dict[str, object]:
    double = _room("101", "Double", "100.00")
    suite = _room("201", "Suite", "250.00")
    ann = _guest("Ann Lee", "ann@example.com")
    ben = _guest("Ben Roy", "ben@example.ca")
    return {"double": double, "suite": suite, "ann": ann, "ben": ben}


def test_rounding_helpers() -> None:
    assert metrics_service.money(Decimal("2.675")) == Decimal("2.68")
    assert metrics_service.money(Decimal("2.665")) == Decimal("2.66")
    assert metrics_service.rate(Decimal("33.35")) == Decimal("33.4")
    assert metrics_service.rate(Decimal("33.25")) == Decimal("33.2")


@pytest.mark.parametrize(
    ("old", "new", "expected"),
    [
        (Decimal("0"), Decimal("500"), Decimal("100")),
        (Decimal("0"), Decimal("0"), Decimal("0")),
        (Decimal("200"), Decimal("300"), Decimal("50.0")),
        (Decimal("300"), Decimal("200"), Decimal("-33.3")),
        (3, 3, Decimal("0.0")),
    ],
)
def test_percentage_change(old, new, expected) -> None:
    assert metrics_service.percentage_change(old, new) == expected


def test_trend_direction() -> None:
    assert metrics_service.trend_direction(1, 2) is TrendDirection.UP
    assert metrics_service.trend_direction(2, 1) is TrendDirection.DOWN
    assert metrics_service.trend_direction(2, 2) is TrendDirection.STABLE


def test_total_days_is_inclusive() -> None:
    assert metrics_service.total_days(date(2030, 1, 1), date(2030, 1, 1)) == 1
    assert metrics_service.total_days(date(2030, 1, 1), date(2030, 1, 31)) == 31
    with pytest.raises(ValidationError):
        metrics_service.total_days(date(2030, 1, 2), date(2030, 1, 1))


def test_previous_period_has_equal_length() -> None:
    assert metrics_service.previous_period(date(2030, 3, 1), date(2030, 3, 10)) == (
        date(2030, 2, 19),
        date(2030, 2, 28),
    )


def test_country_for_email() -> None:
    assert metrics_service.country_for_email("a@example.com") == "United States"
    assert metrics_service.country_for_email("a@gov.us") == "United States"
    assert metrics_service.country_for_email("a@mail.CA") == "Canada"
    assert metrics_service.country_for_email("a@post.co.uk") == "United Kingdom"
    assert metrics_service.country_for_email("a@web.de") == "Germany"
    assert metrics_service.country_for_email("a@free.fr") == "France"
    assert metrics_service.country_for_email("a@example.jp") == "Others"


def test_summary_of_nothing_is_zero() -> None:
    summary = metrics_service.compute_summary([], total_rooms=0, days=30)
    assert summary["total_bookings"] == 0
    assert summary["total_revenue"] == 0
    assert summary["average_occupancy"] == 0
    assert summary["average_daily_rate"] == 0
    assert summary["rev_par"] == 0
    assert summary["repeat_guest_rate"] == 0
    assert summary["cancellation_rate"] == 0


def test_summary_adr_uses_paid_nights(hotel) -> None:
    stays = [
        _stay(hotel["ann"], hotel["double"], date(2030, 1, 1), date(2030, 1, 3)),
        _stay(
            hotel["ann"],
            hotel["suite"],
            date(2030, 1, 5),
            date(2030, 1, 7),
            status=ReservationStatus.CHECKED_OUT,
        ),
        _stay(
            hotel["ben"],
            hotel["double"],
            date(2030, 1, 8),
            date(2030, 1, 9),
            status=ReservationStatus.CANCELLED,
            payment_status=PaymentStatus.PENDING,
        ),
    ]
    summary = metrics_service.compute_summary(stays, total_rooms=2, days=10)

    assert summary["total_revenue"] == Decimal("700.00")
    # 700 over four paid nights.
    assert summary["average_daily_rate"] == Decimal("175.00")
    assert summary["average_occupancy"] == Decimal("20.0")
    assert summary["rev_par"] == Decimal("35.00")
    assert summary["total_guests"] == 2
    assert summary["repeat_guest_rate"] == Decimal("50.0")
    assert summary["average_stay_length"] == Decimal("4.0")
    assert summary["cancellation_rate"] == Decimal("33.3")


def test_single_paid_stay_adr(hotel) -> None:
    stay = _stay(hotel["ann"], hotel["suite"], date(2030, 1, 1), date(2030, 1, 3))
    stay.total_price = Decimal("400.00")
    summary = metrics_service.compute_summary([stay], total_rooms=1, days=2)
    assert summary["average_daily_rate"] == Decimal("200.00")


def test_kpi_cards_from_zero_baseline() -> None:
    empty = metrics_service.compute_summary([], total_rooms=1, days=1)
    current = dict(empty, total_revenue=Decimal("1234.50"), total_bookings=3)
    cards = metrics_service.compute_kpi_cards(current, empty)

    revenue, _, bookings, *_ = cards
    assert revenue["value"] == "$1,235"
    assert revenue["change"] == Decimal("100")
    assert revenue["trend"] is TrendDirection.UP
    assert (revenue["icon"], revenue["color"]) == ("revenue", "blue")
    assert bookings["value"] == "3"
    assert all(card["trend"] is TrendDirection.STABLE for card in cards[3:])


def test_revenue_trend_growth_windows(hotel) -> None:
    start, end = date(2030, 1, 1), date(2030, 1, 14)
    paid = [
        _stay(hotel["ann"], hotel["double"], date(2030, 1, 2), date(2030, 1, 4)),
        _stay(hotel["ben"], hotel["double"], date(2030, 1, 10), date(2030, 1, 13)),
    ]
    trend = metrics_service.compute_revenue_trend(paid, start, end)

    assert len(trend["daily_revenue"]) == 14
    assert trend["total_revenue"] == Decimal("500.00")
    assert trend["growth_rate"] == Decimal("50.0")
    assert trend["trend_direction"] is TrendDirection.UP
    assert trend["daily_revenue"][1]["average_rate"] == Decimal("200.00")
    assert trend["daily_revenue"][0]["average_rate"] == 0


def test_occupancy_trend_is_half_open() -> None:
    stays = [(date(2030, 1, 1), date(2030, 1, 3))]
    trend = metrics_service.compute_occupancy_trend(
        stays, total_rooms=4, start_date=date(2030, 1, 1), end_date=date(2030, 1, 4)
    )
    assert [d["occupied_rooms"] for d in trend["daily_occupancy"]] == [1, 1, 0, 0]
    assert trend["peak_occupancy"] == Decimal("25.0")
    assert trend["lowest_occupancy"] == 0
    assert trend["average_occupancy"] == Decimal("12.5")


def test_occupancy_trend_without_rooms() -> None:
    trend = metrics_service.compute_occupancy_trend(
        [], total_rooms=0, start_date=date(2030, 1, 1), end_date=date(2030, 1, 2)
    )
    assert all(d["occupancy_rate"] == 0 for d in trend["daily_occupancy"])


def test_revenue_by_room_type_and_top_lists(hotel) -> None:
    paid = [
        _stay(hotel["ann"], hotel["double"], date(2030, 1, 1), date(2030, 1, 2)),
        _stay(hotel["ben"], hotel["suite"], date(2030, 1, 3), date(2030, 1, 4)),
        _stay(hotel["ann"], hotel["suite"], date(2030, 1, 6), date(2030, 1, 7)),
    ]

    by_type = metrics_service.compute_revenue_by_room_type(paid)
    assert [(r["room_type"], r["revenue"], r["bookings"]) for r in by_type] == [
        ("Suite", Decimal("500.00"), 2),
        ("Double", Decimal("100.00"), 1),
    ]
    assert by_type[0]["percentage"] == Decimal("83.3")

    rooms = metrics_service.compute_top_rooms(paid, days=10, top_count=1)
    assert len(rooms) == 1
    assert rooms[0]["room_id"] == hotel["suite"].id
    assert rooms[0]["occupancy_rate"] == Decimal("20.0")

    guests = metrics_service.compute_top_guests(paid, top_count=5)
    assert [g["name"] for g in guests] == ["Ann Lee", "Ben Roy"]
    assert guests[0]["total_spent"] == Decimal("350.00")
    assert guests[0]["total_stays"] == 2
    assert guests[0]["last_visit"] == date(2030, 1, 6)


def test_guest_demographics_counts_distinct_guests(hotel) -> None:
    reservations = [
        _stay(hotel["ann"], hotel["double"], date(2030, 1, 1), date(2030, 1, 2)),
        _stay(hotel["ann"], hotel["double"], date(2030, 1, 3), date(2030, 1, 4)),
        _stay(hotel["ben"], hotel["suite"], date(2030, 1, 3), date(2030, 1, 4)),
    ]
    rows = metrics_service.compute_guest_demographics(reservations)
    assert rows == [
        {"country": "United States", "count": 1, "percentage": Decimal("50.0")},
        {"country": "Canada", "count": 1, "percentage": Decimal("50.0")},
    ]


def test_payment_analytics(hotel) -> None:
    reservations = [
        _stay(hotel["ann"], hotel["double"], date(2030, 1, 1), date(2030, 1, 2)),
        _stay(
            hotel["ben"],
            hotel["suite"],
            date(2030, 1, 3),
            date(2030, 1, 4),
            payment_status=PaymentStatus.FAILED,
        ),
        _stay(
            hotel["ben"],
            hotel["double"],
            date(2030, 1, 5),
            date(2030, 1, 6),
            payment_status=PaymentStatus.REFUNDED,
        ),
    ]
    analytics = metrics_service.compute_payment_analytics(reservations)
    assert analytics["total_paid"] == Decimal("100.00")
    assert analytics["total_failed"] == Decimal("250.00")
    assert analytics["total_refunded"] == Decimal("100.00")
    assert analytics["total_pending"] == 0
    assert analytics["payment_success_rate"] == Decimal("33.3")


def test_booking_patterns_start_on_sunday(hotel) -> None:
    # 2030-01-06 is a Sunday, 2030-01-07 a Monday.
    paid = [
        _stay(hotel["ann"], hotel["double"], date(2030, 1, 7), date(2030, 1, 8)),
        _stay(hotel["ben"], hotel["suite"], date(2030, 1, 6), date(2030, 1, 7)),
        _stay(hotel["ann"], hotel["suite"], date(2030, 1, 13), date(2030, 1, 15)),
    ]
    patterns = metrics_service.compute_booking_patterns(paid)
    assert patterns == [
        {
            "day_of_week": "Sunday",
            "booking_count": 2,
            "average_revenue": Decimal("375.00"),
        },
        {
            "day_of_week": "Monday",
            "booking_count": 1,
            "average_revenue": Decimal("100.00"),
        },
    ]


def test_monthly_performance_clips_to_month(hotel) -> None:
    reservations = [
        _stay(hotel["ann"], hotel["double"], date(2030, 1, 30), date(2030, 2, 3)),
        _stay(
            hotel["ben"],
            hotel["suite"],
            date(2030, 2, 10),
            date(2030, 2, 12),
            status=ReservationStatus.CANCELLED,
            payment_status=PaymentStatus.PENDING,
        ),
    ]
    months = metrics_service.compute_monthly_performance(
        reservations, total_rooms=1, year=2030, today=date(2030, 2, 15)
    )
    assert [m["month"] for m in months] == ["January", "February"]
    january, february = months
    assert january["revenue"] == Decimal("400.00")
    assert january["adr"] == Decimal("100.00")
    # Only the nights of 30 and 31 January fall inside the month.
    assert january["occupancy"] == Decimal("6.5")
    assert february["total_bookings"] == 1
    assert february["cancelled_bookings"] == 1
    assert february["occupancy"] == 0
