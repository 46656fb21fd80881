"""Hospitality metrics computed over materialised reservation rows.

Each report is split in two halves: an async loader that pulls the
reservations for an inclusive ``[start_date, end_date]`` window (by check-in
date) and a pure ``compute_*`` function that aggregates the rows.  Rates are
rounded to one decimal place and currency to two, using banker's rounding.
Any ratio whose denominator is zero evaluates to zero.
"""

from __future__ import annotations

import calendar
import uuid
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, timedelta
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hotel_api.core.errors import ValidationError
from hotel_api.models.reservation import PaymentStatus, Reservation, ReservationStatus
from hotel_api.models.room import Room
from hotel_api.schemas.reporting import TrendDirection

ZERO = Decimal("0")
_CENTS = Decimal("0.01")
_TENTHS = Decimal("0.1")
_HUNDRED = Decimal("100")

TREND_WINDOW_DAYS = 7

# Weekday names ordered Sunday first, indexed by ``date.isoweekday() % 7``.
WEEKDAY_NAMES = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

_COUNTRY_SUFFIXES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("United States", (".com", ".us")),
    ("Canada", (".ca",)),
    ("United Kingdom", (".uk",)),
    ("Germany", (".de",)),
    ("France", (".fr",)),
)
OTHER_COUNTRY = "Others"


def money(value: Decimal | int) -> Decimal:
    return Decimal(value).quantize(_CENTS, rounding=ROUND_HALF_EVEN)


def rate(value: Decimal | int) -> Decimal:
    return Decimal(value).quantize(_TENTHS, rounding=ROUND_HALF_EVEN)


def _ratio(numerator: Decimal | int, denominator: Decimal | int) -> Decimal:
    if not denominator:
        return ZERO
    return Decimal(numerator) / Decimal(denominator)


def _percent(numerator: Decimal | int, denominator: Decimal | int) -> Decimal:
    return rate(_ratio(numerator, denominator) * _HUNDRED)


def total_days(start_date: date, end_date: date) -> int:
    """Number of calendar days in the inclusive range."""
    if start_date > end_date:
        raise ValidationError("start_date must be on or before end_date")
    return (end_date - start_date).days + 1


def percentage_change(old: Decimal | int, new: Decimal | int) -> Decimal:
    """Period-over-period change; a zero baseline reports 100 or 0."""
    old_value = Decimal(old)
    new_value = Decimal(new)
    if old_value == 0:
        return Decimal("100") if new_value > 0 else ZERO
    return rate((new_value - old_value) / old_value * _HUNDRED)


def trend_direction(old: Decimal | int, new: Decimal | int) -> TrendDirection:
    if new > old:
        return TrendDirection.UP
    if new < old:
        return TrendDirection.DOWN
    return TrendDirection.STABLE


def _is_paid(reservation: Reservation) -> bool:
    return reservation.payment_status == PaymentStatus.PAID


def _iter_days(start_date: date, end_date: date) -> Iterable[date]:
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


# Loaders


async def count_rooms(session: AsyncSession) -> int:
    return (await session.execute(select(func.count()).select_from(Room))).scalar_one()


async def load_reservations(
    session: AsyncSession,
    start_date: date,
    end_date: date,
    *,
    paid_only: bool = False,
) -> list[Reservation]:
    """Reservations whose check-in falls inside the inclusive range."""
    stmt = (
        select(Reservation)
        .options(selectinload(Reservation.guest), selectinload(Reservation.room))
        .where(
            Reservation.check_in_date >= start_date,
            Reservation.check_in_date <= end_date,
        )
        .order_by(Reservation.check_in_date, Reservation.created_at)
    )
    if paid_only:
        stmt = stmt.where(Reservation.payment_status == PaymentStatus.PAID)
    result = await session.execute(stmt)
    return list(result.scalars().unique().all())


async def load_active_stays(
    session: AsyncSession, start_date: date, end_date: date
) -> list[tuple[date, date]]:
    """Non-cancelled stays occupying at least one night of the range."""
    result = await session.execute(
        select(Reservation.check_in_date, Reservation.check_out_date).where(
            Reservation.status != ReservationStatus.CANCELLED,
            Reservation.check_in_date <= end_date,
            Reservation.check_out_date > start_date,
        )
    )
    return [(check_in, check_out) for check_in, check_out in result.all()]


# Pure aggregations


def compute_summary(
    reservations: Sequence[Reservation], *, total_rooms: int, days: int
) -> dict[str, Any]:
    paid = [r for r in reservations if _is_paid(r)]
    active = [r for r in reservations if r.is_active]

    total_revenue = sum((r.total_price for r in paid), ZERO)
    paid_nights = sum(r.nights for r in paid)
    occupied_nights = sum(r.nights for r in active)
    room_nights = total_rooms * days
    cancelled = sum(1 for r in reservations if not r.is_active)
    checked_out = sum(
        1 for r in reservations if r.status == ReservationStatus.CHECKED_OUT
    )

    bookings_per_guest: dict[uuid.UUID, int] = defaultdict(int)
    for reservation in reservations:
        bookings_per_guest[reservation.guest_id] += 1
    repeat_guests = sum(1 for count in bookings_per_guest.values() if count > 1)

    return {
        "total_revenue": money(total_revenue),
        "total_bookings": len(reservations),
        "average_occupancy": _percent(occupied_nights, room_nights),
        "average_daily_rate": money(_ratio(total_revenue, paid_nights)),
        "rev_par": money(_ratio(total_revenue, room_nights)),
        "total_guests": len(bookings_per_guest),
        "repeat_guest_rate": _percent(repeat_guests, len(bookings_per_guest)),
        "average_stay_length": rate(_ratio(occupied_nights, checked_out)),
        "total_active_rooms": total_rooms,
        "cancellation_rate": _percent(cancelled, len(reservations)),
    }


def _kpi_card(
    title: str,
    value: str,
    previous: Decimal | int,
    current: Decimal | int,
    icon: str,
    color: str,
) -> dict[str, Any]:
    return {
        "title": title,
        "value": value,
        "change": percentage_change(previous, current),
        "trend": trend_direction(previous, current),
        "icon": icon,
        "color": color,
    }


def compute_kpi_cards(
    current: dict[str, Any], previous: dict[str, Any]
) -> list[dict[str, Any]]:
    """Six dashboard cards comparing a period with the one before it."""
    whole_revenue = current["total_revenue"].quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return [
        _kpi_card(
            "Total Revenue",
            f"${whole_revenue:,}",
            previous["total_revenue"],
            current["total_revenue"],
            "revenue",
            "blue",
        ),
        _kpi_card(
            "Occupancy Rate",
            f"{current['average_occupancy']:.1f}%",
            previous["average_occupancy"],
            current["average_occupancy"],
            "occupancy",
            "green",
        ),
        _kpi_card(
            "Total Bookings",
            str(current["total_bookings"]),
            previous["total_bookings"],
            current["total_bookings"],
            "bookings",
            "purple",
        ),
        _kpi_card(
            "Average Daily Rate",
            f"${current['average_daily_rate']:.2f}",
            previous["average_daily_rate"],
            current["average_daily_rate"],
            "adr",
            "orange",
        ),
        _kpi_card(
            "Total Guests",
            str(current["total_guests"]),
            previous["total_guests"],
            current["total_guests"],
            "guests",
            "pink",
        ),
        _kpi_card(
            "RevPAR",
            f"${current['rev_par']:.2f}",
            previous["rev_par"],
            current["rev_par"],
            "revpar",
            "teal",
        ),
    ]


def compute_revenue_trend(
    paid: Sequence[Reservation], start_date: date, end_date: date
) -> dict[str, Any]:
    by_day: dict[date, list[Decimal]] = defaultdict(list)
    for reservation in paid:
        by_day[reservation.check_in_date].append(reservation.total_price)

    daily: list[dict[str, Any]] = []
    for day in _iter_days(start_date, end_date):
        prices = by_day.get(day, [])
        revenue = sum(prices, ZERO)
        daily.append(
            {
                "date": day,
                "revenue": money(revenue),
                "bookings": len(prices),
                "average_rate": money(_ratio(revenue, len(prices))),
            }
        )

    total = sum((entry["revenue"] for entry in daily), ZERO)
    first_window = sum((e["revenue"] for e in daily[:TREND_WINDOW_DAYS]), ZERO)
    last_window = sum((e["revenue"] for e in daily[-TREND_WINDOW_DAYS:]), ZERO)
    return {
        "daily_revenue": daily,
        "total_revenue": money(total),
        "average_revenue": money(_ratio(total, len(daily))),
        "growth_rate": percentage_change(first_window, last_window),
        "trend_direction": trend_direction(first_window, last_window),
    }


def compute_occupancy_trend(
    stays: Sequence[tuple[date, date]],
    *,
    total_rooms: int,
    start_date: date,
    end_date: date,
) -> dict[str, Any]:
    daily: list[dict[str, Any]] = []
    for day in _iter_days(start_date, end_date):
        occupied = sum(1 for check_in, check_out in stays if check_in <= day < check_out)
        daily.append(
            {
                "date": day,
                "occupancy_rate": _percent(occupied, total_rooms),
                "available_rooms": total_rooms,
                "occupied_rooms": occupied,
            }
        )

    rates = [entry["occupancy_rate"] for entry in daily]
    return {
        "daily_occupancy": daily,
        "average_occupancy": rate(_ratio(sum(rates, ZERO), len(rates))),
        "peak_occupancy": max(rates, default=ZERO),
        "lowest_occupancy": min(rates, default=ZERO),
    }


def compute_revenue_by_room_type(paid: Sequence[Reservation]) -> list[dict[str, Any]]:
    revenue: dict[str, Decimal] = defaultdict(lambda: ZERO)
    bookings: dict[str, int] = defaultdict(int)
    for reservation in paid:
        room_type = reservation.room.room_type
        revenue[room_type] += reservation.total_price
        bookings[room_type] += 1

    total = sum(revenue.values(), ZERO)
    rows = [
        {
            "room_type": room_type,
            "revenue": money(amount),
            "bookings": bookings[room_type],
            "percentage": _percent(amount, total),
        }
        for room_type, amount in revenue.items()
    ]
    rows.sort(key=lambda row: (-row["revenue"], row["room_type"]))
    return rows


def compute_monthly_performance(
    reservations: Sequence[Reservation],
    *,
    total_rooms: int,
    year: int,
    today: date,
) -> list[dict[str, Any]]:
    """Per-month figures for ``year``, stopping before months after ``today``.

    Occupied nights are clipped to the month so a stay crossing into the next
    month only counts the nights that fall inside it.
    """
    by_month: dict[int, list[Reservation]] = defaultdict(list)
    for reservation in reservations:
        if reservation.check_in_date.year == year:
            by_month[reservation.check_in_date.month].append(reservation)

    months: list[dict[str, Any]] = []
    for month in range(1, 13):
        month_start = date(year, month, 1)
        if month_start > today:
            break
        days_in_month = calendar.monthrange(year, month)[1]
        next_month = month_start + timedelta(days=days_in_month)
        rows = by_month.get(month, [])

        paid = [r for r in rows if _is_paid(r)]
        revenue = sum((r.total_price for r in paid), ZERO)
        paid_nights = sum(r.nights for r in paid)
        occupied_nights = sum(
            max(0, (min(r.check_out_date, next_month) - r.check_in_date).days)
            for r in rows
            if r.is_active
        )
        room_nights = total_rooms * days_in_month

        months.append(
            {
                "month": calendar.month_name[month],
                "year": year,
                "revenue": money(revenue),
                "occupancy": _percent(occupied_nights, room_nights),
                "adr": money(_ratio(revenue, paid_nights)),
                "rev_par": money(_ratio(revenue, room_nights)),
                "total_bookings": len(rows),
                "cancelled_bookings": sum(
                    1 for r in rows if not r.is_active
                ),
            }
        )
    return months


def compute_top_rooms(
    paid: Sequence[Reservation], *, days: int, top_count: int
) -> list[dict[str, Any]]:
    groups: dict[uuid.UUID, dict[str, Any]] = {}
    for reservation in paid:
        room = reservation.room
        entry = groups.setdefault(
            room.id,
            {
                "room_id": room.id,
                "room_number": room.room_number,
                "room_type": room.room_type,
                "bookings": 0,
                "revenue": ZERO,
                "nights": 0,
            },
        )
        entry["bookings"] += 1
        entry["revenue"] += reservation.total_price
        entry["nights"] += reservation.nights

    ranked = sorted(
        groups.values(), key=lambda row: (-row["revenue"], row["room_number"])
    )
    return [
        {
            "room_id": row["room_id"],
            "room_number": row["room_number"],
            "room_type": row["room_type"],
            "bookings": row["bookings"],
            "revenue": money(row["revenue"]),
            "occupancy_rate": _percent(row["nights"], days),
            "average_rate": money(_ratio(row["revenue"], row["nights"])),
        }
        for row in ranked[:top_count]
    ]


def compute_top_guests(
    paid: Sequence[Reservation], *, top_count: int
) -> list[dict[str, Any]]:
    groups: dict[uuid.UUID, dict[str, Any]] = {}
    for reservation in paid:
        guest = reservation.guest
        entry = groups.setdefault(
            guest.id,
            {
                "id": guest.id,
                "name": guest.name,
                "email": guest.email,
                "phone": guest.phone,
                "total_stays": 0,
                "total_spent": ZERO,
                "last_visit": reservation.check_in_date,
            },
        )
        entry["total_stays"] += 1
        entry["total_spent"] += reservation.total_price
        entry["last_visit"] = max(entry["last_visit"], reservation.check_in_date)

    ranked = sorted(
        groups.values(),
        key=lambda row: (-row["total_spent"], row["name"], row["email"]),
    )
    return [
        {**row, "total_spent": money(row["total_spent"])} for row in ranked[:top_count]
    ]


def country_for_email(email: str) -> str:
    """Approximate a guest's country from the e-mail domain suffix."""
    domain = email.rsplit("@", 1)[-1].lower()
    for country, suffixes in _COUNTRY_SUFFIXES:
        if domain.endswith(suffixes):
            return country
    return OTHER_COUNTRY


def compute_guest_demographics(
    reservations: Sequence[Reservation],
) -> list[dict[str, Any]]:
    emails: dict[uuid.UUID, str] = {}
    for reservation in reservations:
        emails.setdefault(reservation.guest_id, reservation.guest.email)

    counts: dict[str, int] = {country: 0 for country, _ in _COUNTRY_SUFFIXES}
    counts[OTHER_COUNTRY] = 0
    for email in emails.values():
        counts[country_for_email(email)] += 1

    total = sum(counts.values())
    rows = [
        {"country": country, "count": count, "percentage": _percent(count, total)}
        for country, count in counts.items()
        if count > 0
    ]
    # Stable sort keeps the bucket order for ties.
    rows.sort(key=lambda row: -row["count"])
    return rows


def compute_payment_analytics(reservations: Sequence[Reservation]) -> dict[str, Any]:
    totals: dict[PaymentStatus, Decimal] = defaultdict(lambda: ZERO)
    counts: dict[PaymentStatus, int] = defaultdict(int)
    for reservation in reservations:
        totals[reservation.payment_status] += reservation.total_price
        counts[reservation.payment_status] += 1

    return {
        "total_paid": money(totals[PaymentStatus.PAID]),
        "total_pending": money(totals[PaymentStatus.PENDING]),
        "total_refunded": money(totals[PaymentStatus.REFUNDED]),
        "total_failed": money(totals[PaymentStatus.FAILED]),
        "paid_count": counts[PaymentStatus.PAID],
        "pending_count": counts[PaymentStatus.PENDING],
        "refunded_count": counts[PaymentStatus.REFUNDED],
        "failed_count": counts[PaymentStatus.FAILED],
        "payment_success_rate": _percent(
            counts[PaymentStatus.PAID], len(reservations)
        ),
    }


def compute_booking_patterns(paid: Sequence[Reservation]) -> list[dict[str, Any]]:
    by_weekday: dict[int, list[Decimal]] = defaultdict(list)
    for reservation in paid:
        by_weekday[reservation.check_in_date.isoweekday() % 7].append(
            reservation.total_price
        )

    return [
        {
            "day_of_week": WEEKDAY_NAMES[weekday],
            "booking_count": len(prices),
            "average_revenue": money(_ratio(sum(prices, ZERO), len(prices))),
        }
        for weekday, prices in sorted(by_weekday.items())
    ]


# Async entry points


async def summary_stats(
    session: AsyncSession, *, start_date: date, end_date: date
) -> dict[str, Any]:
    days = total_days(start_date, end_date)
    reservations = await load_reservations(session, start_date, end_date)
    return compute_summary(
        reservations, total_rooms=await count_rooms(session), days=days
    )


def previous_period(start_date: date, end_date: date) -> tuple[date, date]:
    """The equal-length window ending the day before ``start_date``."""
    days = total_days(start_date, end_date)
    return start_date - timedelta(days=days), start_date - timedelta(days=1)


async def kpi_cards(
    session: AsyncSession, *, start_date: date, end_date: date
) -> list[dict[str, Any]]:
    current = await summary_stats(session, start_date=start_date, end_date=end_date)
    previous_start, previous_end = previous_period(start_date, end_date)
    previous = await summary_stats(
        session, start_date=previous_start, end_date=previous_end
    )
    return compute_kpi_cards(current, previous)


async def revenue_trend(
    session: AsyncSession, *, start_date: date, end_date: date
) -> dict[str, Any]:
    total_days(start_date, end_date)
    paid = await load_reservations(session, start_date, end_date, paid_only=True)
    return compute_revenue_trend(paid, start_date, end_date)


async def occupancy_trend(
    session: AsyncSession, *, start_date: date, end_date: date
) -> dict[str, Any]:
    total_days(start_date, end_date)
    stays = await load_active_stays(session, start_date, end_date)
    return compute_occupancy_trend(
        stays,
        total_rooms=await count_rooms(session),
        start_date=start_date,
        end_date=end_date,
    )


async def revenue_by_room_type(
    session: AsyncSession, *, start_date: date, end_date: date
) -> list[dict[str, Any]]:
    total_days(start_date, end_date)
    paid = await load_reservations(session, start_date, end_date, paid_only=True)
    return compute_revenue_by_room_type(paid)


async def monthly_performance(
    session: AsyncSession, *, year: int, today: date
) -> list[dict[str, Any]]:
    reservations = await load_reservations(
        session, date(year, 1, 1), date(year, 12, 31)
    )
    return compute_monthly_performance(
        reservations, total_rooms=await count_rooms(session), year=year, today=today
    )


async def top_rooms(
    session: AsyncSession, *, start_date: date, end_date: date, top_count: int = 5
) -> list[dict[str, Any]]:
    days = total_days(start_date, end_date)
    paid = await load_reservations(session, start_date, end_date, paid_only=True)
    return compute_top_rooms(paid, days=days, top_count=top_count)


async def top_guests(
    session: AsyncSession, *, start_date: date, end_date: date, top_count: int = 5
) -> list[dict[str, Any]]:
    total_days(start_date, end_date)
    paid = await load_reservations(session, start_date, end_date, paid_only=True)
    return compute_top_guests(paid, top_count=top_count)


async def guest_demographics(
    session: AsyncSession, *, start_date: date, end_date: date
) -> list[dict[str, Any]]:
    total_days(start_date, end_date)
    reservations = await load_reservations(session, start_date, end_date)
    return compute_guest_demographics(reservations)


async def payment_analytics(
    session: AsyncSession, *, start_date: date, end_date: date
) -> dict[str, Any]:
    total_days(start_date, end_date)
    reservations = await load_reservations(session, start_date, end_date)
    return compute_payment_analytics(reservations)


async def booking_patterns(
    session: AsyncSession, *, start_date: date, end_date: date
) -> list[dict[str, Any]]:
    total_days(start_date, end_date)
    paid = await load_reservations(session, start_date, end_date, paid_only=True)
    return compute_booking_patterns(paid)
