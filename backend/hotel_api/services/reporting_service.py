"""Reporting and analytics services."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from hotel_api.services import metrics_service

logger = logging.getLogger(__name__)

DEFAULT_QUICK_PERIOD = "last30days"
QUICK_REPORT_TOP_COUNT = 3


def _first_of_previous_month(today: date) -> date:
    return (today.replace(day=1) - timedelta(days=1)).replace(day=1)


def resolve_quick_period(period: str, today: date) -> tuple[date, date]:
    """Map a named preset to an inclusive date range.

    Unknown presets fall back to the last thirty days.
    """
    preset = period.lower()
    if preset == "today":
        return today, today
    if preset == "yesterday":
        yesterday = today - timedelta(days=1)
        return yesterday, yesterday
    if preset == "last7days":
        return today - timedelta(days=7), today
    if preset == "last90days":
        return today - timedelta(days=90), today
    if preset == "thismonth":
        return today.replace(day=1), today
    if preset == "lastmonth":
        return _first_of_previous_month(today), today.replace(day=1) - timedelta(days=1)
    if preset == "thisyear":
        return date(today.year, 1, 1), today
    return today - timedelta(days=30), today


async def comprehensive_report(
    session: AsyncSession,
    *,
    start_date: date,
    end_date: date,
    period: str = "monthly",
    today: date | None = None,
    top_count: int = 5,
) -> dict[str, Any]:
    """Every metric for the range plus generation metadata."""
    days = metrics_service.total_days(start_date, end_date)
    today = today or datetime.now(UTC).date()
    window = {"start_date": start_date, "end_date": end_date}

    report = {
        "summary": await metrics_service.summary_stats(session, **window),
        "kpi_cards": await metrics_service.kpi_cards(session, **window),
        "revenue_trend": await metrics_service.revenue_trend(session, **window),
        "occupancy_trend": await metrics_service.occupancy_trend(session, **window),
        "revenue_by_room_type": await metrics_service.revenue_by_room_type(
            session, **window
        ),
        "monthly_performance": await metrics_service.monthly_performance(
            session, year=start_date.year, today=today
        ),
        "top_rooms": await metrics_service.top_rooms(
            session, top_count=top_count, **window
        ),
        "top_guests": await metrics_service.top_guests(
            session, top_count=top_count, **window
        ),
        "guest_demographics": await metrics_service.guest_demographics(
            session, **window
        ),
        "payment_analytics": await metrics_service.payment_analytics(session, **window),
        "booking_patterns": await metrics_service.booking_patterns(session, **window),
        "metadata": {
            "generated_at": datetime.now(UTC),
            "start_date": start_date,
            "end_date": end_date,
            "period": period,
            "total_days": days,
        },
    }
    logger.info("Generated comprehensive report for %s to %s", start_date, end_date)
    return report


async def quick_report(
    session: AsyncSession,
    *,
    period: str,
    today: date | None = None,
) -> dict[str, Any]:
    today = today or datetime.now(UTC).date()
    start_date, end_date = resolve_quick_period(period, today)
    window = {"start_date": start_date, "end_date": end_date}
    return {
        "period": period,
        "start_date": start_date,
        "end_date": end_date,
        "summary": await metrics_service.summary_stats(session, **window),
        "kpi_cards": await metrics_service.kpi_cards(session, **window),
        "revenue_by_room_type": await metrics_service.revenue_by_room_type(
            session, **window
        ),
        "top_rooms": await metrics_service.top_rooms(
            session, top_count=QUICK_REPORT_TOP_COUNT, **window
        ),
        "top_guests": await metrics_service.top_guests(
            session, top_count=QUICK_REPORT_TOP_COUNT, **window
        ),
    }


def metric_change(old: Decimal | int, new: Decimal | int) -> dict[str, Any]:
    return {
        "difference": Decimal(new) - Decimal(old),
        "percentage_change": metrics_service.percentage_change(old, new),
        "trend": metrics_service.trend_direction(old, new),
    }


async def _period_snapshot(
    session: AsyncSession, start_date: date, end_date: date
) -> dict[str, Any]:
    window = {"start_date": start_date, "end_date": end_date}
    return {
        "start_date": start_date,
        "end_date": end_date,
        "summary": await metrics_service.summary_stats(session, **window),
        "revenue_trend": await metrics_service.revenue_trend(session, **window),
    }


async def comparison_report(
    session: AsyncSession,
    *,
    period1_start: date,
    period1_end: date,
    period2_start: date,
    period2_end: date,
) -> dict[str, Any]:
    """Summaries for two periods and the change from the first to the second."""
    first = await _period_snapshot(session, period1_start, period1_end)
    second = await _period_snapshot(session, period2_start, period2_end)
    old, new = first["summary"], second["summary"]
    return {
        "period1": first,
        "period2": second,
        "changes": {
            "revenue": metric_change(old["total_revenue"], new["total_revenue"]),
            "occupancy": metric_change(
                old["average_occupancy"], new["average_occupancy"]
            ),
            "bookings": metric_change(old["total_bookings"], new["total_bookings"]),
            "adr": metric_change(old["average_daily_rate"], new["average_daily_rate"]),
            "rev_par": metric_change(old["rev_par"], new["rev_par"]),
            "guests": metric_change(old["total_guests"], new["total_guests"]),
        },
    }
