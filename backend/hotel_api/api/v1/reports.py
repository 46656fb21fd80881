"""Reporting and analytics endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Query

from hotel_api.api import deps
from hotel_api.api.errors import to_http_exception
from hotel_api.core.config import get_settings
from hotel_api.schemas.reporting import (
    BookingPattern,
    ComparisonReport,
    ComparisonRequest,
    ComprehensiveReport,
    GuestDemographic,
    KpiCard,
    MonthlyPerformance,
    OccupancyTrend,
    PaymentAnalytics,
    QuickReport,
    ReportRequest,
    RevenueByRoomType,
    RevenueTrend,
    SummaryStats,
    TopGuest,
    TopRoom,
)
from hotel_api.services import metrics_service, reporting_service

router = APIRouter(prefix="/reports")


def _top_count(top_count: int | None) -> int:
    return top_count if top_count is not None else get_settings().report_top_count


@router.get("/summary", response_model=SummaryStats, summary="Summary statistics")
async def summary_report(
    session: deps.SessionDep, window: deps.ReportWindow
) -> SummaryStats:
    start_date, end_date = window
    try:
        stats = await metrics_service.summary_stats(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return SummaryStats.model_validate(stats)


@router.get("/kpi-cards", response_model=list[KpiCard], summary="Dashboard KPI cards")
async def kpi_cards(
    session: deps.SessionDep, window: deps.ReportWindow
) -> list[KpiCard]:
    start_date, end_date = window
    try:
        cards = await metrics_service.kpi_cards(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return [KpiCard.model_validate(card) for card in cards]


@router.get(
    "/revenue-trend", response_model=RevenueTrend, summary="Daily revenue trend"
)
async def revenue_trend(
    session: deps.SessionDep, window: deps.ReportWindow
) -> RevenueTrend:
    start_date, end_date = window
    try:
        trend = await metrics_service.revenue_trend(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return RevenueTrend.model_validate(trend)


@router.get(
    "/occupancy-trend", response_model=OccupancyTrend, summary="Daily occupancy trend"
)
async def occupancy_trend(
    session: deps.SessionDep, window: deps.ReportWindow
) -> OccupancyTrend:
    start_date, end_date = window
    try:
        trend = await metrics_service.occupancy_trend(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return OccupancyTrend.model_validate(trend)


@router.get(
    "/revenue-by-room-type",
    response_model=list[RevenueByRoomType],
    summary="Revenue split by room type",
)
async def revenue_by_room_type(
    session: deps.SessionDep, window: deps.ReportWindow
) -> list[RevenueByRoomType]:
    start_date, end_date = window
    try:
        rows = await metrics_service.revenue_by_room_type(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return [RevenueByRoomType.model_validate(row) for row in rows]


@router.get(
    "/monthly-performance",
    response_model=list[MonthlyPerformance],
    summary="Month-by-month performance for a year",
)
async def monthly_performance(
    session: deps.SessionDep,
    year: int | None = Query(default=None, ge=1900, le=9999),
) -> list[MonthlyPerformance]:
    today = deps.today_utc()
    rows = await metrics_service.monthly_performance(
        session, year=year or today.year, today=today
    )
    return [MonthlyPerformance.model_validate(row) for row in rows]


@router.get("/top-rooms", response_model=list[TopRoom], summary="Top rooms by revenue")
async def top_rooms(
    session: deps.SessionDep,
    window: deps.ReportWindow,
    top_count: int | None = Query(default=None, ge=1, le=100),
) -> list[TopRoom]:
    start_date, end_date = window
    try:
        rows = await metrics_service.top_rooms(
            session,
            start_date=start_date,
            end_date=end_date,
            top_count=_top_count(top_count),
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return [TopRoom.model_validate(row) for row in rows]


@router.get(
    "/top-guests", response_model=list[TopGuest], summary="Top guests by spend"
)
async def top_guests(
    session: deps.SessionDep,
    window: deps.ReportWindow,
    top_count: int | None = Query(default=None, ge=1, le=100),
) -> list[TopGuest]:
    start_date, end_date = window
    try:
        rows = await metrics_service.top_guests(
            session,
            start_date=start_date,
            end_date=end_date,
            top_count=_top_count(top_count),
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return [TopGuest.model_validate(row) for row in rows]


@router.get(
    "/guest-demographics",
    response_model=list[GuestDemographic],
    summary="Guests by country",
)
async def guest_demographics(
    session: deps.SessionDep, window: deps.ReportWindow
) -> list[GuestDemographic]:
    start_date, end_date = window
    try:
        rows = await metrics_service.guest_demographics(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return [GuestDemographic.model_validate(row) for row in rows]


@router.get(
    "/payment-analytics",
    response_model=PaymentAnalytics,
    summary="Payment status breakdown",
)
async def payment_analytics(
    session: deps.SessionDep, window: deps.ReportWindow
) -> PaymentAnalytics:
    start_date, end_date = window
    try:
        analytics = await metrics_service.payment_analytics(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return PaymentAnalytics.model_validate(analytics)


@router.get(
    "/booking-patterns",
    response_model=list[BookingPattern],
    summary="Paid bookings by check-in weekday",
)
async def booking_patterns(
    session: deps.SessionDep, window: deps.ReportWindow
) -> list[BookingPattern]:
    start_date, end_date = window
    try:
        rows = await metrics_service.booking_patterns(
            session, start_date=start_date, end_date=end_date
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return [BookingPattern.model_validate(row) for row in rows]


@router.post(
    "/comprehensive",
    response_model=ComprehensiveReport,
    summary="Comprehensive report",
)
async def comprehensive_report(
    payload: ReportRequest, session: deps.SessionDep
) -> ComprehensiveReport:
    try:
        report = await reporting_service.comprehensive_report(
            session,
            start_date=payload.start_date,
            end_date=payload.end_date,
            period=payload.period,
            today=deps.today_utc(),
            top_count=get_settings().report_top_count,
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return ComprehensiveReport.model_validate(report)


@router.get("/quick-report", response_model=QuickReport, summary="Preset period report")
async def quick_report(
    session: deps.SessionDep,
    period: str = Query(default=reporting_service.DEFAULT_QUICK_PERIOD, max_length=32),
) -> QuickReport:
    report = await reporting_service.quick_report(
        session, period=period, today=deps.today_utc()
    )
    return QuickReport.model_validate(report)


@router.post(
    "/comparison", response_model=ComparisonReport, summary="Compare two periods"
)
async def comparison_report(
    payload: ComparisonRequest, session: deps.SessionDep
) -> ComparisonReport:
    try:
        report = await reporting_service.comparison_report(
            session,
            period1_start=payload.period1_start,
            period1_end=payload.period1_end,
            period2_start=payload.period2_start,
            period2_end=payload.period2_end,
        )
    except ValueError as exc:
        raise to_http_exception(exc) from exc
    return ComparisonReport.model_validate(report)
