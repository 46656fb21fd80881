"""Reporting schemas."""
from __future__ import annotations

import enum
import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator


class TrendDirection(str, enum.Enum):
    """Sign of a period-over-period difference."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class SummaryStats(BaseModel):
    """Headline hospitality metrics for a date range."""

    total_revenue: Decimal
    total_bookings: int
    average_occupancy: Decimal
    average_daily_rate: Decimal
    rev_par: Decimal
    total_guests: int
    repeat_guest_rate: Decimal
    average_stay_length: Decimal
    total_active_rooms: int
    cancellation_rate: Decimal


class KpiCard(BaseModel):
    """Dashboard card with a formatted value and change indicator."""

    title: str
    value: str
    change: Decimal | None = None
    trend: TrendDirection = TrendDirection.STABLE
    icon: str
    color: str


class RevenueDataPoint(BaseModel):
    date: date
    revenue: Decimal
    bookings: int
    average_rate: Decimal


class RevenueTrend(BaseModel):
    daily_revenue: list[RevenueDataPoint] = Field(default_factory=list)
    total_revenue: Decimal
    average_revenue: Decimal
    growth_rate: Decimal
    trend_direction: TrendDirection


class OccupancyDataPoint(BaseModel):
    date: date
    occupancy_rate: Decimal
    available_rooms: int
    occupied_rooms: int


class OccupancyTrend(BaseModel):
    daily_occupancy: list[OccupancyDataPoint] = Field(default_factory=list)
    average_occupancy: Decimal
    peak_occupancy: Decimal
    lowest_occupancy: Decimal


class RevenueByRoomType(BaseModel):
    room_type: str
    revenue: Decimal
    bookings: int
    percentage: Decimal


class MonthlyPerformance(BaseModel):
    month: str
    year: int
    revenue: Decimal
    occupancy: Decimal
    adr: Decimal
    rev_par: Decimal
    total_bookings: int
    cancelled_bookings: int


class TopRoom(BaseModel):
    room_id: uuid.UUID
    room_number: str
    room_type: str
    bookings: int
    revenue: Decimal
    occupancy_rate: Decimal
    average_rate: Decimal


class TopGuest(BaseModel):
    id: uuid.UUID
    name: str
    email: str
    phone: str
    total_stays: int
    total_spent: Decimal
    last_visit: date


class GuestDemographic(BaseModel):
    country: str
    count: int
    percentage: Decimal


class PaymentAnalytics(BaseModel):
    total_paid: Decimal
    total_pending: Decimal
    total_refunded: Decimal
    total_failed: Decimal
    paid_count: int
    pending_count: int
    refunded_count: int
    failed_count: int
    payment_success_rate: Decimal


class BookingPattern(BaseModel):
    day_of_week: str
    booking_count: int
    average_revenue: Decimal


class ReportMetadata(BaseModel):
    generated_at: datetime
    start_date: date
    end_date: date
    period: str
    total_days: int


class ReportRequest(BaseModel):
    """Date range and grouping for a comprehensive report."""

    start_date: date
    end_date: date
    period: str = "monthly"

    @model_validator(mode="after")
    def _check_order(self) -> "ReportRequest":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self


class ComprehensiveReport(BaseModel):
    summary: SummaryStats
    kpi_cards: list[KpiCard]
    revenue_trend: RevenueTrend
    occupancy_trend: OccupancyTrend
    revenue_by_room_type: list[RevenueByRoomType]
    monthly_performance: list[MonthlyPerformance]
    top_rooms: list[TopRoom]
    top_guests: list[TopGuest]
    guest_demographics: list[GuestDemographic]
    payment_analytics: PaymentAnalytics
    booking_patterns: list[BookingPattern]
    metadata: ReportMetadata


class QuickReport(BaseModel):
    period: str
    start_date: date
    end_date: date
    summary: SummaryStats
    kpi_cards: list[KpiCard]
    revenue_by_room_type: list[RevenueByRoomType]
    top_rooms: list[TopRoom]
    top_guests: list[TopGuest]


class ComparisonRequest(BaseModel):
    """Two arbitrary periods to compare side by side."""

    period1_start: date
    period1_end: date
    period2_start: date
    period2_end: date

    @model_validator(mode="after")
    def _check_order(self) -> "ComparisonRequest":
        if self.period1_start > self.period1_end or self.period2_start > self.period2_end:
            raise ValueError("Each period must start on or before its end date")
        return self


class MetricChange(BaseModel):
    difference: Decimal
    percentage_change: Decimal
    trend: TrendDirection


class PeriodSnapshot(BaseModel):
    start_date: date
    end_date: date
    summary: SummaryStats
    revenue_trend: RevenueTrend


class ComparisonChanges(BaseModel):
    revenue: MetricChange
    occupancy: MetricChange
    bookings: MetricChange
    adr: MetricChange
    rev_par: MetricChange
    guests: MetricChange


class ComparisonReport(BaseModel):
    period1: PeriodSnapshot
    period2: PeriodSnapshot
    changes: ComparisonChanges
