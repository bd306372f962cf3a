from __future__ import annotations

from datetime import date
from typing import List, Literal, Optional

from pydantic import Field

from src.models.revenue import Location, TimeFrame
from src.shared.base import BaseSchema


TrendDirection = Literal["improving", "declining", "stable"]


class LocationMetric(BaseSchema):
    revenue: float
    target: float
    attainment_pct: float


class AttainmentBreakdown(BaseSchema):
    location_a: float
    location_b: float
    combined: float


class DailyAttainment(BaseSchema):
    date: date
    location_a: LocationMetric
    location_b: LocationMetric
    combined: LocationMetric
    is_working_day: bool


class PeriodMetrics(BaseSchema):
    label: str
    start_date: date
    end_date: date
    record_count: int
    location_a: LocationMetric
    location_b: LocationMetric
    combined: LocationMetric


class PeriodBreakdown(BaseSchema):
    weekly: List[PeriodMetrics]
    monthly: Optional[PeriodMetrics] = None


class PaceMetric(BaseSchema):
    revenue: float
    target: float
    monthly_target: float
    attainment_pct: float
    elapsed_days: int
    remaining_days: int
    total_days: int
    daily_pace_needed: float


class PaceMetrics(BaseSchema):
    as_of_date: date
    location_a: PaceMetric
    location_b: PaceMetric
    total: PaceMetric


class MetricsSummary(BaseSchema):
    total_revenue: float
    location_a_revenue: float
    location_b_revenue: float
    location_a_attainment_pct: float
    location_b_attainment_pct: float
    combined_attainment_pct: float
    days_above_target: int
    working_days: int
    trend: TrendDirection = "stable"


class MonthlyTrendPoint(BaseSchema):
    year: int
    month: int
    label: str
    period_start: date
    location_a_revenue: float
    location_b_revenue: float
    location_a_target: float
    location_b_target: float
    location_a_attainment_pct: float
    location_b_attainment_pct: float
    combined_attainment_pct: float
    current_year_revenue: Optional[float] = None
    previous_year_revenue: Optional[float] = None


class MovingAveragePoint(BaseSchema):
    label: str
    location_a: float
    location_b: float


class MonthlyTrendsResponse(BaseSchema):
    timeline: List[MonthlyTrendPoint]
    moving_average: List[MovingAveragePoint]


class DataIntegrityReport(BaseSchema):
    is_valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class MissingDataReport(BaseSchema):
    missing_days: int
    missing_dates: List[date] = Field(default_factory=list)
    last_data_date: Optional[date] = None


class AttainmentFilters(BaseSchema):
    time_frame: TimeFrame = TimeFrame.MTD
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Location = Location.COMBINED
    as_of: Optional[date] = None
    min_attainment: Optional[float] = Field(default=None, ge=0)
    max_attainment: Optional[float] = Field(default=None, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=500)


class TrendFilters(BaseSchema):
    as_of: Optional[date] = None
    moving_average_periods: int = Field(default=3, ge=1, le=12)
