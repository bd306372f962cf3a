from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from src.analytics.time_frames import time_frame_bounds
from src.api.dependencies import get_attainment_service
from src.models.revenue import Location, TimeFrame
from src.schemas.attainment import (
    AttainmentFilters,
    DailyAttainment,
    MetricsSummary,
    MonthlyTrendsResponse,
    PaceMetrics,
    PeriodBreakdown,
    TrendFilters,
)
from src.services.attainment_service import AttainmentService
from src.shared.response import Meta, ResponseEnvelope, build_meta, paginate_list


router = APIRouter(prefix="/attainment", tags=["attainment"])

SOURCE = "revenue_entries,target_settings,monthly_target_adjustments"


def get_attainment_filters(
    time_frame: TimeFrame = Query(default=TimeFrame.MTD, alias="time_frame"),
    start_date: Optional[date] = Query(default=None, alias="start_date"),
    end_date: Optional[date] = Query(default=None, alias="end_date"),
    location: Location = Query(default=Location.COMBINED),
    as_of: Optional[date] = Query(default=None, alias="as_of"),
    min_attainment: Optional[float] = Query(default=None, alias="min_attainment", ge=0),
    max_attainment: Optional[float] = Query(default=None, alias="max_attainment", ge=0),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, alias="page_size", ge=1, le=500),
) -> AttainmentFilters:
    return AttainmentFilters(
        time_frame=time_frame,
        start_date=start_date,
        end_date=end_date,
        location=location,
        as_of=as_of,
        min_attainment=min_attainment,
        max_attainment=max_attainment,
        page=page,
        page_size=page_size,
    )


def get_trend_filters(
    as_of: Optional[date] = Query(default=None, alias="as_of"),
    moving_average_periods: int = Query(default=3, alias="moving_average_periods", ge=1, le=12),
) -> TrendFilters:
    return TrendFilters(as_of=as_of, moving_average_periods=moving_average_periods)


def _time_window(filters: AttainmentFilters, as_of: date) -> str:
    start, end = time_frame_bounds(filters.time_frame, as_of, filters.start_date, filters.end_date)
    if start is None:
        return f"{filters.time_frame.value}:..{end.isoformat()}"
    return f"{filters.time_frame.value}:{start.isoformat()}..{end.isoformat()}"


def _meta(as_of: date, time_window: str) -> Meta:
    return build_meta(as_of, SOURCE, time_window)


@router.get("/daily")
def attainment_daily(
    filters: AttainmentFilters = Depends(get_attainment_filters),
    service: AttainmentService = Depends(get_attainment_service),
) -> ResponseEnvelope[List[DailyAttainment]]:
    as_of = service.resolve_as_of(filters.as_of)
    filters = filters.model_copy(update={"as_of": as_of})
    data = service.get_daily_attainment(filters)
    paged_data, pagination = paginate_list(data, filters.page, filters.page_size)
    return ResponseEnvelope(
        data=paged_data, pagination=pagination, meta=_meta(as_of, _time_window(filters, as_of))
    )


@router.get("/periods")
def attainment_periods(
    filters: AttainmentFilters = Depends(get_attainment_filters),
    service: AttainmentService = Depends(get_attainment_service),
) -> ResponseEnvelope[PeriodBreakdown]:
    as_of = service.resolve_as_of(filters.as_of)
    filters = filters.model_copy(update={"as_of": as_of})
    data = service.get_period_metrics(filters)
    return ResponseEnvelope(data=data, meta=_meta(as_of, _time_window(filters, as_of)))


@router.get("/pace")
def attainment_pace(
    as_of: Optional[date] = Query(default=None, alias="as_of"),
    location: Location = Query(default=Location.COMBINED),
    service: AttainmentService = Depends(get_attainment_service),
) -> ResponseEnvelope[PaceMetrics]:
    resolved = service.resolve_as_of(as_of)
    data = service.get_pace_metrics(resolved, location)
    return ResponseEnvelope(data=data, meta=_meta(resolved, "MTD"))


@router.get("/summary")
def attainment_summary(
    filters: AttainmentFilters = Depends(get_attainment_filters),
    service: AttainmentService = Depends(get_attainment_service),
) -> ResponseEnvelope[MetricsSummary]:
    as_of = service.resolve_as_of(filters.as_of)
    filters = filters.model_copy(update={"as_of": as_of})
    data = service.get_summary(filters)
    return ResponseEnvelope(data=data, meta=_meta(as_of, _time_window(filters, as_of)))


@router.get("/monthly-trends")
def attainment_monthly_trends(
    filters: TrendFilters = Depends(get_trend_filters),
    service: AttainmentService = Depends(get_attainment_service),
) -> ResponseEnvelope[MonthlyTrendsResponse]:
    as_of = service.resolve_as_of(filters.as_of)
    data = service.get_monthly_trends(as_of, filters.moving_average_periods)
    return ResponseEnvelope(data=data, meta=_meta(as_of, "all"))
