from __future__ import annotations

from typing import Iterable, List

from src.analytics.targets import resolve_target
from src.models.revenue import ResolvedTarget, RevenueRecord, TargetConfiguration
from src.schemas.attainment import (
    AttainmentBreakdown,
    DailyAttainment,
    LocationMetric,
    MetricsSummary,
)


def attainment_pct(revenue: float, target: float) -> float:
    return revenue / target * 100 if target > 0 else 0.0


def rounded_attainment_pct(revenue: float, target: float, precision: int = 2) -> float:
    if target <= 0:
        return 0.0
    return round(revenue / target * 100, precision)


def location_metric(revenue: float, target: float) -> LocationMetric:
    return LocationMetric(
        revenue=revenue, target=target, attainment_pct=attainment_pct(revenue, target)
    )


def compute_attainment(record: RevenueRecord, target: ResolvedTarget) -> AttainmentBreakdown:
    return AttainmentBreakdown(
        location_a=attainment_pct(record.location_a_revenue, target.location_a),
        location_b=attainment_pct(record.location_b_revenue, target.location_b),
        combined=attainment_pct(record.combined_revenue, target.combined),
    )


def daily_attainment(
    records: Iterable[RevenueRecord], config: TargetConfiguration
) -> List[DailyAttainment]:
    points: List[DailyAttainment] = []
    for record in records:
        target = resolve_target(record.date, config)
        points.append(
            DailyAttainment(
                date=record.date,
                location_a=location_metric(record.location_a_revenue, target.location_a),
                location_b=location_metric(record.location_b_revenue, target.location_b),
                combined=location_metric(record.combined_revenue, target.combined),
                is_working_day=target.is_working_day,
            )
        )
    return points


def summarize_metrics(
    records: Iterable[RevenueRecord], config: TargetConfiguration
) -> MetricsSummary:
    """Totals over a series; targets only accrue on days that carry one."""
    location_a_revenue = 0.0
    location_b_revenue = 0.0
    location_a_target = 0.0
    location_b_target = 0.0
    days_above_target = 0
    working_days = 0

    for record in records:
        target = resolve_target(record.date, config)
        location_a_revenue += record.location_a_revenue
        location_b_revenue += record.location_b_revenue
        if not target.is_working_day:
            continue
        working_days += 1
        location_a_target += target.location_a
        location_b_target += target.location_b
        if target.combined > 0 and record.combined_revenue >= target.combined:
            days_above_target += 1

    return MetricsSummary(
        total_revenue=location_a_revenue + location_b_revenue,
        location_a_revenue=location_a_revenue,
        location_b_revenue=location_b_revenue,
        location_a_attainment_pct=attainment_pct(location_a_revenue, location_a_target),
        location_b_attainment_pct=attainment_pct(location_b_revenue, location_b_target),
        combined_attainment_pct=attainment_pct(
            location_a_revenue + location_b_revenue, location_a_target + location_b_target
        ),
        days_above_target=days_above_target,
        working_days=working_days,
    )
