from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, Iterable, List, Sequence, Tuple

from src.analytics.attainment import (
    attainment_pct,
    location_metric,
    rounded_attainment_pct,
    summarize_metrics,
)
from src.analytics.calendar import count_working_days
from src.analytics.targets import resolve_target
from src.models.revenue import Location, RevenueRecord, TargetConfiguration
from src.schemas.attainment import (
    MonthlyTrendPoint,
    MovingAveragePoint,
    PaceMetric,
    PaceMetrics,
    PeriodBreakdown,
    PeriodMetrics,
    TrendDirection,
)
from src.shared.time import month_bounds


WEEK_LENGTH_DAYS = 7
TREND_WINDOW = 5
TREND_THRESHOLD_PCT = 5.0


def _day_label(value: date) -> str:
    return f"{value:%b} {value.day}"


def _period_metrics(
    label: str,
    start: date,
    end: date,
    records: Sequence[RevenueRecord],
    config: TargetConfiguration,
) -> PeriodMetrics:
    location_a_revenue = 0.0
    location_b_revenue = 0.0
    location_a_target = 0.0
    location_b_target = 0.0
    for record in records:
        target = resolve_target(record.date, config)
        location_a_revenue += record.location_a_revenue
        location_b_revenue += record.location_b_revenue
        location_a_target += target.location_a
        location_b_target += target.location_b
    return PeriodMetrics(
        label=label,
        start_date=start,
        end_date=end,
        record_count=len(records),
        location_a=location_metric(location_a_revenue, location_a_target),
        location_b=location_metric(location_b_revenue, location_b_target),
        combined=location_metric(
            location_a_revenue + location_b_revenue, location_a_target + location_b_target
        ),
    )


def bucket_into_periods(
    records: Iterable[RevenueRecord], config: TargetConfiguration
) -> PeriodBreakdown:
    """Seven-day buckets anchored on the first record plus a whole-span bucket.

    Windows are not aligned to calendar weeks; the last one stops at the
    final record's date. Attainment uses summed revenue over summed target.
    """
    ordered = sorted(records, key=lambda record: record.date)
    if not ordered:
        return PeriodBreakdown(weekly=[], monthly=None)

    first_date = ordered[0].date
    last_date = ordered[-1].date
    windows: Dict[int, List[RevenueRecord]] = defaultdict(list)
    for record in ordered:
        windows[(record.date - first_date).days // WEEK_LENGTH_DAYS].append(record)

    weekly: List[PeriodMetrics] = []
    for index in sorted(windows):
        start = first_date + timedelta(days=index * WEEK_LENGTH_DAYS)
        end = min(start + timedelta(days=WEEK_LENGTH_DAYS - 1), last_date)
        label = f"{_day_label(start)}-{_day_label(end)}"
        weekly.append(_period_metrics(label, start, end, windows[index], config))

    monthly = _period_metrics(f"{first_date:%B %Y}", first_date, last_date, ordered, config)
    return PeriodBreakdown(weekly=weekly, monthly=monthly)


def _pace_metric(
    revenue: float,
    daily_target: float,
    total_days: int,
    elapsed_days: int,
    remaining_days: int,
) -> PaceMetric:
    monthly_target = daily_target * total_days
    on_pace_target = monthly_target * (elapsed_days / total_days) if total_days else 0.0
    daily_pace_needed = (
        (monthly_target - revenue) / remaining_days if remaining_days > 0 else 0.0
    )
    return PaceMetric(
        revenue=revenue,
        target=on_pace_target,
        monthly_target=monthly_target,
        attainment_pct=rounded_attainment_pct(revenue, on_pace_target),
        elapsed_days=elapsed_days,
        remaining_days=remaining_days,
        total_days=total_days,
        daily_pace_needed=daily_pace_needed,
    )


def compute_location_metrics(
    records: Iterable[RevenueRecord],
    config: TargetConfiguration,
    as_of: date,
    location: Location = Location.COMBINED,
) -> PaceMetrics:
    """Month-to-date revenue against the on-pace share of the monthly target.

    The on-pace target scales the month's envelope by elapsed working days,
    counting through yesterday. A single-location filter reports the other
    location's targets as zero.
    """
    location_a_revenue = 0.0
    location_b_revenue = 0.0
    for record in records:
        location_a_revenue += record.location_a_revenue
        location_b_revenue += record.location_b_revenue

    month_start, month_end = month_bounds(as_of.year, as_of.month)
    total_days = count_working_days(month_start, month_end)
    elapsed_days = count_working_days(month_start, as_of - timedelta(days=1))
    remaining_days = count_working_days(as_of, month_end)

    default = config.default_daily_target
    daily_a = default.location_a if location != Location.LOCATION_B else 0.0
    daily_b = default.location_b if location != Location.LOCATION_A else 0.0

    location_a = _pace_metric(
        location_a_revenue, daily_a, total_days, elapsed_days, remaining_days
    )
    location_b = _pace_metric(
        location_b_revenue, daily_b, total_days, elapsed_days, remaining_days
    )
    if location == Location.LOCATION_A:
        location_b = location_b.model_copy(update={"daily_pace_needed": 0.0})
    elif location == Location.LOCATION_B:
        location_a = location_a.model_copy(update={"daily_pace_needed": 0.0})

    total_revenue = location_a.revenue + location_b.revenue
    total_target = location_a.target + location_b.target
    total = PaceMetric(
        revenue=total_revenue,
        target=total_target,
        monthly_target=location_a.monthly_target + location_b.monthly_target,
        attainment_pct=rounded_attainment_pct(total_revenue, total_target),
        elapsed_days=elapsed_days,
        remaining_days=remaining_days,
        total_days=total_days,
        daily_pace_needed=location_a.daily_pace_needed + location_b.daily_pace_needed,
    )
    return PaceMetrics(
        as_of_date=as_of, location_a=location_a, location_b=location_b, total=total
    )


def monthly_trends(
    records: Iterable[RevenueRecord], config: TargetConfiguration, as_of: date
) -> List[MonthlyTrendPoint]:
    totals: Dict[Tuple[int, int], List[float]] = defaultdict(lambda: [0.0, 0.0, 0.0, 0.0])
    for record in records:
        target = resolve_target(record.date, config)
        bucket = totals[(record.date.year, record.date.month)]
        bucket[0] += record.location_a_revenue
        bucket[1] += record.location_b_revenue
        bucket[2] += target.location_a
        bucket[3] += target.location_b

    points: List[MonthlyTrendPoint] = []
    for (year, month), (revenue_a, revenue_b, target_a, target_b) in sorted(totals.items()):
        period_start = date(year, month, 1)
        combined_revenue = revenue_a + revenue_b
        points.append(
            MonthlyTrendPoint(
                year=year,
                month=month,
                label=f"{period_start:%b} {year}",
                period_start=period_start,
                location_a_revenue=revenue_a,
                location_b_revenue=revenue_b,
                location_a_target=target_a,
                location_b_target=target_b,
                location_a_attainment_pct=attainment_pct(revenue_a, target_a),
                location_b_attainment_pct=attainment_pct(revenue_b, target_b),
                combined_attainment_pct=attainment_pct(combined_revenue, target_a + target_b),
                current_year_revenue=combined_revenue if year == as_of.year else None,
                previous_year_revenue=combined_revenue if year == as_of.year - 1 else None,
            )
        )
    return points


def moving_average(points: Sequence[MonthlyTrendPoint], periods: int) -> List[MovingAveragePoint]:
    """Trailing mean of attainment; early windows use what is available."""
    periods = max(periods, 1)
    averages: List[MovingAveragePoint] = []
    for index, point in enumerate(points):
        window = points[max(0, index - periods + 1) : index + 1]
        averages.append(
            MovingAveragePoint(
                label=point.label,
                location_a=sum(item.location_a_attainment_pct for item in window) / len(window),
                location_b=sum(item.location_b_attainment_pct for item in window) / len(window),
            )
        )
    return averages


def trend_direction(
    records: Sequence[RevenueRecord], config: TargetConfiguration
) -> TrendDirection:
    ordered = sorted(records, key=lambda record: record.date)
    if len(ordered) < 2:
        return "stable"
    recent = ordered[-TREND_WINDOW:]
    half = len(recent) // 2
    earlier = summarize_metrics(recent[:half], config).combined_attainment_pct
    later = summarize_metrics(recent[half:], config).combined_attainment_pct
    if later - earlier > TREND_THRESHOLD_PCT:
        return "improving"
    if earlier - later > TREND_THRESHOLD_PCT:
        return "declining"
    return "stable"
