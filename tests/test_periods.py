from __future__ import annotations

from datetime import date

import pytest

from src.analytics.periods import (
    _pace_metric,
    bucket_into_periods,
    compute_location_metrics,
    monthly_trends,
    moving_average,
    trend_direction,
)
from src.analytics.time_frames import filter_by_time_frame
from src.models.revenue import Location, RevenueRecord, TimeFrame


def _record(day: str, a: float = 1000, b: float = 2000) -> RevenueRecord:
    return RevenueRecord(date=day, location_a_revenue=a, location_b_revenue=b)


def test_single_week_bucket(week_records, default_config) -> None:
    filtered = filter_by_time_frame(
        week_records, TimeFrame.THIS_WEEK, default_config, date(2025, 3, 31)
    )

    breakdown = bucket_into_periods(filtered, default_config)

    assert len(breakdown.weekly) == 1
    week = breakdown.weekly[0]
    assert week.label == "Mar 24-Mar 28"
    assert week.record_count == 5
    assert week.combined.revenue == 571500
    assert week.combined.target == 577500
    assert week.combined.attainment_pct == pytest.approx(98.961, abs=1e-3)
    assert breakdown.monthly is not None
    assert breakdown.monthly.label == "March 2025"
    assert breakdown.monthly.combined.revenue == 571500


def test_combined_is_sum_of_locations(week_records, default_config) -> None:
    breakdown = bucket_into_periods(week_records, default_config)

    for bucket in breakdown.weekly + [breakdown.monthly]:
        assert bucket.combined.revenue == bucket.location_a.revenue + bucket.location_b.revenue
        assert bucket.combined.target == bucket.location_a.target + bucket.location_b.target


def test_windows_anchor_on_first_record_and_truncate(default_config) -> None:
    records = [_record("2025-03-20"), _record("2025-03-12"), _record("2025-03-05"), _record("2025-03-11")]

    breakdown = bucket_into_periods(records, default_config)

    assert [week.label for week in breakdown.weekly] == [
        "Mar 5-Mar 11",
        "Mar 12-Mar 18",
        "Mar 19-Mar 20",
    ]
    assert [week.record_count for week in breakdown.weekly] == [2, 1, 1]
    assert breakdown.weekly[-1].end_date == date(2025, 3, 20)


def test_empty_windows_are_omitted(default_config) -> None:
    records = [_record("2025-03-03"), _record("2025-03-20")]

    breakdown = bucket_into_periods(records, default_config)

    assert [week.start_date for week in breakdown.weekly] == [date(2025, 3, 3), date(2025, 3, 17)]


def test_weekend_rows_accrue_default_target_without_adjustment(default_config) -> None:
    breakdown = bucket_into_periods([_record("2025-03-29", 0, 0)], default_config)

    assert breakdown.weekly[0].combined.target == 115500
    assert breakdown.weekly[0].combined.attainment_pct == 0


def test_adjustment_targets_are_used_per_date(default_config, march_adjustment) -> None:
    config = default_config.model_copy(update={"monthly_adjustments": (march_adjustment,)})
    records = [_record("2025-03-03", 40000, 62500), _record("2025-03-04", 5000, 5000)]

    breakdown = bucket_into_periods(records, config)

    week = breakdown.weekly[0]
    assert week.location_a.target == 40000
    assert week.location_b.target == 62500
    assert week.location_a.revenue == 45000
    assert week.location_a.attainment_pct == pytest.approx(112.5)


def test_empty_series_has_no_buckets(default_config) -> None:
    breakdown = bucket_into_periods([], default_config)

    assert breakdown.weekly == []
    assert breakdown.monthly is None


def test_filter_and_bucket_are_idempotent(week_records, default_config) -> None:
    as_of = date(2025, 3, 31)
    first = bucket_into_periods(
        filter_by_time_frame(week_records, TimeFrame.MTD, default_config, as_of), default_config
    )
    second = bucket_into_periods(
        filter_by_time_frame(week_records, TimeFrame.MTD, default_config, as_of), default_config
    )

    assert first.model_dump() == second.model_dump()


def test_pace_metrics_scale_target_to_elapsed_days(week_records, default_config) -> None:
    metrics = compute_location_metrics(week_records, default_config, date(2025, 3, 31))

    assert metrics.total.total_days == 21
    assert metrics.total.elapsed_days == 20
    assert metrics.total.remaining_days == 1
    assert metrics.location_a.monthly_target == 53000 * 21
    assert metrics.location_a.target == pytest.approx(53000 * 20)
    assert metrics.location_a.revenue == 266000
    assert metrics.location_a.attainment_pct == pytest.approx(25.09)
    assert metrics.location_a.daily_pace_needed == pytest.approx(53000 * 21 - 266000)
    assert metrics.total.target == pytest.approx(115500 * 20)
    assert metrics.total.revenue == 571500


def test_pace_target_equals_envelope_once_month_elapsed(default_config) -> None:
    # 31 August 2025 is a Sunday, so every working day of the month has passed.
    metrics = compute_location_metrics(
        [_record("2025-08-29", 53000, 62500)], default_config, date(2025, 8, 31)
    )

    assert metrics.total.elapsed_days == metrics.total.total_days == 21
    assert metrics.location_a.target == metrics.location_a.monthly_target
    assert metrics.location_b.target == metrics.location_b.monthly_target
    assert metrics.total.remaining_days == 0
    assert metrics.total.daily_pace_needed == 0


def test_pace_on_first_of_month_reports_zero(default_config) -> None:
    metrics = compute_location_metrics([], default_config, date(2025, 4, 1))

    assert metrics.total.elapsed_days == 0
    assert metrics.total.target == 0
    assert metrics.total.attainment_pct == 0


def test_pace_with_no_working_days_is_zero_not_error() -> None:
    metric = _pace_metric(
        revenue=1000.0, daily_target=500.0, total_days=0, elapsed_days=0, remaining_days=0
    )

    assert metric.target == 0
    assert metric.attainment_pct == 0
    assert metric.daily_pace_needed == 0


def test_pace_location_filter_zeroes_other_target(week_records, default_config) -> None:
    metrics = compute_location_metrics(
        week_records, default_config, date(2025, 3, 31), location=Location.LOCATION_A
    )

    assert metrics.location_b.target == 0
    assert metrics.location_b.monthly_target == 0
    assert metrics.location_b.revenue == 305500
    assert metrics.total.target == metrics.location_a.target
    assert metrics.total.monthly_target == metrics.location_a.monthly_target


def test_monthly_trends_split_by_year(default_config) -> None:
    records = [
        _record("2024-03-04", 53000, 62500),
        _record("2025-02-03", 26500, 62500),
        _record("2025-03-03", 53000, 62500),
        _record("2025-03-04", 53000, 62500),
    ]

    points = monthly_trends(records, default_config, date(2025, 3, 31))

    assert [point.label for point in points] == ["Mar 2024", "Feb 2025", "Mar 2025"]
    assert points[0].previous_year_revenue == 115500
    assert points[0].current_year_revenue is None
    assert points[1].location_a_attainment_pct == pytest.approx(50.0)
    assert points[2].current_year_revenue == 231000
    assert points[2].location_a_target == 106000


def test_moving_average_uses_growing_window(default_config) -> None:
    records = [
        _record("2025-01-06", 53000, 62500),
        _record("2025-02-03", 26500, 31250),
        _record("2025-03-03", 79500, 93750),
    ]
    points = monthly_trends(records, default_config, date(2025, 3, 31))

    averages = moving_average(points, periods=2)

    assert averages[0].location_a == pytest.approx(100.0)
    assert averages[1].location_a == pytest.approx(75.0)
    assert averages[2].location_b == pytest.approx(100.0)


def test_trend_direction(default_config) -> None:
    rising = [
        _record("2025-03-24", 40000, 40000),
        _record("2025-03-25", 40000, 40000),
        _record("2025-03-26", 60000, 70000),
        _record("2025-03-27", 60000, 70000),
        _record("2025-03-28", 60000, 70000),
    ]
    falling = [
        RevenueRecord(date=record.date, location_a_revenue=a, location_b_revenue=b)
        for record, (a, b) in zip(rising, [(60000, 70000)] * 3 + [(40000, 40000)] * 2)
    ]

    assert trend_direction(rising, default_config) == "improving"
    assert trend_direction(falling, default_config) == "declining"
    assert trend_direction(rising[:1], default_config) == "stable"


def test_moving_average_with_non_positive_periods_uses_single_point(default_config) -> None:
    records = [_record("2025-01-06", 53000, 62500), _record("2025-02-03", 26500, 31250)]
    points = monthly_trends(records, default_config, date(2025, 3, 31))

    averages = moving_average(points, periods=0)

    assert [average.location_a for average in averages] == pytest.approx([100.0, 50.0])
