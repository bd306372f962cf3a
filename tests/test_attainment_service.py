from __future__ import annotations

from datetime import date

import pytest

from src.core.errors import BadRequestError, DataValidationError
from src.models.revenue import Location, MonthlyAdjustment, TimeFrame
from src.schemas.attainment import AttainmentFilters
from src.services.attainment_service import AttainmentService


AS_OF = date(2025, 3, 31)


def test_period_metrics_for_this_week(stub_repository) -> None:
    service = AttainmentService(repository=stub_repository)

    breakdown = service.get_period_metrics(
        AttainmentFilters(time_frame=TimeFrame.THIS_WEEK, as_of=AS_OF)
    )

    assert stub_repository.requested_ranges == [(date(2025, 3, 24), date(2025, 3, 30))]
    assert breakdown.weekly[0].combined.revenue == 571500
    assert breakdown.weekly[0].combined.target == 577500


def test_daily_attainment_is_sorted(stub_repository) -> None:
    service = AttainmentService(repository=stub_repository)

    points = service.get_daily_attainment(AttainmentFilters(time_frame=TimeFrame.MTD, as_of=AS_OF))

    assert [point.date.day for point in points] == [24, 25, 26, 27, 28]


def test_pace_metrics_for_single_location(stub_repository) -> None:
    service = AttainmentService(repository=stub_repository)

    metrics = service.get_pace_metrics(AS_OF, Location.LOCATION_B)

    assert metrics.as_of_date == AS_OF
    assert metrics.location_a.revenue == 0
    assert metrics.location_a.target == 0
    assert metrics.location_b.revenue == 305500
    assert metrics.total.target == pytest.approx(62500 * 20)


def test_summary_includes_trend(stub_repository) -> None:
    service = AttainmentService(repository=stub_repository)

    summary = service.get_summary(AttainmentFilters(time_frame=TimeFrame.ALL_TIME, as_of=AS_OF))

    assert summary.total_revenue == 571500
    assert summary.days_above_target == 2
    assert summary.trend == "stable"


def test_inverted_attainment_band_is_rejected(stub_repository) -> None:
    service = AttainmentService(repository=stub_repository)

    with pytest.raises(BadRequestError):
        service.get_daily_attainment(
            AttainmentFilters(as_of=AS_OF, min_attainment=120, max_attainment=80)
        )


def test_custom_range_without_end_is_rejected(stub_repository) -> None:
    service = AttainmentService(repository=stub_repository)

    with pytest.raises(DataValidationError):
        service.get_daily_attainment(
            AttainmentFilters(time_frame=TimeFrame.CUSTOM, start_date=date(2025, 3, 1), as_of=AS_OF)
        )


def test_integrity_check_fills_empty_current_month_adjustment(stub_repository) -> None:
    stub_repository.config = stub_repository.config.model_copy(
        update={"monthly_adjustments": (MonthlyAdjustment(month=2, year=2025, working_days=[]),)}
    )
    service = AttainmentService(repository=stub_repository)

    report = service.get_data_integrity(AS_OF)

    assert report.is_valid
    assert report.errors == []


def test_missing_days_up_to_yesterday(stub_repository) -> None:
    service = AttainmentService(repository=stub_repository)

    report = service.get_missing_data_days(date(2025, 4, 3))

    assert report.missing_dates == [date(2025, 3, 31), date(2025, 4, 1), date(2025, 4, 2)]


def test_explicit_as_of_is_kept(stub_repository) -> None:
    service = AttainmentService(repository=stub_repository)
    assert service.resolve_as_of(AS_OF) == AS_OF
