from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional, Tuple

from src.analytics.attainment import daily_attainment, summarize_metrics
from src.analytics.data_quality import find_missing_data_days, validate_data_integrity
from src.analytics.periods import (
    bucket_into_periods,
    compute_location_metrics,
    monthly_trends,
    moving_average,
    trend_direction,
)
from src.analytics.targets import refresh_working_days
from src.analytics.time_frames import filter_by_time_frame, time_frame_bounds
from src.core.config import get_settings
from src.core.errors import BadRequestError
from src.models.revenue import Location, RevenueRecord, TargetConfiguration, TimeFrame
from src.repositories.revenue_repository import RevenueRepository
from src.schemas.attainment import (
    AttainmentFilters,
    DailyAttainment,
    DataIntegrityReport,
    MetricsSummary,
    MissingDataReport,
    MonthlyTrendsResponse,
    PaceMetrics,
    PeriodBreakdown,
)
from src.shared.time import resolve_as_of


logger = logging.getLogger(__name__)


class AttainmentService:
    def __init__(self, repository: RevenueRepository) -> None:
        self.repository = repository
        self.settings = get_settings()

    def resolve_as_of(self, as_of: Optional[date]) -> date:
        return resolve_as_of(as_of, self.settings.business_timezone)

    def get_daily_attainment(self, filters: AttainmentFilters) -> List[DailyAttainment]:
        records, config, _ = self._load_filtered(filters)
        return daily_attainment(records, config)

    def get_period_metrics(self, filters: AttainmentFilters) -> PeriodBreakdown:
        records, config, _ = self._load_filtered(filters)
        return bucket_into_periods(records, config)

    def get_pace_metrics(
        self, as_of: Optional[date], location: Location = Location.COMBINED
    ) -> PaceMetrics:
        filters = AttainmentFilters(time_frame=TimeFrame.MTD, location=location, as_of=as_of)
        records, config, resolved = self._load_filtered(filters)
        return compute_location_metrics(records, config, resolved, location)

    def get_summary(self, filters: AttainmentFilters) -> MetricsSummary:
        records, config, _ = self._load_filtered(filters)
        summary = summarize_metrics(records, config)
        return summary.model_copy(update={"trend": trend_direction(records, config)})

    def get_monthly_trends(self, as_of: Optional[date], periods: int) -> MonthlyTrendsResponse:
        filters = AttainmentFilters(time_frame=TimeFrame.ALL_TIME, as_of=as_of)
        records, config, resolved = self._load_filtered(filters)
        timeline = monthly_trends(records, config, resolved)
        return MonthlyTrendsResponse(
            timeline=timeline, moving_average=moving_average(timeline, periods)
        )

    def get_data_integrity(self, as_of: Optional[date]) -> DataIntegrityReport:
        resolved = self.resolve_as_of(as_of)
        records = self.repository.list_revenue_records()
        config = self._load_configuration(resolved)
        report = validate_data_integrity(records, config, resolved)
        if not report.is_valid:
            logger.warning("Revenue data failed integrity checks: %s", report.errors)
        return report

    def get_missing_data_days(self, as_of: Optional[date]) -> MissingDataReport:
        resolved = self.resolve_as_of(as_of)
        records = self.repository.list_revenue_records()
        config = self._load_configuration(resolved)
        return find_missing_data_days(records, config, resolved)

    def _load_configuration(self, as_of: date) -> TargetConfiguration:
        return refresh_working_days(self.repository.get_target_configuration(), as_of)

    def _load_filtered(
        self, filters: AttainmentFilters
    ) -> Tuple[List[RevenueRecord], TargetConfiguration, date]:
        as_of = self.resolve_as_of(filters.as_of)
        band = self._attainment_band(filters)
        start, end = time_frame_bounds(
            filters.time_frame, as_of, filters.start_date, filters.end_date
        )
        records = self.repository.list_revenue_records(start_date=start, end_date=end)
        config = self._load_configuration(as_of)
        filtered = filter_by_time_frame(
            records,
            filters.time_frame,
            config,
            as_of,
            custom_start=filters.start_date,
            custom_end=filters.end_date,
            location=filters.location,
            attainment_band=band,
        )
        logger.debug(
            "Time frame %s as of %s kept %d of %d records",
            filters.time_frame.value,
            as_of.isoformat(),
            len(filtered),
            len(records),
        )
        return filtered, config, as_of

    @staticmethod
    def _attainment_band(filters: AttainmentFilters) -> Optional[Tuple[float, float]]:
        if filters.min_attainment is None and filters.max_attainment is None:
            return None
        low = filters.min_attainment if filters.min_attainment is not None else 0.0
        high = filters.max_attainment if filters.max_attainment is not None else float("inf")
        if low > high:
            raise BadRequestError("min_attainment must not exceed max_attainment")
        return low, high
