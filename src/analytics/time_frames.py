from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, List, Optional, Tuple

from src.analytics.attainment import attainment_pct
from src.analytics.calendar import is_working_day
from src.analytics.targets import resolve_target
from src.core.errors import DataValidationError
from src.models.revenue import Location, RevenueRecord, TargetConfiguration, TimeFrame


RECENT_WORKING_DAYS = 5
_ROLLING_WINDOWS = {TimeFrame.LAST_30: 30, TimeFrame.LAST_90: 90}


def recent_working_days(end: date, count: int = RECENT_WORKING_DAYS) -> List[date]:
    """The ``count`` most recent weekdays ending at ``end``, oldest first."""
    days: List[date] = []
    current = end
    while len(days) < count:
        if is_working_day(current):
            days.append(current)
        current -= timedelta(days=1)
    return list(reversed(days))


def time_frame_bounds(
    time_frame: TimeFrame,
    as_of: date,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
) -> Tuple[Optional[date], date]:
    """Inclusive date window for a time frame; ``None`` start means unbounded."""
    yesterday = as_of - timedelta(days=1)
    if time_frame == TimeFrame.MTD:
        return date(as_of.year, as_of.month, 1), yesterday
    if time_frame == TimeFrame.THIS_WEEK:
        return recent_working_days(yesterday)[0], yesterday
    if time_frame in _ROLLING_WINDOWS:
        return yesterday - timedelta(days=_ROLLING_WINDOWS[time_frame] - 1), yesterday
    if time_frame == TimeFrame.YTD:
        return date(as_of.year, 1, 1), yesterday
    if time_frame == TimeFrame.CUSTOM:
        if custom_start is None or custom_end is None:
            raise DataValidationError("Custom time frame requires both start and end dates")
        return custom_start, custom_end
    return None, yesterday


def filter_by_time_frame(
    records: Iterable[RevenueRecord],
    time_frame: TimeFrame,
    config: TargetConfiguration,
    as_of: date,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
    location: Location = Location.COMBINED,
    attainment_band: Optional[Tuple[float, float]] = None,
) -> List[RevenueRecord]:
    """Records in scope for a time frame, sorted by date.

    ``as_of`` is the current calendar day and is never included unless a
    custom range explicitly ends on it. A single-location filter zeroes the
    other location's revenue instead of dropping the record.
    """
    start, end = time_frame_bounds(time_frame, as_of, custom_start, custom_end)
    allowed_days = None
    if time_frame == TimeFrame.THIS_WEEK:
        allowed_days = set(recent_working_days(end))

    selected: List[RevenueRecord] = []
    for record in records:
        if record.date > end or (start is not None and record.date < start):
            continue
        if allowed_days is not None and record.date not in allowed_days:
            continue
        selected.append(_apply_location(record, location))

    selected.sort(key=lambda record: record.date)

    if attainment_band is not None:
        selected = [
            record for record in selected if _within_band(record, config, attainment_band)
        ]
    return selected


def _apply_location(record: RevenueRecord, location: Location) -> RevenueRecord:
    if location == Location.LOCATION_A:
        return record.model_copy(update={"location_b_revenue": 0.0})
    if location == Location.LOCATION_B:
        return record.model_copy(update={"location_a_revenue": 0.0})
    return record


def _within_band(
    record: RevenueRecord, config: TargetConfiguration, band: Tuple[float, float]
) -> bool:
    target = resolve_target(record.date, config)
    # Days without a target cannot be judged, keep them.
    if target.combined <= 0:
        return True
    low, high = band
    return low <= attainment_pct(record.combined_revenue, target.combined) <= high
