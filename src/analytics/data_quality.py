from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import List, Sequence, Set

from src.analytics.attainment import attainment_pct
from src.analytics.calendar import is_working_day
from src.analytics.targets import find_adjustment, resolve_target
from src.models.revenue import RevenueRecord, TargetConfiguration
from src.schemas.attainment import DataIntegrityReport, MissingDataReport
from src.shared.time import iter_days


logger = logging.getLogger(__name__)

HIGH_ATTAINMENT_WARNING_PCT = 1500.0
LOW_ATTAINMENT_WARNING_PCT = 10.0
ADJUSTMENT_YEAR_RANGE = (2020, 2030)


def validate_data_integrity(
    records: Sequence[RevenueRecord], config: TargetConfiguration, as_of: date
) -> DataIntegrityReport:
    errors: List[str] = []
    warnings: List[str] = []

    if not records:
        return DataIntegrityReport(
            is_valid=False, errors=["No data provided for validation"], warnings=[]
        )

    seen: Set[date] = set()
    for index, record in enumerate(records):
        day = record.date.isoformat()
        if record.date in seen:
            errors.append(f"Duplicate date found: {day}")
        seen.add(record.date)

        if record.location_a_revenue < 0:
            errors.append(f"Invalid location A revenue at index {index}: {record.location_a_revenue}")
        if record.location_b_revenue < 0:
            errors.append(f"Invalid location B revenue at index {index}: {record.location_b_revenue}")
        if record.date > as_of:
            warnings.append(f"Future date found at index {index}: {day}")

        target = resolve_target(record.date, config)
        if target.combined <= 0:
            continue
        pct = attainment_pct(record.combined_revenue, target.combined)
        if pct > HIGH_ATTAINMENT_WARNING_PCT:
            warnings.append(f"Unusually high attainment ({pct:.1f}%) on {day}")
        if pct < LOW_ATTAINMENT_WARNING_PCT and record.combined_revenue > 0:
            warnings.append(f"Unusually low attainment ({pct:.1f}%) on {day}")

    default = config.default_daily_target
    if default.location_a <= 0:
        errors.append("Location A daily target must be greater than 0")
    if default.location_b <= 0:
        errors.append("Location B daily target must be greater than 0")

    for index, adjustment in enumerate(config.monthly_adjustments):
        low_year, high_year = ADJUSTMENT_YEAR_RANGE
        if not low_year <= adjustment.year <= high_year:
            warnings.append(f"Unusual year in adjustment {index}: {adjustment.year}")
        if not adjustment.working_days:
            errors.append(f"No working days specified in adjustment {index}")
        if adjustment.location_a_override is not None and adjustment.location_a_override <= 0:
            errors.append(
                f"Invalid location A target in adjustment {index}: {adjustment.location_a_override}"
            )
        if adjustment.location_b_override is not None and adjustment.location_b_override <= 0:
            errors.append(
                f"Invalid location B target in adjustment {index}: {adjustment.location_b_override}"
            )

    logger.debug(
        "Integrity check over %d records: %d errors, %d warnings",
        len(records),
        len(errors),
        len(warnings),
    )
    return DataIntegrityReport(is_valid=not errors, errors=errors, warnings=warnings)


def _counts_as_working_day(value: date, config: TargetConfiguration) -> bool:
    adjustment = find_adjustment(config, value.year, value.month - 1)
    if adjustment is not None and adjustment.working_days:
        return value.day in adjustment.working_days
    return is_working_day(value)


def find_missing_data_days(
    records: Sequence[RevenueRecord], config: TargetConfiguration, as_of: date
) -> MissingDataReport:
    """Working days after the latest record, through yesterday, with no entry."""
    if not records:
        return MissingDataReport(missing_days=0, missing_dates=[], last_data_date=None)

    last_data_date = max(record.date for record in records)
    yesterday = as_of - timedelta(days=1)
    existing = {record.date for record in records}
    missing = [
        day
        for day in iter_days(last_data_date + timedelta(days=1), yesterday)
        if day not in existing and _counts_as_working_day(day, config)
    ]
    return MissingDataReport(
        missing_days=len(missing), missing_dates=missing, last_data_date=last_data_date
    )
