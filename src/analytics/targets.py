from __future__ import annotations

from datetime import date
from typing import Optional

from src.analytics.calendar import working_days_in_month
from src.models.revenue import MonthlyAdjustment, ResolvedTarget, TargetConfiguration


def find_adjustment(
    config: TargetConfiguration, year: int, month: int
) -> Optional[MonthlyAdjustment]:
    """Adjustment for a zero-based ``month``; the first match wins."""
    for adjustment in config.monthly_adjustments:
        if adjustment.year == year and adjustment.month == month:
            return adjustment
    return None


def resolve_target(value: date, config: TargetConfiguration) -> ResolvedTarget:
    """Effective daily target pair for one calendar date.

    An adjustment's ``working_days`` decides whether the date carries a target
    at all; its overrides replace the defaults per location. Months without an
    adjustment inherit the default target on every date, weekends included.
    """
    default = config.default_daily_target
    adjustment = find_adjustment(config, value.year, value.month - 1)
    if adjustment is None:
        return ResolvedTarget(location_a=default.location_a, location_b=default.location_b)
    if value.day not in adjustment.working_days:
        return ResolvedTarget(location_a=0.0, location_b=0.0)
    return ResolvedTarget(
        location_a=(
            adjustment.location_a_override
            if adjustment.location_a_override is not None
            else default.location_a
        ),
        location_b=(
            adjustment.location_b_override
            if adjustment.location_b_override is not None
            else default.location_b
        ),
    )


def refresh_working_days(
    config: TargetConfiguration, as_of: date, force: bool = False
) -> TargetConfiguration:
    """Return a configuration whose ``as_of`` month adjustment lists weekdays.

    Only an adjustment with an empty working-day set is rebuilt unless
    ``force`` is set. The input configuration is left untouched.
    """
    month = as_of.month - 1
    adjustments = list(config.monthly_adjustments)
    for index, adjustment in enumerate(adjustments):
        if adjustment.year != as_of.year or adjustment.month != month:
            continue
        if force or not adjustment.working_days:
            adjustments[index] = adjustment.model_copy(
                update={"working_days": frozenset(working_days_in_month(as_of.year, as_of.month))}
            )
        break
    return config.model_copy(update={"monthly_adjustments": tuple(adjustments)})
