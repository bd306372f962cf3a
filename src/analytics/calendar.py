from __future__ import annotations

from datetime import date
from typing import List

from src.shared.time import iter_days, month_bounds


def is_working_day(value: date) -> bool:
    """Generic weekday rule; monthly adjustments are resolved elsewhere."""
    return value.weekday() < 5


def count_working_days(start: date, end: date) -> int:
    return sum(1 for day in iter_days(start, end) if is_working_day(day))


def working_days_in_month(year: int, month: int) -> List[int]:
    """Weekday day-of-month numbers for a 1-based calendar month."""
    first_day, last_day = month_bounds(year, month)
    return [day.day for day in iter_days(first_day, last_day) if is_working_day(day)]
