from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Optional, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from src.core.errors import BadRequestError, DataValidationError


_ISO_DATE_PATTERN = re.compile(r"^(\d{4})-(\d{2})-(\d{2})$")


def parse_calendar_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string into a date.

    The string is split into year/month/day components and rebuilt as a
    plain ``date`` so no timezone or locale ever shifts the calendar day.
    """
    match = _ISO_DATE_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise DataValidationError(
            f"Invalid date format: {value!r} (expected YYYY-MM-DD)",
            details={"value": str(value)},
        )
    year, month, day = (int(part) for part in match.groups())
    try:
        return date(year, month, day)
    except ValueError as exc:
        raise DataValidationError(
            f"Invalid calendar date: {value!r}", details={"value": value}
        ) from exc


def business_today(timezone_name: str) -> date:
    try:
        zone = ZoneInfo(timezone_name)
    except ZoneInfoNotFoundError as exc:
        raise BadRequestError(f"Unknown business timezone: {timezone_name}") from exc
    return datetime.now(zone).date()


def resolve_as_of(as_of: Optional[date], timezone_name: str) -> date:
    return as_of if as_of is not None else business_today(timezone_name)


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """First and last day of a 1-based calendar month."""
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def iter_days(start: date, end: date):
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
