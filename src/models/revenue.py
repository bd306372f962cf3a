from __future__ import annotations

from datetime import date
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from src.core.errors import DataValidationError
from src.shared.time import days_in_month, parse_calendar_date


class TimeFrame(str, Enum):
    MTD = "MTD"
    THIS_WEEK = "this_week"
    LAST_30 = "last30"
    LAST_90 = "last90"
    YTD = "YTD"
    ALL_TIME = "all"
    CUSTOM = "custom"


class Location(str, Enum):
    LOCATION_A = "location_a"
    LOCATION_B = "location_b"
    COMBINED = "combined"


class RevenueRecord(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    date: date
    location_a_revenue: float = 0.0
    location_b_revenue: float = 0.0

    @field_validator("date", mode="before")
    @classmethod
    def _parse_iso_date(cls, value: object) -> object:
        if isinstance(value, str):
            try:
                return parse_calendar_date(value)
            except DataValidationError as exc:
                raise ValueError(exc.message) from exc
        return value

    @field_validator("location_a_revenue", "location_b_revenue", mode="before")
    @classmethod
    def _missing_revenue_is_zero(cls, value: object) -> object:
        return 0.0 if value is None else value

    @property
    def combined_revenue(self) -> float:
        return self.location_a_revenue + self.location_b_revenue


class DailyTargetPair(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    location_a: float = Field(..., ge=0)
    location_b: float = Field(..., ge=0)


class ResolvedTarget(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    location_a: float = Field(default=0.0, ge=0)
    location_b: float = Field(default=0.0, ge=0)

    @property
    def combined(self) -> float:
        return self.location_a + self.location_b

    @property
    def is_working_day(self) -> bool:
        return self.location_a > 0 or self.location_b > 0


class MonthlyAdjustment(BaseModel):
    """Per-month override of working days and, optionally, daily targets.

    ``month`` is zero-based (0 = January) to match how adjustments are stored.
    """

    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    month: int = Field(..., ge=0, le=11)
    year: int = Field(..., ge=1, le=9999)
    working_days: FrozenSet[int] = frozenset()
    location_a_override: Optional[float] = Field(default=None, ge=0)
    location_b_override: Optional[float] = Field(default=None, ge=0)

    @field_validator("working_days", mode="before")
    @classmethod
    def _missing_days_are_empty(cls, value: object) -> object:
        return frozenset() if value is None else value

    @model_validator(mode="after")
    def _check_working_days(self) -> "MonthlyAdjustment":
        last_day = days_in_month(self.year, self.month + 1)
        invalid = sorted(day for day in self.working_days if day < 1 or day > last_day)
        if invalid:
            raise ValueError(
                f"Working days {invalid} are outside 1..{last_day} "
                f"for month {self.month} of {self.year}"
            )
        return self


class TargetConfiguration(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    default_daily_target: DailyTargetPair
    monthly_adjustments: Tuple[MonthlyAdjustment, ...] = ()
