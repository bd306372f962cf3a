from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from src.core.config import get_settings
from src.core.errors import DataValidationError
from src.core.supabase import SupabaseClient
from src.models.revenue import (
    DailyTargetPair,
    MonthlyAdjustment,
    RevenueRecord,
    TargetConfiguration,
)


logger = logging.getLogger(__name__)


class RevenueRepository:
    def __init__(self, client: Optional[SupabaseClient] = None) -> None:
        self.client = client or SupabaseClient()

    def list_revenue_records(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> List[RevenueRecord]:
        filters: List[Tuple[str, str]] = []
        if start_date:
            filters.append(("date", f"gte.{start_date.isoformat()}"))
        if end_date:
            filters.append(("date", f"lte.{end_date.isoformat()}"))
        rows = self.client.select_all(
            table="revenue_entries",
            select="date,location_a_revenue,location_b_revenue",
            filters=filters,
            order="date.asc",
        )
        return [self._validate(RevenueRecord, row, "revenue_entries") for row in rows]

    def get_target_configuration(self) -> TargetConfiguration:
        settings_rows = self.client.select(
            table="target_settings",
            select="location_a_daily_target,location_b_daily_target",
            limit=1,
        )
        if settings_rows:
            row = settings_rows[0]
            default_target = self._validate(
                DailyTargetPair,
                {
                    "location_a": row.get("location_a_daily_target"),
                    "location_b": row.get("location_b_daily_target"),
                },
                "target_settings",
            )
        else:
            settings = get_settings()
            logger.info("No target_settings row found, using configured default targets")
            default_target = DailyTargetPair(
                location_a=settings.default_location_a_daily_target,
                location_b=settings.default_location_b_daily_target,
            )

        adjustment_rows = self.client.select_all(
            table="monthly_target_adjustments",
            select="month,year,working_days,location_a_override,location_b_override",
            order="year.asc,month.asc",
        )
        adjustments = [
            self._validate(MonthlyAdjustment, row, "monthly_target_adjustments")
            for row in adjustment_rows
        ]
        return TargetConfiguration(
            default_daily_target=default_target, monthly_adjustments=tuple(adjustments)
        )

    @staticmethod
    def _validate(model: Any, row: Dict[str, Any], table: str) -> Any:
        try:
            return model.model_validate(row)
        except ValidationError as exc:
            logger.warning("Rejected malformed %s row: %s", table, row)
            raise DataValidationError(
                f"Malformed row in {table}",
                details={"row": row, "errors": exc.errors(include_url=False, include_context=False)},
            ) from exc
