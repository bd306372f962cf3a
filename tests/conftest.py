from __future__ import annotations

import os

os.environ.setdefault("SUPABASE_URL", "http://localhost:54321")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")

from datetime import date
from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from src.api.dependencies import get_attainment_service
from src.main import create_app
from src.models.revenue import (
    DailyTargetPair,
    MonthlyAdjustment,
    RevenueRecord,
    TargetConfiguration,
)
from src.services.attainment_service import AttainmentService


WEEK_OF_MARCH_24 = [
    ("2025-03-24", 53000, 62500),
    ("2025-03-25", 55000, 60000),
    ("2025-03-26", 50000, 60000),
    ("2025-03-27", 48000, 53000),
    ("2025-03-28", 60000, 70000),
]


class StubRevenueRepository:
    def __init__(
        self,
        records: List[RevenueRecord],
        config: TargetConfiguration,
    ) -> None:
        self.records = records
        self.config = config
        self.requested_ranges: List[tuple] = []

    def list_revenue_records(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> List[RevenueRecord]:
        self.requested_ranges.append((start_date, end_date))
        return [
            record
            for record in self.records
            if (start_date is None or record.date >= start_date)
            and (end_date is None or record.date <= end_date)
        ]

    def get_target_configuration(self) -> TargetConfiguration:
        return self.config


@pytest.fixture()
def default_config() -> TargetConfiguration:
    return TargetConfiguration(
        default_daily_target=DailyTargetPair(location_a=53000, location_b=62500)
    )


@pytest.fixture()
def march_adjustment() -> MonthlyAdjustment:
    return MonthlyAdjustment(
        month=2, year=2025, working_days=[1, 3, 5], location_a_override=40000
    )


@pytest.fixture()
def week_records() -> List[RevenueRecord]:
    return [
        RevenueRecord(date=day, location_a_revenue=a, location_b_revenue=b)
        for day, a, b in WEEK_OF_MARCH_24
    ]


@pytest.fixture()
def stub_repository(week_records, default_config) -> StubRevenueRepository:
    return StubRevenueRepository(records=list(reversed(week_records)), config=default_config)


@pytest.fixture()
def client(stub_repository) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_attainment_service] = lambda: AttainmentService(
        repository=stub_repository
    )
    return TestClient(app)
