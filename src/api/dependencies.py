from __future__ import annotations

from functools import lru_cache

from src.repositories.revenue_repository import RevenueRepository
from src.services.attainment_service import AttainmentService


@lru_cache
def get_revenue_repository() -> RevenueRepository:
    return RevenueRepository()


def get_attainment_service() -> AttainmentService:
    return AttainmentService(repository=get_revenue_repository())
