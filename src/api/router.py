from __future__ import annotations

from fastapi import APIRouter

from src.api.attainment import router as attainment_router
from src.api.data_quality import router as data_quality_router
from src.api.health import router as health_router


api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(attainment_router)
api_router.include_router(data_quality_router)
