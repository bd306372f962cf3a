from __future__ import annotations

from fastapi import APIRouter

from src.core.config import get_settings
from src.shared.response import Meta, ResponseEnvelope, build_meta
from src.shared.time import business_today


router = APIRouter(tags=["health"])


def _system_meta() -> Meta:
    settings = get_settings()
    return build_meta(business_today(settings.business_timezone), "system", "now", stamp=False)


@router.get("/health")
def health_check() -> ResponseEnvelope[dict]:
    settings = get_settings()
    return ResponseEnvelope(
        data={"status": "ok", "environment": settings.environment}, meta=_system_meta()
    )


@router.get("/healthz")
def health_check_liveness() -> ResponseEnvelope[dict]:
    return ResponseEnvelope(data={"status": "ok"}, meta=_system_meta())
