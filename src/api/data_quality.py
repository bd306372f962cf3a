from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.dependencies import get_attainment_service
from src.schemas.attainment import DataIntegrityReport, MissingDataReport
from src.services.attainment_service import AttainmentService
from src.shared.response import Meta, ResponseEnvelope, build_meta


router = APIRouter(prefix="/data-quality", tags=["data-quality"])


def _meta(as_of: date) -> Meta:
    return build_meta(as_of, "revenue_entries,monthly_target_adjustments", "all")


@router.get("/integrity")
def data_integrity(
    as_of: Optional[date] = Query(default=None, alias="as_of"),
    service: AttainmentService = Depends(get_attainment_service),
) -> ResponseEnvelope[DataIntegrityReport]:
    resolved = service.resolve_as_of(as_of)
    data = service.get_data_integrity(resolved)
    return ResponseEnvelope(data=data, meta=_meta(resolved))


@router.get("/missing-days")
def missing_data_days(
    as_of: Optional[date] = Query(default=None, alias="as_of"),
    service: AttainmentService = Depends(get_attainment_service),
) -> ResponseEnvelope[MissingDataReport]:
    resolved = service.resolve_as_of(as_of)
    data = service.get_missing_data_days(resolved)
    return ResponseEnvelope(data=data, meta=_meta(resolved))
