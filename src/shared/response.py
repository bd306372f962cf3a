from __future__ import annotations

from datetime import date, datetime, timezone
from math import ceil
from typing import Generic, Optional, Sequence, TypeVar

from src.shared.base import BaseSchema


T = TypeVar("T")

CALCULATION_VERSION = "v1"


class Pagination(BaseSchema):
    page: int
    page_size: int
    total_items: int
    total_pages: int


class Meta(BaseSchema):
    as_of_date: str
    source: str
    time_window: str
    calculation_version: str
    generated_at: Optional[str] = None


class ResponseEnvelope(BaseSchema, Generic[T]):
    data: T
    pagination: Optional[Pagination] = None
    meta: Optional[Meta] = None


def build_meta(as_of: date, source: str, time_window: str, stamp: bool = True) -> Meta:
    """Response metadata; ``as_of`` is the business date the figures run up to."""
    return Meta(
        as_of_date=as_of.isoformat(),
        source=source,
        time_window=time_window,
        calculation_version=CALCULATION_VERSION,
        generated_at=datetime.now(timezone.utc).isoformat() if stamp else None,
    )


def build_pagination(page: int, page_size: int, total_items: int) -> Pagination:
    total_pages = ceil(total_items / page_size) if page_size else 0
    return Pagination(
        page=page,
        page_size=page_size,
        total_items=total_items,
        total_pages=total_pages,
    )


def paginate_list(items: Sequence[T], page: int, page_size: int) -> tuple[list[T], Pagination]:
    total_items = len(items)
    pagination = build_pagination(page, page_size, total_items)
    start_index = (page - 1) * page_size
    return list(items[start_index : start_index + page_size]), pagination
