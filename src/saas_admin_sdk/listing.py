from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from typing import Any, Generic, Mapping, TypeVar

from pydantic import BaseModel

from .error_mapper import FALLBACK_MESSAGE
from .exceptions import ApiError

logger = logging.getLogger(__name__)

T = TypeVar("T")

FilterValue = Any


@dataclass(frozen=True)
class DateRange:
    start: str = ""
    end: str = ""

    @property
    def is_empty(self) -> bool:
        return not self.start and not self.end


def total_pages(total: int, limit: int) -> int:
    if limit <= 0:
        raise ValueError("limit must be > 0")
    return max(1, math.ceil(max(0, total) / limit))


@dataclass(frozen=True)
class ListQuery:
    page: int = 1
    limit: int = 10
    sort_by: str = ""
    sort_order: str = "asc"
    filters: Mapping[str, FilterValue] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.limit <= 0:
            raise ValueError("limit must be > 0")
        if self.page < 1:
            object.__setattr__(self, "page", 1)
        if self.sort_order not in {"asc", "desc"}:
            raise ValueError(f"sort_order must be 'asc' or 'desc', got {self.sort_order!r}")

    def with_page(self, page: int) -> "ListQuery":
        return replace(self, page=max(1, page))

    def with_limit(self, limit: int) -> "ListQuery":
        return replace(self, limit=limit, page=1)

    def with_sort(self, sort_by: str, sort_order: str) -> "ListQuery":
        return replace(self, sort_by=sort_by, sort_order=sort_order, page=1)

    def with_filters(self, filters: Mapping[str, FilterValue]) -> "ListQuery":
        return replace(self, filters=dict(filters), page=1)

    def clamped(self, pages: int) -> "ListQuery":
        return replace(self, page=min(max(1, self.page), max(1, pages)))

    def to_params(self, aliases: Mapping[str, str] | None = None) -> dict[str, Any]:
        aliases = aliases or {}
        params: dict[str, Any] = {"page": self.page, "limit": self.limit}
        if self.sort_by:
            params["sortBy"] = self.sort_by
            params["sortOrder"] = self.sort_order
        for key, value in self.filters.items():
            if isinstance(value, DateRange):
                if value.start:
                    params["startDate"] = value.start
                if value.end:
                    params["endDate"] = value.end
                continue
            if value in (None, ""):
                continue
            params[aliases.get(key, key)] = value
        return params


@dataclass(frozen=True)
class Page(Generic[T]):
    items: tuple[T, ...] = ()
    page: int = 1
    limit: int = 10
    total: int = 0

    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.limit)

    def replace_item(self, key: str, item: T) -> "Page[T]":
        items = tuple(item if getattr(existing, "id", None) == key else existing for existing in self.items)
        return replace(self, items=items)


def normalize_page(
    payload: Any,
    *,
    page: int = 1,
    limit: int = 10,
    model: type[BaseModel] | None = None,
    items_key: str | None = None,
) -> Page[Any]:
    """Fold the backend's list envelopes into one ``Page`` shape."""
    rows: list[Any] = []
    meta: dict[str, Any] = {}

    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        if payload.get("success") is False:
            raise ApiError(
                code="REQUEST_FAILED",
                message=str(payload.get("message") or payload.get("error") or FALLBACK_MESSAGE),
                details=payload.get("details"),
                trace_id=payload.get("trace_id"),
                status_code=200,
                raw_payload=payload,
            )
        for key in (items_key, "data", "items", "rows"):
            if key and isinstance(payload.get(key), list):
                rows = payload[key]
                break
        for key in ("meta", "pagination"):
            if isinstance(payload.get(key), dict):
                meta = payload[key]
                break

    safe_limit = _to_int(meta.get("limit")) or _to_int(meta.get("pageSize")) or max(1, int(limit))
    safe_page = _to_int(meta.get("page")) or _to_int(meta.get("currentPage")) or max(1, int(page))
    total = _to_int(meta.get("total"))
    if total is None:
        total = _to_int(meta.get("totalItems"))
    if total is None:
        total = len(rows)

    items = [model.model_validate(row) for row in rows if isinstance(row, dict)] if model else list(rows)
    if len(items) > safe_limit:
        dropped = len(items) - safe_limit
        logger.warning("list response returned %d rows for limit %d; dropping %d", len(items), safe_limit, dropped)
    return Page(items=tuple(items[:safe_limit]), page=safe_page, limit=safe_limit, total=max(0, total))


def _to_int(value: Any) -> int | None:
    try:
        if value is None or value == "" or isinstance(value, bool):
            return None
        return int(value)
    except (TypeError, ValueError):
        return None
