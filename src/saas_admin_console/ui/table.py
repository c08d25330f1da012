from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable

from pydantic.alias_generators import to_camel

EMPTY_VALUE = "—"
SENSITIVE_KEYS = {"token", "secret", "password", "authorization"}
EMPTY_MESSAGE = "No records found."

RowPredicate = Callable[[Any, date], bool]

BADGE_COLORS = {
    "active": "green",
    "paid": "green",
    "trial": "blue",
    "pending": "yellow",
    "unpaid": "yellow",
    "suspended": "orange",
    "overdue": "red",
    "deactivated": "red",
    "locked": "red",
    "subscription_cancelled": "gray",
    "unverified": "gray",
}


@dataclass(frozen=True)
class ColumnDef:
    key: str
    label: str
    sortable: bool = True
    badge: bool = False
    value: Callable[[Any, date], Any] | None = None

    @property
    def sort_key(self) -> str:
        return to_camel(self.key)


def _always(_entity: Any, _today: date) -> bool:
    return True


@dataclass(frozen=True)
class RowAction:
    name: str
    label: str
    visible: RowPredicate = _always


def toggle_sort(current_by: str, current_order: str, field_key: str) -> tuple[str, str]:
    if current_by == field_key:
        return field_key, "desc" if current_order == "asc" else "asc"
    return field_key, "asc"


def badge_color(status: Any) -> str:
    return BADGE_COLORS.get(str(status or "").lower(), "gray")


def normalize_value(value: Any) -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, str):
        clean = value.strip()
        return clean or EMPTY_VALUE
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, float):
        return f"{value:,.2f}"
    if isinstance(value, datetime):
        return value.astimezone().strftime("%Y-%m-%d %H:%M:%S %z")
    return str(value)


def cell_value(entity: Any, column: ColumnDef, today: date | None = None) -> Any:
    if column.value is not None:
        return column.value(entity, today or date.today())
    if isinstance(entity, dict):
        return entity.get(column.key)
    return getattr(entity, column.key, None)


def sanitize_row(row: dict[str, Any], headers: list[str]) -> dict[str, str]:
    sanitized: dict[str, str] = {}
    for header in headers:
        if any(token in header.lower() for token in SENSITIVE_KEYS):
            sanitized[header] = EMPTY_VALUE
            continue
        sanitized[header] = normalize_value(row.get(header))
    return sanitized


@dataclass(frozen=True)
class TableRow:
    key: str
    cells: dict[str, str]
    badges: dict[str, str]
    actions: tuple[str, ...]
    entity: Any


@dataclass(frozen=True)
class TableView:
    mode: str
    columns: tuple[ColumnDef, ...]
    rows: tuple[TableRow, ...] = ()
    skeleton_rows: int = 0
    sort_by: str = ""
    sort_order: str = "asc"
    loading: bool = False
    empty_message: str = EMPTY_MESSAGE
    headers: tuple[str, ...] = ()


def render_table(
    *,
    rows: tuple[Any, ...] | list[Any],
    loading: bool,
    limit: int,
    columns: tuple[ColumnDef, ...],
    actions: tuple[RowAction, ...] = (),
    sort_by: str = "",
    sort_order: str = "asc",
    empty_message: str = EMPTY_MESSAGE,
    today: date | None = None,
) -> TableView:
    """Skeleton while the first page loads, then empty or populated rows.

    Stale rows stay visible during a background refetch. ``today`` feeds
    date-dependent cells and action gates so they agree with the page clock.
    """
    today = today or date.today()
    base = {
        "columns": columns,
        "sort_by": sort_by,
        "sort_order": sort_order,
        "loading": loading,
        "empty_message": empty_message,
        "headers": tuple(column.label for column in columns),
    }
    if loading and not rows:
        return TableView(mode="skeleton", skeleton_rows=limit, **base)
    if not rows:
        return TableView(mode="empty", **base)

    rendered = []
    for entity in rows:
        values = {column.key: cell_value(entity, column, today) for column in columns}
        rendered.append(
            TableRow(
                key=str(getattr(entity, "id", "")),
                cells={key: normalize_value(value) for key, value in values.items()},
                badges={column.key: badge_color(values[column.key]) for column in columns if column.badge},
                actions=tuple(action.name for action in actions if action.visible(entity, today)),
                entity=entity,
            )
        )
    return TableView(mode="rows", rows=tuple(rendered), **base)
