from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Any, Callable, Mapping, Protocol

from saas_admin_sdk.listing import DateRange

QUICK_FILTERS = ("last_24_hours", "last_7_days", "last_30_days")


@dataclass(frozen=True)
class FilterField:
    key: str
    label: str
    kind: str = "text"
    options: tuple[str, ...] = ()
    live: bool = False

    def empty_value(self) -> Any:
        return DateRange() if self.kind == "date_range" else ""


def empty_filters(fields: list[FilterField] | tuple[FilterField, ...]) -> dict[str, Any]:
    return {item.key: item.empty_value() for item in fields}


def clean_filters(filters: Mapping[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in filters.items():
        if value in (None, ""):
            continue
        if isinstance(value, DateRange) and value.is_empty:
            continue
        cleaned[key] = value.strip() if isinstance(value, str) else value
    return cleaned


class Cancellable(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], Cancellable]


def start_timer(delay: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


def quick_range(name: str, now: datetime | None = None) -> DateRange:
    current = now or datetime.now(timezone.utc)
    spans = {"last_24_hours": timedelta(hours=24), "last_7_days": timedelta(days=7), "last_30_days": timedelta(days=30)}
    if name not in spans:
        raise ValueError(f"unknown quick filter {name!r}")
    return DateRange(start=(current - spans[name]).date().isoformat(), end=current.date().isoformat())


@dataclass
class FilterPanel:
    """Draft filter values kept apart from the committed ones.

    Edits touch only the draft. ``apply`` commits it; ``clear`` commits the
    empty filter set. Fields marked ``live`` commit once typing pauses for
    ``debounce_ms``: each edit restarts the wait, so a burst of keystrokes
    produces a single commit carrying the last value.
    """

    fields: tuple[FilterField, ...]
    on_filter_change: Callable[[dict[str, Any]], None]
    debounce_ms: int = 350
    scheduler: Scheduler | None = None
    committed: dict[str, Any] = field(default_factory=dict)
    draft: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.committed:
            self.committed = empty_filters(self.fields)
        self.draft = dict(self.committed)
        self._lock = threading.Lock()
        self._generation: dict[str, int] = {}
        self._timers: dict[str, Cancellable] = {}

    def _field(self, key: str) -> FilterField:
        for item in self.fields:
            if item.key == key:
                return item
        raise KeyError(key)

    def sync(self, committed: Mapping[str, Any]) -> None:
        self.committed = {**empty_filters(self.fields), **dict(committed)}
        self.draft = dict(self.committed)

    def set_field(self, key: str, value: Any) -> None:
        spec = self._field(key)
        if spec.kind == "select" and value not in ("", None) and spec.options and value not in spec.options:
            raise ValueError(f"{value!r} is not an option for {key}")
        self.draft[key] = value
        if not spec.live:
            return
        if self.debounce_ms <= 0:
            self.apply()
            return
        with self._lock:
            generation = self._generation.get(key, 0) + 1
            self._generation[key] = generation
            previous = self._timers.pop(key, None)
            if previous is not None:
                previous.cancel()
            schedule = self.scheduler or start_timer
            self._timers[key] = schedule(self.debounce_ms / 1000, partial(self._settle, key, generation))

    def _settle(self, key: str, generation: int) -> None:
        with self._lock:
            if self._generation.get(key) != generation:
                return
            self._timers.pop(key, None)
        self.apply()

    @property
    def pending(self) -> bool:
        return bool(self._timers)

    def flush(self) -> bool:
        """Commit a waiting live edit now instead of at the end of its pause."""
        if not self._cancel_pending():
            return False
        self.apply()
        return True

    def _cancel_pending(self) -> bool:
        with self._lock:
            timers = list(self._timers.values())
            self._timers.clear()
            for key in self._generation:
                self._generation[key] += 1
        for timer in timers:
            timer.cancel()
        return bool(timers)

    def quick_filter(self, name: str, now: datetime | None = None) -> None:
        target = next((item for item in self.fields if item.kind == "date_range"), None)
        if target is None:
            raise ValueError("no date range field to apply a quick filter to")
        self.draft[target.key] = quick_range(name, now)

    def apply(self) -> dict[str, Any]:
        self._cancel_pending()
        self.committed = dict(self.draft)
        self.on_filter_change(dict(self.committed))
        return self.committed

    def clear(self) -> dict[str, Any]:
        self.draft = empty_filters(self.fields)
        return self.apply()

    @property
    def dirty(self) -> bool:
        return self.draft != self.committed

    @property
    def active_count(self) -> int:
        return len(clean_filters(self.committed))

    def render(self) -> dict[str, Any]:
        return {
            "fields": [
                {"key": item.key, "label": item.label, "kind": item.kind, "options": list(item.options), "live": item.live}
                for item in self.fields
            ],
            "draft": dict(self.draft),
            "dirty": self.dirty,
            "pending": self.pending,
            "active_count": self.active_count,
        }
