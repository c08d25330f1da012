from __future__ import annotations

from datetime import datetime, timezone

import pytest

from saas_admin_console.ui.filters import FilterField, FilterPanel, clean_filters, empty_filters
from saas_admin_sdk.listing import DateRange

FIELDS = (
    FilterField("tenantName", "Tenant name"),
    FilterField("status", "Status", kind="select", options=("active", "suspended")),
    FilterField("dateRange", "Date range", kind="date_range"),
)


def _panel(emitted: list[dict], fields=FIELDS, **kwargs) -> FilterPanel:
    return FilterPanel(fields=fields, on_filter_change=emitted.append, **kwargs)


def test_edits_only_touch_the_draft_until_apply() -> None:
    emitted: list[dict] = []
    panel = _panel(emitted)

    panel.set_field("status", "active")

    assert emitted == []
    assert panel.dirty is True
    assert panel.committed["status"] == ""

    panel.apply()

    assert emitted == [{"tenantName": "", "status": "active", "dateRange": DateRange()}]
    assert panel.dirty is False


def test_apply_then_clear_returns_initial_filters() -> None:
    emitted: list[dict] = []
    panel = _panel(emitted)
    initial = dict(panel.committed)

    panel.set_field("tenantName", "Acme")
    panel.set_field("dateRange", DateRange(start="2024-01-01", end="2024-02-01"))
    panel.apply()
    panel.clear()

    assert emitted[-1] == initial == empty_filters(FIELDS)
    assert panel.draft == initial


def test_select_rejects_unknown_option() -> None:
    panel = _panel([])
    with pytest.raises(ValueError):
        panel.set_field("status", "archived")


def test_quick_filter_edits_draft_without_applying() -> None:
    emitted: list[dict] = []
    panel = _panel(emitted)

    panel.quick_filter("last_24_hours", now=datetime(2024, 3, 2, 9, 30, tzinfo=timezone.utc))

    assert emitted == []
    assert panel.draft["dateRange"] == DateRange(start="2024-03-01", end="2024-03-02")


class ManualScheduler:
    """Collects scheduled callbacks so tests decide when the pause ends."""

    def __init__(self) -> None:
        self.timers: list[ManualTimer] = []

    def __call__(self, delay: float, callback) -> "ManualTimer":
        timer = ManualTimer(delay, callback)
        self.timers.append(timer)
        return timer

    def fire_all(self) -> None:
        for timer in list(self.timers):
            timer.fire()


class ManualTimer:
    def __init__(self, delay: float, callback) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.cancelled:
            self.callback()


LIVE_FIELDS = (FilterField("searchTerm", "Search", live=True), FilterField("deletedBy", "Deleted by"))


def test_burst_of_keystrokes_commits_once_with_last_value() -> None:
    emitted: list[dict] = []
    scheduler = ManualScheduler()
    panel = _panel(emitted, fields=LIVE_FIELDS, scheduler=scheduler, debounce_ms=300)

    panel.set_field("deletedBy", "ops")
    for text in ("i", "in", "inv"):
        panel.set_field("searchTerm", text)

    assert emitted == []
    assert panel.pending is True
    assert [timer.delay for timer in scheduler.timers] == [0.3, 0.3, 0.3]
    assert [timer.cancelled for timer in scheduler.timers] == [True, True, False]

    scheduler.fire_all()

    assert emitted == [{"searchTerm": "inv", "deletedBy": "ops"}]
    assert panel.pending is False


def test_stale_timer_callback_is_ignored() -> None:
    emitted: list[dict] = []
    scheduler = ManualScheduler()
    panel = _panel(emitted, fields=LIVE_FIELDS, scheduler=scheduler, debounce_ms=300)

    panel.set_field("searchTerm", "i")
    panel.set_field("searchTerm", "in")
    # a timer thread that already woke up still calls back after being cancelled
    scheduler.timers[0].callback()

    assert emitted == []
    scheduler.timers[1].fire()
    assert emitted == [{"searchTerm": "in", "deletedBy": ""}]


def test_flush_commits_waiting_edit_immediately() -> None:
    emitted: list[dict] = []
    scheduler = ManualScheduler()
    panel = _panel(emitted, fields=LIVE_FIELDS, scheduler=scheduler, debounce_ms=300)

    assert panel.flush() is False
    panel.set_field("searchTerm", "acme")

    assert panel.flush() is True
    assert emitted == [{"searchTerm": "acme", "deletedBy": ""}]
    scheduler.fire_all()
    assert len(emitted) == 1


def test_explicit_apply_cancels_pending_live_commit() -> None:
    emitted: list[dict] = []
    scheduler = ManualScheduler()
    panel = _panel(emitted, fields=LIVE_FIELDS, scheduler=scheduler, debounce_ms=300)

    panel.set_field("searchTerm", "inv")
    panel.apply()
    scheduler.fire_all()

    assert emitted == [{"searchTerm": "inv", "deletedBy": ""}]


def test_zero_debounce_applies_on_every_edit() -> None:
    emitted: list[dict] = []
    panel = _panel(emitted, fields=LIVE_FIELDS, debounce_ms=0)

    panel.set_field("searchTerm", "i")
    panel.set_field("searchTerm", "in")

    assert [item["searchTerm"] for item in emitted] == ["i", "in"]



def test_sync_replaces_draft_with_committed_values() -> None:
    panel = _panel([])
    panel.set_field("tenantName", "draft only")

    panel.sync({"status": "suspended"})

    assert panel.draft == {"tenantName": "", "status": "suspended", "dateRange": DateRange()}


def test_clean_filters_drops_empty_values() -> None:
    assert clean_filters({"a": "", "b": None, "c": " x ", "d": DateRange(), "e": DateRange(start="2024-01-01")}) == {
        "c": "x",
        "e": DateRange(start="2024-01-01"),
    }
