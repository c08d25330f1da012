from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field, replace
from typing import Any, Generic, TypeVar

from saas_admin_sdk.listing import Page

T = TypeVar("T")


@dataclass(frozen=True)
class Action:
    type: str
    payload: Any = None
    request_id: int | None = None
    meta: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AsyncState(Generic[T]):
    data: T | None = None
    loading: bool = False
    error: str | None = None
    trace_id: str | None = None
    latest_request_id: int = 0

    @property
    def status(self) -> str:
        if self.loading:
            return "loading"
        if self.error is not None:
            return "failure"
        if self.data is not None:
            return "success"
        return "idle"


class AsyncSlice:
    """Reducer and action creators for one remote resource.

    Every ``request`` gets a monotonic id; a ``success``/``failure`` answering
    an older request than the latest one is dropped.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._ids = itertools.count(1)
        self._ids_lock = threading.Lock()

    def type(self, suffix: str) -> str:
        return f"{self.name}/{suffix}"

    @property
    def initial_state(self) -> AsyncState[Any]:
        return AsyncState()

    def owns(self, action: Action) -> bool:
        return action.type.startswith(f"{self.name}/")

    def request(self, params: Any = None) -> Action:
        with self._ids_lock:
            request_id = next(self._ids)
        return Action(self.type("request"), params, request_id=request_id)

    def success(self, data: Any, request_id: int | None = None, trace_id: str | None = None) -> Action:
        return Action(self.type("success"), data, request_id=request_id, meta={"trace_id": trace_id})

    def failure(self, message: str, request_id: int | None = None, trace_id: str | None = None) -> Action:
        return Action(self.type("failure"), message, request_id=request_id, meta={"trace_id": trace_id})

    def clear_error(self) -> Action:
        return Action(self.type("clearError"))

    def patch_item(self, item_id: str, changes: dict[str, Any]) -> Action:
        return Action(self.type("patchItem"), {"id": item_id, "changes": dict(changes)})

    def is_stale(self, state: AsyncState[Any], action: Action) -> bool:
        return action.request_id is not None and action.request_id < state.latest_request_id

    def reduce(self, state: AsyncState[Any], action: Action) -> AsyncState[Any]:
        suffix = action.type[len(self.name) + 1 :]
        if suffix == "request":
            return replace(
                state,
                loading=True,
                error=None,
                latest_request_id=max(state.latest_request_id, action.request_id or 0),
            )
        if suffix == "success":
            if self.is_stale(state, action):
                return state
            return replace(state, data=action.payload, loading=False, error=None, trace_id=action.meta.get("trace_id"))
        if suffix == "failure":
            if self.is_stale(state, action):
                return state
            return replace(state, loading=False, error=str(action.payload), trace_id=action.meta.get("trace_id"))
        if suffix == "clearError":
            return replace(state, error=None)
        if suffix == "patchItem":
            return replace(state, data=_patch(state.data, action.payload["id"], action.payload["changes"]))
        return state


def _patch(data: Any, item_id: str, changes: dict[str, Any]) -> Any:
    if not isinstance(data, Page):
        return data
    for item in data.items:
        if getattr(item, "id", None) == item_id:
            return data.replace_item(item_id, item.model_copy(update=changes))
    return data
