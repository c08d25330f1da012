from __future__ import annotations

import threading
from concurrent.futures import Executor, Future
from typing import Any, Callable

from ..logger import get_logger
from .async_state import Action, AsyncSlice, AsyncState

Listener = Callable[[Action, "Store"], None]
Worker = Callable[[Action, "Store"], None]

logger = get_logger(__name__)


class Store:
    """Single source of truth for every slice.

    Reducers run under a lock; subscribers and effects run after it is
    released so that effects may dispatch again.
    """

    def __init__(self, slices: list[AsyncSlice] | None = None, executor: Executor | None = None) -> None:
        self._lock = threading.Lock()
        self._slices: dict[str, AsyncSlice] = {}
        self._state: dict[str, AsyncState[Any]] = {}
        self._listeners: list[Listener] = []
        self._effects: dict[str, list[Worker]] = {}
        self._executor = executor
        self._pending: set[Future] = set()
        for slice_ in slices or []:
            self.add_slice(slice_)

    def add_slice(self, slice_: AsyncSlice) -> AsyncSlice:
        with self._lock:
            if slice_.name in self._slices:
                raise ValueError(f"slice {slice_.name!r} already registered")
            self._slices[slice_.name] = slice_
            self._state[slice_.name] = slice_.initial_state
        return slice_

    def get_state(self, name: str) -> AsyncState[Any]:
        with self._lock:
            return self._state[name]

    def snapshot(self) -> dict[str, AsyncState[Any]]:
        with self._lock:
            return dict(self._state)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def take_every(self, action_type: str, worker: Worker) -> None:
        with self._lock:
            self._effects.setdefault(action_type, []).append(worker)

    def dispatch(self, action: Action) -> Action:
        with self._lock:
            name = action.type.split("/", 1)[0]
            slice_ = self._slices.get(name)
            if slice_ is not None:
                self._state[name] = slice_.reduce(self._state[name], action)
            listeners = list(self._listeners)
            workers = list(self._effects.get(action.type, ()))
        for listener in listeners:
            listener(action, self)
        for worker in workers:
            self._run(worker, action)
        return action

    @property
    def pending(self) -> tuple[Future, ...]:
        """Effects still running on the executor."""
        with self._lock:
            return tuple(self._pending)

    def _run(self, worker: Worker, action: Action) -> None:
        if self._executor is None:
            worker(action, self)
            return
        future = self._executor.submit(worker, action, self)
        with self._lock:
            self._pending.add(future)
        # runs at once when the future already finished
        future.add_done_callback(lambda done: self._report(action, done))

    def _report(self, action: Action, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)
        exc = future.exception()
        if exc is not None:
            logger.error("effect for %s raised %r", action.type, exc)
