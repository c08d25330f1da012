from __future__ import annotations

from typing import Any, Callable

from saas_admin_sdk.exceptions import ApiError

from ..error_presenter import user_message
from ..logger import get_logger, log_action
from .async_state import Action, AsyncSlice
from .store import Store, Worker

logger = get_logger(__name__)


def fetch_effect(slice_: AsyncSlice, fetcher: Callable[[Any], Any]) -> Worker:
    """One call per request; every outcome becomes a success or failure action."""

    def worker(action: Action, store: Store) -> None:
        log_action(logger, slice_.name, "fetch", "request", request_id=action.request_id)
        try:
            data = fetcher(action.payload)
        except Exception as exc:
            trace_id = exc.trace_id if isinstance(exc, ApiError) else None
            log_action(
                logger,
                slice_.name,
                "fetch",
                "failure",
                trace_id=trace_id,
                request_id=action.request_id,
                error=type(exc).__name__,
                status_code=getattr(exc, "status_code", None),
            )
            store.dispatch(slice_.failure(user_message(exc), request_id=action.request_id, trace_id=trace_id))
            return
        log_action(logger, slice_.name, "fetch", "success", request_id=action.request_id)
        store.dispatch(slice_.success(data, request_id=action.request_id))

    return worker


def register_fetch(store: Store, slice_: AsyncSlice, fetcher: Callable[[Any], Any]) -> None:
    store.take_every(slice_.type("request"), fetch_effect(slice_, fetcher))
