from __future__ import annotations

from typing import Mapping

from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ServerError,
    ServiceUnavailableError,
    ValidationError,
)

STATUS_ERRORS: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthError,
    403: PermissionError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
    503: ServiceUnavailableError,
}

FALLBACK_MESSAGE = "Request failed"


def error_class(status_code: int) -> type[ApiError]:
    if status_code in STATUS_ERRORS:
        return STATUS_ERRORS[status_code]
    return ServerError if status_code >= 500 else ApiError


def _message(payload: Mapping[str, object]) -> str:
    candidates = (payload.get(key) for key in ("message", "error", "detail"))
    return next((value.strip() for value in candidates if isinstance(value, str) and value.strip()), FALLBACK_MESSAGE)


def map_error(status_code: int, payload: Mapping[str, object] | None, trace_id: str | None) -> ApiError:
    """Turn a non-2xx response into the matching ``ApiError`` subclass.

    A ``trace_id`` in the body beats the one taken from headers.
    """
    body = dict(payload or {})
    body_trace = body.get("trace_id")
    return error_class(status_code)(
        code=str(body.get("code") or "HTTP_ERROR"),
        message=_message(body),
        details=body.get("details"),
        trace_id=str(body_trace) if body_trace is not None else trace_id,
        status_code=status_code,
        raw_payload=body,
    )
