from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from saas_admin_sdk.error_mapper import FALLBACK_MESSAGE
from saas_admin_sdk.exceptions import ApiError, AuthError, TransportError

NOT_FOUND_MESSAGE = "The requested resource was not found."
UNAVAILABLE_MESSAGE = "The service is temporarily unavailable. Please try again later."
TRANSPORT_MESSAGE = "Unable to reach the server. Check your connection and try again."
SESSION_EXPIRED_MESSAGE = "Your session has expired. Please sign in again."
GENERIC_MESSAGE = "Something went wrong. Please try again."


@dataclass(frozen=True)
class PresentedError:
    category: str
    message: str
    trace_id: str | None = None
    safe_to_retry: bool = False

    def render(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "message": self.message,
            "trace_id": self.trace_id,
            "retry": self.safe_to_retry,
        }


def user_message(error: BaseException) -> str:
    """Text shown to the operator for a failed call."""
    if isinstance(error, TransportError):
        return TRANSPORT_MESSAGE
    if not isinstance(error, ApiError):
        return GENERIC_MESSAGE
    if error.status_code == 404:
        return NOT_FOUND_MESSAGE
    if error.status_code == 503:
        return UNAVAILABLE_MESSAGE
    if isinstance(error, AuthError) or error.status_code == 401:
        return SESSION_EXPIRED_MESSAGE
    message = (error.message or "").strip()
    if message and message != FALLBACK_MESSAGE:
        return message
    return GENERIC_MESSAGE


def present_error(error: BaseException) -> PresentedError:
    if not isinstance(error, ApiError):
        return PresentedError(category="internal", message=user_message(error))
    category = _classify(error)
    return PresentedError(
        category=category,
        message=user_message(error),
        trace_id=error.trace_id,
        safe_to_retry=category in {"transport", "unavailable", "server", "rate_limited"},
    )


def _classify(error: ApiError) -> str:
    if isinstance(error, TransportError) or error.status_code == 0:
        return "transport"
    if error.status_code == 401:
        return "auth"
    if error.status_code == 403:
        return "permission"
    if error.status_code == 404:
        return "not_found"
    if error.status_code in {400, 422}:
        return "validation"
    if error.status_code == 409:
        return "conflict"
    if error.status_code == 429:
        return "rate_limited"
    if error.status_code == 503:
        return "unavailable"
    if error.status_code and error.status_code >= 500:
        return "server"
    return "api"
