from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    """Any failed call against the admin API, mapped from status and payload."""

    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        suffix = f" (trace {self.trace_id})" if self.trace_id else ""
        return f"{self.code} {self.status_code}: {self.message}{suffix}"


class AuthError(ApiError):
    """401: the token is missing, expired or revoked."""


class PermissionError(ApiError):
    """403: signed in, but not as a super admin."""


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    """400/422. ``details`` may carry per-field messages."""


class ConflictError(ApiError):
    pass


class RateLimitError(ApiError):
    pass


class ServerError(ApiError):
    """Any 5xx."""


class ServiceUnavailableError(ServerError):
    pass


class TransportError(ApiError):
    """No HTTP response at all: DNS, connect, TLS or timeout."""
