from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Any, Callable, Mapping, NoReturn
from urllib.parse import urljoin

import requests
from requests.adapters import HTTPAdapter

from .config import ClientConfig
from .error_mapper import map_error
from .exceptions import ApiError, TransportError

TRACE_HEADER = "X-Trace-ID"
TRACE_HEADER_ALIASES = (TRACE_HEADER, "X-Trace-Id", "x-trace-id", "X-Request-ID")
IDEMPOTENT_METHODS = frozenset({"GET", "HEAD"})

AuthErrorHandler = Callable[[ApiError], None]
ProgressCallback = Callable[[int], None]


@dataclass
class TraceContext:
    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = str(uuid.uuid4())
        return self.trace_id

    def absorb(self, headers: Mapping[str, str], payload: object = None) -> None:
        if isinstance(payload, dict) and isinstance(payload.get("trace_id"), str) and payload["trace_id"]:
            self.trace_id = payload["trace_id"]
            return
        for key in TRACE_HEADER_ALIASES:
            trace_id = headers.get(key)
            if trace_id:
                self.trace_id = trace_id
                return


class _ProgressReader:
    """File-like body that reports upload progress as a whole percentage."""

    def __init__(self, body: bytes, on_progress: ProgressCallback | None) -> None:
        self._body = body
        self._offset = 0
        self._on_progress = on_progress
        self.last_reported = -1

    def __len__(self) -> int:
        return len(self._body)

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            size = len(self._body) - self._offset
        chunk = self._body[self._offset : self._offset + size]
        self._offset += len(chunk)
        self.report()
        return chunk

    def report(self, done: bool = False) -> None:
        if not self._on_progress:
            return
        total = len(self._body)
        percent = 100 if done or total == 0 else int(self._offset * 100 / total)
        if percent != self.last_reported:
            self.last_reported = percent
            self._on_progress(percent)


@dataclass
class HttpClient:
    """Thin ``requests`` wrapper that owns trace propagation and error mapping.

    Only idempotent verbs are retried, on transport failures and 5xx, with
    exponential backoff. A 401 is reported through ``on_auth_error`` before
    it is raised so the console can drop the session.
    """

    config: ClientConfig
    trace: TraceContext | None = None
    session: requests.Session | None = None
    on_auth_error: AuthErrorHandler | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = self._pooled_session()

    def _pooled_session(self) -> requests.Session:
        pool = HTTPAdapter(pool_connections=self.config.max_connections, pool_maxsize=self.config.max_connections)
        session = requests.Session()
        for scheme in ("http://", "https://"):
            session.mount(scheme, pool)
        return session

    @property
    def _timeout(self) -> tuple[float, float]:
        return self.config.connect_timeout_seconds, self.config.read_timeout_seconds

    def build_url(self, path: str) -> str:
        return urljoin(self.config.api_base_url.rstrip("/") + "/", path.lstrip("/"))

    def request(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> dict[str, Any] | list[Any] | None:
        response = self._send(method, path, headers=headers, json_body=json_body, params=params, accept="application/json")
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                code="INVALID_RESPONSE",
                message="Response body is not valid JSON",
                details={"content_type": response.headers.get("Content-Type")},
                trace_id=self._trace().trace_id,
                status_code=response.status_code,
            ) from exc

    def request_bytes(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
    ) -> bytes:
        return self._send(method, path, headers=headers, json_body=json_body, params=params, accept="*/*").content

    def put_bytes(
        self,
        url: str,
        body: bytes,
        *,
        content_type: str,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        """PUT raw bytes to a presigned object-store URL (no bearer token)."""
        reader = _ProgressReader(body, on_progress)
        try:
            response = self._session().put(
                url,
                data=reader,
                headers={"Content-Type": content_type, "Content-Length": str(len(body))},
                timeout=self._timeout,
                verify=self.config.verify_ssl,
            )
        except requests.RequestException as exc:
            raise _transport_error("UPLOAD_FAILED", exc, None) from exc
        if not response.ok:
            raise map_error(response.status_code, {"message": response.text or "Upload rejected", "code": "UPLOAD_FAILED"}, None)
        reader.report(done=True)

    def _session(self) -> requests.Session:
        if self.session is None:
            raise RuntimeError("HttpClient has no session")
        return self.session

    def _trace(self) -> TraceContext:
        if self.trace is None:
            self.trace = TraceContext()
        return self.trace

    def _send(
        self,
        method: str,
        path: str,
        *,
        headers: dict[str, str] | None,
        json_body: dict[str, Any] | None,
        params: dict[str, Any] | None,
        accept: str,
    ) -> requests.Response:
        verb = method.upper()
        trace = self._trace()
        sent_headers = {"Accept": accept, TRACE_HEADER: trace.ensure(), **(headers or {})}
        kwargs = {
            "method": verb,
            "url": self.build_url(path),
            "headers": sent_headers,
            "json": json_body,
            "params": params,
            "timeout": self._timeout,
            "verify": self.config.verify_ssl,
        }
        tries = 1 + self.config.retries if verb in IDEMPOTENT_METHODS else 1
        response = self._attempt(kwargs, tries, trace)
        if response.ok:
            trace.absorb(response.headers)
            return response
        self._raise_for_status(response, trace)

    def _attempt(self, kwargs: dict[str, Any], tries: int, trace: TraceContext) -> requests.Response:
        session = self._session()
        attempt = 0
        while True:
            last = attempt == tries - 1
            try:
                response = session.request(**kwargs)
            except requests.RequestException as exc:
                if last:
                    raise _transport_error("TRANSPORT_ERROR", exc, trace.trace_id) from exc
            else:
                if last or response.status_code < 500:
                    return response
            time.sleep(self.config.retry_backoff_seconds * 2**attempt)
            attempt += 1

    def _raise_for_status(self, response: requests.Response, trace: TraceContext) -> NoReturn:
        try:
            payload = response.json()
        except ValueError:
            payload = {"message": response.text}
        if not isinstance(payload, dict):
            payload = {"details": payload}
        trace.absorb(response.headers, payload)
        error = map_error(response.status_code, payload, trace.trace_id)
        if error.status_code == 401 and self.on_auth_error is not None:
            self.on_auth_error(error)
        raise error


def _transport_error(code: str, exc: requests.RequestException, trace_id: str | None) -> TransportError:
    return TransportError(
        code=code,
        message=str(exc),
        details={"type": type(exc).__name__},
        trace_id=trace_id,
        status_code=0,
    )
