from __future__ import annotations

import pytest
import requests
import responses

from saas_admin_sdk.error_mapper import map_error
from saas_admin_sdk.exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionError,
    RateLimitError,
    ServerError,
    ServiceUnavailableError,
    TransportError,
    ValidationError,
)
from saas_admin_sdk.http_client import TRACE_HEADER, HttpClient, TraceContext

BASE_URL = "https://api.example.com"


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (400, ValidationError),
        (401, AuthError),
        (403, PermissionError),
        (404, NotFoundError),
        (409, ConflictError),
        (422, ValidationError),
        (429, RateLimitError),
        (500, ServerError),
        (503, ServiceUnavailableError),
        (418, ApiError),
    ],
)
def test_map_error_picks_subclass(status: int, expected: type) -> None:
    error = map_error(status, {"message": "boom", "code": "X"}, "trace-1")
    assert type(error) is expected
    assert error.message == "boom"
    assert error.trace_id == "trace-1"


def test_map_error_reads_error_and_detail_keys() -> None:
    assert map_error(400, {"error": "bad input"}, None).message == "bad input"
    assert map_error(400, {"detail": "nope"}, None).message == "nope"
    assert map_error(400, {}, None).message == "Request failed"


@responses.activate
def test_request_sends_trace_header_and_absorbs_response_trace(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/tenants",
        json={"data": []},
        headers={TRACE_HEADER: "server-trace"},
        status=200,
    )

    http.request("GET", "/tenants")

    sent = responses.calls[0].request.headers
    assert sent[TRACE_HEADER]
    assert sent["Accept"] == "application/json"
    assert http.trace.trace_id == "server-trace"


@responses.activate
def test_not_found_raises_mapped_error(http: HttpClient) -> None:
    responses.add(responses.GET, f"{BASE_URL}/tenants/missing", json={"message": "Tenant not found"}, status=404)

    with pytest.raises(NotFoundError) as exc_info:
        http.request("GET", "/tenants/missing")

    assert exc_info.value.status_code == 404
    assert exc_info.value.message == "Tenant not found"


@responses.activate
def test_get_is_not_retried_by_default(http: HttpClient) -> None:
    responses.add(responses.GET, f"{BASE_URL}/tenants", json={"message": "down"}, status=503)

    with pytest.raises(ServiceUnavailableError):
        http.request("GET", "/tenants")

    assert len(responses.calls) == 1


@responses.activate
def test_get_retries_when_configured(http: HttpClient) -> None:
    object.__setattr__(http.config, "retries", 1)
    object.__setattr__(http.config, "retry_backoff_seconds", 0)
    responses.add(responses.GET, f"{BASE_URL}/tenants", json={"message": "down"}, status=503)
    responses.add(responses.GET, f"{BASE_URL}/tenants", json={"data": []}, status=200)

    assert http.request("GET", "/tenants") == {"data": []}
    assert len(responses.calls) == 2


@responses.activate
def test_transport_failure_raises_transport_error(http: HttpClient) -> None:
    responses.add(responses.GET, f"{BASE_URL}/tenants", body=requests.ConnectionError("refused"))

    with pytest.raises(TransportError) as exc_info:
        http.request("GET", "/tenants")

    assert exc_info.value.status_code == 0


@responses.activate
def test_invalid_json_raises_invalid_response(http: HttpClient) -> None:
    responses.add(responses.GET, f"{BASE_URL}/tenants", body="<html>", status=200, content_type="text/html")

    with pytest.raises(ApiError) as exc_info:
        http.request("GET", "/tenants")

    assert exc_info.value.code == "INVALID_RESPONSE"


@responses.activate
def test_unauthorized_calls_auth_error_handler(config) -> None:
    seen: list[ApiError] = []
    http = HttpClient(config, trace=TraceContext(), on_auth_error=seen.append)
    responses.add(responses.GET, f"{BASE_URL}/tenants", json={"message": "expired"}, status=401)

    with pytest.raises(AuthError):
        http.request("GET", "/tenants")

    assert len(seen) == 1
    assert seen[0].status_code == 401


@responses.activate
def test_put_bytes_reports_progress_without_auth_header(http: HttpClient) -> None:
    upload_url = "https://storage.example.com/bucket/key?signature=abc"
    responses.add(responses.PUT, upload_url, status=200)
    progress: list[int] = []

    http.put_bytes(upload_url, b"x" * 1024, content_type="application/pdf", on_progress=progress.append)

    request = responses.calls[0].request
    assert "Authorization" not in request.headers
    assert request.headers["Content-Type"] == "application/pdf"
    assert progress[-1] == 100
    assert progress == sorted(progress)


@responses.activate
def test_put_bytes_rejected_upload_raises(http: HttpClient) -> None:
    upload_url = "https://storage.example.com/bucket/key"
    responses.add(responses.PUT, upload_url, body="AccessDenied", status=403)

    with pytest.raises(PermissionError):
        http.put_bytes(upload_url, b"data", content_type="text/plain")
