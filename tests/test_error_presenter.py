from __future__ import annotations

import json
import logging

import pytest

from saas_admin_console.error_presenter import (
    GENERIC_MESSAGE,
    NOT_FOUND_MESSAGE,
    SESSION_EXPIRED_MESSAGE,
    TRANSPORT_MESSAGE,
    UNAVAILABLE_MESSAGE,
    present_error,
    user_message,
)
from saas_admin_console.logger import get_logger, log_action
from saas_admin_console.notifications import NotificationCenter
from saas_admin_sdk.error_mapper import map_error
from saas_admin_sdk.exceptions import TransportError


@pytest.mark.parametrize(
    ("status", "payload", "expected"),
    [
        (404, {"message": "Invoice 9 missing"}, NOT_FOUND_MESSAGE),
        (503, {"message": "maintenance"}, UNAVAILABLE_MESSAGE),
        (401, {"message": "jwt expired"}, SESSION_EXPIRED_MESSAGE),
        (409, {"message": "Tenant already deactivated"}, "Tenant already deactivated"),
        (500, {}, GENERIC_MESSAGE),
    ],
)
def test_user_message_by_status(status: int, payload: dict, expected: str) -> None:
    assert user_message(map_error(status, payload, None)) == expected


def test_user_message_for_transport_and_unknown_errors() -> None:
    transport = TransportError(code="TRANSPORT_ERROR", message="refused", details=None, trace_id=None, status_code=0)
    assert user_message(transport) == TRANSPORT_MESSAGE
    assert user_message(RuntimeError("boom")) == GENERIC_MESSAGE


def test_present_error_marks_transient_errors_retryable() -> None:
    unavailable = present_error(map_error(503, {}, "trace-9"))
    assert unavailable.category == "unavailable"
    assert unavailable.safe_to_retry is True
    assert unavailable.trace_id == "trace-9"

    conflict = present_error(map_error(409, {"message": "exists"}, None))
    assert conflict.category == "conflict"
    assert conflict.safe_to_retry is False
    assert conflict.render()["message"] == "exists"

    assert present_error(ValueError("x")).category == "internal"


def test_log_action_emits_json_without_secrets(caplog: pytest.LogCaptureFixture) -> None:
    logger = get_logger("saas_admin_console.test")
    with caplog.at_level(logging.INFO, logger="saas_admin_console.test"):
        log_action(logger, "tenants", "fetch", "success", trace_id="t-1", access_token="abc", page=2)

    record = json.loads(caplog.records[-1].getMessage())
    assert record["module"] == "tenants"
    assert record["outcome"] == "success"
    assert record["trace_id"] == "t-1"
    assert record["page"] == 2
    assert "access_token" not in record


def test_get_logger_adds_single_handler() -> None:
    first = get_logger("saas_admin_console.handlers")
    second = get_logger("saas_admin_console.handlers")
    assert first is second
    assert len(second.handlers) == 1


def test_notification_center_queue() -> None:
    center = NotificationCenter()
    center.success("Exported Tenants_2024-01-01.csv", path="/tmp/x.csv")
    center.error("Payment failed", trace_id="t-2")

    rendered = center.render()
    assert rendered["count"] == 2
    assert rendered["messages"][0]["details"] == {"path": "/tmp/x.csv"}
    assert rendered["messages"][1]["trace_id"] == "t-2"

    center.clear()
    assert center.render()["count"] == 0
