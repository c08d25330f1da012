from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Any, Iterator, Mapping

EMAIL_REGEX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_REASON_LENGTH = 5
MAX_REFUND_AMOUNT = 10000
MAX_GRACE_PERIOD_DAYS = 90

READ_ONLY_STATUSES = {"suspended", "deactivated"}
TENANT_STATUSES = ("active", "trial", "suspended", "deactivated", "subscription_cancelled")
TRIAL_ACTIONS = ("extend", "modify", "end", "convert")
SUBSCRIPTION_ACTIONS = ("cancel", "suspend", "reactivate", "change_plan")
BILLING_CYCLES = ("monthly", "annual")
PLAN_FEATURE_FLAGS = ("api_access", "advanced_analytics", "custom_integrations")


class FormStatus(str, Enum):
    EDITING = "editing"
    INVALID = "invalid"
    SUBMITTING = "submitting"
    FAILED = "failed"


@dataclass
class FormResult:
    values: dict[str, Any]
    field_errors: dict[str, str]

    @property
    def is_valid(self) -> bool:
        return not self.field_errors


@dataclass(frozen=True)
class FormState:
    status: FormStatus
    can_submit: bool
    hint: str = ""


def build_form_state(
    result: FormResult,
    status: FormStatus = FormStatus.EDITING,
    submit_error: str | None = None,
) -> FormState:
    """Derive the submit button state; field errors outrank a failed submit."""
    if status is FormStatus.SUBMITTING:
        return FormState(status, can_submit=False, hint="Saving changes.")
    if not result.is_valid:
        culprit = next(iter(result.field_errors))
        return FormState(FormStatus.INVALID, can_submit=False, hint=f"Fix '{culprit}' before submitting.")
    if status is FormStatus.FAILED:
        return FormState(status, can_submit=True, hint=submit_error or "")
    return FormState(FormStatus.EDITING, can_submit=True)


def _text(value: Any) -> str:
    return str(value or "").strip()


def _check_reason(values: Mapping[str, Any], errors: dict[str, str]) -> str:
    reason = _text(values.get("reason"))
    if len(reason) < MIN_REASON_LENGTH:
        errors["reason"] = f"Reason is required (minimum {MIN_REASON_LENGTH} characters)"
    return reason


def _parse_date(value: Any) -> date | None:
    text = _text(value)
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def _number(value: Any, cast: type) -> Any:
    if value in (None, ""):
        return None
    try:
        return cast(value)
    except (TypeError, ValueError):
        return None


def validate_state_change(values: Mapping[str, Any], today: date | None = None) -> FormResult:
    errors: dict[str, str] = {}
    status = _text(values.get("status"))
    if not status:
        errors["status"] = "Status is required"
    elif status not in TENANT_STATUSES:
        errors["status"] = f"Unknown status '{status}'"
    reason = _check_reason(values, errors)

    effective = _parse_date(values.get("effectiveDate"))
    if not _text(values.get("effectiveDate")):
        errors["effectiveDate"] = "Effective date is required"
    elif effective is None:
        errors["effectiveDate"] = "Effective date must be YYYY-MM-DD"
    elif effective < (today or date.today()):
        errors["effectiveDate"] = "Effective date cannot be in the past"

    payload = {
        "status": status,
        "reason": reason,
        "effectiveDate": effective.isoformat() if effective else _text(values.get("effectiveDate")),
        "notifyUsers": bool(values.get("notifyUsers", True)),
        "setReadOnly": bool(values.get("setReadOnly")) and status in READ_ONLY_STATUSES,
    }
    return FormResult(values=payload, field_errors=errors)


def validate_trial(values: Mapping[str, Any]) -> FormResult:
    errors: dict[str, str] = {}
    action = _text(values.get("action"))
    if action not in TRIAL_ACTIONS:
        errors["action"] = "Please select an action"
    reason = _check_reason(values, errors)
    payload: dict[str, Any] = {"action": action, "reason": reason}

    if action == "extend":
        days = _number(values.get("extendDays"), int)
        if days is None or days < 1:
            errors["extendDays"] = "Extension days must be at least 1"
        payload["extendDays"] = days
    elif action == "modify":
        end_date = _parse_date(values.get("trialEndDate"))
        if end_date is None:
            errors["trialEndDate"] = "Trial end date is required"
        payload["trialEndDate"] = end_date.isoformat() if end_date else ""
    elif action == "convert":
        plan = _text(values.get("subscriptionPlan"))
        if not plan:
            errors["subscriptionPlan"] = "Subscription plan is required"
        payload["subscriptionPlan"] = plan
    return FormResult(values=payload, field_errors=errors)


def validate_subscription(values: Mapping[str, Any]) -> FormResult:
    errors: dict[str, str] = {}
    action = _text(values.get("action"))
    if action not in SUBSCRIPTION_ACTIONS:
        errors["action"] = "Please select an action"
    reason = _check_reason(values, errors)
    effective = _text(values.get("effectiveDate"))
    if not effective:
        errors["effectiveDate"] = "Effective date is required"

    payload: dict[str, Any] = {
        "action": action,
        "reason": reason,
        "effectiveDate": effective,
        "notifyUsers": bool(values.get("notifyUsers", True)),
    }

    if action == "change_plan":
        plan = _text(values.get("newPlan"))
        if not plan:
            errors["newPlan"] = "New subscription plan is required"
        payload["newPlan"] = plan

    raw_refund = values.get("refundAmount")
    if raw_refund not in (None, ""):
        refund = _number(raw_refund, float)
        if refund is None or not 0 <= refund <= MAX_REFUND_AMOUNT:
            errors["refundAmount"] = f"Refund amount must be between 0 and {MAX_REFUND_AMOUNT}"
        payload["refundAmount"] = refund

    raw_grace = values.get("gracePeriodDays")
    if raw_grace not in (None, ""):
        grace = _number(raw_grace, int)
        if grace is None or not 0 <= grace <= MAX_GRACE_PERIOD_DAYS:
            errors["gracePeriodDays"] = f"Grace period must be between 0 and {MAX_GRACE_PERIOD_DAYS} days"
        payload["gracePeriodDays"] = grace
    return FormResult(values=payload, field_errors=errors)


def validate_payment(values: Mapping[str, Any]) -> FormResult:
    errors: dict[str, str] = {}
    method = _text(values.get("paymentMethod"))
    if not method:
        errors["paymentMethod"] = "Payment method is required"
    amount = _number(values.get("amount"), float)
    if amount is None or amount <= 0:
        errors["amount"] = "Amount must be greater than 0"
    payment_date = _parse_date(values.get("paymentDate"))
    if payment_date is None:
        errors["paymentDate"] = "Payment date is required"

    payload: dict[str, Any] = {
        "paymentMethod": method,
        "amount": amount,
        "paymentDate": payment_date.isoformat() if payment_date else "",
    }
    reference = _text(values.get("transactionReference"))
    if reference:
        payload["transactionReference"] = reference
    return FormResult(values=payload, field_errors=errors)


def validate_tenant_form(values: Mapping[str, Any]) -> FormResult:
    errors: dict[str, str] = {}
    name = _text(values.get("tenantName"))
    if not name:
        errors["tenantName"] = "Tenant name is required"
    elif len(name) > 255:
        errors["tenantName"] = "Tenant name cannot exceed 255 characters"
    email = _text(values.get("primaryContactEmail")).lower()
    if not email:
        errors["primaryContactEmail"] = "Primary contact email is required"
    elif not EMAIL_REGEX.match(email):
        errors["primaryContactEmail"] = "Enter a valid email address"

    payload: dict[str, Any] = {"tenantName": name, "primaryContactEmail": email}
    for key in ("description", "subscriptionPlan"):
        text = _text(values.get(key))
        if text:
            payload[key] = text
    return FormResult(values=payload, field_errors=errors)


def validate_plan_form(values: Mapping[str, Any]) -> FormResult:
    errors: dict[str, str] = {}
    name = _text(values.get("name"))
    if not name:
        errors["name"] = "Plan name is required"
    description = _text(values.get("description"))
    if not description:
        errors["description"] = "Description is required"

    price = _number(values.get("price"), float)
    if values.get("price") in (None, ""):
        errors["price"] = "Price is required"
    elif price is None or price < 0:
        errors["price"] = "Price must be a valid positive number"

    cycle = _text(values.get("billingCycle")) or "monthly"
    if cycle not in BILLING_CYCLES:
        errors["billingCycle"] = f"Billing cycle must be one of {', '.join(BILLING_CYCLES)}"

    limits: dict[str, int | None] = {}
    for key, label in (("maxUsers", "Max users"), ("storageLimit", "Storage limit")):
        limit = _number(values.get(key), int)
        if values.get(key) in (None, ""):
            errors[key] = f"{label} is required"
        elif limit is None or limit <= 0:
            errors[key] = f"{label} must be a positive number"
        limits[key] = limit

    raw_features = values.get("features")
    features = dict(raw_features) if isinstance(raw_features, Mapping) else {}
    for flag in PLAN_FEATURE_FLAGS:
        features[flag] = bool(features.get(flag))
    features["user_support"] = _text(features.get("user_support")) or "email"
    if limits["storageLimit"]:
        features["document_storage"] = f"{limits['storageLimit']}GB"

    payload = {
        "name": name,
        "description": description,
        "price": price,
        "billingCycle": cycle,
        **limits,
        "features": features,
    }
    return FormResult(values=payload, field_errors=errors)


def _field_messages(details: Any) -> Iterator[tuple[Any, Any]]:
    """Yield ``(field, message)`` pairs from the shapes the API uses for 400/422 bodies.

    Either ``{"field": "msg" | ["msg", ...], "errors": {...}}`` or a list of
    ``{"field"|"loc": ..., "message"|"msg": ...}`` entries.
    """
    if isinstance(details, dict):
        nested = details.get("errors")
        if isinstance(nested, dict):
            yield from ((key, str(value)) for key, value in nested.items())
        for key, value in details.items():
            if key == "errors":
                continue
            if isinstance(value, list):
                value = value[0] if value else None
            if isinstance(value, str):
                yield key, value
    elif isinstance(details, list):
        for entry in filter(lambda item: isinstance(item, dict), details):
            location = entry.get("field") or entry.get("loc")
            if isinstance(location, list):
                location = location[-1] if location else None
            yield location, entry.get("message") or entry.get("msg")


def map_api_validation_errors(error_details: Any) -> dict[str, str]:
    return {str(name): str(message) for name, message in _field_messages(error_details or ()) if name and message}
