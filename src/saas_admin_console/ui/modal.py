from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from enum import Enum
from typing import Any

from .forms import (
    READ_ONLY_STATUSES,
    FormResult,
    FormState,
    FormStatus,
    build_form_state,
    map_api_validation_errors,
    validate_payment,
    validate_plan_form,
    validate_state_change,
    validate_subscription,
    validate_tenant_form,
    validate_trial,
)


class ModalMode(str, Enum):
    DETAIL = "detail"
    STATE_CHANGE = "state_change"
    TRIAL = "trial"
    SUBSCRIPTION = "subscription"
    PAYMENT = "payment"
    CONFIRM = "confirm"
    TENANT_FORM = "tenant_form"
    PLAN_FORM = "plan_form"


@dataclass(frozen=True)
class ModalState:
    is_open: bool = False
    target: Any = None
    mode: ModalMode | None = None
    action: str | None = None
    form_data: dict[str, Any] = field(default_factory=dict)
    validation_errors: dict[str, str] = field(default_factory=dict)
    status: FormStatus = FormStatus.EDITING
    submit_error: str | None = None

    @property
    def submitting(self) -> bool:
        return self.status is FormStatus.SUBMITTING

    def render(self) -> dict[str, Any]:
        return {
            "open": self.is_open,
            "mode": self.mode.value if self.mode else None,
            "action": self.action,
            "target_id": getattr(self.target, "id", None),
            "form": dict(self.form_data),
            "errors": dict(self.validation_errors),
            "status": self.status.value,
            "submitting": self.submitting,
            "submit_error": self.submit_error,
            "can_submit": self.is_open and self.mode is not ModalMode.DETAIL and not self.submitting,
        }


def default_form(mode: ModalMode, target: Any, today: date | None = None) -> dict[str, Any]:
    today = today or date.today()
    status = str(getattr(target, "status", "") or "")
    if mode is ModalMode.STATE_CHANGE:
        return {
            "status": status,
            "reason": "",
            "effectiveDate": today.isoformat(),
            "notifyUsers": True,
            "setReadOnly": status in READ_ONLY_STATUSES,
        }
    if mode is ModalMode.TRIAL:
        trial_end = str(getattr(target, "trial_end_date", "") or "")[:10]
        return {
            "action": "",
            "reason": "",
            "extendDays": 0,
            "trialEndDate": trial_end or (today + timedelta(days=7)).isoformat(),
            "subscriptionPlan": "basic",
        }
    if mode is ModalMode.SUBSCRIPTION:
        return {
            "action": "",
            "reason": "",
            "effectiveDate": today.isoformat(),
            "notifyUsers": True,
            "refundAmount": 0,
            "gracePeriodDays": 7 if getattr(target, "subscription_status", None) == "active" else 0,
            "newPlan": str(getattr(target, "subscription_plan", "") or ""),
        }
    if mode is ModalMode.TENANT_FORM:
        return {
            "tenantName": str(getattr(target, "tenant_name", "") or ""),
            "primaryContactEmail": str(getattr(target, "primary_contact_email", "") or ""),
            "description": str(getattr(target, "description", "") or ""),
            "subscriptionPlan": str(getattr(target, "subscription_plan", "") or ""),
        }
    if mode is ModalMode.PLAN_FORM:
        features = dict(getattr(target, "features", None) or {})
        return {
            "name": str(getattr(target, "name", "") or ""),
            "description": str(getattr(target, "description", "") or ""),
            "price": getattr(target, "price", None) if target is not None else "",
            "billingCycle": str(getattr(target, "billing_cycle", "") or "monthly"),
            "maxUsers": getattr(target, "max_users", None) if target is not None else "",
            "storageLimit": getattr(target, "storage_limit", None) if target is not None else "",
            "features": {
                "api_access": bool(features.get("api_access")),
                "user_support": features.get("user_support") or "email",
                "advanced_analytics": bool(features.get("advanced_analytics")),
                "custom_integrations": bool(features.get("custom_integrations")),
            },
        }
    if mode is ModalMode.PAYMENT:
        return {
            "paymentMethod": "",
            "amount": getattr(target, "amount", 0) or 0,
            "paymentDate": today.isoformat(),
            "transactionReference": "",
        }
    return {}


class ModalController:
    """Open/edit/validate/close lifecycle of the page's single modal."""

    def __init__(self) -> None:
        self.state = ModalState()

    @property
    def is_open(self) -> bool:
        return self.state.is_open

    def open(
        self,
        mode: ModalMode,
        target: Any,
        *,
        action: str | None = None,
        initial: dict[str, Any] | None = None,
        today: date | None = None,
    ) -> ModalState:
        form_data = {**default_form(mode, target, today), **(initial or {})}
        self.state = ModalState(is_open=True, target=target, mode=mode, action=action, form_data=form_data)
        return self.state

    def edit(self, field_name: str, value: Any) -> ModalState:
        if not self.state.is_open or self.state.mode is ModalMode.DETAIL:
            return self.state
        errors = {key: message for key, message in self.state.validation_errors.items() if key != field_name}
        self.state = replace(
            self.state,
            form_data={**self.state.form_data, field_name: value},
            validation_errors=errors,
            status=FormStatus.INVALID if errors else FormStatus.EDITING,
            submit_error=None,
        )
        return self.state

    def validate(self, today: date | None = None) -> FormResult:
        mode = self.state.mode
        data = self.state.form_data
        if mode is ModalMode.STATE_CHANGE:
            result = validate_state_change(data, today)
        elif mode is ModalMode.TRIAL:
            result = validate_trial(data)
        elif mode is ModalMode.SUBSCRIPTION:
            result = validate_subscription(data)
        elif mode is ModalMode.PAYMENT:
            result = validate_payment(data)
        elif mode is ModalMode.TENANT_FORM:
            result = validate_tenant_form(data)
        elif mode is ModalMode.PLAN_FORM:
            result = validate_plan_form(data)
        elif mode is ModalMode.CONFIRM:
            result = FormResult(values={}, field_errors={})
        else:
            result = FormResult(values={}, field_errors={"form": "This dialog is read-only"})
        self.state = replace(
            self.state,
            validation_errors=dict(result.field_errors),
            status=FormStatus.EDITING if result.is_valid else FormStatus.INVALID,
        )
        return result

    def form_state(self) -> FormState:
        if self.state.mode is ModalMode.DETAIL:
            return FormState(FormStatus.EDITING, can_submit=False, hint="This dialog is read-only")
        result = FormResult(values=dict(self.state.form_data), field_errors=dict(self.state.validation_errors))
        return build_form_state(result, self.state.status, self.state.submit_error)

    def begin_submit(self) -> None:
        self.state = replace(self.state, status=FormStatus.SUBMITTING, submit_error=None)

    def fail(self, message: str) -> None:
        """Keep the dialog open after a server failure that names no field."""
        self.state = replace(self.state, status=FormStatus.FAILED, submit_error=message)

    def apply_server_errors(self, details: Any) -> dict[str, str]:
        mapped = map_api_validation_errors(details)
        self.state = replace(self.state, validation_errors=mapped, status=FormStatus.INVALID)
        return mapped

    def close(self) -> None:
        self.state = ModalState()
