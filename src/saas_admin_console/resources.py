from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable

from saas_admin_sdk.clients import (
    ActivityLogsClient,
    DeletedDocumentsClient,
    ErrorLogsClient,
    InvoicesClient,
    PlansClient,
    ResourceClient,
    TenantsClient,
    TenantStatesClient,
)
from saas_admin_sdk.models import ExportFormat, Invoice

from .ui.filters import FilterField
from .ui.forms import BILLING_CYCLES
from .ui.modal import ModalMode
from .ui.table import ColumnDef, RowAction, RowPredicate

Submit = Callable[[Any, Any, dict[str, Any]], Any]

TENANT_STATUS_OPTIONS = ("active", "trial", "suspended", "deactivated", "subscription_cancelled", "unverified", "locked")
PLAN_OPTIONS = ("basic", "professional", "enterprise")
ALL_EXPORT_FORMATS = (ExportFormat.CSV, ExportFormat.PDF, ExportFormat.EXCEL)


@dataclass(frozen=True)
class ActionSpec:
    """How one action button behaves.

    ``mode`` opens a modal first; without it the action runs immediately.
    ``submit`` receives ``(client, entity, payload)``. An action with neither
    is driven by a dedicated page method (uploads).
    """

    name: str
    label: str
    visible: RowPredicate = lambda _entity, _today: True
    mode: ModalMode | None = None
    submit: Submit | None = None
    initial: dict[str, Any] = field(default_factory=dict)
    load: Callable[[Any, Any], dict[str, Any]] | None = None
    success_message: str = ""
    optimistic: Callable[[Any, dict[str, Any]], dict[str, Any]] | None = None
    refetch: bool = True
    download_name: Callable[[Any], str] | None = None
    on_row: bool = True

    @property
    def row(self) -> RowAction:
        return RowAction(name=self.name, label=self.label, visible=self.visible)


@dataclass(frozen=True)
class ResourceConfig:
    name: str
    title: str
    client_type: type[ResourceClient]
    columns: tuple[ColumnDef, ...]
    filters: tuple[FilterField, ...]
    actions: tuple[ActionSpec, ...]
    default_sort: tuple[str, str] = ("", "asc")
    export_formats: tuple[ExportFormat, ...] = ALL_EXPORT_FORMATS
    bulk_actions: dict[str, Callable[[Any, list[str]], Any]] = field(default_factory=dict)
    empty_message: str = "No records found."

    def action(self, name: str) -> ActionSpec:
        for spec in self.actions:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.name} has no action {name!r}")

    @property
    def row_actions(self) -> tuple[RowAction, ...]:
        return tuple(spec.row for spec in self.actions if spec.on_row)


def _status(entity: Any) -> str:
    return str(getattr(entity, "status", "") or "").lower()


def _view() -> ActionSpec:
    return ActionSpec(name="view", label="View", mode=ModalMode.DETAIL)


def _date_range(label: str = "Date range") -> FilterField:
    return FilterField(key="dateRange", label=label, kind="date_range")


def _tenant_status_change(status: str, label: str, visible: RowPredicate) -> ActionSpec:
    return ActionSpec(
        name=label.lower(),
        label=label,
        visible=visible,
        mode=ModalMode.STATE_CHANGE,
        initial={"status": status, "setReadOnly": status == "deactivated"},
        submit=lambda client, tenant, payload: client.update(tenant.id, payload),
        success_message=f"Tenant status changed to {status}",
    )


def _load_tenant_users(client: TenantsClient, tenant: Any) -> dict[str, Any]:
    return {"users": [user.model_dump() for user in client.list_users(tenant.id)]}


TENANTS = ResourceConfig(
    name="tenants",
    title="Tenants",
    client_type=TenantsClient,
    columns=(
        ColumnDef("tenant_name", "Tenant"),
        ColumnDef("primary_contact_email", "Primary contact"),
        ColumnDef("status", "Status", badge=True),
        ColumnDef("subscription_plan", "Plan"),
        ColumnDef("user_count", "Users"),
        ColumnDef("created_date", "Created"),
        ColumnDef("last_login", "Last login"),
    ),
    filters=(
        FilterField("tenantName", "Tenant name"),
        FilterField("status", "Status", kind="select", options=TENANT_STATUS_OPTIONS),
        FilterField("subscriptionPlan", "Plan", kind="select", options=PLAN_OPTIONS),
        _date_range("Created between"),
    ),
    actions=(
        _view(),
        ActionSpec(
            name="create",
            label="New tenant",
            mode=ModalMode.TENANT_FORM,
            submit=lambda client, _, payload: client.create(payload),
            success_message="Tenant created",
            on_row=False,
        ),
        ActionSpec(
            name="edit",
            label="Edit",
            mode=ModalMode.TENANT_FORM,
            submit=lambda client, tenant, payload: client.update(tenant.id, payload),
            success_message="Tenant updated",
        ),
        _tenant_status_change("suspended", "Suspend", lambda tenant, _: _status(tenant) == "active"),
        _tenant_status_change("active", "Activate", lambda tenant, _: _status(tenant) == "suspended"),
        _tenant_status_change("deactivated", "Deactivate", lambda tenant, _: _status(tenant) != "deactivated"),
        ActionSpec(
            name="users",
            label="Users",
            mode=ModalMode.DETAIL,
            load=_load_tenant_users,
        ),
        ActionSpec(
            name="delete",
            label="Delete",
            mode=ModalMode.CONFIRM,
            submit=lambda client, tenant, _: client.delete(tenant.id),
            success_message="Tenant deleted",
        ),
    ),
    default_sort=("createdDate", "desc"),
    empty_message="No tenants match the current filters.",
)


def _on_trial(state: Any, _today: date) -> bool:
    return _status(state) == "trial" or str(getattr(state, "trial_status", "") or "").lower() == "active"


TENANT_STATES = ResourceConfig(
    name="tenantStates",
    title="TenantStates",
    client_type=TenantStatesClient,
    columns=(
        ColumnDef("tenant_name", "Tenant"),
        ColumnDef("status", "Status", badge=True),
        ColumnDef("subscription_status", "Subscription", badge=True),
        ColumnDef("subscription_plan", "Plan"),
        ColumnDef("trial_status", "Trial"),
        ColumnDef("trial_end_date", "Trial ends"),
        ColumnDef("updated_at", "Updated"),
    ),
    filters=(
        FilterField("tenantName", "Tenant name"),
        FilterField("status", "Status", kind="select", options=TENANT_STATUS_OPTIONS),
        FilterField("subscriptionStatus", "Subscription", kind="select", options=("active", "cancelled", "suspended", "past_due")),
        FilterField("trialStatus", "Trial", kind="select", options=("active", "expired", "converted")),
        _date_range(),
    ),
    actions=(
        _view(),
        ActionSpec(
            name="change_state",
            label="Change status",
            mode=ModalMode.STATE_CHANGE,
            submit=lambda client, state, payload: client.change_state(state.id, payload),
            success_message="Tenant status updated",
        ),
        ActionSpec(
            name="trial",
            label="Manage trial",
            visible=_on_trial,
            mode=ModalMode.TRIAL,
            submit=lambda client, state, payload: client.update_trial(state.id, payload),
            success_message="Trial updated",
        ),
        ActionSpec(
            name="subscription",
            label="Manage subscription",
            visible=lambda state, _: bool(getattr(state, "subscription_status", None)),
            mode=ModalMode.SUBSCRIPTION,
            submit=lambda client, state, payload: client.update_subscription(state.id, payload),
            success_message="Subscription updated",
        ),
    ),
    default_sort=("tenantName", "asc"),
)


PLANS = ResourceConfig(
    name="subscriptionPlans",
    title="SubscriptionPlans",
    client_type=PlansClient,
    columns=(
        ColumnDef("name", "Plan"),
        ColumnDef("price", "Price"),
        ColumnDef("billing_cycle", "Billing cycle"),
        ColumnDef("max_users", "Max users"),
        ColumnDef("storage_limit", "Storage (GB)"),
        ColumnDef("tenant_count", "Tenants", sortable=False),
    ),
    filters=(
        FilterField("name", "Plan name"),
        FilterField("billingCycle", "Billing cycle", kind="select", options=BILLING_CYCLES),
    ),
    actions=(
        _view(),
        ActionSpec(
            name="create",
            label="New plan",
            mode=ModalMode.PLAN_FORM,
            submit=lambda client, _, payload: client.create(payload),
            success_message="Subscription plan created successfully",
            on_row=False,
        ),
        ActionSpec(
            name="edit",
            label="Edit",
            mode=ModalMode.PLAN_FORM,
            submit=lambda client, plan, payload: client.update(plan.id, payload),
            success_message="Subscription plan updated successfully",
        ),
        ActionSpec(
            name="delete",
            label="Delete",
            mode=ModalMode.CONFIRM,
            submit=lambda client, plan, _: client.delete(plan.id),
            success_message="Subscription plan deleted successfully",
        ),
    ),
    default_sort=("price", "asc"),
    export_formats=(),
    empty_message="No plans created yet.",
)


def _invoice_payable(invoice: Invoice, today: date) -> bool:
    return invoice.effective_status(today) in {"unpaid", "overdue"}


INVOICES = ResourceConfig(
    name="invoices",
    title="Invoices",
    client_type=InvoicesClient,
    columns=(
        ColumnDef("invoice_number", "Invoice"),
        ColumnDef("tenant_name", "Tenant"),
        ColumnDef("amount", "Amount"),
        ColumnDef("currency", "Currency", sortable=False),
        ColumnDef("status", "Status", badge=True, value=lambda invoice, today: invoice.effective_status(today)),
        ColumnDef("issue_date", "Issued"),
        ColumnDef("due_date", "Due"),
    ),
    filters=(
        FilterField("tenantName", "Tenant name"),
        FilterField("status", "Status", kind="select", options=("paid", "unpaid", "pending", "overdue")),
        _date_range("Issued between"),
    ),
    actions=(
        _view(),
        ActionSpec(
            name="pay",
            label="Pay",
            visible=_invoice_payable,
            mode=ModalMode.PAYMENT,
            submit=lambda client, invoice, payload: client.mark_paid(invoice.id, payload),
            success_message="Payment recorded",
            optimistic=lambda _, payload: {"status": "paid", "paid_date": payload.get("paymentDate")},
            refetch=False,
        ),
        ActionSpec(
            name="receipt",
            label="Receipt",
            visible=lambda invoice, _: _status(invoice) == "paid",
            submit=lambda client, invoice, _: client.download_receipt(invoice.id),
            success_message="Receipt downloaded",
            refetch=False,
            download_name=lambda invoice: f"Receipt_{invoice.invoice_number or invoice.id}.pdf",
        ),
    ),
    default_sort=("dueDate", "desc"),
)


ACTIVITY_LOGS = ResourceConfig(
    name="activityLogs",
    title="ActivityLogs",
    client_type=ActivityLogsClient,
    columns=(
        ColumnDef("timestamp", "Time"),
        ColumnDef("tenant_name", "Tenant"),
        ColumnDef("user_email", "User"),
        ColumnDef("action_performed", "Action"),
        ColumnDef("resource_affected", "Resource"),
        ColumnDef("ip_address", "IP address", sortable=False),
    ),
    filters=(
        FilterField("tenantName", "Tenant name"),
        FilterField("userEmail", "User email"),
        FilterField("actionPerformed", "Action"),
        _date_range(),
    ),
    actions=(_view(),),
    default_sort=("timestamp", "desc"),
)


DELETED_DOCUMENTS = ResourceConfig(
    name="deletedDocuments",
    title="DeletedDocuments",
    client_type=DeletedDocumentsClient,
    columns=(
        ColumnDef("document_name", "Document"),
        ColumnDef("document_type", "Type"),
        ColumnDef("tenant_name", "Tenant"),
        ColumnDef("original_owner", "Owner"),
        ColumnDef("deleted_by", "Deleted by"),
        ColumnDef("deleted_at", "Deleted at"),
    ),
    filters=(
        FilterField("searchTerm", "Search", live=True),
        FilterField("deletedBy", "Deleted by"),
        FilterField("originalOwner", "Original owner"),
        FilterField("documentType", "Document type"),
        _date_range("Deleted between"),
    ),
    actions=(
        _view(),
        ActionSpec(
            name="restore",
            label="Restore",
            mode=ModalMode.CONFIRM,
            submit=lambda client, document, _: client.restore(document.id),
            success_message="Document restored",
        ),
        ActionSpec(
            name="permanent_delete",
            label="Delete permanently",
            mode=ModalMode.CONFIRM,
            submit=lambda client, document, _: client.permanent_delete(document.id),
            success_message="Document permanently deleted",
        ),
        ActionSpec(name="upload", label="Upload file"),
    ),
    default_sort=("deletedAt", "desc"),
    bulk_actions={
        "restore": lambda client, ids: client.bulk_restore(ids),
        "delete": lambda client, ids: client.bulk_delete(ids),
    },
    empty_message="No deleted documents found.",
)


ERROR_LOGS = ResourceConfig(
    name="errorLogs",
    title="ErrorLogs",
    client_type=ErrorLogsClient,
    columns=(
        ColumnDef("timestamp", "Time"),
        ColumnDef("error_type", "Type", badge=True),
        ColumnDef("description", "Description", sortable=False),
        ColumnDef("affected_tenant", "Tenant"),
        ColumnDef("affected_user", "User"),
    ),
    filters=(
        FilterField("tenantName", "Tenant name"),
        FilterField("errorType", "Error type"),
        _date_range(),
    ),
    actions=(_view(),),
    default_sort=("timestamp", "desc"),
)


RESOURCES: tuple[ResourceConfig, ...] = (
    TENANTS,
    TENANT_STATES,
    PLANS,
    INVOICES,
    ACTIVITY_LOGS,
    DELETED_DOCUMENTS,
    ERROR_LOGS,
)
