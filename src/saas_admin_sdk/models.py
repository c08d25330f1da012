from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )


class Entity(WireModel):
    id: str
    status: str | None = None


class TenantStatus(str, Enum):
    ACTIVE = "active"
    TRIAL = "trial"
    SUSPENDED = "suspended"
    DEACTIVATED = "deactivated"
    SUBSCRIPTION_CANCELLED = "subscription_cancelled"
    UNVERIFIED = "unverified"
    LOCKED = "locked"


class InvoiceStatus(str, Enum):
    PAID = "paid"
    UNPAID = "unpaid"
    PENDING = "pending"
    OVERDUE = "overdue"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ExportFormat(str, Enum):
    CSV = "csv"
    PDF = "pdf"
    EXCEL = "excel"

    @property
    def extension(self) -> str:
        return "xlsx" if self is ExportFormat.EXCEL else self.value


class Tenant(Entity):
    tenant_id: str | None = None
    tenant_name: str = Field(default="", validation_alias=AliasChoices("tenantName", "name", "tenant_name"))
    primary_contact_email: str | None = None
    description: str | None = None
    subscription_plan: str | None = None
    created_date: str | None = None
    last_login: str | None = None
    user_count: int | None = None
    documents_count: int | None = None


class TenantState(Entity):
    tenant_name: str = Field(default="", validation_alias=AliasChoices("tenantName", "name", "tenant_name"))
    subscription_status: str | None = None
    subscription_plan: str | None = None
    trial_status: str | None = None
    trial_end_date: str | None = None
    access_level: str | None = None
    updated_at: str | None = None


class Invoice(Entity):
    invoice_number: str | None = None
    tenant_name: str | None = None
    amount: float = 0.0
    currency: str = "USD"
    issue_date: str | None = None
    due_date: str | None = None
    paid_date: str | None = None

    def effective_status(self, today: date | None = None) -> str:
        status = (self.status or "").lower()
        if status == InvoiceStatus.PAID.value or not self.due_date:
            return status
        try:
            due = date.fromisoformat(self.due_date[:10])
        except ValueError:
            return status
        if due < (today or date.today()):
            return InvoiceStatus.OVERDUE.value
        return status


class ActivityLog(Entity):
    timestamp: str | None = None
    tenant_name: str | None = None
    user_email: str | None = None
    action_performed: str | None = None
    resource_affected: str | None = None
    ip_address: str | None = None
    details: dict[str, Any] | str | None = None


class DeletedDocument(Entity):
    document_name: str | None = None
    document_type: str | None = None
    tenant_name: str | None = None
    original_owner: str | None = None
    deleted_by: str | None = None
    deleted_at: str | None = None
    file_size: int | None = None


class ErrorLog(Entity):
    timestamp: str | None = None
    error_type: str | None = None
    description: str | None = None
    affected_tenant: str | None = None
    affected_user: str | None = None
    affected_document: str | None = None


class TenantUser(Entity):
    name: str | None = None
    email: str | None = None
    role: str | None = None


class SystemMetrics(WireModel):
    uptime: float | str | None = None
    active_tenants: int = 0
    active_users: int = 0
    document_uploads: int = 0
    compliance_checks: int = 0
    error_rate: float = 0.0
    avg_processing_time: float | str | None = None


class UploadTicket(WireModel):
    upload_url: str
    s3_key: str


class SessionData(WireModel):
    token: str | None = None
    user: dict[str, Any] | None = None
    is_authenticated: bool = False


class SubscriptionPlan(Entity):
    name: str = ""
    description: str | None = None
    price: float | None = None
    billing_cycle: str = "monthly"
    max_users: int | None = None
    storage_limit: int | None = None
    features: dict[str, Any] = Field(default_factory=dict)
    tenant_count: int | None = None
