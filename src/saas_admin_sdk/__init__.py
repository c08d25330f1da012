from .auth_store import AuthSession, AuthStore, token_expired
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
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
from .http_client import HttpClient, TraceContext
from .listing import DateRange, ListQuery, Page, normalize_page, total_pages
from .models import (
    ActivityLog,
    DeletedDocument,
    ErrorLog,
    ExportFormat,
    Invoice,
    SessionData,
    SubscriptionPlan,
    SystemMetrics,
    Tenant,
    TenantState,
    TenantUser,
)

__all__ = [
    "ActivityLog",
    "ApiError",
    "AuthError",
    "AuthSession",
    "AuthStore",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "DateRange",
    "DeletedDocument",
    "ErrorLog",
    "ExportFormat",
    "HttpClient",
    "Invoice",
    "ListQuery",
    "NotFoundError",
    "Page",
    "PermissionError",
    "RateLimitError",
    "ServerError",
    "ServiceUnavailableError",
    "SessionData",
    "SubscriptionPlan",
    "SystemMetrics",
    "Tenant",
    "TenantState",
    "TenantUser",
    "TraceContext",
    "TransportError",
    "ValidationError",
    "load_config",
    "normalize_page",
    "token_expired",
    "total_pages",
]
