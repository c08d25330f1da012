from .console import Console, MetricsLoader, build_console
from .error_presenter import PresentedError, present_error, user_message
from .notifications import NotificationCenter, NotificationService
from .page import PageView, ResourcePage
from .resources import (
    ACTIVITY_LOGS,
    DELETED_DOCUMENTS,
    ERROR_LOGS,
    INVOICES,
    PLANS,
    RESOURCES,
    TENANT_STATES,
    TENANTS,
    ActionSpec,
    ResourceConfig,
)

__all__ = [
    "ACTIVITY_LOGS",
    "DELETED_DOCUMENTS",
    "ERROR_LOGS",
    "INVOICES",
    "PLANS",
    "RESOURCES",
    "TENANTS",
    "TENANT_STATES",
    "ActionSpec",
    "Console",
    "MetricsLoader",
    "NotificationCenter",
    "NotificationService",
    "PageView",
    "PresentedError",
    "ResourcePage",
    "build_console",
    "present_error",
    "user_message",
]
