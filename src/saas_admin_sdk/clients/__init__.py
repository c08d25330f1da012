from .activity_logs_client import ActivityLogsClient
from .base import BaseClient, ResourceClient
from .deleted_documents_client import DeletedDocumentsClient, UploadResult
from .invoices_client import InvoicesClient
from .plans_client import PlansClient
from .system_client import ErrorLogsClient, SystemMetricsClient
from .tenant_states_client import TenantStatesClient
from .tenants_client import TenantsClient

__all__ = [
    "ActivityLogsClient",
    "BaseClient",
    "DeletedDocumentsClient",
    "ErrorLogsClient",
    "InvoicesClient",
    "PlansClient",
    "ResourceClient",
    "SystemMetricsClient",
    "TenantStatesClient",
    "TenantsClient",
    "UploadResult",
]
