from __future__ import annotations

from dataclasses import dataclass

from ..models import Tenant, TenantUser
from .base import ResourceClient


@dataclass
class TenantsClient(ResourceClient):
    endpoint = "/tenants"
    model = Tenant
    items_key = "tenants"
    param_aliases = {"tenantName": "search"}

    def list_users(self, tenant_id: str) -> list[TenantUser]:
        payload = self._request("GET", f"{self.endpoint}/{tenant_id}/users")
        rows = payload.get("data") or payload.get("users") if isinstance(payload, dict) else payload
        return [TenantUser.model_validate(row) for row in rows or [] if isinstance(row, dict)]
