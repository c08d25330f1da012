from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..models import TenantState
from .base import ResourceClient


@dataclass
class TenantStatesClient(ResourceClient):
    """Lifecycle transitions; the server decides the resulting state."""

    endpoint = "/tenant-states"
    model = TenantState
    items_key = "tenantStates"
    param_aliases = {"tenantName": "search"}

    def change_state(self, tenant_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self.update(tenant_id, payload)

    def update_trial(self, tenant_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._action("PATCH", f"{tenant_id}/trial", payload)

    def update_subscription(self, tenant_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return self._action("PATCH", f"{tenant_id}/subscription", payload)
