from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..models import SubscriptionPlan
from .base import ResourceClient, _as_dict


@dataclass
class PlansClient(ResourceClient):
    endpoint = "/subscription-plans"
    model = SubscriptionPlan
    items_key = "plans"
    param_aliases = {"name": "search"}

    def update(self, entity_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        # plans are replaced whole, not patched
        return _as_dict(self._request("PUT", f"{self.endpoint}/{entity_id}", json_body=payload))
