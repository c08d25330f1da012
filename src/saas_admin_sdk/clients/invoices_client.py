from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..models import Invoice
from .base import ResourceClient


@dataclass
class InvoicesClient(ResourceClient):
    endpoint = "/invoices"
    model = Invoice
    items_key = "invoices"
    param_aliases = {"tenantName": "search"}

    def mark_paid(self, invoice_id: str, payment: dict[str, Any]) -> dict[str, Any]:
        return self._action("PATCH", f"{invoice_id}/mark-paid", payment)

    def download_receipt(self, invoice_id: str) -> bytes:
        return self._request_bytes("GET", f"{self.endpoint}/{invoice_id}/receipt")
