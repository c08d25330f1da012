from __future__ import annotations

from dataclasses import dataclass

from ..models import ErrorLog, SystemMetrics
from .base import BaseClient, ResourceClient, _unwrap


@dataclass
class ErrorLogsClient(ResourceClient):
    endpoint = "/error-logs"
    model = ErrorLog
    items_key = "logs"


@dataclass
class SystemMetricsClient(BaseClient):
    def get_metrics(self) -> SystemMetrics:
        payload = _unwrap(self._request("GET", "/system-metrics"))
        return SystemMetrics.model_validate(payload if isinstance(payload, dict) else {})
