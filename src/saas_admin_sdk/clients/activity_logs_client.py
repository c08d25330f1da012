from __future__ import annotations

from dataclasses import dataclass

from ..models import ActivityLog
from .base import ResourceClient


@dataclass
class ActivityLogsClient(ResourceClient):
    endpoint = "/activity-logs"
    model = ActivityLog
    items_key = "logs"
