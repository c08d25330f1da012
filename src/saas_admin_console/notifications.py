from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


class NotificationService(Protocol):
    def toast(
        self,
        *,
        level: str,
        message: str,
        trace_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]: ...


@dataclass
class NotificationCenter:
    """In-memory toast queue; the shell drains it with ``render``/``clear``."""

    items: list[dict[str, Any]] = field(default_factory=list)

    def toast(
        self,
        *,
        level: str,
        message: str,
        trace_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        payload = {"level": level, "message": message, "trace_id": trace_id, "details": details or {}}
        self.items.append(payload)
        return payload

    def success(self, message: str, **details: Any) -> dict[str, Any]:
        return self.toast(level="success", message=message, details=details or None)

    def error(self, message: str, trace_id: str | None = None) -> dict[str, Any]:
        return self.toast(level="error", message=message, trace_id=trace_id)

    def render(self) -> dict[str, Any]:
        return {"count": len(self.items), "messages": list(self.items)}

    def clear(self) -> None:
        self.items.clear()
