from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from pydantic import BaseModel

from ..exceptions import ApiError
from ..http_client import HttpClient
from ..listing import ListQuery, Page, normalize_page
from ..models import ExportFormat


@dataclass
class BaseClient:
    http: HttpClient
    access_token: str | None = None

    def _auth_headers(self) -> dict[str, str]:
        if self.access_token:
            return {"Authorization": f"Bearer {self.access_token}"}
        return {}

    def _request(self, method: str, path: str, **kwargs: Any):
        headers = kwargs.pop("headers", None) or {}
        merged = {**self._auth_headers(), **headers}
        return self.http.request(method, path, headers=merged, **kwargs)

    def _request_bytes(self, method: str, path: str, **kwargs: Any) -> bytes:
        headers = kwargs.pop("headers", None) or {}
        merged = {**self._auth_headers(), **headers}
        return self.http.request_bytes(method, path, headers=merged, **kwargs)


@dataclass
class ResourceClient(BaseClient):
    """CRUD, listing and export calls shared by every admin list endpoint."""

    endpoint: ClassVar[str] = ""
    model: ClassVar[type[BaseModel]]
    items_key: ClassVar[str | None] = None
    param_aliases: ClassVar[dict[str, str]] = {}

    def list(self, query: ListQuery) -> Page[Any]:
        payload = self._request("GET", self.endpoint, params=query.to_params(self.param_aliases))
        return normalize_page(
            payload,
            page=query.page,
            limit=query.limit,
            model=self.model,
            items_key=self.items_key,
        )

    def get(self, entity_id: str):
        return self._parse(self._request("GET", f"{self.endpoint}/{entity_id}"))

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        return _as_dict(self._request("POST", self.endpoint, json_body=payload))

    def update(self, entity_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        return _as_dict(self._request("PATCH", f"{self.endpoint}/{entity_id}", json_body=payload))

    def _action(self, method: str, path: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
        return _as_dict(self._request(method, f"{self.endpoint}/{path}", json_body=payload))

    def delete(self, entity_id: str) -> None:
        self._request("DELETE", f"{self.endpoint}/{entity_id}")

    def export(self, export_format: ExportFormat | str, query: ListQuery) -> bytes:
        fmt = ExportFormat(export_format)
        filters = {key: value for key, value in query.to_params(self.param_aliases).items() if key not in {"page", "limit"}}
        return self._request_bytes(
            "POST",
            f"{self.endpoint}/export",
            json_body={"format": fmt.value, "filters": filters},
        )

    def _parse(self, payload: Any):
        data = _unwrap(payload)
        if not isinstance(data, dict):
            raise ApiError(
                code="INVALID_RESPONSE",
                message=f"Expected a JSON object from {self.endpoint}",
                details=None,
                trace_id=None,
                status_code=200,
                raw_payload=payload,
            )
        return self.model.model_validate(data)


def _unwrap(payload: Any) -> Any:
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return payload


def _as_dict(payload: Any) -> dict[str, Any]:
    data = _unwrap(payload)
    return data if isinstance(data, dict) else {}
