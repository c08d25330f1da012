from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..http_client import ProgressCallback
from ..models import DeletedDocument, UploadTicket
from .base import ResourceClient, _unwrap


@dataclass(frozen=True)
class UploadResult:
    document_id: str
    s3_key: str
    file_size: int
    response: dict[str, Any]


@dataclass
class DeletedDocumentsClient(ResourceClient):
    endpoint = "/deleted-documents"
    model = DeletedDocument
    items_key = "documents"
    param_aliases = {"searchTerm": "search"}

    def restore(self, document_id: str) -> dict[str, Any]:
        return self._action("POST", f"{document_id}/restore")

    def permanent_delete(self, document_id: str) -> dict[str, Any]:
        return self._action("DELETE", f"{document_id}/permanent")

    def bulk_restore(self, document_ids: list[str]) -> dict[str, Any]:
        return self._action("POST", "bulk-restore", {"ids": list(document_ids)})

    def bulk_delete(self, document_ids: list[str]) -> dict[str, Any]:
        return self._action("POST", "bulk-delete", {"ids": list(document_ids)})

    def request_upload_url(self, document_id: str, file_name: str, content_type: str) -> UploadTicket:
        payload = self._request(
            "POST",
            f"{self.endpoint}/{document_id}/upload-url",
            json_body={"fileName": file_name, "contentType": content_type},
        )
        return UploadTicket.model_validate(_unwrap(payload))

    def confirm_upload(self, document_id: str, s3_key: str, file_size: int) -> dict[str, Any]:
        return self._action("PATCH", f"{document_id}/file-uploaded", {"s3Key": s3_key, "fileSize": file_size})

    def upload_file(
        self,
        document_id: str,
        *,
        file_name: str,
        content: bytes,
        content_type: str = "application/octet-stream",
        on_progress: ProgressCallback | None = None,
    ) -> UploadResult:
        """Presign, PUT the raw bytes to object storage, then finalize."""
        ticket = self.request_upload_url(document_id, file_name, content_type)
        self.http.put_bytes(ticket.upload_url, content, content_type=content_type, on_progress=on_progress)
        response = self.confirm_upload(document_id, ticket.s3_key, len(content))
        return UploadResult(document_id=document_id, s3_key=ticket.s3_key, file_size=len(content), response=response)
