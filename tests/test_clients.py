from __future__ import annotations

import json

import responses
from responses import matchers

from saas_admin_sdk.clients import (
    DeletedDocumentsClient,
    InvoicesClient,
    PlansClient,
    SystemMetricsClient,
    TenantsClient,
    TenantStatesClient,
)
from saas_admin_sdk.http_client import HttpClient
from saas_admin_sdk.listing import ListQuery
from saas_admin_sdk.models import ExportFormat, Invoice

BASE_URL = "https://api.example.com"


@responses.activate
def test_tenant_list_sends_bearer_token_and_query(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/tenants",
        json={
            "success": True,
            "data": [{"id": "t-1", "tenantName": "Acme", "status": "active"}],
            "meta": {"page": 1, "limit": 10, "total": 1, "totalPages": 1},
        },
        match=[
            matchers.query_param_matcher(
                {"page": "1", "limit": "10", "search": "ac", "sortBy": "createdDate", "sortOrder": "desc"}
            )
        ],
        status=200,
    )

    client = TenantsClient(http=http, access_token="token-1")
    page = client.list(ListQuery(sort_by="createdDate", sort_order="desc", filters={"tenantName": "ac"}))

    assert responses.calls[0].request.headers["Authorization"] == "Bearer token-1"
    assert page.total == 1
    assert page.items[0].tenant_name == "Acme"


@responses.activate
def test_tenant_users(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/tenants/t-1/users",
        json={"data": [{"id": "u-1", "name": "Ann", "email": "ann@acme.io", "role": "admin"}]},
        status=200,
    )

    users = TenantsClient(http=http).list_users("t-1")

    assert [user.email for user in users] == ["ann@acme.io"]


@responses.activate
def test_tenant_state_mutations_hit_their_endpoints(http: HttpClient) -> None:
    responses.add(responses.PATCH, f"{BASE_URL}/tenant-states/t-1", json={"success": True}, status=200)
    responses.add(responses.PATCH, f"{BASE_URL}/tenant-states/t-1/trial", json={"success": True}, status=200)
    responses.add(responses.PATCH, f"{BASE_URL}/tenant-states/t-1/subscription", json={"success": True}, status=200)
    client = TenantStatesClient(http=http)

    client.change_state("t-1", {"status": "suspended"})
    client.update_trial("t-1", {"action": "extend", "extendDays": 7})
    client.update_subscription("t-1", {"action": "cancel"})

    assert [call.request.url for call in responses.calls] == [
        f"{BASE_URL}/tenant-states/t-1",
        f"{BASE_URL}/tenant-states/t-1/trial",
        f"{BASE_URL}/tenant-states/t-1/subscription",
    ]
    assert json.loads(responses.calls[1].request.body) == {"action": "extend", "extendDays": 7}


@responses.activate
def test_invoice_mark_paid_and_receipt(http: HttpClient) -> None:
    responses.add(
        responses.PATCH,
        f"{BASE_URL}/invoices/inv-1/mark-paid",
        json={"success": True, "data": {"id": "inv-1", "status": "paid"}},
        status=200,
    )
    responses.add(
        responses.GET,
        f"{BASE_URL}/invoices/inv-1/receipt",
        body=b"%PDF-1.4",
        content_type="application/pdf",
        status=200,
    )
    client = InvoicesClient(http=http)

    result = client.mark_paid("inv-1", {"paymentMethod": "card", "amount": 10.0, "paymentDate": "2024-01-01"})
    receipt = client.download_receipt("inv-1")

    assert result == {"id": "inv-1", "status": "paid"}
    assert receipt == b"%PDF-1.4"


@responses.activate
def test_export_posts_format_and_filters(http: HttpClient) -> None:
    responses.add(responses.POST, f"{BASE_URL}/invoices/export", body=b"a,b\n1,2\n", status=200)

    content = InvoicesClient(http=http).export(
        ExportFormat.EXCEL,
        ListQuery(page=3, filters={"status": "unpaid"}),
    )

    assert content == b"a,b\n1,2\n"
    assert json.loads(responses.calls[0].request.body) == {"format": "excel", "filters": {"status": "unpaid"}}


@responses.activate
def test_deleted_document_two_phase_upload(http: HttpClient) -> None:
    upload_url = "https://storage.example.com/docs/abc?sig=1"
    responses.add(
        responses.POST,
        f"{BASE_URL}/deleted-documents/d-1/upload-url",
        json={"success": True, "data": {"uploadUrl": upload_url, "s3Key": "docs/abc"}},
        status=200,
    )
    responses.add(responses.PUT, upload_url, status=200)
    responses.add(responses.PATCH, f"{BASE_URL}/deleted-documents/d-1/file-uploaded", json={"success": True}, status=200)
    progress: list[int] = []

    result = DeletedDocumentsClient(http=http, access_token="token-1").upload_file(
        "d-1",
        file_name="contract.pdf",
        content=b"%PDF" * 10,
        content_type="application/pdf",
        on_progress=progress.append,
    )

    presign, put, finalize = responses.calls
    assert json.loads(presign.request.body) == {"fileName": "contract.pdf", "contentType": "application/pdf"}
    assert "Authorization" not in put.request.headers
    assert json.loads(finalize.request.body) == {"s3Key": "docs/abc", "fileSize": 40}
    assert result.s3_key == "docs/abc"
    assert progress[-1] == 100


@responses.activate
def test_deleted_document_restore_and_bulk(http: HttpClient) -> None:
    responses.add(responses.POST, f"{BASE_URL}/deleted-documents/d-1/restore", json={"success": True}, status=200)
    responses.add(responses.DELETE, f"{BASE_URL}/deleted-documents/d-2/permanent", json={"success": True}, status=200)
    responses.add(responses.POST, f"{BASE_URL}/deleted-documents/bulk-restore", json={"restored": 2}, status=200)
    client = DeletedDocumentsClient(http=http)

    client.restore("d-1")
    client.permanent_delete("d-2")
    result = client.bulk_restore(["d-3", "d-4"])

    assert result == {"restored": 2}
    assert json.loads(responses.calls[2].request.body) == {"ids": ["d-3", "d-4"]}


@responses.activate
def test_system_metrics(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/system-metrics",
        json={"success": True, "data": {"activeTenants": 12, "activeUsers": 340, "errorRate": 0.5}},
        status=200,
    )

    metrics = SystemMetricsClient(http=http).get_metrics()

    assert metrics.active_tenants == 12
    assert metrics.error_rate == 0.5


def test_invoice_effective_status_marks_past_due_as_overdue() -> None:
    from datetime import date

    invoice = Invoice(id="inv-1", status="unpaid", dueDate="2024-01-10")
    assert invoice.effective_status(today=date(2024, 1, 11)) == "overdue"
    assert invoice.effective_status(today=date(2024, 1, 10)) == "unpaid"
    paid = Invoice(id="inv-2", status="paid", dueDate="2024-01-10")
    assert paid.effective_status(today=date(2024, 2, 1)) == "paid"


@responses.activate
def test_plans_list_and_whole_replacement(http: HttpClient) -> None:
    responses.add(
        responses.GET,
        f"{BASE_URL}/subscription-plans",
        json={"plans": [{"id": "p-1", "name": "Pro", "price": 49, "billingCycle": "monthly", "maxUsers": 25, "storageLimit": 100}]},
        match=[matchers.query_param_matcher({"page": "1", "limit": "10", "search": "pro"})],
        status=200,
    )
    responses.add(responses.PUT, f"{BASE_URL}/subscription-plans/p-1", json={"success": True, "data": {"id": "p-1"}}, status=200)
    responses.add(responses.DELETE, f"{BASE_URL}/subscription-plans/p-1", status=204)
    client = PlansClient(http=http)

    page = client.list(ListQuery(filters={"name": "pro"}))
    plan = page.items[0]
    assert (plan.name, plan.price, plan.max_users, plan.storage_limit) == ("Pro", 49.0, 25, 100)

    client.update("p-1", {"name": "Pro", "price": 59})
    client.delete("p-1")

    assert [call.request.method for call in responses.calls] == ["GET", "PUT", "DELETE"]
    assert json.loads(responses.calls[1].request.body) == {"name": "Pro", "price": 59}
