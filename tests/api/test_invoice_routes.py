"""API tests for invoice endpoints."""

from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from srecha.api.dependencies import get_invoice_service
from srecha.api.main import create_app
from srecha.core.exceptions import StorageUnavailableError


@pytest_asyncio.fixture
async def refs(async_client: AsyncClient) -> dict:
    client = await async_client.post("/api/catalog/clients", json={"name": "C1"})
    product = await async_client.post(
        "/api/catalog/products", json={"code": "SKU-1", "name": "Green tea", "price": 10.0}
    )
    return {"client_id": client.json()["id"], "product_id": product.json()["id"]}


@pytest.fixture
def invoice_payload(refs: dict) -> dict:
    return {
        "invoice_number": "12/2024",
        "client_id": refs["client_id"],
        "issue_date": "2024-03-15",
        "items": [{"product_id": refs["product_id"], "quantity": 3, "unit_price": 10.0}],
    }


async def _create(async_client: AsyncClient, payload: dict) -> dict:
    response = await async_client.post("/api/invoices", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreateInvoice:
    async def test_create(self, async_client, invoice_payload):
        data = await _create(async_client, invoice_payload)

        assert data["status"] == "draft"
        assert data["total"] == 30.0
        assert data["client_name"] == "C1"
        assert data["items"][0]["line_total"] == 30.0
        assert data["items"][0]["product_name"] == "Green tea"

    async def test_number_sharing_document_filename_is_conflict(
        self, async_client, invoice_payload
    ):
        await _create(async_client, invoice_payload)

        response = await async_client.post(
            "/api/invoices", json=invoice_payload | {"invoice_number": "12-2024"}
        )

        assert response.status_code == 409
        assert response.json()["details"]["key"] == "document_filename"

    async def test_duplicate_number_is_conflict(self, async_client, invoice_payload):
        await _create(async_client, invoice_payload)

        response = await async_client.post("/api/invoices", json=invoice_payload)

        assert response.status_code == 409
        assert response.json()["error_code"] == "DUPLICATE_KEY"

    async def test_unknown_client_is_bad_request(self, async_client, invoice_payload):
        invoice_payload["client_id"] = 999
        response = await async_client.post("/api/invoices", json=invoice_payload)

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "client_id"

    async def test_no_items_is_bad_request(self, async_client, invoice_payload):
        invoice_payload["items"] = []
        response = await async_client.post("/api/invoices", json=invoice_payload)
        assert response.status_code == 400

    async def test_malformed_body_is_bad_request(self, async_client, invoice_payload):
        invoice_payload["items"][0]["quantity"] = -1
        response = await async_client.post("/api/invoices", json=invoice_payload)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"


class TestReadInvoices:
    async def test_get(self, async_client, invoice_payload):
        created = await _create(async_client, invoice_payload)

        response = await async_client.get(f"/api/invoices/{created['id']}")

        assert response.status_code == 200
        assert response.json()["invoice_number"] == "12/2024"

    async def test_get_missing(self, async_client):
        response = await async_client.get("/api/invoices/999")

        assert response.status_code == 404
        body = response.json()
        assert body["error_code"] == "INVOICE_NOT_FOUND"
        assert body["hint"]

    async def test_list(self, async_client, invoice_payload):
        await _create(async_client, invoice_payload)

        response = await async_client.get("/api/invoices")

        assert response.status_code == 200
        assert response.json()["total"] == 1
        assert "items" not in response.json()["invoices"][0]

    async def test_client_history(self, async_client, invoice_payload, refs):
        await _create(async_client, invoice_payload)

        response = await async_client.get(f"/api/invoices/clients/{refs['client_id']}/history")
        assert response.json()["total"] == 1

        response = await async_client.get("/api/invoices/clients/999/history")
        assert response.json() == {"invoices": [], "total": 0}


class TestStatusAndEdits:
    async def test_transitions(self, async_client, invoice_payload):
        invoice_id = (await _create(async_client, invoice_payload))["id"]
        url = f"/api/invoices/{invoice_id}/status"

        response = await async_client.post(url, json={"status": "issued"})
        assert response.status_code == 200
        assert response.json()["status"] == "issued"

        response = await async_client.post(url, json={"status": "draft"})
        assert response.status_code == 409
        assert response.json()["error_code"] == "INVALID_TRANSITION"

        response = await async_client.post(url, json={"status": "bogus"})
        assert response.status_code == 400

        response = await async_client.post(url, json={"status": "paid"})
        assert response.status_code == 200

        response = await async_client.patch(f"/api/invoices/{invoice_id}", json={"notes": "x"})
        assert response.status_code == 409
        assert response.json()["error_code"] == "IMMUTABLE_STATE"

    async def test_patch_header(self, async_client, invoice_payload):
        invoice_id = (await _create(async_client, invoice_payload))["id"]

        response = await async_client.patch(
            f"/api/invoices/{invoice_id}", json={"notes": "net 30"}
        )

        assert response.status_code == 200
        assert response.json()["notes"] == "net 30"
        assert response.json()["total"] == 30.0

    async def test_patch_rejects_status(self, async_client, invoice_payload):
        invoice_id = (await _create(async_client, invoice_payload))["id"]
        response = await async_client.patch(
            f"/api/invoices/{invoice_id}", json={"status": "paid"}
        )
        assert response.status_code == 400

    async def test_replace_items(self, async_client, invoice_payload, refs):
        invoice_id = (await _create(async_client, invoice_payload))["id"]

        response = await async_client.put(
            f"/api/invoices/{invoice_id}/items",
            json={"items": [{"product_id": refs["product_id"], "quantity": 1, "unit_price": 2.5}]},
        )

        assert response.status_code == 200
        assert response.json()["total"] == 2.5
        assert len(response.json()["items"]) == 1

    async def test_delete(self, async_client, invoice_payload):
        invoice_id = (await _create(async_client, invoice_payload))["id"]

        response = await async_client.delete(f"/api/invoices/{invoice_id}")
        assert response.status_code == 204

        response = await async_client.delete(f"/api/invoices/{invoice_id}")
        assert response.status_code == 404

    async def test_delete_removes_from_listings(self, async_client, invoice_payload, refs):
        doomed = (await _create(async_client, invoice_payload))["id"]
        kept = (await _create(async_client, invoice_payload | {"invoice_number": "13/2024"}))["id"]

        await async_client.delete(f"/api/invoices/{doomed}")

        listed = (await async_client.get("/api/invoices")).json()
        assert [i["id"] for i in listed["invoices"]] == [kept]
        history = (
            await async_client.get(f"/api/invoices/clients/{refs['client_id']}/history")
        ).json()
        assert [i["id"] for i in history["invoices"]] == [kept]


class TestStorageFailures:
    async def test_storage_unavailable_is_503(self, container):
        service = AsyncMock()
        service.list_invoices.side_effect = StorageUnavailableError(
            "list_invoices", "database is locked", attempts=3
        )
        app = create_app(container=container)
        app.dependency_overrides[get_invoice_service] = lambda: service

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/api/invoices")

        assert response.status_code == 503
        assert response.json()["error_code"] == "STORAGE_UNAVAILABLE"
