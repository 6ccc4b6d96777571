"""
Integration tests for the /api/v1/vendors endpoints.

Full HTTP flow through the app with an in-memory database and locally minted
identity-provider tokens.
"""
import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.exc import OperationalError

from app.core.config import Settings
from app.main import create_app
from app.services.vendor import VendorService
from tests.conftest import TEST_ACCOUNT_KEY, auth_header

BASE = "/api/v1/vendors"

PROFILE = {
    "address": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "zipCode": "62701",
    "taxId": "12-3456789",
}


async def _create(client, headers, **fields) -> dict:
    body = {"companyId": "c1", "companyName": "Acme", **fields}
    response = await client.post(BASE, json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def _submitted(client, headers) -> dict:
    vendor = await _create(client, headers, **PROFILE)
    response = await client.patch(f"{BASE}/{vendor['id']}/submit", headers=headers)
    assert response.status_code == 200, response.text
    return response.json()["data"]


class TestCreateVendor:
    async def test_create_returns_public_projection(self, client, vendor_headers):
        response = await client.post(
            BASE,
            json={
                "companyId": "c1",
                "companyName": "  Acme  ",
                "bankName": "First Bank",
                "routingNumber": "123456789",
                "accountNumber": "000123456789",
                "accountType": "checking",
            },
            headers=vendor_headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Vendor created successfully"
        vendor = body["data"]
        assert vendor["companyName"] == "Acme"
        assert vendor["status"] == "draft"
        assert vendor["bankComplete"] is True
        assert "accountNumberEncrypted" not in vendor
        assert "accountNumber" not in vendor
        assert "000123456789" not in response.text

    async def test_create_requires_actor(self, client):
        response = await client.post(BASE, json={"companyId": "c1", "companyName": "Acme"})

        assert response.status_code == 401
        assert response.json()["success"] is False

    async def test_invalid_token(self, client):
        response = await client.post(
            BASE,
            json={"companyId": "c1", "companyName": "Acme"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401

    @pytest.mark.parametrize(
        "field, value",
        [
            ("companyName", ""),
            ("routingNumber", "12345"),
            ("accountType", "brokerage"),
            ("website", "ftp://acme.example"),
            ("zipCode", "!"),
            ("vendorUserId", "not-a-uuid"),
            ("accountNumber", "1" * 21),
            ("phone", "-------"),
            ("phone", "(((())))"),
            ("phone", "+.........."),
            ("phone", "555-1234-5678-9012-34567"),
        ],
    )
    async def test_field_validation(self, client, vendor_headers, field, value):
        body = {"companyId": "c1", "companyName": "Acme", field: value}

        response = await client.post(BASE, json=body, headers=vendor_headers)

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert data["message"] == "Validation failed"
        assert field in [e["field"] for e in data["errors"]]

    @pytest.mark.parametrize("phone", ["+1 (555) 123-4567", "555.123.4567", "5551234"])
    async def test_phone_accepts_separators(self, client, vendor_headers, phone):
        vendor = await _create(client, vendor_headers, phone=phone)

        assert vendor["phone"] == phone

    async def test_vendor_user_id_stored_canonically(self, client, vendor_headers):
        user_id = uuid.uuid4()

        vendor = await _create(client, vendor_headers, vendorUserId=f"urn:uuid:{user_id.hex.upper()}")

        assert vendor["vendorUserId"] == str(user_id)

    async def test_missing_company_id(self, client, vendor_headers):
        response = await client.post(BASE, json={"companyName": "Acme"}, headers=vendor_headers)

        assert response.status_code == 400
        assert "companyId" in [e["field"] for e in response.json()["errors"]]


class TestReadVendors:
    async def test_get_vendor(self, client, vendor_headers):
        vendor = await _create(client, vendor_headers)

        response = await client.get(f"{BASE}/{vendor['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == vendor["id"]

    async def test_get_unknown_vendor(self, client):
        response = await client.get(f"{BASE}/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Vendor not found"}

    async def test_get_malformed_id(self, client):
        response = await client.get(f"{BASE}/not-a-uuid")

        assert response.status_code == 400

    async def test_list_with_filters_and_pagination(self, client, vendor_headers):
        submitted = await _submitted(client, vendor_headers)
        for i in range(3):
            await _create(client, vendor_headers, companyName=f"Draft {i}")

        response = await client.get(BASE, params={"status": "submitted", "limit": 20, "page": 1})

        assert response.status_code == 200
        data = response.json()["data"]
        assert [v["id"] for v in data["vendors"]] == [submitted["id"]]
        assert data["pagination"] == {"page": 1, "limit": 20, "total": 1, "totalPages": 1}

        response = await client.get(BASE, params={"companyId": "c1", "limit": 2, "page": 2})
        data = response.json()["data"]
        assert len(data["vendors"]) == 2
        assert data["pagination"]["total"] == 4
        assert data["pagination"]["totalPages"] == 2

    async def test_list_search(self, client, vendor_headers):
        await _create(client, vendor_headers, companyName="Northwind Traders")
        await _create(client, vendor_headers, companyName="Contoso")

        response = await client.get(BASE, params={"search": "northwind"})

        names = [v["companyName"] for v in response.json()["data"]["vendors"]]
        assert names == ["Northwind Traders"]

    async def test_list_rejects_unknown_status(self, client):
        response = await client.get(BASE, params={"status": "archived"})

        assert response.status_code == 400

    async def test_pending(self, client, vendor_headers):
        submitted = await _submitted(client, vendor_headers)
        await _create(client, vendor_headers, companyName="Still drafting")

        response = await client.get(f"{BASE}/pending")

        assert response.status_code == 200
        assert [v["id"] for v in response.json()["data"]] == [submitted["id"]]


class TestUpdateVendor:
    async def test_partial_update(self, client, vendor_headers):
        vendor = await _create(client, vendor_headers, description="Widgets")

        response = await client.put(
            f"{BASE}/{vendor['id']}", json={"city": "Springfield"}, headers=vendor_headers
        )

        assert response.status_code == 200
        updated = response.json()["data"]
        assert updated["city"] == "Springfield"
        assert updated["description"] == "Widgets"

    async def test_status_cannot_be_set_directly(self, client, vendor_headers):
        vendor = await _create(client, vendor_headers)

        response = await client.put(
            f"{BASE}/{vendor['id']}", json={"status": "approved"}, headers=vendor_headers
        )

        assert response.status_code == 400

    async def test_update_submitted_vendor_conflicts(self, client, vendor_headers):
        vendor = await _submitted(client, vendor_headers)

        response = await client.put(
            f"{BASE}/{vendor['id']}", json={"city": "Elsewhere"}, headers=vendor_headers
        )

        assert response.status_code == 409
        assert "submitted" in response.json()["message"]


class TestLifecycleEndpoints:
    async def test_submit_incomplete_vendor(self, client, vendor_headers):
        vendor = await _create(client, vendor_headers)

        response = await client.patch(f"{BASE}/{vendor['id']}/submit", headers=vendor_headers)

        assert response.status_code == 409
        assert "taxId" in response.json()["message"] or "tax_id" in response.json()["message"]

    async def test_approve_activate(self, client, vendor_headers, approver_headers, approver_id):
        vendor = await _submitted(client, vendor_headers)

        response = await client.patch(f"{BASE}/{vendor['id']}/approve", headers=approver_headers)
        assert response.status_code == 200
        approved = response.json()["data"]
        assert approved["status"] == "approved"
        assert approved["approverUserId"] == approver_id
        assert approved["approvedAt"] is not None

        response = await client.patch(f"{BASE}/{vendor['id']}/approve", headers=approver_headers)
        assert response.status_code == 409

        response = await client.patch(f"{BASE}/{vendor['id']}/activate", headers=vendor_headers)
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "active"

    async def test_approve_requires_approver_role(self, client, vendor_headers):
        vendor = await _submitted(client, vendor_headers)

        response = await client.patch(f"{BASE}/{vendor['id']}/approve", headers=vendor_headers)

        assert response.status_code == 403

    async def test_admin_may_approve(self, client, vendor_headers):
        vendor = await _submitted(client, vendor_headers)

        response = await client.patch(
            f"{BASE}/{vendor['id']}/approve", headers=auth_header(str(uuid.uuid4()), "admin")
        )

        assert response.status_code == 200

    async def test_reject_with_reason(self, client, vendor_headers, approver_headers):
        vendor = await _submitted(client, vendor_headers)

        response = await client.patch(
            f"{BASE}/{vendor['id']}/reject",
            json={"reason": "Tax ID does not match"},
            headers=approver_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "rejected"

        logs = (await client.get(f"{BASE}/{vendor['id']}/audit-logs")).json()["data"]
        rejected = [e for e in logs if e["action"] == "VENDOR_REJECTED"]
        assert rejected[0]["details"]["reason"] == "Tax ID does not match"

    async def test_reject_without_body(self, client, vendor_headers, approver_headers):
        vendor = await _submitted(client, vendor_headers)

        response = await client.patch(f"{BASE}/{vendor['id']}/reject", headers=approver_headers)

        assert response.status_code == 200

    async def test_transition_on_unknown_vendor(self, client, vendor_headers):
        response = await client.patch(f"{BASE}/{uuid.uuid4()}/submit", headers=vendor_headers)

        assert response.status_code == 404


class TestDeleteVendor:
    async def test_delete_draft(self, client, vendor_headers):
        vendor = await _create(client, vendor_headers)

        response = await client.delete(f"{BASE}/{vendor['id']}", headers=vendor_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Vendor deleted successfully"
        assert (await client.get(f"{BASE}/{vendor['id']}")).status_code == 404

    async def test_delete_submitted_vendor(self, client, vendor_headers):
        vendor = await _submitted(client, vendor_headers)

        response = await client.delete(f"{BASE}/{vendor['id']}", headers=vendor_headers)

        assert response.status_code == 400
        assert (await client.get(f"{BASE}/{vendor['id']}")).status_code == 200

    async def test_delete_requires_actor(self, client, vendor_headers):
        vendor = await _create(client, vendor_headers)

        response = await client.delete(f"{BASE}/{vendor['id']}")

        assert response.status_code == 401


class TestAuditLogEndpoint:
    async def test_one_entry_per_action(self, client, vendor_headers, approver_headers, vendor_user_id):
        vendor = await _submitted(client, vendor_headers)
        await client.patch(f"{BASE}/{vendor['id']}/approve", headers=approver_headers)

        response = await client.get(f"{BASE}/{vendor['id']}/audit-logs")

        assert response.status_code == 200
        actions = sorted(e["action"] for e in response.json()["data"])
        assert actions == ["VENDOR_APPROVED", "VENDOR_CREATED", "VENDOR_SUBMITTED"]
        created = [e for e in response.json()["data"] if e["action"] == "VENDOR_CREATED"][0]
        assert created["userId"] == vendor_user_id

    async def test_unknown_vendor(self, client):
        response = await client.get(f"{BASE}/{uuid.uuid4()}/audit-logs")

        assert response.status_code == 404


class TestErrorHandling:
    async def test_store_failure_is_generic_500(self, client, monkeypatch):
        async def boom(self, vendor_id):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        monkeypatch.setattr(VendorService, "get_vendor", boom)

        response = await client.get(f"{BASE}/{uuid.uuid4()}")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert "connection refused" not in body["message"]
        assert "details" not in body

    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "ok"

    async def test_health_degraded_when_database_unavailable(self, app, client, monkeypatch):
        def broken_session():
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(app.state.db, "session_factory", broken_session)

        response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"
        assert response.json()["database"] == "unavailable"


def _settings(**overrides) -> Settings:
    values = {"APP_ENV": "test", "ACCOUNT_NUMBER_KEY": TEST_ACCOUNT_KEY, **overrides}
    return Settings(**values)


async def _client_for(settings: Settings, database) -> AsyncClient:
    app = create_app(settings=settings, database=database)
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestAppSettings:
    async def test_tokens_verified_with_app_secret(self, database, vendor_headers):
        async with await _client_for(_settings(JWT_SECRET="another-secret"), database) as c:
            response = await c.post(
                BASE, json={"companyId": "c1", "companyName": "Acme"}, headers=vendor_headers
            )

        assert response.status_code == 401

    async def test_page_size_limits(self, database, vendor_headers):
        settings = _settings(DEFAULT_PAGE_SIZE=2, MAX_PAGE_SIZE=5)
        async with await _client_for(settings, database) as c:
            for i in range(3):
                await _create(c, vendor_headers, companyName=f"Vendor {i}")

            response = await c.get(BASE)
            assert response.json()["data"]["pagination"]["limit"] == 2
            assert len(response.json()["data"]["vendors"]) == 2

            response = await c.get(BASE, params={"limit": 10})
            assert response.status_code == 400
            assert response.json()["errors"][0]["field"] == "limit"

    async def test_development_exposes_failure_details(self, database, monkeypatch):
        async def boom(self, vendor_id):
            raise OperationalError("SELECT", {}, Exception("connection refused"))

        monkeypatch.setattr(VendorService, "get_vendor", boom)

        async with await _client_for(_settings(APP_ENV="development"), database) as c:
            response = await c.get(f"{BASE}/{uuid.uuid4()}")

        assert response.status_code == 500
        assert "connection refused" in response.json()["details"]
