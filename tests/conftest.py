"""
Shared test fixtures.

Each test gets its own in-memory SQLite database (aiosqlite + StaticPool),
a fresh app built around it, and helpers for minting identity-provider tokens.
"""
import base64
import os
import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set environment variables BEFORE importing any app modules
TEST_JWT_SECRET = "test-secret-key-for-testing-only"
TEST_ACCOUNT_KEY = base64.urlsafe_b64encode(b"0" * 32).decode()

os.environ.update({
    "APP_ENV": "test",
    "DATABASE_URL": "sqlite+aiosqlite:///:memory:",
    "JWT_SECRET": TEST_JWT_SECRET,
    "ACCOUNT_NUMBER_KEY": TEST_ACCOUNT_KEY,
})

from app.core.crypto import AccountNumberCipher  # noqa: E402
from app.db.base import Database  # noqa: E402
from app.main import create_app  # noqa: E402
from app.schemas.vendor import VendorCreate, VendorUpdate  # noqa: E402
from app.services.vendor import VendorService  # noqa: E402

COMPLETE_PROFILE = {
    "address": "1 Main St",
    "city": "Springfield",
    "state": "IL",
    "zip_code": "62701",
    "tax_id": "12-3456789",
}


def make_token(sub: str, role: str | None = None, expires_in: timedelta = timedelta(hours=1)) -> str:
    now = datetime.now(timezone.utc)
    claims = {"sub": sub, "iat": now, "exp": now + expires_in}
    if role:
        claims["user_role"] = role
    return jwt.encode(claims, TEST_JWT_SECRET, algorithm="HS256")


def auth_header(sub: str, role: str | None = None) -> dict:
    return {"Authorization": f"Bearer {make_token(sub, role)}"}


# ==== DATABASE FIXTURES ==== #


@pytest_asyncio.fixture
async def database():
    db = Database("sqlite+aiosqlite:///:memory:")
    await db.create_all()
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def session(database):
    async with database.session_factory() as s:
        yield s


@pytest.fixture
def cipher():
    return AccountNumberCipher(TEST_ACCOUNT_KEY)


@pytest.fixture
def service(session, cipher):
    return VendorService.for_session(session, cipher)


@pytest.fixture
def vendor_user_id():
    return str(uuid.uuid4())


@pytest_asyncio.fixture
async def draft_vendor(service, vendor_user_id):
    return await service.create_vendor(
        VendorCreate(company_id="c1", company_name="Acme"), vendor_user_id
    )


@pytest_asyncio.fixture
async def submitted_vendor(service, draft_vendor, vendor_user_id):
    await service.update_vendor(draft_vendor.id, VendorUpdate(**COMPLETE_PROFILE), vendor_user_id)
    return await service.submit_vendor(draft_vendor.id, vendor_user_id)


# ==== APPLICATION FIXTURES ==== #


@pytest.fixture
def app(database):
    return create_app(database=database)


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def vendor_headers(vendor_user_id):
    return auth_header(vendor_user_id, "vendor")


@pytest.fixture
def approver_id():
    return str(uuid.uuid4())


@pytest.fixture
def approver_headers(approver_id):
    return auth_header(approver_id, "approver")
