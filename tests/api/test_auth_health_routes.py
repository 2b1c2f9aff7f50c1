"""API tests for login and health endpoints."""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from pydantic import SecretStr

from srecha.api.main import create_app
from srecha.application.container import build_container


@pytest_asyncio.fixture
async def admin_client(settings) -> AsyncGenerator[AsyncClient, None]:
    """App whose container bootstraps an admin user."""
    settings.auth.admin_username = "admin"
    settings.auth.admin_password = SecretStr("s3cret")
    container = build_container(settings)
    await container.startup()

    transport = ASGITransport(app=create_app(container=container))
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    await container.shutdown()


class TestLogin:
    async def test_login_success(self, admin_client):
        response = await admin_client.post(
            "/api/auth/login", json={"username": "admin", "password": "s3cret"}
        )

        assert response.status_code == 200
        assert response.json()["username"] == "admin"
        assert "password" not in response.text

    async def test_wrong_password(self, admin_client):
        response = await admin_client.post(
            "/api/auth/login", json={"username": "admin", "password": "nope"}
        )

        assert response.status_code == 401
        assert response.json()["error_code"] == "AUTH_FAILED"
        assert "nope" not in response.text

    async def test_unknown_user(self, admin_client):
        response = await admin_client.post(
            "/api/auth/login", json={"username": "ghost", "password": "s3cret"}
        )
        assert response.status_code == 401

    async def test_no_users_configured(self, async_client):
        response = await async_client.post(
            "/api/auth/login", json={"username": "admin", "password": "s3cret"}
        )
        assert response.status_code == 401


class TestHealth:
    async def test_health(self, async_client):
        response = await async_client.get("/api/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "ok"
        assert body["invoices"] == 0

    async def test_request_id_header(self, async_client):
        response = await async_client.get("/api/health")
        assert response.headers.get("X-Request-ID")

    async def test_caller_request_id_echoed(self, async_client):
        response = await async_client.get("/api/health", headers={"X-Request-ID": "abc123"})
        assert response.headers["X-Request-ID"] == "abc123"
