"""Integration tests for auth flow (requires running PG + Redis).

Run: RUN_INTEGRATION=1 pytest tests/integration/test_auth_flow.py -v
Pre-condition: alembic upgrade head
"""

import uuid

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio(loop_scope="session")


def unique_user() -> dict[str, str]:
    """Fresh credentials per test to avoid pollution between runs."""
    return {"email": f"test_{uuid.uuid4().hex[:8]}@example.com", "password": "TestPass1"}


class TestRegister:
    async def test_register_success(self, client: AsyncClient) -> None:
        user = unique_user()
        resp = await client.post("/api/v1/auth/register", json=user)
        assert resp.status_code == 201
        body = resp.json()
        assert body["code"] == 0
        assert body["data"]["email"] == user["email"]
        assert "user_id" in body["data"]

    async def test_register_duplicate_email_any_case(self, client: AsyncClient) -> None:
        user = unique_user()
        await client.post("/api/v1/auth/register", json=user)
        resp = await client.post(
            "/api/v1/auth/register", json={**user, "email": user["email"].upper()}
        )
        assert resp.status_code == 409
        assert resp.json()["code"] == 1001

    async def test_register_weak_password(self, client: AsyncClient) -> None:
        resp = await client.post(
            "/api/v1/auth/register", json={**unique_user(), "password": "weak"}
        )
        assert resp.status_code == 422


class TestLogin:
    async def test_login_then_refresh(self, client: AsyncClient) -> None:
        user = unique_user()
        await client.post("/api/v1/auth/register", json=user)
        resp = await client.post("/api/v1/auth/login", json=user)
        assert resp.status_code == 200
        refresh = resp.json()["data"]["refresh_token"]

        resp = await client.post("/api/v1/auth/refresh", json={"refresh_token": refresh})
        assert resp.status_code == 200
        assert resp.json()["data"]["access_token"]

    async def test_wrong_password_and_unknown_email_look_the_same(
        self, client: AsyncClient
    ) -> None:
        user = unique_user()
        await client.post("/api/v1/auth/register", json=user)
        wrong = await client.post(
            "/api/v1/auth/login", json={**user, "password": "WrongPass1"}
        )
        unknown = await client.post("/api/v1/auth/login", json=unique_user())
        assert wrong.status_code == unknown.status_code == 401
        assert wrong.json()["message"] == unknown.json()["message"]


class TestEntitlementMe:
    async def test_new_user_has_no_access(self, client: AsyncClient) -> None:
        user = unique_user()
        await client.post("/api/v1/auth/register", json=user)
        login = await client.post("/api/v1/auth/login", json=user)
        token = login.json()["data"]["access_token"]

        resp = await client.get(
            "/api/v1/entitlements/me", headers={"Authorization": f"Bearer {token}"}
        )
        assert resp.status_code == 200
        assert resp.json()["data"]["has_access"] is False
