"""Shared test fixtures."""

import os

# Settings are read once at import; JWT_SECRET has no default
os.environ.setdefault("JWT_SECRET", "unit-test-secret-not-for-production-use")
# Integration flows register and log in far more than 5 times a minute
os.environ.setdefault("RATE_LIMIT_AUTH_PER_MINUTE", "1000")

import uuid
from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app  # noqa: E402
from src.ss_common.database import get_db_session  # noqa: E402
from src.ss_gateway.auth.dependencies import get_current_user  # noqa: E402
from src.ss_gateway.user.db_models import UserModel  # noqa: E402


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client for testing FastAPI endpoints."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def mock_session() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def current_user() -> UserModel:
    user = UserModel()
    user.id = uuid.uuid4()
    user.email = "promoter@example.com"
    user.password_hash = "$2b$12$fakehash"
    user.is_active = True
    return user


@pytest.fixture
def api_overrides(mock_session: AsyncMock, current_user: UserModel):
    """Route DB sessions to a mock and authenticate as `current_user`."""

    async def _db() -> AsyncGenerator[AsyncMock, None]:
        yield mock_session

    app.dependency_overrides[get_db_session] = _db
    app.dependency_overrides[get_current_user] = lambda: current_user
    yield
    app.dependency_overrides.clear()
