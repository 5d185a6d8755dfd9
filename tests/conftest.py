"""Pytest configuration and fixtures for API tests."""
import os

# Set test env BEFORE any imports that use config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "testpass123"
os.environ["ADMIN_PASSWORD_HASH"] = ""
os.environ["JWT_SECRET"] = "test-secret-for-the-leaderboard-suite-0123456789"

import pytest
from httpx import ASGITransport, AsyncClient

from leaderboard.models import init_db
from leaderboard.models.base import engine
from web.api.main import app


@pytest.fixture(autouse=True)
async def _fresh_db():
    """Empty schema for every test (ASGI lifespan doesn't run with httpx).

    Disposing the engine closes the single in-memory connection, which drops the database.
    """
    await init_db()
    yield
    await engine.dispose()


@pytest.fixture
async def client():
    """Async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
async def auth_headers(client):
    """Login as admin and return Authorization headers for protected endpoints."""
    r = await client.post(
        "/api/auth/login",
        json={"username": "admin", "password": "testpass123"},
    )
    assert r.status_code == 200, f"Login failed: {r.text}"
    token = r.json()["token"]
    return {"Authorization": f"Bearer {token}"}
