"""Shared fixtures for API integration tests."""

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from chunav.database import get_db
from chunav.main import app

PREFIX = "/api/v1/predictions"


@pytest.fixture(scope="function")
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for API tests."""
    # Every request shares the test session
    async def get_test_db():
        yield db_session

    app.dependency_overrides[get_db] = get_test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"X-User-Id": "user-1"}


@pytest.fixture
def other_headers() -> dict[str, str]:
    return {"X-User-Id": "user-2"}


@pytest.fixture
async def created_set(client, auth_headers) -> dict:
    """Create a 2025 Bihar prediction set for user-1 through the API."""
    response = await client.post(
        f"{PREFIX}/create",
        json={"election_type": "assembly", "election_year": 2025, "state": "Bihar"},
        headers=auth_headers,
    )
    assert response.status_code == 201
    return response.json()
