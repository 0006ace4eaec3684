"""
Fixtures for integration tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.database import get_database
from app.main import app


@pytest.fixture
async def client(mock_db):
    """
    HTTP client for testing API endpoints.

    Overrides the database dependency with the mocked database; the lifespan
    (real MongoDB connection) is not run by ASGITransport.
    """
    async def override_get_db():
        return mock_db

    app.dependency_overrides[get_database] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
