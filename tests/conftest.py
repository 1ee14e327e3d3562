"""
pytest fixtures: a fresh application over its own SQLite file per test.
"""

from typing import Generator

import pytest
from fastapi.testclient import TestClient

from fixture_utils import FRONTEND_URL, sqlite_url
from main import Settings, create_app


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway database."""
    return Settings(database_url=sqlite_url(tmp_path / "products.db"), frontend_url=FRONTEND_URL)


@pytest.fixture
def client(settings: Settings) -> Generator[TestClient, None, None]:
    """Test client with the lifespan (table creation) already run."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def product(client: TestClient) -> dict:
    """A stored product, as returned by the create endpoint."""
    response = client.post("/api/products", json={"name": "Mouse Testing", "price": 40})
    assert response.status_code == 201
    return response.json()["data"]
