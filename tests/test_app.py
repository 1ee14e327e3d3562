"""
Tests for application wiring: startup, health, docs, CORS and request ids.
"""

import asyncio
import logging

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from fixture_utils import FRONTEND_URL, sqlite_url
from database import build_database_url, create_engine
from main import Settings, connect_db, create_app

# SQLite cannot create a file inside a directory that does not exist
UNREACHABLE = "missing-dir/products.db"


class TestConnectDB:
    """Startup behaviour when the database is unreachable."""

    def test_logs_and_continues(self, tmp_path, caplog):
        engine = create_engine(sqlite_url(tmp_path / UNREACHABLE))

        with caplog.at_level(logging.ERROR):
            ready = asyncio.run(connect_db(engine))

        assert ready is False
        assert "An error occurred with the connection to the DB" in caplog.text

    def test_fail_fast_raises(self, tmp_path):
        engine = create_engine(sqlite_url(tmp_path / UNREACHABLE))

        with pytest.raises(OperationalError):
            asyncio.run(connect_db(engine, fail_fast=True))

    def test_service_starts_without_database(self, tmp_path):
        app = create_app(Settings(database_url=sqlite_url(tmp_path / UNREACHABLE)))

        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "unavailable"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "service": "product-service",
        "version": "1.0.0",
        "database": "ok",
    }


def test_docs(client):
    assert client.get("/docs").status_code == 200

    paths = client.get("/openapi.json").json()["paths"]
    assert set(paths["/api/products"]) == {"get", "post"}
    assert set(paths["/api/products/{id}"]) == {"get", "put", "patch", "delete"}


def test_docs_describe_request_bodies(client):
    paths = client.get("/openapi.json").json()["paths"]

    create_body = paths["/api/products"]["post"]["requestBody"]
    update_body = paths["/api/products/{id}"]["put"]["requestBody"]

    assert create_body["required"] is True
    create_schema = create_body["content"]["application/json"]["schema"]
    assert set(create_schema["required"]) == {"name", "price"}
    assert create_schema["properties"]["name"]["maxLength"] == 100

    update_schema = update_body["content"]["application/json"]["schema"]
    assert set(update_schema["required"]) == {"name", "price", "availability"}
    assert "requestBody" not in paths["/api/products/{id}"]["patch"]


class TestCORS:
    """Origin allowlist."""

    def test_allowed_origin(self, client):
        response = client.get("/api/products", headers={"Origin": FRONTEND_URL})

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == FRONTEND_URL

    def test_other_origin_rejected(self, client):
        response = client.post(
            "/api/products",
            json={"name": "Mouse", "price": 10},
            headers={"Origin": "http://evil.example.com"},
        )

        assert response.status_code == 403
        assert response.json() == {"error": "Origin not allowed"}
        assert client.get("/api/products").json()["data"] == []

    def test_preflight(self, client):
        response = client.options(
            "/api/products/1",
            headers={"Origin": FRONTEND_URL, "Access-Control-Request-Method": "DELETE"},
        )

        assert response.status_code == 200
        assert "DELETE" in response.headers["access-control-allow-methods"]

    def test_no_frontend_configured_rejects_browsers(self, tmp_path):
        app = create_app(Settings(database_url=sqlite_url(tmp_path / "products.db")))

        with TestClient(app) as client:
            assert client.get("/api/products").status_code == 200
            assert client.get("/api/products", headers={"Origin": FRONTEND_URL}).status_code == 403


class TestRequestId:
    """X-Request-ID handling in the logging middleware."""

    def test_echoes_request_id(self, client):
        response = client.get("/health", headers={"X-Request-ID": "abc123"})

        assert response.headers["x-request-id"] == "abc123"

    def test_generates_request_id(self, client):
        assert client.get("/health").headers["x-request-id"]

    def test_logs_request(self, client, caplog):
        with caplog.at_level(logging.INFO, logger="middleware"):
            client.get("/api/products", headers={"X-Request-ID": "req-1"})

        record = next(r for r in caplog.records if r.name == "middleware")
        assert record.getMessage().startswith("GET /api/products 200")
        assert record.correlation_id == "req-1"

    def test_logs_unhandled_failure(self, settings, caplog):
        app = create_app(settings)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("connection lost")

        with TestClient(app) as client, caplog.at_level(logging.ERROR, logger="middleware"):
            with pytest.raises(RuntimeError):
                client.get("/boom", headers={"X-Request-ID": "req-err"})

        record = next(r for r in caplog.records if r.name == "middleware" and r.levelno == logging.ERROR)
        assert record.getMessage().startswith("GET /boom failed")
        assert record.correlation_id == "req-err"
        assert record.exc_info[0] is RuntimeError


class TestSettings:
    """Database URL resolution."""

    def test_builds_postgres_url(self):
        url = build_database_url("app", "secret", "db", "5433", "catalog")

        assert url == "postgresql+asyncpg://app:secret@db:5433/catalog"

    def test_explicit_url_wins(self):
        settings = Settings(database_url="sqlite+aiosqlite:///x.db", postgres_host="ignored")

        assert settings.sqlalchemy_url == "sqlite+aiosqlite:///x.db"

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("FRONTEND_URL", "https://shop.example.com")
        monkeypatch.setenv("DB_FAIL_FAST", "true")

        settings = Settings()

        assert settings.allowed_origins == ["https://shop.example.com"]
        assert settings.db_fail_fast is True
