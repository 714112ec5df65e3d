"""Tests for the liveness and readiness probes."""

from decision_log.infrastructure import database
from decision_log.infrastructure.database import DatabaseSessionManager


async def test_liveness(client):
    response = await client.get("/api/v1/health/")
    assert response.status_code == 200
    assert response.json()["service"] == "decision-log"


async def test_ready_without_database(client, monkeypatch):
    monkeypatch.setattr(database, "db_manager", None)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 503


async def test_ready_with_database(client, api_engine, monkeypatch):
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:", engine=api_engine)
    monkeypatch.setattr(database, "db_manager", manager)
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json()["checks"]["database"] == "healthy"
