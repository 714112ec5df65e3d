"""API test fixtures — the FastAPI app over ASGITransport with every app.state link overridden.

Invariants:
    - The lifespan never runs: database, key-value store, crypto, Gist client and
      the session credential all come from dependency_overrides
    - One in-memory SQLite database per test, shared across requests (StaticPool)
"""

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import decision_log.models  # noqa: F401
from decision_log.api.dependencies import (
    get_crypto, get_gist_client, get_kv_store, get_session_credential,
)
from decision_log.db.base import Base
from decision_log.infrastructure.crypto_provider import CryptoProvider
from decision_log.infrastructure.database import get_db
from decision_log.infrastructure.gist_client import GistClient
from decision_log.infrastructure.key_value_store import JsonFileKeyValueStore
from decision_log.main import app
from decision_log.services.credential_vault import SessionCredential


@pytest.fixture
async def api_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def gist_requests():
    """Requests the Gist handler saw, and the handler it should answer with."""
    return {"seen": [], "respond": lambda request: httpx.Response(200, json={})}


@pytest.fixture
def credential():
    return SessionCredential()


@pytest.fixture
async def client(api_engine, tmp_path, gist_requests, credential):
    factory = async_sessionmaker(api_engine, class_=AsyncSession, expire_on_commit=False)

    async def override_get_db():
        async with factory() as session:
            yield session

    def handler(request: httpx.Request) -> httpx.Response:
        gist_requests["seen"].append(request)
        return gist_requests["respond"](request)

    gist_client = GistClient(
        client=httpx.AsyncClient(
            transport=httpx.MockTransport(handler), base_url="https://gist.test",
        ),
    )
    kv_store = JsonFileKeyValueStore(tmp_path / "store.json")
    crypto = CryptoProvider()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_kv_store] = lambda: kv_store
    app.dependency_overrides[get_crypto] = lambda: crypto
    app.dependency_overrides[get_gist_client] = lambda: gist_client
    app.dependency_overrides[get_session_credential] = lambda: credential

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
    await gist_client.aclose()


@pytest.fixture
def decision_body():
    def build(**overrides):
        body = {
            "title": "Take the new job",
            "date": "2024-01-31",
            "category": "Work",
            "decisionType": "binary",
            "options": ["Accept", "Decline"],
            "chosenOption": "Accept",
            "reasoning": "Better growth path",
            "expectedOutcome": "More interesting work",
            "confidence": 70,
            "stakes": "medium",
            "horizonDays": 30,
            "tags": ["career"],
        }
        body.update(overrides)
        return body
    return build
