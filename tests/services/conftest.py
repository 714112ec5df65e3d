"""Service test fixtures — async in-memory DB, repository and key-value store.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Every test gets its own key-value file under tmp_path
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

import decision_log.models  # noqa: F401
from decision_log.db.base import Base
from decision_log.infrastructure.key_value_store import JsonFileKeyValueStore
from decision_log.services.backup_manager import BackupManager
from decision_log.services.decision_repository import DecisionRepository


@pytest.fixture
async def test_engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def repo(test_db):
    return DecisionRepository(test_db)


@pytest.fixture
def kv_store(tmp_path):
    return JsonFileKeyValueStore(tmp_path / "store.json")


@pytest.fixture
def backups(repo, kv_store):
    return BackupManager(repo, kv_store, retention=5)


@pytest.fixture
def new_decision():
    """Create payload in wire (camelCase) form."""
    def build(**overrides):
        data = {
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
            "tags": ["Career", "career"],
        }
        data.update(overrides)
        return data
    return build
