"""Database Session Manager — async SQLite engine with automatic rollback and health checks.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions mapped to DatabaseError (core/errors.py)
    - SQLite engines get no pool sizing (aiosqlite uses a static/null pool)

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (no global import side effects)
    - expire_on_commit=False: prevents lazy-load issues in async context
    - create_all only for fresh local files and tests; Alembic owns upgrades
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from decision_log.core.errors import DatabaseError
from decision_log.db.base import Base

logger = logging.getLogger(__name__)


def _engine_for(database_url: str, pool_size: int, max_overflow: int) -> AsyncEngine:
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url)
    return create_async_engine(
        database_url,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_pre_ping=True,
        pool_recycle=3600,
    )


class DatabaseSessionManager:
    """Manages async database sessions with rollback mapping and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 5, max_overflow: int = 5,
        engine: AsyncEngine | None = None,
    ):
        self.engine = engine or _engine_for(database_url, pool_size, max_overflow)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}", extra={"error_code": "DATABASE_ERROR"})
            raise DatabaseError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}", extra={"error_code": "DATABASE_ERROR"})
            raise DatabaseError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}", extra={"error_code": "DATABASE_ERROR"})
            raise DatabaseError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}", extra={"error_code": "DATABASE_ERROR"})
            raise DatabaseError("Database operation failed", "unknown") from e
        finally:
            await session.close()

    async def create_all(self) -> None:
        """Create missing tables (fresh databases and tests)."""
        import decision_log.models  # noqa: F401  (registers tables on Base.metadata)

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except DatabaseError as e:
            logger.error(f"DB health check failed: {e.message}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
