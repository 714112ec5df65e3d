"""Decision Log API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map DecisionLogError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database, key-value store, crypto provider, Gist client and the session
      credential are created on startup via the lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Schema auto-created for a fresh local file (auto_create_schema); existing
      databases are upgraded with `alembic upgrade head`
    - One SessionCredential per process: the unlocked token never outlives it
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from decision_log import __version__
from decision_log.api.error_handlers import register_error_handlers
from decision_log.api.routes import categories, data, decisions, health, stats, sync
from decision_log.config import get_settings
from decision_log.infrastructure.crypto_provider import CryptoProvider
from decision_log.infrastructure.database import init_db
from decision_log.infrastructure.gist_client import GistClient
from decision_log.infrastructure.key_value_store import JsonFileKeyValueStore
from decision_log.infrastructure.observability import setup_logging
from decision_log.services.credential_vault import SessionCredential

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(settings.database_url)
    if settings.auto_create_schema:
        await manager.create_all()

    app.state.kv_store = JsonFileKeyValueStore(settings.store_path)
    app.state.crypto = CryptoProvider(settings.kdf_iterations)
    app.state.gist_client = GistClient(
        base_url=settings.gist_api_url,
        filename=settings.gist_filename,
        timeout_seconds=settings.gist_timeout_seconds,
    )
    app.state.credential = SessionCredential()
    logger.info("Decision Log API started")
    yield
    app.state.credential.clear()
    await app.state.gist_client.aclose()
    await manager.dispose()
    logger.info("Decision Log API shutting down")


app = FastAPI(title="Decision Log API", version=__version__, lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — explicit registration
app.include_router(health.router)
app.include_router(decisions.router)
app.include_router(categories.router)
app.include_router(stats.router)
app.include_router(data.router)
app.include_router(sync.router)

register_error_handlers(app)
