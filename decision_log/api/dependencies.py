"""API Dependencies — per-request service wiring for the route modules.

Invariants:
    - Database-backed services get the request's AsyncSession (get_db)
    - Process-wide collaborators (key-value store, crypto, Gist client, session
      credential) are created once in the lifespan and read from app.state
    - Routes never construct services themselves

Design Decisions:
    - FastAPI Depends chain over a service locator: tests swap any link through
      app.dependency_overrides
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from decision_log.config import get_settings
from decision_log.infrastructure.crypto_provider import CryptoProvider
from decision_log.infrastructure.database import get_db
from decision_log.infrastructure.gist_client import GistClient
from decision_log.infrastructure.key_value_store import JsonFileKeyValueStore
from decision_log.services.backup_manager import BackupManager
from decision_log.services.category_manager import CategoryManager
from decision_log.services.credential_vault import CredentialVault, SessionCredential
from decision_log.services.decision_repository import DecisionRepository
from decision_log.services.import_export import ImportExportService
from decision_log.services.remote_sync import RemoteSync


def get_kv_store(request: Request) -> JsonFileKeyValueStore:
    return request.app.state.kv_store


def get_crypto(request: Request) -> CryptoProvider:
    return request.app.state.crypto


def get_gist_client(request: Request) -> GistClient:
    return request.app.state.gist_client


def get_session_credential(request: Request) -> SessionCredential:
    return request.app.state.credential


def get_repository(db: AsyncSession = Depends(get_db)) -> DecisionRepository:
    return DecisionRepository(db)


def get_category_manager(db: AsyncSession = Depends(get_db)) -> CategoryManager:
    return CategoryManager(db)


def get_backup_manager(
    repository: DecisionRepository = Depends(get_repository),
    store: JsonFileKeyValueStore = Depends(get_kv_store),
) -> BackupManager:
    return BackupManager(repository, store, get_settings().backup_retention)


def get_import_export(
    repository: DecisionRepository = Depends(get_repository),
    backups: BackupManager = Depends(get_backup_manager),
) -> ImportExportService:
    return ImportExportService(repository, backups)


def get_vault(
    store: JsonFileKeyValueStore = Depends(get_kv_store),
    crypto: CryptoProvider = Depends(get_crypto),
) -> CredentialVault:
    return CredentialVault(store, crypto)


def get_remote_sync(
    client: GistClient = Depends(get_gist_client),
    vault: CredentialVault = Depends(get_vault),
    repository: DecisionRepository = Depends(get_repository),
    backups: BackupManager = Depends(get_backup_manager),
    credential: SessionCredential = Depends(get_session_credential),
) -> RemoteSync:
    return RemoteSync(client, vault, repository, backups, credential)
