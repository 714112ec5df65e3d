"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting has a working local default (no secrets in configuration;
      the remote access token lives encrypted in the key-value store)
    - get_settings() is cached (lru_cache) — single instance per process
    - kdf_iterations never drops below 100,000

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - DECISION_LOG_ env prefix: avoids clashing with unrelated DATABASE_URL variables
"""

from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from decision_log.core.backup_rotation import DEFAULT_RETENTION
from decision_log.infrastructure.crypto_provider import MIN_ITERATIONS
from decision_log.infrastructure.gist_client import GIST_FILENAME, GITHUB_API_URL


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="DECISION_LOG_", case_sensitive=False,
    )

    # Persistent store
    database_url: str = "sqlite+aiosqlite:///./decision_log.db"
    auto_create_schema: bool = True

    # Key-value store (backups, encrypted token, gist id)
    data_dir: Path = Path("./.decision_log")
    backup_retention: int = DEFAULT_RETENTION

    # Remote sync
    gist_api_url: str = GITHUB_API_URL
    gist_filename: str = GIST_FILENAME
    gist_timeout_seconds: float = 30.0
    kdf_iterations: int = MIN_ITERATIONS

    @field_validator("kdf_iterations")
    @classmethod
    def enforce_kdf_floor(cls, v: int) -> int:
        if v < MIN_ITERATIONS:
            raise ValueError(f"kdf_iterations must be >= {MIN_ITERATIONS}")
        return v

    @field_validator("backup_retention")
    @classmethod
    def positive_retention(cls, v: int) -> int:
        if v < 1:
            raise ValueError("backup_retention must be >= 1")
        return v

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @property
    def store_path(self) -> Path:
        return self.data_dir / "store.json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
