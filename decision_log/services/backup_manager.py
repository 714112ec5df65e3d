"""Backup Manager — rotating snapshots of the decision collection in the key-value store.

Invariants:
    - Backups are kept newest first and never exceed `retention` entries
    - create_backup snapshots the CURRENT collection (flat export records)
    - restore_backup of an unknown id raises ResourceNotFoundError and mutates nothing
    - restore_backup snapshots the pre-restore state ("Before restore") before replacing
    - with_backup awaits the snapshot, then returns the operation's result or lets its
      exception propagate unchanged

Design Decisions:
    - Snapshots live in the key-value file store, not the decisions database: a broken
      database does not take its safety net with it
    - A corrupt stored list reads as [] (logged), so the next backup starts a fresh list
    - Backup-before-destructive is a compensating action, not a transaction
"""

import logging
import uuid
from collections.abc import Awaitable, Callable
from typing import TypeVar

from pydantic import ValidationError

from decision_log.core.backup_rotation import (
    DEFAULT_RETENTION, Backup, decode_backups, find_backup, push_backup,
)
from decision_log.core.decision import Decision
from decision_log.core.errors import ResourceNotFoundError, StorageError
from decision_log.core.repository_protocols import DecisionCollection, KeyValueStore
from decision_log.core.review_schedule import utc_timestamp

logger = logging.getLogger(__name__)

BACKUP_KEY = "decision-log-backup"
BEFORE_RESTORE = "Before restore"

T = TypeVar("T")


class BackupManager:
    """Snapshot, list, restore and prune backups of the decision collection."""

    def __init__(
        self,
        repository: DecisionCollection,
        store: KeyValueStore,
        retention: int = DEFAULT_RETENTION,
    ):
        self.repository = repository
        self.store = store
        self.retention = retention

    async def list_backups(self) -> list[Backup]:
        raw = await self.store.get(BACKUP_KEY)
        try:
            return decode_backups(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(
                f"Stored backups unreadable, treating as empty: {e}",
                extra={"operation": "list_backups"},
            )
            return []

    async def _save(self, backups: list[Backup]) -> None:
        await self.store.set(BACKUP_KEY, [b.to_dict() for b in backups])

    async def create_backup(self, reason: str) -> Backup:
        decisions = await self.repository.list_all()
        backup = Backup(
            id=str(uuid.uuid4()),
            timestamp=utc_timestamp(),
            reason=reason,
            decisions=[d.to_record() for d in decisions],
        )
        backups = push_backup(await self.list_backups(), backup, self.retention)
        await self._save(backups)
        logger.info(
            f"Backup created: {reason}",
            extra={"backup_id": backup.id, "count": len(backup.decisions)},
        )
        return backup

    async def restore_backup(self, backup_id: str) -> int:
        """Replace the collection with a snapshot; returns the number restored."""
        backup = find_backup(await self.list_backups(), backup_id)
        if backup is None:
            raise ResourceNotFoundError("Backup", backup_id)
        try:
            decisions = [Decision.from_record(r) for r in backup.decisions]
        except ValidationError as e:
            raise StorageError(f"Backup {backup_id} holds unreadable records", "restore") from e

        await self.create_backup(BEFORE_RESTORE)
        restored = await self.repository.replace_all(decisions)
        logger.info(
            "Backup restored", extra={"backup_id": backup_id, "count": restored},
        )
        return restored

    async def with_backup(
        self, reason: str, operation: Callable[[], Awaitable[T]],
    ) -> T:
        """Snapshot first, then run the destructive operation."""
        await self.create_backup(reason)
        return await operation()

    async def delete_backup(self, backup_id: str) -> bool:
        backups = await self.list_backups()
        remaining = [b for b in backups if b.id != backup_id]
        if len(remaining) == len(backups):
            return False
        await self._save(remaining)
        logger.info("Backup deleted", extra={"backup_id": backup_id})
        return True

    async def clear_backups(self) -> None:
        await self.store.delete(BACKUP_KEY)
        logger.info("All backups cleared")
