"""Remote Sync — push/pull the decision collection to a single private Gist document.

Invariants:
    - verify_token never raises: any failure reads as an invalid token
    - push creates the gist when no id is stored (and remembers the id), else patches it
    - pull is all-or-nothing: ANY invalid record fails the whole pull with every diagnostic
    - sync_from_gist snapshots "Before sync from Gist" before replacing the collection
    - The token comes from the caller or from the caller-owned SessionCredential

Design Decisions:
    - Remote documents are the export envelope, so file import and pull share parsing
      and validation (core/export_envelope, core/validation_rules)
    - Pull is stricter than file import: a remote copy that is partly broken is never
      allowed to replace local data
"""

import logging
from dataclasses import dataclass

from decision_log.core.decision import Decision
from decision_log.core.errors import (
    DecisionLogError, ImportFormatError, InvalidInputError, RecordValidationError,
)
from decision_log.core.export_envelope import (
    create_export_data, dump_export, parse_import_data,
)
from decision_log.core.repository_protocols import DecisionCollection
from decision_log.core.validation_rules import validate_decisions
from decision_log.infrastructure.gist_client import GistClient
from decision_log.services.backup_manager import BackupManager
from decision_log.services.credential_vault import CredentialVault, SessionCredential

logger = logging.getLogger(__name__)

BEFORE_SYNC = "Before sync from Gist"


@dataclass
class PulledDocument:
    decisions: list[Decision]
    updated_at: str | None


class RemoteSync:
    """Push/pull against the remote Gist document."""

    def __init__(
        self,
        client: GistClient,
        vault: CredentialVault,
        repository: DecisionCollection,
        backups: BackupManager,
        credential: SessionCredential,
    ):
        self.client = client
        self.vault = vault
        self.repository = repository
        self.backups = backups
        self.credential = credential

    def _token(self, token: str | None) -> str:
        return token or self.credential.require()

    async def _gist_id(self, gist_id: str | None) -> str:
        gist_id = gist_id or await self.vault.get_gist_id()
        if not gist_id:
            raise InvalidInputError("No gist id given and none stored", "gist_id")
        return gist_id

    async def verify_token(self, token: str | None = None) -> bool:
        try:
            await self.client.get_user(self._token(token))
        except DecisionLogError as e:
            logger.warning(f"Token verification failed: {e.message}")
            return False
        return True

    async def push(self, token: str | None = None) -> str:
        """Upload a fresh export; returns the gist id."""
        token = self._token(token)
        decisions = await self.repository.list_all()
        content = dump_export(create_export_data(decisions))
        gist_id = await self.vault.get_gist_id()
        if gist_id:
            await self.client.update_gist(token, gist_id, content)
        else:
            gist = await self.client.create_gist(token, content)
            gist_id = gist["id"]
            await self.vault.set_gist_id(gist_id)
        logger.info(
            "Pushed to gist", extra={"gist_id": gist_id, "count": len(decisions)},
        )
        return gist_id

    async def pull(
        self, token: str | None = None, gist_id: str | None = None,
    ) -> PulledDocument:
        """Fetch and validate the remote document without touching local data."""
        token = self._token(token)
        gist_id = await self._gist_id(gist_id)
        gist = await self.client.get_gist(token, gist_id)
        content = self.client.file_content(gist)
        if content is None:
            raise ImportFormatError("Backup file not found in gist", kind="format")

        parsed = parse_import_data(content)
        result = validate_decisions(parsed.decisions)
        if not result.valid:
            raise RecordValidationError(result.errors)
        return PulledDocument(
            decisions=[Decision.from_record(r) for r in result.decisions],
            updated_at=gist.get("updated_at"),
        )

    async def sync_from_gist(
        self, token: str | None = None, gist_id: str | None = None,
    ) -> int:
        """Replace local data with the remote document; returns the count."""
        pulled = await self.pull(token, gist_id)

        async def replace() -> int:
            return await self.repository.replace_all(pulled.decisions)

        count = await self.backups.with_backup(BEFORE_SYNC, replace)
        logger.info("Synced from gist", extra={"gist_id": gist_id, "count": count})
        return count
