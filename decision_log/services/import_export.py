"""Import / Export — JSON envelope export and replace/merge import of decision records.

Invariants:
    - export_json always writes the current envelope (version, exportedAt, decisions)
    - import_json accepts the envelope and the legacy bare-array format
    - Partial-import policy: the valid subset is imported even when some records fail;
      every rejected record is reported with its diagnostic
    - A batch in which EVERY record fails is refused (RecordValidationError), so a bad
      file never wipes the collection in replace mode
    - replace snapshots "Before import (replace)" first; merge never overwrites and
      imported + skipped == len(incoming)

Design Decisions:
    - Parse/validate are pure (core/export_envelope, core/validation_rules); this
      service only sequences them against the repository and the backup manager
"""

import logging
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from datetime import datetime

from decision_log.core.decision import Decision
from decision_log.core.domain_types import ImportMode
from decision_log.core.errors import RecordValidationError
from decision_log.core.export_envelope import (
    create_export_data, dump_export, parse_import_data,
)
from decision_log.core.merge_import import plan_merge
from decision_log.core.repository_protocols import DecisionCollection
from decision_log.core.validation_rules import validate_decisions
from decision_log.services.backup_manager import BackupManager

logger = logging.getLogger(__name__)

BEFORE_IMPORT_REPLACE = "Before import (replace)"


@dataclass
class MergeReport:
    imported: int
    skipped: int = 0


@dataclass
class ImportReport:
    mode: str
    imported: int
    skipped: int
    rejected: int
    is_legacy: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


class ImportExportService:
    """Export the collection, and import files in replace or merge mode."""

    def __init__(self, repository: DecisionCollection, backups: BackupManager):
        self.repository = repository
        self.backups = backups

    async def export_json(self, now: datetime | None = None) -> str:
        decisions = await self.repository.list_all()
        logger.info("Export created", extra={"count": len(decisions)})
        return dump_export(create_export_data(decisions, now))

    async def import_with_mode(
        self, decisions: Sequence[Decision], mode: ImportMode | str,
    ) -> MergeReport:
        if ImportMode(mode) == ImportMode.REPLACE:
            async def replace() -> int:
                return await self.repository.replace_all(decisions)

            imported = await self.backups.with_backup(BEFORE_IMPORT_REPLACE, replace)
            return MergeReport(imported=imported)

        plan = plan_merge(await self.repository.existing_ids(), decisions)
        if plan.to_insert:
            await self.repository.bulk_insert(plan.to_insert)
        logger.info(
            f"Merge import: {plan.imported} imported, {plan.skipped} skipped",
            extra={"count": plan.imported},
        )
        return MergeReport(imported=plan.imported, skipped=plan.skipped)

    async def import_json(
        self, raw: str | bytes, mode: ImportMode | str = ImportMode.REPLACE,
    ) -> ImportReport:
        """Parse, validate and import a file; raises ImportFormatError on bad JSON/shape."""
        parsed = parse_import_data(raw)
        result = validate_decisions(parsed.decisions)
        if result.errors and not result.decisions:
            raise RecordValidationError(result.errors)
        if result.errors:
            logger.warning(
                f"Import skipped {len(result.errors)} invalid record(s)",
                extra={"count": len(result.errors)},
            )

        decisions = [Decision.from_record(r) for r in result.decisions]
        report = await self.import_with_mode(decisions, mode)
        return ImportReport(
            mode=ImportMode(mode).value,
            imported=report.imported,
            skipped=report.skipped,
            rejected=len(result.errors),
            is_legacy=parsed.is_legacy,
            errors=result.errors,
        )
