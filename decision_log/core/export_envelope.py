"""Export Envelope — schema-versioned wrapper for export, import and remote payloads.

Invariants:
    - Every export is {version: CURRENT_SCHEMA_VERSION, exportedAt, decisions: [record]}
    - A top-level object with `version` and `decisions` is the current envelope
    - A bare JSON array is the legacy format: is_legacy=True, version 1, exportedAt "unknown"
    - JSON syntax errors (kind="json") are reported separately from shape errors (kind="format")
    - NaN, Infinity and -Infinity are not JSON: they are syntax errors (kind="json")

Design Decisions:
    - Parsing returns raw dicts; record validation is a separate step (validation_rules)
      so remote pull and file import share both halves
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from decision_log.core.decision import Decision
from decision_log.core.domain_types import (
    CURRENT_SCHEMA_VERSION, LEGACY_EXPORTED_AT, LEGACY_SCHEMA_VERSION,
)
from decision_log.core.errors import ImportFormatError
from decision_log.core.review_schedule import utc_timestamp


@dataclass
class ParsedImport:
    data: dict[str, Any]
    is_legacy: bool

    @property
    def decisions(self) -> Any:
        return self.data["decisions"]


def create_export_data(
    decisions: Iterable[Decision], now: datetime | None = None,
) -> dict[str, Any]:
    return {
        "version": CURRENT_SCHEMA_VERSION,
        "exportedAt": utc_timestamp(now),
        "decisions": [d.to_record() for d in decisions],
    }


def dump_export(envelope: dict[str, Any]) -> str:
    """Pretty-printed UTF-8 JSON text of an envelope."""
    return json.dumps(envelope, indent=2, ensure_ascii=False)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"non-standard JSON constant {name}")


def parse_import_data(raw: str | bytes) -> ParsedImport:
    """Detect envelope vs legacy array; raise ImportFormatError otherwise."""
    try:
        parsed = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as e:  # JSONDecodeError, UnicodeDecodeError, NaN/Infinity
        raise ImportFormatError(f"Invalid JSON: {e}", kind="json") from e

    if isinstance(parsed, dict) and parsed.get("version") and "decisions" in parsed:
        return ParsedImport(data=parsed, is_legacy=False)

    if isinstance(parsed, list):
        return ParsedImport(
            data={
                "version": LEGACY_SCHEMA_VERSION,
                "exportedAt": LEGACY_EXPORTED_AT,
                "decisions": parsed,
            },
            is_legacy=True,
        )

    raise ImportFormatError("Invalid format", kind="format")
