"""Backup Rotation — snapshot records and the most-recent-first retention list.

Invariants:
    - Backups are ordered newest first
    - push_backup never returns more than `retention` entries; the oldest fall off the end
    - A Backup's decisions are flat wire records (the same shape as an export)

Design Decisions:
    - Plain dataclass + dict conversion: backups live in the key-value store as JSON
"""

from dataclasses import asdict, dataclass, field
from typing import Any

DEFAULT_RETENTION = 5


@dataclass
class Backup:
    id: str
    timestamp: str
    reason: str
    decisions: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Backup":
        return cls(
            id=data["id"],
            timestamp=data["timestamp"],
            reason=data["reason"],
            decisions=list(data.get("decisions", [])),
        )

    def summary(self) -> dict[str, Any]:
        """Listing view without the snapshot payload."""
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "reason": self.reason,
            "count": len(self.decisions),
        }


def push_backup(
    backups: list[Backup], backup: Backup, retention: int = DEFAULT_RETENTION,
) -> list[Backup]:
    return [backup, *backups][:retention]


def find_backup(backups: list[Backup], backup_id: str) -> Backup | None:
    return next((b for b in backups if b.id == backup_id), None)


def decode_backups(raw: Any) -> list[Backup]:
    """Parse the stored list; raises (KeyError, TypeError, ValueError) if corrupt."""
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValueError("stored backups must be a list")
    return [Backup.from_dict(item) for item in raw]
