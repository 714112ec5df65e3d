"""Key-Value File Store — small JSON document store for backups and credentials.

Invariants:
    - One JSON object per file; each key maps to an arbitrary JSON value
    - Writes are atomic: full document written to a .tmp sibling, then os.replace
    - Any filesystem or decode failure surfaces as StorageError (core/errors.py)
    - Kept apart from the decision database: a corrupted database never takes the
      backups down with it

Design Decisions:
    - Blocking file IO runs in asyncio.to_thread (each call is an awaitable suspension point)
    - Whole-document rewrite per set/delete: a handful of keys, a few MB at most
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Any

from decision_log.core.errors import StorageError

logger = logging.getLogger(__name__)


class JsonFileKeyValueStore:
    """KeyValueStore backed by a single JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    async def get(self, key: str) -> Any | None:
        data = await asyncio.to_thread(self._read_sync)
        return data.get(key)

    async def set(self, key: str, value: Any) -> None:
        await asyncio.to_thread(self._update_sync, key, value, False)

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._update_sync, key, None, True)

    def _read_sync(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        except OSError as e:
            logger.error(f"Key-value store read failed: {e}", extra={"operation": "read"})
            raise StorageError(f"Cannot read {self.path.name}", "read") from e
        except json.JSONDecodeError as e:
            logger.error(f"Key-value store is corrupt: {e}", extra={"operation": "read"})
            raise StorageError(f"{self.path.name} is not valid JSON", "read") from e
        if not isinstance(data, dict):
            raise StorageError(f"{self.path.name} must hold a JSON object", "read")
        return data

    def _update_sync(self, key: str, value: Any, remove: bool) -> None:
        data = self._read_sync()
        if remove:
            if key not in data:
                return
            data.pop(key)
        else:
            data[key] = value
        self._write_sync(data)

    def _write_sync(self, data: dict[str, Any]) -> None:
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            os.replace(tmp, self.path)
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Key-value store write failed: {e}", extra={"operation": "write"})
            raise StorageError(f"Cannot write {self.path.name}", "write") from e
