"""Boundary Protocols — contracts between core/services and the storage shell.

Invariants:
    - Services depend on these Protocols, never on a concrete store class
    - All IO operations are async (each call is a suspension point)
    - Implementations provided by infrastructure/ and services/ via constructor injection

Design Decisions:
    - Protocol over ABC: structural subtyping, test doubles need no inheritance
"""

from collections.abc import Iterable
from typing import Any, Protocol

from decision_log.core.decision import Decision


class KeyValueStore(Protocol):
    """Contract for the small JSON key-value store (backups, credentials)."""
    async def get(self, key: str) -> Any | None: ...
    async def set(self, key: str, value: Any) -> None: ...
    async def delete(self, key: str) -> None: ...


class DecisionCollection(Protocol):
    """Whole-collection access needed by backups, import and sync."""
    async def list_all(self) -> list[Decision]: ...
    async def existing_ids(self) -> set[str]: ...
    async def bulk_insert(self, decisions: Iterable[Decision]) -> int: ...
    async def replace_all(self, decisions: Iterable[Decision]) -> int: ...
