"""Category Rules — pure naming and conflict checks for custom categories.

Invariants:
    - Category names are trimmed and lowercased before any comparison or write
    - Known categories = defaults ∪ custom rows ∪ names used by decisions (sorted, unique)
    - A rename/merge target may not collide with another known name (renaming to itself is allowed)
"""

from collections.abc import Iterable

from decision_log.core.domain_types import DEFAULT_CATEGORIES
from decision_log.core.errors import CategoryConflictError, InvalidInputError


def normalize_category_name(name: str) -> str:
    normalized = name.strip().lower()
    if not normalized:
        raise InvalidInputError("Category name cannot be empty", "name")
    return normalized


def all_known_categories(
    custom_names: Iterable[str],
    used_names: Iterable[str],
    defaults: Iterable[str] = DEFAULT_CATEGORIES,
) -> list[str]:
    return sorted({*defaults, *custom_names, *used_names})


def check_new_name_free(new_name: str, known: Iterable[str], old_name: str | None = None) -> None:
    """Raise CategoryConflictError if new_name is taken by a different category."""
    if new_name != old_name and new_name in set(known):
        raise CategoryConflictError(new_name)
