"""Category Manager — custom category CRUD plus rename/merge propagation across decisions.

Invariants:
    - Names are trimmed + lowercased before every comparison and write
    - A new or renamed name may not collide with any other known category
    - Deleting a custom category is refused while any decision still uses its name
    - rename/merge move decisions and custom rows in ONE commit

Design Decisions:
    - Shares the request's AsyncSession with DecisionRepository so propagation
      and the custom-row change commit together
    - Default categories are not rows: they always appear in the known list
"""

import logging
from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from decision_log.core.category_rules import (
    all_known_categories, check_new_name_free, normalize_category_name,
)
from decision_log.core.errors import (
    CategoryConflictError, CategoryInUseError, InvalidInputError, ResourceNotFoundError,
)
from decision_log.models.custom_category import CustomCategory
from decision_log.services.decision_repository import DecisionRepository

logger = logging.getLogger(__name__)


class CategoryManager:
    """Custom categories and the category names decisions carry."""

    def __init__(self, db: AsyncSession, repository: DecisionRepository | None = None):
        self.db = db
        self.repository = repository or DecisionRepository(db)

    async def list_custom(self) -> list[CustomCategory]:
        result = await self.db.execute(
            select(CustomCategory).order_by(CustomCategory.name)
        )
        return list(result.scalars().all())

    async def known_categories(self) -> list[str]:
        custom = await self.list_custom()
        used = await self.repository.used_categories()
        return all_known_categories((c.name for c in custom), used)

    async def _find_by_name(self, name: str) -> CustomCategory | None:
        result = await self.db.execute(
            select(CustomCategory).where(CustomCategory.name == name)
        )
        return result.scalar_one_or_none()

    async def add(self, name: str) -> CustomCategory:
        name = normalize_category_name(name)
        if name in await self.known_categories():
            raise CategoryConflictError(name)
        category = CustomCategory(name=name)
        self.db.add(category)
        await self.db.commit()
        logger.info(f"Category added: {name}", extra={"operation": "category_add"})
        return category

    async def delete(self, category_id: str) -> None:
        category = await self.db.get(CustomCategory, category_id)
        if category is None:
            raise ResourceNotFoundError("Category", category_id)
        usage = (await self.repository.used_categories()).get(category.name, 0)
        if usage:
            raise CategoryInUseError(category.name, usage)
        await self.db.delete(category)
        await self.db.commit()
        logger.info(
            f"Category deleted: {category.name}", extra={"operation": "category_delete"},
        )

    async def rename(self, old_name: str, new_name: str) -> int:
        """Rename a category everywhere; returns the number of decisions moved."""
        old_name = normalize_category_name(old_name)
        new_name = normalize_category_name(new_name)
        known = await self.known_categories()
        if old_name not in known:
            raise ResourceNotFoundError("Category", old_name)
        check_new_name_free(new_name, known, old_name)
        if new_name == old_name:
            return 0

        moved = await self.repository.reassign_category(old_name, new_name)
        custom = await self._find_by_name(old_name)
        if custom is not None:
            custom.name = new_name
        await self.db.commit()
        logger.info(
            f"Category renamed: {old_name} -> {new_name}",
            extra={"operation": "category_rename", "count": moved},
        )
        return moved

    async def merge(self, sources: Iterable[str], target: str) -> int:
        """Fold every source category into target; returns decisions moved."""
        target = normalize_category_name(target)
        names = [normalize_category_name(s) for s in sources]
        names = [n for n in dict.fromkeys(names) if n != target]
        if not names:
            raise InvalidInputError("Select at least one category to merge", "sources")

        known = await self.known_categories()
        missing = [n for n in names if n not in known]
        if missing:
            raise ResourceNotFoundError("Category", ", ".join(missing))

        moved = 0
        for name in names:
            moved += await self.repository.reassign_category(name, target)
        await self.db.execute(
            delete(CustomCategory).where(CustomCategory.name.in_(names))
        )
        if target not in known:
            self.db.add(CustomCategory(name=target))
        await self.db.commit()
        logger.info(
            f"Categories merged into {target}: {', '.join(names)}",
            extra={"operation": "category_merge", "count": moved},
        )
        return moved
