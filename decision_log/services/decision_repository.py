"""Decision Repository — CRUD, queries and review recording over the decisions table.

Invariants:
    - create assigns a fresh uuid4 id and review_date = date + horizon_days
    - update recomputes review_date whenever the resulting date or horizon_days
      differ from the stored ones; review_date and review fields are never patched
    - get/update/delete never raise for a missing id (None / None / False)
    - A review date past the end of the calendar is InvalidInputError, nothing written
    - record_review validates first and sets every review field in ONE commit
    - replace_all deletes and inserts in a single transaction

Design Decisions:
    - AsyncSession injected per request (same seam as the rest of services/)
    - SQL narrows on indexed columns (category, stakes, reviewed_at, review_date);
      search and sorting reuse the pure rules in core/decision_query
"""

import logging
import uuid
from collections.abc import Iterable, Mapping
from datetime import date
from typing import Any

from pydantic import BaseModel, ValidationError
from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from decision_log.core.decision import (
    Decision, DecisionCreate, DecisionFilters, DecisionPatch, ReviewOutcome,
)
from decision_log.core.decision_query import filter_decisions, sort_decisions
from decision_log.core.domain_types import SortField, SortOrder, Stakes
from decision_log.core.errors import InvalidInputError, ResourceNotFoundError
from decision_log.core.review_schedule import (
    calculate_review_date, today_iso, utc_timestamp,
)
from decision_log.models.decision import DecisionRow

logger = logging.getLogger(__name__)


def _coerce(model: type[BaseModel], data: Any, what: str):
    """Accept a model instance or a plain mapping; mapping errors -> InvalidInputError."""
    if isinstance(data, model):
        return data
    if not isinstance(data, Mapping):
        raise InvalidInputError(f"{what} must be an object", what)
    try:
        return model.model_validate(dict(data))
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first["loc"]) or what
        raise InvalidInputError(f"Invalid {what}: {field} {first['msg']}", field) from e


def _review_date(decision_date: str, horizon_days: int) -> str:
    try:
        return calculate_review_date(decision_date, horizon_days)
    except ValueError as e:
        raise InvalidInputError(str(e), "horizonDays") from e


class DecisionRepository:
    """Async repository for the Decision aggregate."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # --- Single-record operations ---------------------------------------

    async def create(self, data: DecisionCreate | Mapping[str, Any]) -> Decision:
        data = _coerce(DecisionCreate, data, "decision")
        decision = Decision(
            id=str(uuid.uuid4()),
            review_date=_review_date(data.date, data.horizon_days),
            **data.model_dump(),
        )
        self.db.add(DecisionRow.from_domain(decision))
        await self.db.commit()
        logger.info("Decision created", extra={"decision_id": decision.id})
        return decision

    async def get(self, decision_id: str) -> Decision | None:
        row = await self.db.get(DecisionRow, decision_id)
        return row.to_domain() if row else None

    async def update(
        self, decision_id: str, patch: DecisionPatch | Mapping[str, Any],
    ) -> Decision | None:
        patch = _coerce(DecisionPatch, patch, "patch")
        row = await self.db.get(DecisionRow, decision_id)
        if row is None:
            return None

        current = row.to_domain()
        updated = current.model_copy(update=patch.changes())
        if (updated.date, updated.horizon_days) != (current.date, current.horizon_days):
            updated.review_date = _review_date(updated.date, updated.horizon_days)

        row.apply_domain(updated)
        await self.db.commit()
        logger.info("Decision updated", extra={"decision_id": decision_id})
        return updated

    async def delete(self, decision_id: str) -> bool:
        result = await self.db.execute(
            delete(DecisionRow).where(DecisionRow.id == decision_id)
        )
        await self.db.commit()
        deleted = result.rowcount > 0
        if deleted:
            logger.info("Decision deleted", extra={"decision_id": decision_id})
        return deleted

    async def record_review(
        self, decision_id: str, outcome: ReviewOutcome | Mapping[str, Any],
    ) -> Decision:
        """Mark a decision reviewed; nothing is written unless the outcome is complete."""
        outcome = _coerce(ReviewOutcome, outcome, "review")
        row = await self.db.get(DecisionRow, decision_id)
        if row is None:
            raise ResourceNotFoundError("Decision", decision_id)

        review = outcome.to_review(reviewed_at=utc_timestamp())
        row.apply_review(review)
        await self.db.commit()
        logger.info("Decision reviewed", extra={"decision_id": decision_id})
        return row.to_domain()

    # --- Queries ----------------------------------------------------------

    async def list_all(self) -> list[Decision]:
        result = await self.db.execute(select(DecisionRow))
        return [row.to_domain() for row in result.scalars().all()]

    async def list_filtered(
        self,
        filters: DecisionFilters | None = None,
        sort_field: SortField | str = SortField.DATE,
        sort_order: SortOrder | str = SortOrder.DESC,
        today: date | None = None,
    ) -> list[Decision]:
        filters = filters or DecisionFilters()
        query = select(DecisionRow)
        if filters.category:
            query = query.where(DecisionRow.category == filters.category)
        if filters.stakes:
            query = query.where(DecisionRow.stakes == Stakes(filters.stakes).value)
        if filters.reviewed is True:
            query = query.where(DecisionRow.reviewed_at.isnot(None))
        elif filters.reviewed is False:
            query = query.where(DecisionRow.reviewed_at.is_(None))
        result = await self.db.execute(query)
        decisions = [row.to_domain() for row in result.scalars().all()]
        return sort_decisions(
            filter_decisions(decisions, filters, today), sort_field, sort_order,
        )

    async def list_due_reviews(self, today: date | None = None) -> list[Decision]:
        """Unreviewed decisions whose review date is today or earlier."""
        result = await self.db.execute(
            select(DecisionRow)
            .where(DecisionRow.reviewed_at.is_(None))
            .where(DecisionRow.review_date <= today_iso(today))
            .order_by(DecisionRow.review_date)
        )
        return [row.to_domain() for row in result.scalars().all()]

    async def count(self) -> int:
        result = await self.db.execute(select(func.count()).select_from(DecisionRow))
        return result.scalar_one()

    async def existing_ids(self) -> set[str]:
        result = await self.db.execute(select(DecisionRow.id))
        return set(result.scalars().all())

    async def used_categories(self) -> dict[str, int]:
        """Category name -> number of decisions using it."""
        result = await self.db.execute(
            select(DecisionRow.category, func.count())
            .group_by(DecisionRow.category)
        )
        return {name: n for name, n in result.all()}

    async def reassign_category(self, old_name: str, new_name: str) -> int:
        """Move every decision from one category name to another (caller commits)."""
        result = await self.db.execute(
            select(DecisionRow).where(DecisionRow.category == old_name)
        )
        rows = result.scalars().all()
        for row in rows:
            row.category = new_name
        return len(rows)

    # --- Bulk operations --------------------------------------------------

    async def bulk_insert(self, decisions: Iterable[Decision]) -> int:
        rows = [DecisionRow.from_domain(d) for d in decisions]
        self.db.add_all(rows)
        await self.db.commit()
        logger.info("Decisions inserted", extra={"count": len(rows)})
        return len(rows)

    async def clear(self) -> None:
        await self.db.execute(delete(DecisionRow))
        await self.db.commit()
        logger.info("Decision collection cleared")

    async def replace_all(self, decisions: Iterable[Decision]) -> int:
        """Swap the whole collection for `decisions` in one transaction."""
        rows = [DecisionRow.from_domain(d) for d in decisions]
        await self.db.execute(
            delete(DecisionRow).execution_options(synchronize_session=False)
        )
        # old rows may still sit in the identity map under the same ids
        self.db.expunge_all()
        self.db.add_all(rows)
        await self.db.commit()
        logger.info("Decision collection replaced", extra={"count": len(rows)})
        return len(rows)
