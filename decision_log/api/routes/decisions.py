"""Decision Routes — create, list, read, edit, delete and review decisions.

Invariants:
    - Responses are flat camelCase wire records (Decision.to_record)
    - GET /{id} on a missing id -> 404; DELETE is idempotent (204 either way)
    - PATCH ignores reviewDate and review fields (DecisionPatch has none)
    - POST /{id}/review writes nothing unless actualOutcome and rating are valid

Design Decisions:
    - Thin routes: every rule lives in DecisionRepository / core
"""

from fastapi import APIRouter, Depends, Query, Response, status

from decision_log.api.dependencies import get_repository
from decision_log.core.decision import (
    DecisionCreate, DecisionFilters, DecisionPatch, ReviewOutcome,
)
from decision_log.core.domain_types import SortField, SortOrder, Stakes
from decision_log.core.errors import ResourceNotFoundError
from decision_log.services.decision_repository import DecisionRepository

router = APIRouter(prefix="/api/v1/decisions", tags=["decisions"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_decision(
    body: DecisionCreate,
    repo: DecisionRepository = Depends(get_repository),
):
    decision = await repo.create(body)
    return decision.to_record()


@router.get("")
async def list_decisions(
    category: str | None = None,
    stakes: Stakes | None = None,
    reviewed: bool | None = None,
    needs_review: bool = Query(False, alias="needsReview"),
    search: str | None = None,
    sort: SortField = SortField.DATE,
    order: SortOrder = SortOrder.DESC,
    repo: DecisionRepository = Depends(get_repository),
):
    """Filtered, sorted decision list."""
    filters = DecisionFilters(
        category=category.strip().lower() if category else None,
        stakes=stakes,
        reviewed=reviewed,
        needs_review=needs_review,
        search_term=search,
    )
    decisions = await repo.list_filtered(filters, sort, order)
    return [d.to_record() for d in decisions]


@router.get("/due")
async def list_due_reviews(repo: DecisionRepository = Depends(get_repository)):
    """Unreviewed decisions due today or earlier."""
    return [d.to_record() for d in await repo.list_due_reviews()]


@router.get("/{decision_id}")
async def get_decision(
    decision_id: str, repo: DecisionRepository = Depends(get_repository),
):
    decision = await repo.get(decision_id)
    if decision is None:
        raise ResourceNotFoundError("Decision", decision_id)
    return decision.to_record()


@router.patch("/{decision_id}")
async def update_decision(
    decision_id: str,
    body: DecisionPatch,
    repo: DecisionRepository = Depends(get_repository),
):
    decision = await repo.update(decision_id, body)
    if decision is None:
        raise ResourceNotFoundError("Decision", decision_id)
    return decision.to_record()


@router.delete("/{decision_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_decision(
    decision_id: str, repo: DecisionRepository = Depends(get_repository),
):
    await repo.delete(decision_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{decision_id}/review")
async def review_decision(
    decision_id: str,
    body: ReviewOutcome,
    repo: DecisionRepository = Depends(get_repository),
):
    decision = await repo.record_review(decision_id, body)
    return decision.to_record()
