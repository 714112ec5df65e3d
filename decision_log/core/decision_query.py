"""Decision Query — pure filtering and sorting over an in-memory decision list.

Invariants:
    - Filters are ANDed; an unset filter never excludes anything
    - needs_review == unreviewed AND review_date <= today
    - search is a case-insensitive substring match over title, reasoning, and tags
    - date/reviewDate sort on ISO strings, confidence on ints, stakes on ordinal rank
    - desc negates the comparator (reverse=True keeps tie order stable, callers must not rely on it)

Design Decisions:
    - Pure functions over repository SQL: the collection is small and personal,
      and the same rules back both list_filtered and the due-review queries
"""

from collections.abc import Callable, Iterable
from datetime import date
from typing import Any

from decision_log.core.decision import Decision, DecisionFilters
from decision_log.core.domain_types import STAKES_ORDER, SortField, SortOrder
from decision_log.core.review_schedule import is_due


def matches_search(decision: Decision, term: str) -> bool:
    needle = term.lower()
    return (
        needle in decision.title.lower()
        or needle in decision.reasoning.lower()
        or any(needle in t.lower() for t in decision.tags)
    )


def filter_decisions(
    decisions: Iterable[Decision],
    filters: DecisionFilters,
    today: date | None = None,
) -> list[Decision]:
    """Apply every set filter in turn."""
    result = list(decisions)
    if filters.category:
        result = [d for d in result if d.category == filters.category]
    if filters.stakes:
        result = [d for d in result if d.stakes == filters.stakes]
    if filters.reviewed is not None:
        result = [d for d in result if d.reviewed == filters.reviewed]
    if filters.needs_review:
        result = [d for d in result if is_due(d.review_date, d.reviewed, today)]
    if filters.search_term:
        result = [d for d in result if matches_search(d, filters.search_term)]
    return result


_SORT_KEYS: dict[SortField, Callable[[Decision], Any]] = {
    SortField.DATE: lambda d: d.date,
    SortField.CONFIDENCE: lambda d: d.confidence,
    SortField.REVIEW_DATE: lambda d: d.review_date,
    SortField.STAKES: lambda d: STAKES_ORDER[d.stakes],
}


def sort_decisions(
    decisions: Iterable[Decision],
    sort_field: SortField = SortField.DATE,
    sort_order: SortOrder = SortOrder.DESC,
) -> list[Decision]:
    return sorted(
        decisions,
        key=_SORT_KEYS[SortField(sort_field)],
        reverse=SortOrder(sort_order) == SortOrder.DESC,
    )


def due_reviews(
    decisions: Iterable[Decision], today: date | None = None,
) -> list[Decision]:
    return [d for d in decisions if is_due(d.review_date, d.reviewed, today)]
