"""Decision Stats — pure calibration analytics over a decision collection.

Invariants:
    - No IO, no DB, no clock reads beyond the injectable `today`
    - Calibration math uses only reviewed decisions (a review always carries a rating)
    - Empty input (or no reviews) yields zeros and empty maps, never NaN or ZeroDivisionError
    - calibration_gap = avg_confidence - (avg_rating - 1) * 25, computed on unrounded means
    - Rounding happens once, at the result boundary: confidence/gap to int,
      rating-like averages to one decimal (half-up, like the UI's Math.round)
    - Time series groups by the month of `date` (not review_date); confidence over ALL
      decisions in the month, rating over the rated subset only (None if none)

Design Decisions:
    - Pure functions returning dataclasses; to_camel_dict() produces the wire shape
    - Buckets accumulate raw sums and divide at the end (no running-average drift)
"""

from collections import defaultdict
from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from pydantic.alias_generators import to_camel

from decision_log.core.decision import Decision
from decision_log.core.review_schedule import is_due, today_iso

RATING_SCALE_OFFSET = 1
RATING_TO_PERCENT = 25  # (rating - 1) * 25 maps 1..5 onto 0..100


def round_half_up(value: float, places: int = 0) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def round_int(value: float) -> int:
    return int(round_half_up(value))


def normalize_rating(avg_rating: float) -> float:
    """Map the 1-5 rating scale onto 0-100 so it compares with confidence."""
    return (avg_rating - RATING_SCALE_OFFSET) * RATING_TO_PERCENT


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


@dataclass
class RatingBucket:
    count: int
    avg_rating: float
    avg_confidence: int | None = None


@dataclass
class DecisionStats:
    total_decisions: int = 0
    reviewed_decisions: int = 0
    pending_reviews: int = 0
    decisions_this_month: int = 0
    avg_confidence: int = 0
    avg_rating: float = 0.0
    calibration_gap: int = 0
    category_breakdown: dict[str, RatingBucket] = field(default_factory=dict)
    factor_breakdown: dict[str, RatingBucket] = field(default_factory=dict)
    stakes_by_rating: dict[str, RatingBucket] = field(default_factory=dict)
    quality_vs_outcome: dict[str, RatingBucket] = field(default_factory=dict)

    def to_camel_dict(self) -> dict[str, Any]:
        return _camelize(asdict(self))


@dataclass
class TimeSeriesPoint:
    date: str  # YYYY-MM
    confidence: int
    rating: float | None
    count: int

    def to_camel_dict(self) -> dict[str, Any]:
        return asdict(self)


def _camelize(value: Any) -> Any:
    # breakdown keys (category names, factors) are data, not field names
    if isinstance(value, dict):
        return {
            (to_camel(k) if k in _FIELD_NAMES else k): _camelize(v)
            for k, v in value.items()
            if not (k == "avg_confidence" and v is None)
        }
    return value


_FIELD_NAMES = frozenset(DecisionStats.__dataclass_fields__) | frozenset(
    RatingBucket.__dataclass_fields__,
)


def _breakdown(
    reviewed: list[Decision],
    keys_of: Callable[[Decision], Iterable[str]],
    with_confidence: bool = False,
) -> dict[str, RatingBucket]:
    """Group reviewed decisions into buckets; a decision may land in several."""
    ratings: dict[str, list[float]] = defaultdict(list)
    confidences: dict[str, list[float]] = defaultdict(list)
    for d in reviewed:
        for key in keys_of(d):
            ratings[key].append(d.rating)
            confidences[key].append(d.confidence)
    return {
        key: RatingBucket(
            count=len(values),
            avg_rating=round_half_up(_mean(values), 1),
            avg_confidence=(
                round_int(_mean(confidences[key])) if with_confidence else None
            ),
        )
        for key, values in ratings.items()
    }


def calculate_stats(
    decisions: Iterable[Decision], today: date | None = None,
) -> DecisionStats:
    """Aggregate and calibration statistics. Pure, no IO."""
    decisions = list(decisions)
    reviewed = [d for d in decisions if d.review is not None]
    current_month = today_iso(today)[:7]

    stats = DecisionStats(
        total_decisions=len(decisions),
        reviewed_decisions=len(reviewed),
        pending_reviews=sum(
            1 for d in decisions if is_due(d.review_date, d.reviewed, today)
        ),
        decisions_this_month=sum(1 for d in decisions if d.date[:7] == current_month),
    )
    if not reviewed:
        return stats

    avg_confidence = _mean([d.confidence for d in reviewed])
    avg_rating = _mean([d.rating for d in reviewed])
    stats.avg_confidence = round_int(avg_confidence)
    stats.avg_rating = round_half_up(avg_rating, 1)
    stats.calibration_gap = round_int(avg_confidence - normalize_rating(avg_rating))

    stats.category_breakdown = _breakdown(reviewed, lambda d: [d.category])
    stats.factor_breakdown = _breakdown(
        reviewed, lambda d: d.review.contributing_factors or [],
    )
    stats.stakes_by_rating = _breakdown(
        reviewed, lambda d: [d.stakes.value], with_confidence=True,
    )
    stats.quality_vs_outcome = _breakdown(
        reviewed,
        lambda d: [d.review.decision_quality.value] if d.review.decision_quality else [],
    )
    return stats


def calculate_time_series(decisions: Iterable[Decision]) -> list[TimeSeriesPoint]:
    """Monthly confidence (all decisions) and rating (rated subset) trend."""
    confidences: dict[str, list[float]] = defaultdict(list)
    ratings: dict[str, list[float]] = defaultdict(list)
    for d in decisions:
        month = d.date[:7]
        confidences[month].append(d.confidence)
        if d.rating is not None:
            ratings[month].append(d.rating)

    return [
        TimeSeriesPoint(
            date=month,
            confidence=round_int(_mean(values)),
            rating=round_half_up(_mean(ratings[month]), 1) if ratings[month] else None,
            count=len(values),
        )
        for month, values in sorted(confidences.items())
    ]


def confidence_label(confidence: int) -> str:
    if confidence <= 10:
        return "Total guess"
    if confidence <= 30:
        return "Shrug"
    if confidence <= 50:
        return "Coin flip"
    if confidence <= 70:
        return "Reasonably confident"
    if confidence <= 85:
        return "Pretty sure"
    return "I'd bet my cat"
