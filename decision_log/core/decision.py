"""Decision Aggregate — the journaled decision and its review, as pydantic models.

Invariants:
    - Decision.review is None (pending) or a complete Review (reviewed) — a reviewed
      decision without actual_outcome or rating cannot be constructed
    - review_date is never taken from a patch; it is always derived (review_schedule)
    - date and review_date are real ISO calendar dates; horizon_days is at most
      MAX_HORIZON_DAYS, so review-date arithmetic stays inside the calendar
    - Wire records are flat camelCase dicts; to_record/from_record convert both ways
    - to_record omits absent optional keys, so an exported record re-imports unchanged

Design Decisions:
    - Nested Review over five optional top-level fields: makes partial reviews unrepresentable
    - Stored Decision is lenient (accepts any validated import); DecisionCreate/DecisionPatch
      normalize user input (lowercase category, deduplicated lowercase tags)
"""

import datetime
import math
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import (
    AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, field_validator,
)
from pydantic.alias_generators import to_camel

from decision_log.core.domain_types import (
    CONTRIBUTING_FACTORS, MAX_HORIZON_DAYS, DecisionQuality, DecisionType, OutcomeMatch,
    Stakes,
)


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _round_number(v: Any) -> Any:
    # legacy exports may carry 70.0 for an integer field; inf/nan fail int validation
    if isinstance(v, float) and math.isfinite(v):
        return int(round(v))
    return v


def _check_iso_date(v: str) -> str:
    # YYYY-MM-DD only: compact forms like 20240315 would break string ordering
    if datetime.date.fromisoformat(v).isoformat() != v:
        raise ValueError(f"date must be YYYY-MM-DD, got {v!r}")
    return v


LenientInt = Annotated[int, BeforeValidator(_round_number)]
IsoDate = Annotated[str, AfterValidator(_check_iso_date)]


def normalize_tags(tags: list[str]) -> list[str]:
    """Lowercase, trim, drop empties, dedupe keeping first occurrence."""
    seen: dict[str, None] = {}
    for tag in tags:
        t = tag.strip().lower()
        if t:
            seen.setdefault(t, None)
    return list(seen)


# ─── Review ──────────────────────────────────────────────────────

class Review(WireModel):
    """Outcome fields of a reviewed decision, as stored."""
    reviewed_at: str
    actual_outcome: str
    rating: LenientInt = Field(ge=1, le=5)
    lessons_learned: str | None = None
    same_choice_again: bool | None = None
    outcome_matched_expectation: OutcomeMatch | None = None
    contributing_factors: list[str] | None = None
    decision_quality: DecisionQuality | None = None


class ReviewOutcome(WireModel):
    """User-supplied review input for DecisionRepository.record_review."""
    actual_outcome: str
    rating: int = Field(ge=1, le=5)
    lessons_learned: str = ""
    same_choice_again: bool = False
    outcome_matched_expectation: OutcomeMatch | None = None
    contributing_factors: list[str] | None = None
    decision_quality: DecisionQuality | None = None

    @field_validator("contributing_factors")
    @classmethod
    def check_factor_vocabulary(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return v
        unknown = [f for f in v if f not in CONTRIBUTING_FACTORS]
        if unknown:
            raise ValueError(f"unknown contributing factor(s): {', '.join(unknown)}")
        return list(dict.fromkeys(v))

    def to_review(self, reviewed_at: str) -> Review:
        return Review(reviewed_at=reviewed_at, **self.model_dump())


_REVIEW_KEYS: tuple[str, ...] = tuple(to_camel(name) for name in Review.model_fields)
# a review exists only if one of these is on the record
_REVIEW_MARKERS: tuple[str, ...] = ("reviewedAt", "actualOutcome", "rating")


# ─── Decision ────────────────────────────────────────────────────

class Decision(WireModel):
    """The aggregate root as stored and exported."""
    id: str = Field(min_length=1)
    title: str
    date: IsoDate
    category: str
    decision_type: DecisionType
    options: list[str]
    chosen_option: str
    reasoning: str = ""
    expected_outcome: str = ""
    confidence: LenientInt = Field(ge=0, le=100)
    stakes: Stakes
    horizon_days: LenientInt = Field(gt=0, le=MAX_HORIZON_DAYS)
    review_date: IsoDate
    tags: list[str] = Field(default_factory=list)
    review: Review | None = None

    @property
    def reviewed(self) -> bool:
        return self.review is not None

    @property
    def rating(self) -> int | None:
        return self.review.rating if self.review else None

    def to_record(self) -> dict[str, Any]:
        """Flatten into the camelCase export record."""
        record = self.model_dump(
            mode="json", by_alias=True, exclude={"review"}, exclude_none=True,
        )
        if self.review is not None:
            record.update(
                self.review.model_dump(mode="json", by_alias=True, exclude_none=True),
            )
        return record

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Decision":
        """Build from a flat record; review keys are nested into Review."""
        data = dict(record)
        review_data: dict[str, Any] = {}
        for key in _REVIEW_KEYS:
            value = data.pop(key, None)
            if value is not None:
                review_data[key] = value
        data.pop("review", None)
        if any(k in review_data for k in _REVIEW_MARKERS):
            data["review"] = review_data
        return cls.model_validate(data)


class DecisionCreate(WireModel):
    """Input for DecisionRepository.create — id and review_date are assigned."""
    title: str = Field(min_length=1)
    date: IsoDate
    category: str = Field(min_length=1)
    decision_type: DecisionType
    options: list[str] = Field(min_length=1)
    chosen_option: str
    reasoning: str = ""
    expected_outcome: str = ""
    confidence: int = Field(ge=0, le=100)
    stakes: Stakes
    horizon_days: int = Field(gt=0, le=MAX_HORIZON_DAYS)
    tags: list[str] = Field(default_factory=list)

    @field_validator("category")
    @classmethod
    def lowercase_category(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("category cannot be empty")
        return v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)


class DecisionPatch(WireModel):
    """Arbitrary field patch for DecisionRepository.update.

    reviewDate and review fields are not patchable: unknown keys are ignored.
    """
    title: str | None = Field(None, min_length=1)
    date: IsoDate | None = None
    category: str | None = None
    decision_type: DecisionType | None = None
    options: list[str] | None = Field(None, min_length=1)
    chosen_option: str | None = None
    reasoning: str | None = None
    expected_outcome: str | None = None
    confidence: int | None = Field(None, ge=0, le=100)
    stakes: Stakes | None = None
    horizon_days: int | None = Field(None, gt=0, le=MAX_HORIZON_DAYS)
    tags: list[str] | None = None

    @field_validator("category")
    @classmethod
    def lowercase_category(cls, v: str | None) -> str | None:
        return v if v is None else v.strip().lower()

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str] | None) -> list[str] | None:
        return v if v is None else normalize_tags(v)

    def changes(self) -> dict[str, Any]:
        """Only the fields the caller actually set to a value."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


@dataclass
class DecisionFilters:
    """ANDed list filters; None/False means "don't filter on this"."""
    category: str | None = None
    stakes: Stakes | None = None
    reviewed: bool | None = None
    needs_review: bool = False
    search_term: str | None = None
