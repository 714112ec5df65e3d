"""Record Validation — schema-driven field rules for imported decision records.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Each rule returns a FieldIssue on violation, None on success
    - Every rule runs for every record (all failing reasons are reported, not just the first)
    - A record with zero issues is accepted verbatim (the original dict, untouched)
    - A record with issues contributes exactly ONE aggregated diagnostic line:
      "Decision {n} ({title or 'untitled'}): {reason}, {reason}, ..."
    - valid == (no diagnostics at all); callers may still import the accepted subset

Design Decisions:
    - Rules operate on raw dicts, decoupled from the Decision model: the rule set is
      the gate that decides whether Decision.from_record may be attempted at all
    - Review completeness rule: reviewedAt, actualOutcome, rating appear together or not
      at all, so every accepted record maps onto Pending | Reviewed
    - A record that passes every rule is finally checked against the Decision model,
      so everything accepted here is guaranteed to load
"""

from collections.abc import Callable
import math
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from decision_log.core.decision import Decision
from decision_log.core.domain_types import (
    DecisionType, MAX_CONFIDENCE, MAX_HORIZON_DAYS, MAX_RATING, MIN_CONFIDENCE,
    MIN_HORIZON_DAYS, MIN_RATING, Stakes,
)


@dataclass(frozen=True)
class FieldIssue:
    field: str
    reason: str


@dataclass
class RecordReport:
    """Outcome of validating one record."""
    index: int
    title: str | None
    issues: list[FieldIssue]

    @property
    def ok(self) -> bool:
        return not self.issues

    def diagnostic(self) -> str:
        reasons = ", ".join(i.reason for i in self.issues)
        return f"Decision {self.index + 1} ({self.title or 'untitled'}): {reasons}"


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    decisions: list[dict[str, Any]] = field(default_factory=list)
    reports: list[RecordReport] = field(default_factory=list)


Rule = Callable[[dict[str, Any]], FieldIssue | None]


def _is_number(v: Any) -> bool:
    """Finite int or float; bool, NaN and infinities do not count."""
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return False
    return isinstance(v, int) or math.isfinite(v)


# --- Rule factories -----------------------------------------------------------

def required_string(name: str) -> Rule:
    def rule(item: dict[str, Any]) -> FieldIssue | None:
        v = item.get(name)
        if not isinstance(v, str) or not v:
            return FieldIssue(name, f"missing or invalid {name}")
        return None
    return rule


def one_of(name: str, allowed: tuple[str, ...]) -> Rule:
    def rule(item: dict[str, Any]) -> FieldIssue | None:
        if item.get(name) not in allowed:
            return FieldIssue(name, f"invalid {name}")
        return None
    return rule


def is_list(name: str) -> Rule:
    def rule(item: dict[str, Any]) -> FieldIssue | None:
        if not isinstance(item.get(name), list):
            return FieldIssue(name, f"{name} must be an array")
        return None
    return rule


def check_confidence(item: dict[str, Any]) -> FieldIssue | None:
    v = item.get("confidence")
    if not _is_number(v) or not MIN_CONFIDENCE <= v <= MAX_CONFIDENCE:
        return FieldIssue(
            "confidence",
            f"confidence must be a number {MIN_CONFIDENCE}-{MAX_CONFIDENCE}",
        )
    return None


def check_horizon(item: dict[str, Any]) -> FieldIssue | None:
    v = item.get("horizonDays")
    if not _is_number(v) or not MIN_HORIZON_DAYS <= v <= MAX_HORIZON_DAYS:
        return FieldIssue(
            "horizonDays",
            f"horizonDays must be a number {MIN_HORIZON_DAYS}-{MAX_HORIZON_DAYS}",
        )
    return None


def check_rating(item: dict[str, Any]) -> FieldIssue | None:
    """Optional; when present an integer 1-5."""
    if item.get("rating") is None:
        return None
    v = item["rating"]
    if not _is_number(v) or not MIN_RATING <= v <= MAX_RATING or v != int(v):
        return FieldIssue("rating", f"rating must be {MIN_RATING}-{MAX_RATING}")
    return None


def check_review_complete(item: dict[str, Any]) -> FieldIssue | None:
    present = [
        k for k in ("reviewedAt", "actualOutcome", "rating")
        if item.get(k) is not None
    ]
    if present and len(present) < 3:
        return FieldIssue(
            "reviewedAt",
            "review must set reviewedAt, actualOutcome and rating together",
        )
    return None


DECISION_RULES: tuple[Rule, ...] = (
    required_string("id"),
    required_string("title"),
    required_string("date"),
    required_string("category"),
    required_string("chosenOption"),
    required_string("reviewDate"),
    one_of("decisionType", tuple(t.value for t in DecisionType)),
    one_of("stakes", tuple(s.value for s in Stakes)),
    is_list("options"),
    is_list("tags"),
    check_confidence,
    check_horizon,
    check_rating,
    check_review_complete,
)


# --- Composite validators -----------------------------------------------------

def model_issues(item: dict[str, Any]) -> list[FieldIssue]:
    """Whatever the Decision model still rejects once every rule has passed."""
    try:
        Decision.from_record(item)
    except ValidationError as e:
        issues = []
        for err in e.errors():
            name = ".".join(str(part) for part in err["loc"]) or "*"
            issues.append(FieldIssue(name, f"invalid {name}"))
        return issues
    return []


def validate_record(
    item: Any, index: int, rules: tuple[Rule, ...] = DECISION_RULES,
) -> RecordReport:
    """Run every rule against one candidate record."""
    if not isinstance(item, dict):
        return RecordReport(index, None, [FieldIssue("*", "record must be an object")])
    title = item.get("title") if isinstance(item.get("title"), str) else None
    issues = [issue for rule in rules if (issue := rule(item)) is not None]
    if not issues:
        issues = model_issues(item)
    return RecordReport(index, title, issues)


def validate_decisions(data: Any) -> ValidationResult:
    """Validate a batch; bad records are excluded, good ones returned verbatim."""
    if not isinstance(data, list):
        return ValidationResult(
            valid=False, errors=["Data must be an array of decisions"],
        )

    reports = [validate_record(item, i) for i, item in enumerate(data)]
    errors = [r.diagnostic() for r in reports if not r.ok]
    accepted = [item for item, r in zip(data, reports) if r.ok]
    return ValidationResult(
        valid=not errors, errors=errors, decisions=accepted, reports=reports,
    )
