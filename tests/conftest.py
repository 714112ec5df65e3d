"""Root conftest — shared test configuration and decision builders."""

import os
import uuid

import pytest

# Tests never touch the developer's real database or key-value store
os.environ.setdefault("DECISION_LOG_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DECISION_LOG_DATA_DIR", "./.decision_log_test")
os.environ.setdefault("DECISION_LOG_LOG_FORMAT", "text")

from decision_log.core.decision import Decision, Review  # noqa: E402
from decision_log.core.review_schedule import calculate_review_date  # noqa: E402


def build_decision(
    rating: int | None = None,
    factors: list[str] | None = None,
    quality: str | None = None,
    **overrides,
) -> Decision:
    """A well-formed decision; pass rating= to make it reviewed."""
    data = {
        "id": str(uuid.uuid4()),
        "title": "Take the new job",
        "date": "2024-01-15",
        "category": "work",
        "decision_type": "binary",
        "options": ["Accept", "Decline"],
        "chosen_option": "Accept",
        "reasoning": "Better growth path",
        "expected_outcome": "More interesting work",
        "confidence": 70,
        "stakes": "medium",
        "horizon_days": 30,
        "tags": ["career"],
    }
    data.update(overrides)
    data.setdefault(
        "review_date", calculate_review_date(data["date"], data["horizon_days"]),
    )
    if rating is not None:
        data["review"] = Review(
            reviewed_at="2024-02-20T10:00:00.000Z",
            actual_outcome="Went fine",
            rating=rating,
            lessons_learned="",
            same_choice_again=True,
            contributing_factors=factors,
            decision_quality=quality,
        )
    return Decision(**data)


@pytest.fixture
def make_decision():
    return build_decision
