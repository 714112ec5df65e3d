"""Domain Types — enums and constants shared across the decision journal.

Invariants:
    - All valid states encoded as str Enums — no raw string matching in domain logic
    - STAKES_ORDER ranks low < medium < high (used for ordinal sorting)
    - CONTRIBUTING_FACTORS is the fixed vocabulary for structured reviews
    - CURRENT_SCHEMA_VERSION is the version written into every export envelope

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class DecisionType(str, Enum):
    BINARY = "binary"
    MULTI = "multi"
    OPEN = "open"


class Stakes(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class OutcomeMatch(str, Enum):
    """How the actual outcome compared to the expected one."""
    EXCEEDED = "exceeded"
    MET = "met"
    PARTIAL = "partial"
    MISSED = "missed"


class DecisionQuality(str, Enum):
    """Self-assessed process quality, independent of the outcome."""
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


class SortField(str, Enum):
    DATE = "date"
    CONFIDENCE = "confidence"
    REVIEW_DATE = "reviewDate"
    STAKES = "stakes"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ImportMode(str, Enum):
    """Replace wipes the collection first; merge is an id-keyed set union."""
    REPLACE = "replace"
    MERGE = "merge"


# ─── Constants ───────────────────────────────────────────────────

STAKES_ORDER: dict[Stakes, int] = {
    Stakes.LOW: 1,
    Stakes.MEDIUM: 2,
    Stakes.HIGH: 3,
}

CONTRIBUTING_FACTORS: tuple[str, ...] = (
    "Good information",
    "Right timing",
    "Proper research",
    "Intuition",
    "Luck",
    "Poor information",
    "Bad timing",
    "External factors",
    "Rushed decision",
    "Overthinking",
)

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "work", "money", "health", "relationships", "fun", "personal", "other",
)

CURRENT_SCHEMA_VERSION = 1
LEGACY_SCHEMA_VERSION = 1
LEGACY_EXPORTED_AT = "unknown"

MIN_CONFIDENCE = 0
MAX_CONFIDENCE = 100
MIN_RATING = 1
MAX_RATING = 5
MIN_HORIZON_DAYS = 1
MAX_HORIZON_DAYS = 36_500
