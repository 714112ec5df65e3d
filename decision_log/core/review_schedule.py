"""Review Schedule — review-date arithmetic, due-date checks, and the clock.

Invariants:
    - review_date = date + horizon_days in calendar days (month/year/leap-safe)
    - Dates travel as zero-padded ISO-8601 strings, so string comparison == date comparison
    - A decision is due when it is unreviewed and review_date <= today
    - "today" is the process-local calendar date unless the caller passes one
    - Timestamps (reviewedAt, exportedAt, backup timestamps) are UTC, millisecond ISO with "Z"

Design Decisions:
    - datetime.date + timedelta over manual day counting: leap years handled by the stdlib
    - today injectable on every function: tests pin the clock without patching
"""

from datetime import date, datetime, timedelta, timezone


def calculate_review_date(decision_date: str, horizon_days: int) -> str:
    """Advance an ISO date by horizon_days calendar days.

    Raises ValueError for a malformed date or a result past year 9999.
    """
    start = date.fromisoformat(decision_date)
    try:
        return (start + timedelta(days=horizon_days)).isoformat()
    except OverflowError as e:
        raise ValueError(
            f"{decision_date} + {horizon_days} days is past the end of the calendar"
        ) from e


def local_today() -> date:
    """Caller's local calendar date (reviews fall due at local midnight)."""
    return date.today()


def today_iso(today: date | None = None) -> str:
    return (today or local_today()).isoformat()


def is_due(review_date: str, reviewed: bool, today: date | None = None) -> bool:
    """Unreviewed and scheduled on or before today."""
    return not reviewed and review_date <= today_iso(today)


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC instant, e.g. 2024-02-01T09:30:00.000Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z",
    )
