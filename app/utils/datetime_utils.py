"""
Timezone-aware datetime helpers.
Store and compute in UTC.
"""
from datetime import date, datetime, timezone

UTC = timezone.utc


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware). Use for clock_in, clock_out, deleted_at, etc."""
    return datetime.now(UTC)


def today_utc() -> date:
    """Current server date in UTC; the attendance business day."""
    return now_utc().date()


def inclusive_day_span(from_date: date, to_date: date) -> int:
    """Number of calendar days from from_date to to_date, both included."""
    return (to_date - from_date).days + 1
