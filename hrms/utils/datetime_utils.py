"""
Date/time helpers.
- Timestamps are stored and compared in UTC.
- Leave day counts are inclusive calendar days (weekends and holidays included).
"""
from datetime import date, datetime, timezone
from typing import Optional

UTC = timezone.utc


def now_utc() -> datetime:
    """Current time in UTC (timezone-aware). Use for applied_at, decision_at, created_at, etc."""
    return datetime.now(UTC)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """If dt is naive, treat as UTC and return timezone-aware UTC. If already aware, convert to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def inclusive_days(start: date, end: date) -> int:
    """Number of calendar days from start to end, both included (2025-10-15..2025-10-19 -> 5)."""
    return (end - start).days + 1
