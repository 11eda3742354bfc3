"""
Calendar-day truncation for bar timestamps.

Simulation dates are calendar days in a fixed timezone (UTC) so the
date sequence does not depend on the host's locale or timezone.
"""

from collections.abc import Callable
from datetime import UTC, date, datetime

DayTruncator = Callable[[datetime], date]


def to_utc_date(timestamp: datetime) -> date:
    """Truncate a timestamp to its UTC calendar day.

    Naive timestamps are interpreted as UTC.

    Args:
        timestamp: Bar timestamp

    Returns:
        The UTC calendar date containing the timestamp
    """
    if timestamp.tzinfo is None:
        return timestamp.date()
    return timestamp.astimezone(UTC).date()


def ensure_utc(timestamp: datetime) -> datetime:
    """Return an aware UTC datetime, treating naive values as UTC."""
    if timestamp.tzinfo is None:
        return timestamp.replace(tzinfo=UTC)
    return timestamp.astimezone(UTC)
