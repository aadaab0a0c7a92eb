"""Common time utilities.

GitHub reports event times in UTC; every comparison and every rendered
timestamp in ghactors is done in UTC as well.
"""

from __future__ import annotations

import datetime as dt


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp for run bookkeeping."""
    return dt.datetime.now(dt.UTC)


def as_utc(value: dt.datetime) -> dt.datetime:
    """Return ``value`` converted to UTC, treating naive values as UTC.

    >>> as_utc(dt.datetime(2024, 1, 1, 12)).isoformat()
    '2024-01-01T12:00:00+00:00'

    """
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.UTC)
    return value.astimezone(dt.UTC)
