"""Time windows for filtering collected events by occurrence time.

Bounds are supplied as calendar dates (``YYYY-MM-DD``) and interpreted in
UTC. The start date begins at midnight and the end date runs until the last
microsecond of that day, so both named days are fully included:

>>> window = TimeWindow.from_dates("2024-01-01", "2024-01-31")
>>> window.contains(dt.datetime(2024, 1, 31, 23, 0, tzinfo=dt.UTC))
True

"""

from __future__ import annotations

import dataclasses
import datetime as dt

from ghactors.common.time import as_utc
from ghactors.logging import get_logger, log_warning

logger = get_logger(__name__)

_DATE_FORMAT = "%Y-%m-%d"


def parse_date(value: str, *, field: str = "date") -> dt.date:
    """Parse a ``YYYY-MM-DD`` string.

    Raises
    ------
    ValueError
        If ``value`` is not a valid calendar date in that format.

    """
    try:
        return dt.datetime.strptime(value.strip(), _DATE_FORMAT).date()  # noqa: DTZ007
    except ValueError as exc:
        msg = f"{field} must be a YYYY-MM-DD date, got {value!r}"
        raise ValueError(msg) from exc


@dataclasses.dataclass(frozen=True, slots=True)
class TimeWindow:
    """Inclusive ``[start, end]`` range of aware UTC datetimes."""

    start: dt.datetime
    end: dt.datetime

    def __post_init__(self) -> None:
        """Reject naive bounds and inverted ranges."""
        if self.start.tzinfo is None or self.end.tzinfo is None:
            msg = "TimeWindow bounds must be timezone-aware"
            raise ValueError(msg)
        if self.start > self.end:
            msg = (
                f"TimeWindow start {self.start.isoformat()} is after "
                f"end {self.end.isoformat()}"
            )
            raise ValueError(msg)

    @classmethod
    def from_dates(cls, start: str | None, end: str | None) -> TimeWindow | None:
        """Build a window from date strings, or ``None`` when unbounded.

        Both bounds must be given for a window to apply. When only one is
        supplied it is ignored with a warning and no filtering takes place.
        """
        start_text = (start or "").strip()
        end_text = (end or "").strip()
        if not start_text and not end_text:
            return None
        if not start_text or not end_text:
            log_warning(
                logger,
                "Ignoring time window: start_date=%r end_date=%r "
                "(both are required)",
                start,
                end,
            )
            return None

        start_day = parse_date(start_text, field="start_date")
        end_day = parse_date(end_text, field="end_date")
        return cls(
            start=dt.datetime.combine(start_day, dt.time.min, tzinfo=dt.UTC),
            end=dt.datetime.combine(end_day, dt.time.max, tzinfo=dt.UTC),
        )

    def contains(self, timestamp: dt.datetime) -> bool:
        """Return True when ``start <= timestamp <= end``.

        Naive timestamps are taken to be UTC.
        """
        moment = as_utc(timestamp)
        return self.start <= moment <= self.end
