"""Unit tests for time-window parsing and boundary handling."""

from __future__ import annotations

import datetime as dt

import pytest

from ghactors.collect.window import TimeWindow, parse_date
from tests.unit.collect_test_helpers import utc


def test_from_dates_spans_whole_days_in_utc() -> None:
    """Start is midnight of the first day; end is the last instant of the last."""
    window = TimeWindow.from_dates("2024-01-01", "2024-01-31")

    assert window is not None
    assert window.start == utc(2024, 1, 1)
    assert window.end == dt.datetime(2024, 1, 31, 23, 59, 59, 999999, tzinfo=dt.UTC)


@pytest.mark.parametrize(
    ("moment", "expected"),
    [
        (utc(2023, 12, 31, 23, 59), False),
        (utc(2024, 1, 1), True),
        (utc(2024, 1, 15, 8, 30), True),
        (utc(2024, 1, 31, 23, 59), True),
        (utc(2024, 2, 1), False),
    ],
)
def test_contains_is_inclusive_on_both_days(
    moment: dt.datetime, *, expected: bool
) -> None:
    """Events on the start and end dates are inside the window."""
    window = TimeWindow.from_dates("2024-01-01", "2024-01-31")
    assert window is not None
    assert window.contains(moment) is expected


def test_contains_converts_other_timezones_to_utc() -> None:
    """Aware timestamps are compared in UTC."""
    window = TimeWindow.from_dates("2024-01-02", "2024-01-02")
    assert window is not None
    plus_two = dt.timezone(dt.timedelta(hours=2))

    assert window.contains(dt.datetime(2024, 1, 3, 1, 0, tzinfo=plus_two))
    assert not window.contains(dt.datetime(2024, 1, 2, 1, 0, tzinfo=plus_two))


def test_contains_treats_naive_timestamps_as_utc() -> None:
    """Naive timestamps are assumed to be UTC."""
    window = TimeWindow.from_dates("2024-01-02", "2024-01-02")
    assert window is not None
    assert window.contains(dt.datetime(2024, 1, 2, 12, 0))  # noqa: DTZ001


@pytest.mark.parametrize(
    ("start", "end"),
    [(None, None), ("", ""), ("2024-01-01", None), (None, "2024-01-31"), ("  ", "x")],
)
def test_from_dates_requires_both_bounds(start: str | None, end: str | None) -> None:
    """A window applies only when both bounds are supplied."""
    assert TimeWindow.from_dates(start, end) is None


def test_from_dates_rejects_malformed_dates() -> None:
    """Bad dates are configuration errors."""
    with pytest.raises(ValueError, match="end_date must be a YYYY-MM-DD date"):
        TimeWindow.from_dates("2024-01-01", "01/31/2024")


def test_from_dates_rejects_inverted_range() -> None:
    """Start after end is rejected."""
    with pytest.raises(ValueError, match="is after"):
        TimeWindow.from_dates("2024-02-01", "2024-01-01")


def test_window_rejects_naive_bounds() -> None:
    """Direct construction requires aware datetimes."""
    with pytest.raises(ValueError, match="timezone-aware"):
        TimeWindow(start=dt.datetime(2024, 1, 1), end=utc(2024, 1, 2))  # noqa: DTZ001


def test_parse_date_strips_whitespace() -> None:
    """Surrounding whitespace is ignored."""
    assert parse_date(" 2024-05-06 ") == dt.date(2024, 5, 6)


def test_from_dates_warns_when_one_bound_is_missing(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A lone bound is reported rather than silently dropped."""
    warnings: list[str] = []
    monkeypatch.setattr(
        "ghactors.collect.window.log_warning",
        lambda _logger, template, *args: warnings.append(template % args),
    )

    assert TimeWindow.from_dates("2024-01-01", None) is None
    assert TimeWindow.from_dates(None, None) is None

    assert len(warnings) == 1
    assert "start_date='2024-01-01'" in warnings[0]
