"""Unit tests for tab-separated actor rows."""

from __future__ import annotations

import datetime as dt

import pytest

from ghactors.github.models import Actor
from ghactors.output import (
    PLACEHOLDER,
    format_actor_rows,
    format_contact_rows,
    format_id_rows,
)
from ghactors.output.formatting import format_timestamp
from tests.unit.collect_test_helpers import make_actor, utc


def _full_actor() -> Actor:
    return make_actor(
        583231,
        login="octocat",
        name="The Octocat",
        email=None,
        location="San Francisco",
        company="@github",
        blog="https://github.blog",
        bio=None,
        public_repos=8,
        following=0,
        followers=9000,
        html_url="https://github.com/octocat",
    )


def test_actor_row_uses_placeholder_for_absent_values() -> None:
    """Absent fields render as the placeholder while zeros stay zeros."""
    (row,) = format_actor_rows([_full_actor()])

    assert row.split("\t") == [
        "583231",
        "octocat",
        "The Octocat",
        PLACEHOLDER,
        "San Francisco",
        "@github",
        "https://github.blog",
        PLACEHOLDER,
        "8",
        "0",
        "9000",
        "https://github.com/octocat",
    ]


def test_actor_rows_carry_prefix_and_timestamp() -> None:
    """The slug leads and the event time trails each row."""
    rows = format_actor_rows(
        [make_actor(1), make_actor(2)],
        [utc(2024, 1, 2, 3, 4), utc(2024, 5, 6)],
        repo_slug="pingcap/tidb",
    )

    columns = [row.split("\t") for row in rows]
    assert [cols[0] for cols in columns] == ["pingcap/tidb", "pingcap/tidb"]
    assert [cols[-1] for cols in columns] == [
        "2024-01-02 03:04:00",
        "2024-05-06 00:00:00",
    ]
    assert all(len(cols) == 14 for cols in columns)


def test_free_text_fields_are_flattened() -> None:
    """Tabs and line breaks inside values cannot split rows or columns."""
    (row,) = format_actor_rows([make_actor(1, bio="line one\nline\ttwo\r\n")])

    assert "\n" not in row
    assert row.count("\t") == 11
    assert row.split("\t")[7] == "line one line two  "


def test_id_rows_with_and_without_timestamps() -> None:
    """Identifier rows add the event time only when tracked."""
    actors = [make_actor(7), make_actor(8)]

    assert format_id_rows(actors) == ["7", "8"]
    assert format_id_rows(actors, [utc(2024, 3, 1), utc(2024, 3, 2, 12)]) == [
        "7\t2024-03-01 00:00:00",
        "8\t2024-03-02 12:00:00",
    ]


def test_contact_rows_project_id_name_email() -> None:
    """Contact rows hold id, name and email after the optional slug."""
    actors = [make_actor(1, name="Ada", email="ada@example.test"), make_actor(2)]

    assert format_contact_rows(actors) == [
        "1\tAda\tada@example.test",
        f"2\t{PLACEHOLDER}\t{PLACEHOLDER}",
    ]
    assert format_contact_rows(actors[:1], repo_slug="a/b") == [
        "a/b\t1\tAda\tada@example.test"
    ]


def test_timestamp_is_rendered_in_utc() -> None:
    """Offsets are converted to UTC before formatting."""
    plus_eight = dt.timezone(dt.timedelta(hours=8))

    assert format_timestamp(dt.datetime(2024, 1, 1, 8, 30, tzinfo=plus_eight)) == (
        "2024-01-01 00:30:00"
    )
    assert format_timestamp(None) == PLACEHOLDER


def test_misaligned_timestamps_are_rejected() -> None:
    """Timestamps must pair one-to-one with actors."""
    with pytest.raises(ValueError, match="must align"):
        format_actor_rows([make_actor(1)], [utc(2024, 1, 1), utc(2024, 1, 2)])


@pytest.mark.parametrize("blank", ["", "   "])
def test_blank_strings_render_as_placeholder(blank: str) -> None:
    """GitHub's empty-string fields are treated as absent."""
    (row,) = format_actor_rows([make_actor(1, blog=blank, bio=blank)])

    columns = row.split("\t")
    assert columns[6] == PLACEHOLDER
    assert columns[7] == PLACEHOLDER
    assert all(columns), "no column may be empty"
