"""Tab-separated projections of collected actors.

Absent values, including blank strings, are written as :data:`PLACEHOLDER`
rather than an empty field or ``0`` so that "unknown" stays distinguishable
from a genuine zero count and every column is non-empty.
"""

from __future__ import annotations

import typing as typ

from ghactors.common.time import as_utc

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from ghactors.github.models import Actor

PLACEHOLDER = "NULL"

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"
_FIELD_BREAKS = str.maketrans({"\t": " ", "\r": " ", "\n": " "})


def format_str(value: str | None) -> str:
    """Render an optional string, flattening tabs and line breaks.

    GitHub reports unset profile fields such as ``blog`` as ``""``; empty and
    whitespace-only values render as :data:`PLACEHOLDER` like ``null`` does.
    """
    if value is None or not value.strip():
        return PLACEHOLDER
    return value.translate(_FIELD_BREAKS)


def format_int(value: int | None) -> str:
    """Render an optional integer."""
    if value is None:
        return PLACEHOLDER
    return str(value)


def format_timestamp(value: dt.datetime | None) -> str:
    """Render a timestamp in UTC as ``YYYY-MM-DD HH:MM:SS``."""
    if value is None:
        return PLACEHOLDER
    return as_utc(value).strftime(_TIMESTAMP_FORMAT)


def _check_alignment(
    actors: cabc.Sequence[Actor], timestamps: cabc.Sequence[dt.datetime]
) -> bool:
    """Return True when timestamps should be printed; reject misalignment."""
    if not timestamps:
        return False
    if len(timestamps) != len(actors):
        msg = (
            f"timestamps ({len(timestamps)}) must align with actors ({len(actors)})"
        )
        raise ValueError(msg)
    return True


def actor_fields(actor: Actor) -> list[str]:
    """Return the full column set for one actor, without prefix or time."""
    return [
        format_int(actor.id),
        format_str(actor.login),
        format_str(actor.name),
        format_str(actor.email),
        format_str(actor.location),
        format_str(actor.company),
        format_str(actor.blog),
        format_str(actor.bio),
        format_int(actor.public_repos),
        format_int(actor.following),
        format_int(actor.followers),
        format_str(actor.html_url),
    ]


def format_actor_rows(
    actors: cabc.Sequence[Actor],
    timestamps: cabc.Sequence[dt.datetime] = (),
    *,
    repo_slug: str | None = None,
) -> list[str]:
    """Format full profile rows.

    Columns: optional ``owner/repo`` prefix, id, login, name, email,
    location, company, blog, bio, public repos, following, followers,
    profile URL and, when ``timestamps`` is non-empty, the event time.
    """
    with_time = _check_alignment(actors, timestamps)
    rows: list[str] = []
    for index, actor in enumerate(actors):
        columns = [repo_slug] if repo_slug else []
        columns.extend(actor_fields(actor))
        if with_time:
            columns.append(format_timestamp(timestamps[index]))
        rows.append("\t".join(columns))
    return rows


def format_id_rows(
    actors: cabc.Sequence[Actor],
    timestamps: cabc.Sequence[dt.datetime] = (),
) -> list[str]:
    """Format ``id`` rows, followed by the event time when tracked."""
    with_time = _check_alignment(actors, timestamps)
    rows: list[str] = []
    for index, actor in enumerate(actors):
        columns = [format_int(actor.id)]
        if with_time:
            columns.append(format_timestamp(timestamps[index]))
        rows.append("\t".join(columns))
    return rows


def format_contact_rows(
    actors: cabc.Sequence[Actor],
    *,
    repo_slug: str | None = None,
) -> list[str]:
    """Format reduced ``[owner/repo] id name email`` rows."""
    rows: list[str] = []
    for actor in actors:
        columns = [repo_slug] if repo_slug else []
        columns.extend(
            [format_int(actor.id), format_str(actor.name), format_str(actor.email)]
        )
        rows.append("\t".join(columns))
    return rows
