"""Typed records decoded from GitHub REST responses.

List endpoints embed partially populated user objects; the single-user
lookup returns a fully populated one. Both decode into :class:`Actor`, and
two actors with the same ``id`` are the same account regardless of which
fields were filled in.
"""

from __future__ import annotations

import dataclasses
import datetime as dt  # noqa: TC003
import typing as typ

import msgspec

ItemT = typ.TypeVar("ItemT")


class Actor(msgspec.Struct, frozen=True, kw_only=True):
    """A GitHub account as returned by the users API."""

    id: int
    login: str | None = None
    name: str | None = None
    email: str | None = None
    location: str | None = None
    company: str | None = None
    blog: str | None = None
    bio: str | None = None
    public_repos: int | None = None
    following: int | None = None
    followers: int | None = None
    html_url: str | None = None


class Commit(msgspec.Struct, frozen=True, kw_only=True):
    """Commit listing entry; ``author`` is null when the email is unlinked."""

    sha: str
    author: Actor | None = None


class Fork(msgspec.Struct, frozen=True, kw_only=True):
    """Fork listing entry."""

    id: int
    full_name: str
    owner: Actor
    created_at: dt.datetime


class Stargazer(msgspec.Struct, frozen=True, kw_only=True):
    """Stargazer entry returned with the ``star+json`` media type."""

    user: Actor
    starred_at: dt.datetime


class Issue(msgspec.Struct, frozen=True, kw_only=True):
    """Issue listing entry (pull requests are listed as issues too)."""

    id: int
    number: int
    user: Actor
    created_at: dt.datetime


class Repository(msgspec.Struct, frozen=True, kw_only=True):
    """Organisation repository listing entry."""

    id: int
    name: str
    full_name: str | None = None
    html_url: str | None = None
    private: bool = False


@dataclasses.dataclass(frozen=True, slots=True)
class Page(typ.Generic[ItemT]):
    """One bounded chunk of a listing plus the cursor for the next chunk.

    ``next_token`` is opaque to callers; ``None`` or an empty string means
    there are no more pages.
    """

    items: tuple[ItemT, ...]
    next_token: str | None = None

    @property
    def is_last(self) -> bool:
        """Return True when no further page should be requested."""
        return not self.next_token
