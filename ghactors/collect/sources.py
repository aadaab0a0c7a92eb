"""Actor sources: one strategy per GitHub listing.

Each source binds a listing endpoint of :class:`GitHubRESTClient` to the
collection engine and declares which per-item strategies apply:

==================  ==========  ===========  ==============  ==========
Source              Window on   Dedup key    Hydration       Timestamps
==================  ==========  ===========  ==============  ==========
commit authors      --          author id    --              --
forks               created_at  --           owner id        created_at
watchers            --          --           user id         --
stargazers          starred_at  --           user id [1]_    starred_at
issue reporters     --          user id      user id         --
user list           --          --           listed id       --
org repositories    --          --           --              --
==================  ==========  ===========  ==============  ==========

.. [1] Skipped when ``only_ids`` is set; the embedded user stub is reused.
"""

from __future__ import annotations

import dataclasses
import typing as typ

from ghactors.github.models import Actor, Page

from .errors import UserListError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt
    from pathlib import Path

    from ghactors.github.client import GitHubRESTClient
    from ghactors.github.models import Fork, Issue, Repository, Stargazer

    from .engine import Hydrate, IdentityKey, TimestampOf


def _actor_id(actor: Actor) -> int:
    return actor.id


def _issue_reporter_id(issue: Issue) -> int:
    return issue.user.id


def _fork_created_at(fork: Fork) -> dt.datetime:
    return fork.created_at


def _starred_at(stargazer: Stargazer) -> dt.datetime:
    return stargazer.starred_at


@dataclasses.dataclass(frozen=True, slots=True)
class CommitAuthorsSource:
    """Distinct GitHub accounts that authored commits on the default branch.

    Commits whose author email is not linked to an account carry no author
    and are dropped. Authors are reported as the stubs embedded in the
    commit listing.
    """

    client: GitHubRESTClient
    owner: str
    repo: str
    name: str = "commits"

    async def fetch_page(self, page_token: str | None, page_size: int) -> Page[Actor]:
        """Fetch one page of commits and keep their linked authors."""
        page = await self.client.list_commits(
            self.owner, self.repo, page_token=page_token, per_page=page_size
        )
        authors = tuple(
            commit.author for commit in page.items if commit.author is not None
        )
        return Page(items=authors, next_token=page.next_token)

    @property
    def timestamp_of(self) -> TimestampOf[Actor] | None:
        """Commit authors carry no event time."""
        return None

    @property
    def identity_key(self) -> IdentityKey[Actor] | None:
        """Deduplicate authors by account ID."""
        return _actor_id

    @property
    def hydrate(self) -> Hydrate[Actor, Actor] | None:
        """Authors are not hydrated."""
        return None


@dataclasses.dataclass(frozen=True, slots=True)
class ForkersSource:
    """Owners of forks, with the time each fork was created."""

    client: GitHubRESTClient
    owner: str
    repo: str
    name: str = "forks"

    async def fetch_page(self, page_token: str | None, page_size: int) -> Page[Fork]:
        """Fetch one page of forks."""
        return await self.client.list_forks(
            self.owner, self.repo, page_token=page_token, per_page=page_size
        )

    @property
    def timestamp_of(self) -> TimestampOf[Fork] | None:
        """Forks are timed by creation."""
        return _fork_created_at

    @property
    def identity_key(self) -> IdentityKey[Fork] | None:
        """Every fork has its own owner; no deduplication."""
        return None

    @property
    def hydrate(self) -> Hydrate[Fork, Actor] | None:
        """Resolve the fork owner's full profile."""
        return self._owner_profile

    async def _owner_profile(self, fork: Fork) -> Actor:
        return await self.client.get_user(fork.owner.id)


@dataclasses.dataclass(frozen=True, slots=True)
class WatchersSource:
    """Accounts subscribed to repository notifications.

    GitHub does not expose when a watch started, so no timestamps are
    tracked and no window applies.
    """

    client: GitHubRESTClient
    owner: str
    repo: str
    name: str = "watchers"

    async def fetch_page(self, page_token: str | None, page_size: int) -> Page[Actor]:
        """Fetch one page of watchers."""
        return await self.client.list_watchers(
            self.owner, self.repo, page_token=page_token, per_page=page_size
        )

    @property
    def timestamp_of(self) -> TimestampOf[Actor] | None:
        """Watchers carry no event time."""
        return None

    @property
    def identity_key(self) -> IdentityKey[Actor] | None:
        """Watchers are distinct per listing; no deduplication."""
        return None

    @property
    def hydrate(self) -> Hydrate[Actor, Actor] | None:
        """Resolve each watcher's full profile."""
        return self._profile

    async def _profile(self, watcher: Actor) -> Actor:
        return await self.client.get_user(watcher.id)


@dataclasses.dataclass(frozen=True, slots=True)
class StargazersSource:
    """Accounts that starred the repository, with the time of starring.

    With ``only_ids`` the user stub embedded in the listing is reused
    instead of looking up each profile, saving one request per stargazer
    when only identifiers are needed.
    """

    client: GitHubRESTClient
    owner: str
    repo: str
    only_ids: bool = False
    name: str = "stargazers"

    async def fetch_page(
        self, page_token: str | None, page_size: int
    ) -> Page[Stargazer]:
        """Fetch one page of stargazers."""
        return await self.client.list_stargazers(
            self.owner, self.repo, page_token=page_token, per_page=page_size
        )

    @property
    def timestamp_of(self) -> TimestampOf[Stargazer] | None:
        """Stargazers are timed by when the star was given."""
        return _starred_at

    @property
    def identity_key(self) -> IdentityKey[Stargazer] | None:
        """An account can star a repository once; no deduplication."""
        return None

    @property
    def hydrate(self) -> Hydrate[Stargazer, Actor] | None:
        """Resolve full profiles unless ``only_ids`` is set."""
        if self.only_ids:
            return self._embedded_user
        return self._profile

    async def _embedded_user(self, stargazer: Stargazer) -> Actor:
        return stargazer.user

    async def _profile(self, stargazer: Stargazer) -> Actor:
        return await self.client.get_user(stargazer.user.id)


@dataclasses.dataclass(frozen=True, slots=True)
class IssueReportersSource:
    """Distinct accounts that opened issues or pull requests."""

    client: GitHubRESTClient
    owner: str
    repo: str
    name: str = "issues"

    async def fetch_page(self, page_token: str | None, page_size: int) -> Page[Issue]:
        """Fetch one page of issues."""
        return await self.client.list_issues(
            self.owner, self.repo, page_token=page_token, per_page=page_size
        )

    @property
    def timestamp_of(self) -> TimestampOf[Issue] | None:
        """Reporters are listed without event times."""
        return None

    @property
    def identity_key(self) -> IdentityKey[Issue] | None:
        """Deduplicate by reporter so each profile is fetched once."""
        return _issue_reporter_id

    @property
    def hydrate(self) -> Hydrate[Issue, Actor] | None:
        """Resolve the reporter's full profile."""
        return self._reporter_profile

    async def _reporter_profile(self, issue: Issue) -> Actor:
        return await self.client.get_user(issue.user.id)


def read_user_ids(path: Path) -> tuple[int, ...]:
    """Read numeric account IDs from a text file.

    The first whitespace-delimited field of each line is the ID; anything
    after it is ignored. Blank lines are skipped.

    Raises
    ------
    UserListError
        If a line's first field is not a positive base-10 integer, or the
        file is not UTF-8 text.
    OSError
        If the file cannot be read.

    """
    ids: list[int] = []
    with path.open(encoding="utf-8") as handle:
        try:
            for line_number, line in enumerate(handle, start=1):
                fields = line.split()
                if fields:
                    ids.append(_parse_user_id(path, line_number, fields[0]))
        except UnicodeDecodeError as exc:
            raise UserListError.not_text(path, exc) from exc
    return tuple(ids)


def _parse_user_id(path: Path, line_number: int, field: str) -> int:
    # ASCII decimal digits only; no sign, underscores or non-ASCII numerals.
    if not (field.isascii() and field.isdigit()) or int(field) < 1:
        raise UserListError.not_numeric(path, line_number, field)
    return int(field)


@dataclasses.dataclass(frozen=True, slots=True)
class UserListSource:
    """Accounts named by ID in a local file, resolved to full profiles.

    The IDs are held in memory and served in ``page_size`` chunks; the page
    cursor is the offset of the next chunk.
    """

    client: GitHubRESTClient
    user_ids: tuple[int, ...]
    name: str = "users"

    @classmethod
    def from_file(cls, client: GitHubRESTClient, path: Path) -> UserListSource:
        """Parse ``path`` up front so malformed input fails before any request."""
        return cls(client=client, user_ids=read_user_ids(path))

    async def fetch_page(self, page_token: str | None, page_size: int) -> Page[int]:
        """Return the next chunk of IDs."""
        offset = int(page_token) if page_token else 0
        end = offset + page_size
        next_token = str(end) if end < len(self.user_ids) else None
        return Page(items=self.user_ids[offset:end], next_token=next_token)

    @property
    def timestamp_of(self) -> TimestampOf[int] | None:
        """Listed IDs carry no event time."""
        return None

    @property
    def identity_key(self) -> IdentityKey[int] | None:
        """IDs are resolved as listed, duplicates included."""
        return None

    @property
    def hydrate(self) -> Hydrate[int, Actor] | None:
        """Resolve each listed ID."""
        return self.client.get_user


@dataclasses.dataclass(frozen=True, slots=True)
class RepositoriesSource:
    """Public repositories of an organisation."""

    client: GitHubRESTClient
    org: str
    name: str = "repos"

    async def fetch_page(
        self, page_token: str | None, page_size: int
    ) -> Page[Repository]:
        """Fetch one page of repositories."""
        return await self.client.list_org_repositories(
            self.org, page_token=page_token, per_page=page_size
        )

    @property
    def timestamp_of(self) -> TimestampOf[Repository] | None:
        """Repositories are listed without event times."""
        return None

    @property
    def identity_key(self) -> IdentityKey[Repository] | None:
        """Repositories are distinct per listing."""
        return None

    @property
    def hydrate(self) -> Hydrate[Repository, Repository] | None:
        """Repositories are reported as listed."""
        return None


def sorted_repository_names(repositories: cabc.Iterable[Repository]) -> list[str]:
    """Return repository names in lexicographic order."""
    return sorted(repository.name for repository in repositories)
