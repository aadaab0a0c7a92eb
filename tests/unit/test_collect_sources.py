"""Unit tests for the per-listing actor sources."""

from __future__ import annotations

import typing as typ

import pytest

from ghactors.collect import (
    CommitAuthorsSource,
    ErrorCategory,
    ForkersSource,
    IssueReportersSource,
    RepositoriesSource,
    StargazersSource,
    UserListError,
    UserListSource,
    WatchersSource,
    categorize_error,
    collect_from,
    read_user_ids,
    sorted_repository_names,
)
from ghactors.collect.window import TimeWindow
from ghactors.github.models import (
    Actor,
    Commit,
    Fork,
    Issue,
    Page,
    Repository,
    Stargazer,
)
from tests.unit.collect_test_helpers import RecordingEventLogger, make_actor, utc

if typ.TYPE_CHECKING:
    from pathlib import Path


class FakeRESTClient:
    """Serves canned single-page listings and counts profile lookups."""

    def __init__(self, **listings: tuple[typ.Any, ...]) -> None:
        """Store listings keyed by client method name."""
        self._listings = listings
        self.user_lookups: list[int] = []
        self.listing_calls: list[tuple[str, str | None, int]] = []

    def _page(self, method: str, page_token: str | None, per_page: int) -> Page:
        self.listing_calls.append((method, page_token, per_page))
        return Page(items=self._listings[method])

    async def list_commits(
        self, owner: str, repo: str, *, page_token: str | None, per_page: int
    ) -> Page[Commit]:
        """Return canned commits."""
        return self._page("list_commits", page_token, per_page)

    async def list_forks(
        self, owner: str, repo: str, *, page_token: str | None, per_page: int
    ) -> Page[Fork]:
        """Return canned forks."""
        return self._page("list_forks", page_token, per_page)

    async def list_watchers(
        self, owner: str, repo: str, *, page_token: str | None, per_page: int
    ) -> Page[Actor]:
        """Return canned watchers."""
        return self._page("list_watchers", page_token, per_page)

    async def list_stargazers(
        self, owner: str, repo: str, *, page_token: str | None, per_page: int
    ) -> Page[Stargazer]:
        """Return canned stargazers."""
        return self._page("list_stargazers", page_token, per_page)

    async def list_issues(
        self, owner: str, repo: str, *, page_token: str | None, per_page: int
    ) -> Page[Issue]:
        """Return canned issues."""
        return self._page("list_issues", page_token, per_page)

    async def list_org_repositories(
        self, org: str, *, page_token: str | None, per_page: int
    ) -> Page[Repository]:
        """Return canned repositories."""
        return self._page("list_org_repositories", page_token, per_page)

    async def get_user(self, user_id: int) -> Actor:
        """Return a profile with a name derived from the ID."""
        self.user_lookups.append(user_id)
        return make_actor(user_id, name=f"Full {user_id}", email=f"{user_id}@x.test")


def _client(**listings: tuple[typ.Any, ...]) -> typ.Any:  # noqa: ANN401
    return FakeRESTClient(**listings)


@pytest.mark.asyncio
async def test_commit_authors_skip_unlinked_and_deduplicate() -> None:
    """Null authors are dropped and repeat authors appear once."""
    client = _client(
        list_commits=(
            Commit(sha="a", author=make_actor(1)),
            Commit(sha="b", author=None),
            Commit(sha="c", author=make_actor(2)),
            Commit(sha="d", author=make_actor(1)),
        )
    )
    source = CommitAuthorsSource(client=client, owner="octo", repo="reef")

    result = await collect_from(
        source, page_size=50, event_logger=RecordingEventLogger()
    )

    assert [actor.id for actor in result.records] == [1, 2]
    assert client.user_lookups == [], "commit authors are not hydrated"
    assert client.listing_calls == [("list_commits", None, 50)]


@pytest.mark.asyncio
async def test_forkers_are_hydrated_and_windowed_by_creation() -> None:
    """Fork owners outside the window are skipped before any lookup."""
    client = _client(
        list_forks=(
            Fork(
                id=1,
                full_name="a/reef",
                owner=make_actor(10),
                created_at=utc(2023, 12, 31),
            ),
            Fork(
                id=2,
                full_name="b/reef",
                owner=make_actor(11),
                created_at=utc(2024, 1, 5),
            ),
        )
    )
    source = ForkersSource(client=client, owner="octo", repo="reef")

    result = await collect_from(
        source,
        page_size=100,
        window=TimeWindow.from_dates("2024-01-01", "2024-01-31"),
        event_logger=RecordingEventLogger(),
    )

    assert [actor.name for actor in result.records] == ["Full 11"]
    assert result.timestamps == (utc(2024, 1, 5),)
    assert client.user_lookups == [11]


@pytest.mark.asyncio
async def test_watchers_are_hydrated_without_timestamps() -> None:
    """Watchers resolve to full profiles and carry no times."""
    client = _client(list_watchers=(make_actor(3), make_actor(4)))
    source = WatchersSource(client=client, owner="octo", repo="reef")

    result = await collect_from(
        source, page_size=100, event_logger=RecordingEventLogger()
    )

    assert [actor.email for actor in result.records] == ["3@x.test", "4@x.test"]
    assert result.timestamps == ()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("only_ids", "expected_lookups"), [(False, [5, 6]), (True, [])]
)
async def test_stargazers_hydration_depends_on_only_ids(
    *, only_ids: bool, expected_lookups: list[int]
) -> None:
    """Embedded user stubs are reused when only identifiers are needed."""
    client = _client(
        list_stargazers=(
            Stargazer(user=make_actor(5), starred_at=utc(2024, 2, 1)),
            Stargazer(user=make_actor(6), starred_at=utc(2024, 2, 2)),
        )
    )
    source = StargazersSource(
        client=client, owner="octo", repo="reef", only_ids=only_ids
    )

    result = await collect_from(
        source, page_size=100, event_logger=RecordingEventLogger()
    )

    assert [actor.id for actor in result.records] == [5, 6]
    assert result.timestamps == (utc(2024, 2, 1), utc(2024, 2, 2))
    assert client.user_lookups == expected_lookups


@pytest.mark.asyncio
async def test_issue_reporters_are_deduplicated_before_lookup() -> None:
    """Each reporter profile is fetched once however many issues they opened."""
    client = _client(
        list_issues=(
            Issue(id=1, number=1, user=make_actor(7), created_at=utc(2024, 1, 1)),
            Issue(id=2, number=2, user=make_actor(8), created_at=utc(2024, 1, 2)),
            Issue(id=3, number=3, user=make_actor(7), created_at=utc(2024, 1, 3)),
        )
    )
    source = IssueReportersSource(client=client, owner="octo", repo="reef")

    result = await collect_from(
        source, page_size=100, event_logger=RecordingEventLogger()
    )

    assert [actor.id for actor in result.records] == [7, 8]
    assert client.user_lookups == [7, 8]


def test_read_user_ids_uses_first_field_and_skips_blank_lines(tmp_path: Path) -> None:
    """Trailing fields and blank lines are ignored."""
    path = tmp_path / "users.txt"
    path.write_text("12 alice\n\n   \n34\t# note\n12\n", encoding="utf-8")

    assert read_user_ids(path) == (12, 34, 12)


@pytest.mark.parametrize(
    "bad_line", ["abc", "0", "-3", "+4", "1.5", "1_000", "\uff11\uff12", "\u0663"]
)
def test_read_user_ids_rejects_non_numeric_ids(tmp_path: Path, bad_line: str) -> None:
    """Malformed lines report the file position."""
    path = tmp_path / "users.txt"
    path.write_text(f"1\n{bad_line}\n", encoding="utf-8")

    with pytest.raises(UserListError, match=":2"):
        read_user_ids(path)


def test_read_user_ids_rejects_non_utf8_files(tmp_path: Path) -> None:
    """Undecodable input is a user-list error, not a configuration error."""
    path = tmp_path / "users.txt"
    path.write_bytes(b"12\n\xff\xfe34\n")

    with pytest.raises(UserListError, match="not UTF-8") as excinfo:
        read_user_ids(path)

    assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)
    assert categorize_error(excinfo.value) is ErrorCategory.INVALID_INPUT


@pytest.mark.asyncio
async def test_user_list_source_pages_through_ids(tmp_path: Path) -> None:
    """Listed IDs are served in page-size chunks and resolved in order."""
    path = tmp_path / "users.txt"
    path.write_text("\n".join(str(user_id) for user_id in range(1, 6)), encoding="utf-8")
    client = _client()
    source = UserListSource.from_file(client, path)

    first = await source.fetch_page(None, 2)
    assert first.items == (1, 2)
    assert first.next_token == "2"

    events = RecordingEventLogger()
    result = await collect_from(source, page_size=2, event_logger=events)

    assert [actor.id for actor in result.records] == [1, 2, 3, 4, 5]
    assert client.user_lookups == [1, 2, 3, 4, 5]
    assert events.events[-1][1]["pages"] == 3


@pytest.mark.asyncio
async def test_empty_user_list_makes_no_lookups(tmp_path: Path) -> None:
    """An empty file yields an empty result after a single page."""
    path = tmp_path / "users.txt"
    path.write_text("\n\n", encoding="utf-8")
    client = _client()

    result = await collect_from(
        UserListSource.from_file(client, path),
        page_size=10,
        event_logger=RecordingEventLogger(),
    )

    assert result.records == ()
    assert client.user_lookups == []


@pytest.mark.asyncio
async def test_repository_names_are_sorted() -> None:
    """Organisation repositories are reported by name in lexicographic order."""
    client = _client(
        list_org_repositories=(
            Repository(id=1, name="zeta"),
            Repository(id=2, name="alpha"),
            Repository(id=3, name="mu"),
        )
    )

    result = await collect_from(
        RepositoriesSource(client=client, org="octo"),
        page_size=100,
        event_logger=RecordingEventLogger(),
    )

    assert sorted_repository_names(result.records) == ["alpha", "mu", "zeta"]
