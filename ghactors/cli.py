"""Command-line interface for collecting repository actors.

Usage:
    ghactors commits pingcap/tidb
    ghactors forks pingcap/tidb --start-date 2024-01-01 --end-date 2024-01-31
    ghactors stargazers pingcap/tidb --output-format ids
    ghactors users ids.txt
    ghactors repos pingcap

Environment variables:
    GHACTORS_GITHUB_TOKEN - GitHub token (falls back to GITHUB_TOKEN)
    GHACTORS_OWNER, GHACTORS_REPO - repository when no slug is given
    GHACTORS_START_DATE, GHACTORS_END_DATE - time window bounds
    GHACTORS_PAGE_SIZE - items per listing request (default 100)
    GHACTORS_LOG_LEVEL - log level (default INFO)
"""

from __future__ import annotations

import asyncio
import dataclasses
import sys
import typing as typ
from pathlib import Path

from cyclopts import App, Parameter

from ghactors.collect.engine import collect_from
from ghactors.collect.errors import CollectionError, UserListError
from ghactors.collect.observability import categorize_error
from ghactors.collect.sources import (
    CommitAuthorsSource,
    ForkersSource,
    IssueReportersSource,
    RepositoriesSource,
    StargazersSource,
    UserListSource,
    WatchersSource,
    sorted_repository_names,
)
from ghactors.common.slug import parse_repo_slug
from ghactors.config import CollectorConfig
from ghactors.github.client import GitHubRESTClient, GitHubRESTConfig
from ghactors.github.errors import GitHubConfigError
from ghactors.logging import configure_logging, get_logger, log_error, log_warning
from ghactors.output.formatting import (
    format_actor_rows,
    format_contact_rows,
    format_id_rows,
)
from ghactors.output.sink import LogRowSink, RowSink, StreamRowSink

if typ.TYPE_CHECKING:
    from ghactors.collect.engine import ActorSource, CollectionResult
    from ghactors.collect.window import TimeWindow
    from ghactors.github.models import Actor, Repository

logger = get_logger(__name__)

app = App(
    name="ghactors",
    help="Collect people associated with a GitHub repository",
    version="0.1.0",
)

OutputFormat = typ.Literal["full", "ids", "contacts"]

Token = typ.Annotated[str | None, Parameter(env_var="GHACTORS_GITHUB_TOKEN")]
StartDate = typ.Annotated[str | None, Parameter(env_var="GHACTORS_START_DATE")]
EndDate = typ.Annotated[str | None, Parameter(env_var="GHACTORS_END_DATE")]
PageSize = typ.Annotated[int | None, Parameter(env_var="GHACTORS_PAGE_SIZE")]
LogLevelName = typ.Annotated[str | None, Parameter(env_var="GHACTORS_LOG_LEVEL")]

_LABELS: dict[str, str] = {
    "full": "users",
    "ids": "user ids",
    "contacts": "user names",
}

SourceFactory = typ.Callable[
    [GitHubRESTClient, CollectorConfig], "ActorSource[typ.Any, typ.Any]"
]
RepositorySourceFactory = typ.Callable[
    [GitHubRESTClient, str, str], "ActorSource[typ.Any, Actor]"
]
Render = typ.Callable[["CollectionResult[typ.Any]", CollectorConfig], list[str]]


@dataclasses.dataclass(frozen=True, slots=True)
class RunOptions:
    """Options shared by every collection command."""

    token: str | None = None
    page_size: int | None = None
    log_level: str | None = None
    output_format: OutputFormat = "full"
    prefix: bool = True
    log_output: bool = False


def build_config(
    slug: str | None,
    options: RunOptions,
    *,
    start_date: str | None = None,
    end_date: str | None = None,
) -> CollectorConfig:
    """Merge CLI values over the environment-derived configuration."""
    overrides: dict[str, typ.Any] = {}
    if slug:
        overrides["owner"], overrides["repo"] = parse_repo_slug(slug)
    if start_date is not None:
        overrides["start_date"] = start_date
    if end_date is not None:
        overrides["end_date"] = end_date
    if options.page_size is not None:
        overrides["page_size"] = options.page_size
    if options.log_level is not None:
        overrides["log_level"] = options.log_level
    return CollectorConfig.from_env(**overrides)


def _client_config(token: str | None) -> GitHubRESTConfig:
    if token is not None:
        if not token.strip():
            raise GitHubConfigError.empty_token()
        return GitHubRESTConfig(token=token.strip())
    return GitHubRESTConfig.from_env()


def _sink(options: RunOptions) -> RowSink:
    if options.log_output:
        return LogRowSink()
    return StreamRowSink(sys.stdout)


def render_actors(
    result: CollectionResult[Actor],
    options: RunOptions,
    *,
    slug: str | None,
) -> list[str]:
    """Format collected actors in the requested projection."""
    prefix = slug if options.prefix else None
    if options.output_format == "ids":
        return format_id_rows(result.records, result.timestamps)
    if options.output_format == "contacts":
        return format_contact_rows(result.records, repo_slug=prefix)
    return format_actor_rows(result.records, result.timestamps, repo_slug=prefix)


async def _collect(
    client_config: GitHubRESTConfig,
    make_source: SourceFactory,
    config: CollectorConfig,
    window: TimeWindow | None,
) -> CollectionResult[typ.Any]:
    async with GitHubRESTClient(client_config) as client:
        source = make_source(client, config)
        return await collect_from(source, page_size=config.page_size, window=window)


def run_collection(  # noqa: PLR0913
    make_source: SourceFactory,
    render: Render,
    *,
    label: str,
    slug: str | None,
    options: RunOptions,
    windowed: bool = False,
    start_date: str | None = None,
    end_date: str | None = None,
    sink: RowSink | None = None,
) -> int:
    """Configure, collect, render and emit one command's output.

    Configuration problems (bad slug, dates, page size, missing token or
    repository) are reported before any request is sent. Any failure is
    logged with its error category and nothing is written to the sink.

    Returns
    -------
    int
        0 on success; 1 when configuration or collection fails.

    """
    try:
        config = build_config(slug, options, start_date=start_date, end_date=end_date)
    except ValueError as exc:
        configure_logging(options.log_level)
        log_error(logger, "Invalid configuration: %s", exc)
        return 1

    level, invalid = configure_logging(config.log_level)
    if invalid:
        log_warning(logger, "Unknown log level %r; using %s", config.log_level, level)

    try:
        window = config.time_window() if windowed else None
        client_config = _client_config(options.token)
        result = asyncio.run(_collect(client_config, make_source, config, window))
        rows = render(result, config)
    except (
        CollectionError,
        GitHubConfigError,
        UserListError,
        ValueError,
        OSError,
    ) as exc:
        log_error(
            logger,
            "%s failed: error_category=%s error_message=%s",
            label,
            categorize_error(exc),
            str(exc),
        )
        return 1

    (sink or _sink(options)).write_rows(label, rows)
    return 0


def _repository_command(
    factory: RepositorySourceFactory,
    slug: str | None,
    options: RunOptions,
    *,
    windowed: bool = False,
    start_date: str | None = None,
    end_date: str | None = None,
) -> int:
    def _make(
        client: GitHubRESTClient, config: CollectorConfig
    ) -> ActorSource[typ.Any, typ.Any]:
        owner, repo = config.require_repository()
        return factory(client, owner, repo)

    def _render(result: CollectionResult[Actor], config: CollectorConfig) -> list[str]:
        return render_actors(result, options, slug=config.slug)

    return run_collection(
        _make,
        _render,
        label=_LABELS[options.output_format],
        slug=slug,
        options=options,
        windowed=windowed,
        start_date=start_date,
        end_date=end_date,
    )


@app.command
def commits(  # noqa: PLR0913
    slug: str | None = None,
    *,
    token: Token = None,
    page_size: PageSize = None,
    output_format: OutputFormat = "full",
    prefix: bool = True,
    log_output: bool = False,
    log_level: LogLevelName = None,
) -> int:
    """List distinct commit authors on the default branch.

    Args:
        slug: Repository as ``owner/repo``.
        token: GitHub token.
        page_size: Items per listing request (1-100).
        output_format: ``full``, ``ids`` or ``contacts``.
        prefix: Prefix rows with ``owner/repo``.
        log_output: Emit rows through the logger instead of stdout.
        log_level: Log level name.

    """
    options = RunOptions(token, page_size, log_level, output_format, prefix, log_output)
    return _repository_command(CommitAuthorsSource, slug, options)


@app.command
def forks(  # noqa: PLR0913
    slug: str | None = None,
    *,
    start_date: StartDate = None,
    end_date: EndDate = None,
    token: Token = None,
    page_size: PageSize = None,
    output_format: OutputFormat = "full",
    prefix: bool = True,
    log_output: bool = False,
    log_level: LogLevelName = None,
) -> int:
    """List fork owners with fork creation times.

    Args:
        slug: Repository as ``owner/repo``.
        start_date: First day (YYYY-MM-DD) of the inclusive window.
        end_date: Last day (YYYY-MM-DD) of the inclusive window.
        token: GitHub token.
        page_size: Items per listing request (1-100).
        output_format: ``full``, ``ids`` or ``contacts``.
        prefix: Prefix rows with ``owner/repo``.
        log_output: Emit rows through the logger instead of stdout.
        log_level: Log level name.

    """
    options = RunOptions(token, page_size, log_level, output_format, prefix, log_output)
    return _repository_command(
        ForkersSource,
        slug,
        options,
        windowed=True,
        start_date=start_date,
        end_date=end_date,
    )


@app.command
def watchers(  # noqa: PLR0913
    slug: str | None = None,
    *,
    token: Token = None,
    page_size: PageSize = None,
    output_format: OutputFormat = "full",
    prefix: bool = True,
    log_output: bool = False,
    log_level: LogLevelName = None,
) -> int:
    """List accounts watching the repository.

    Args:
        slug: Repository as ``owner/repo``.
        token: GitHub token.
        page_size: Items per listing request (1-100).
        output_format: ``full``, ``ids`` or ``contacts``.
        prefix: Prefix rows with ``owner/repo``.
        log_output: Emit rows through the logger instead of stdout.
        log_level: Log level name.

    """
    options = RunOptions(token, page_size, log_level, output_format, prefix, log_output)
    return _repository_command(WatchersSource, slug, options)


@app.command
def stargazers(  # noqa: PLR0913
    slug: str | None = None,
    *,
    start_date: StartDate = None,
    end_date: EndDate = None,
    only_ids: bool = False,
    token: Token = None,
    page_size: PageSize = None,
    output_format: OutputFormat = "full",
    prefix: bool = True,
    log_output: bool = False,
    log_level: LogLevelName = None,
) -> int:
    """List stargazers with the time each star was given.

    Args:
        slug: Repository as ``owner/repo``.
        start_date: First day (YYYY-MM-DD) of the inclusive window.
        end_date: Last day (YYYY-MM-DD) of the inclusive window.
        only_ids: Reuse listing stubs instead of fetching full profiles.
            Implied by ``--output-format ids``.
        token: GitHub token.
        page_size: Items per listing request (1-100).
        output_format: ``full``, ``ids`` or ``contacts``.
        prefix: Prefix rows with ``owner/repo``.
        log_output: Emit rows through the logger instead of stdout.
        log_level: Log level name.

    """
    options = RunOptions(token, page_size, log_level, output_format, prefix, log_output)
    skip_profiles = only_ids or output_format == "ids"

    def _factory(client: GitHubRESTClient, owner: str, repo: str) -> StargazersSource:
        return StargazersSource(client, owner, repo, only_ids=skip_profiles)

    return _repository_command(
        _factory,
        slug,
        options,
        windowed=True,
        start_date=start_date,
        end_date=end_date,
    )


@app.command
def issues(  # noqa: PLR0913
    slug: str | None = None,
    *,
    token: Token = None,
    page_size: PageSize = None,
    output_format: OutputFormat = "full",
    prefix: bool = True,
    log_output: bool = False,
    log_level: LogLevelName = None,
) -> int:
    """List distinct reporters of open issues and pull requests.

    Args:
        slug: Repository as ``owner/repo``.
        token: GitHub token.
        page_size: Items per listing request (1-100).
        output_format: ``full``, ``ids`` or ``contacts``.
        prefix: Prefix rows with ``owner/repo``.
        log_output: Emit rows through the logger instead of stdout.
        log_level: Log level name.

    """
    options = RunOptions(token, page_size, log_level, output_format, prefix, log_output)
    return _repository_command(IssueReportersSource, slug, options)


@app.command
def users(  # noqa: PLR0913
    file: Path,
    *,
    token: Token = None,
    page_size: PageSize = None,
    output_format: OutputFormat = "full",
    log_output: bool = False,
    log_level: LogLevelName = None,
) -> int:
    """Resolve accounts listed by numeric ID, one per line.

    Args:
        file: Text file whose lines start with a numeric account ID.
        token: GitHub token.
        page_size: IDs resolved per batch (1-100).
        output_format: ``full``, ``ids`` or ``contacts``.
        log_output: Emit rows through the logger instead of stdout.
        log_level: Log level name.

    """
    options = RunOptions(
        token,
        page_size,
        log_level,
        output_format,
        prefix=False,
        log_output=log_output,
    )

    def _make(client: GitHubRESTClient, config: CollectorConfig) -> UserListSource:
        del config
        return UserListSource.from_file(client, file)

    def _render(result: CollectionResult[Actor], config: CollectorConfig) -> list[str]:
        del config
        return render_actors(result, options, slug=None)

    return run_collection(
        _make, _render, label=_LABELS[output_format], slug=None, options=options
    )


@app.command
def repos(
    org: str,
    *,
    token: Token = None,
    page_size: PageSize = None,
    log_output: bool = False,
    log_level: LogLevelName = None,
) -> int:
    """List an organisation's public repository names, sorted.

    Args:
        org: Organisation login.
        token: GitHub token.
        page_size: Items per listing request (1-100).
        log_output: Emit rows through the logger instead of stdout.
        log_level: Log level name.

    """
    options = RunOptions(token, page_size, log_level, log_output=log_output)

    def _make(client: GitHubRESTClient, config: CollectorConfig) -> RepositoriesSource:
        del config
        return RepositoriesSource(client, org)

    def _render(
        result: CollectionResult[Repository], config: CollectorConfig
    ) -> list[str]:
        del config
        return sorted_repository_names(result.records)

    return run_collection(_make, _render, label="repos", slug=None, options=options)


def main() -> int:
    """Entry point for the CLI."""
    return app()


if __name__ == "__main__":
    sys.exit(main())
