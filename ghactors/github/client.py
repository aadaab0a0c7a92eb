"""GitHub REST client used by the actor sources.

Every listing method fetches exactly one page and returns it together with
the cursor for the next one; walking the pages is left to
:func:`ghactors.collect.engine.collect`. The cursor is the ``next`` URL from
the response ``Link`` header, so callers treat it as an opaque token.
"""

from __future__ import annotations

import dataclasses
import os
import typing as typ

import httpx
import msgspec

from ghactors.logging import get_logger, log_debug

from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import Actor, Commit, Fork, Issue, Page, Repository, Stargazer

logger = get_logger(__name__)

ItemT = typ.TypeVar("ItemT")

MAX_PER_PAGE = 100

_HTTP_ERROR_STATUS_THRESHOLD = 400
_DEFAULT_ACCEPT = "application/vnd.github+json"
_STAR_ACCEPT = "application/vnd.github.star+json"
_API_VERSION = "2022-11-28"


@dataclasses.dataclass(frozen=True, slots=True)
class GitHubRESTConfig:
    """Configuration for the GitHub REST API client."""

    token: str
    api_base: str = "https://api.github.com"
    timeout_s: float = 20.0
    user_agent: str = "ghactors/0.1"

    @classmethod
    def from_env(cls) -> GitHubRESTConfig:
        """Build configuration from ``GHACTORS_GITHUB_TOKEN`` or ``GITHUB_TOKEN``."""
        token = (
            os.environ.get("GHACTORS_GITHUB_TOKEN", "").strip()
            or os.environ.get("GITHUB_TOKEN", "").strip()
        )
        if not token:
            raise GitHubConfigError.missing_token()
        return cls(token=token)


def _next_link(response: httpx.Response) -> str | None:
    """Return the ``next`` URL from the Link header, if any."""
    next_link = response.links.get("next")
    if not next_link:
        return None
    url = next_link.get("url")
    return url or None


def _decode_items(
    content: bytes, item_type: type[ItemT], *, what: str
) -> tuple[ItemT, ...]:
    try:
        items = msgspec.json.decode(content, type=list[item_type])
    except (msgspec.ValidationError, msgspec.DecodeError) as exc:
        raise GitHubResponseShapeError.unexpected(what, exc) from exc
    return tuple(items)


class GitHubRESTClient:
    """Thin async wrapper over the GitHub REST endpoints ghactors reads."""

    def __init__(
        self,
        config: GitHubRESTConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialise the client with the provided API configuration."""
        if not config.token.strip():
            raise GitHubConfigError.empty_token()

        self._config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=config.timeout_s)
        self._headers = {
            "Authorization": f"Bearer {config.token}",
            "User-Agent": config.user_agent,
            "X-GitHub-Api-Version": _API_VERSION,
        }

    async def aclose(self) -> None:
        """Close any owned HTTP resources."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GitHubRESTClient:
        """Return the client for use in ``async with`` blocks."""
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        """Close owned resources on exit."""
        await self.aclose()

    async def list_commits(
        self,
        owner: str,
        repo: str,
        *,
        page_token: str | None = None,
        per_page: int = MAX_PER_PAGE,
    ) -> Page[Commit]:
        """Return one page of commits on the default branch."""
        return await self._list_page(
            f"/repos/{owner}/{repo}/commits",
            Commit,
            page_token=page_token,
            per_page=per_page,
        )

    async def list_forks(
        self,
        owner: str,
        repo: str,
        *,
        page_token: str | None = None,
        per_page: int = MAX_PER_PAGE,
    ) -> Page[Fork]:
        """Return one page of forks, oldest first."""
        return await self._list_page(
            f"/repos/{owner}/{repo}/forks",
            Fork,
            page_token=page_token,
            per_page=per_page,
            params={"sort": "oldest"},
        )

    async def list_watchers(
        self,
        owner: str,
        repo: str,
        *,
        page_token: str | None = None,
        per_page: int = MAX_PER_PAGE,
    ) -> Page[Actor]:
        """Return one page of accounts watching the repository."""
        return await self._list_page(
            f"/repos/{owner}/{repo}/subscribers",
            Actor,
            page_token=page_token,
            per_page=per_page,
        )

    async def list_stargazers(
        self,
        owner: str,
        repo: str,
        *,
        page_token: str | None = None,
        per_page: int = MAX_PER_PAGE,
    ) -> Page[Stargazer]:
        """Return one page of stargazers with their star timestamps."""
        return await self._list_page(
            f"/repos/{owner}/{repo}/stargazers",
            Stargazer,
            page_token=page_token,
            per_page=per_page,
            accept=_STAR_ACCEPT,
        )

    async def list_issues(
        self,
        owner: str,
        repo: str,
        *,
        page_token: str | None = None,
        per_page: int = MAX_PER_PAGE,
    ) -> Page[Issue]:
        """Return one page of open issues (including pull requests)."""
        return await self._list_page(
            f"/repos/{owner}/{repo}/issues",
            Issue,
            page_token=page_token,
            per_page=per_page,
        )

    async def list_org_repositories(
        self,
        org: str,
        *,
        page_token: str | None = None,
        per_page: int = MAX_PER_PAGE,
    ) -> Page[Repository]:
        """Return one page of an organisation's public repositories."""
        return await self._list_page(
            f"/orgs/{org}/repos",
            Repository,
            page_token=page_token,
            per_page=per_page,
            params={"type": "public"},
        )

    async def get_user(self, user_id: int) -> Actor:
        """Return the fully populated profile for a numeric account ID."""
        response = await self._get(f"{self._config.api_base}/user/{user_id}")
        try:
            return msgspec.json.decode(response.content, type=Actor)
        except (msgspec.ValidationError, msgspec.DecodeError) as exc:
            raise GitHubResponseShapeError.unexpected(f"user {user_id}", exc) from exc

    async def _list_page(  # noqa: PLR0913
        self,
        path: str,
        item_type: type[ItemT],
        *,
        page_token: str | None,
        per_page: int,
        params: dict[str, str] | None = None,
        accept: str = _DEFAULT_ACCEPT,
    ) -> Page[ItemT]:
        """Fetch the first page of ``path`` or the page behind ``page_token``."""
        if page_token:
            response = await self._get(page_token, accept=accept)
        else:
            query: dict[str, str | int] = {"per_page": min(per_page, MAX_PER_PAGE)}
            query.update(params or {})
            response = await self._get(
                f"{self._config.api_base}{path}", params=query, accept=accept
            )
        items = _decode_items(response.content, item_type, what=path)
        next_token = _next_link(response)
        log_debug(
            logger,
            "GET %s returned %d items has_next=%s",
            path,
            len(items),
            next_token is not None,
        )
        return Page(items=items, next_token=next_token)

    async def _get(
        self,
        url: str,
        *,
        params: dict[str, str | int] | None = None,
        accept: str = _DEFAULT_ACCEPT,
    ) -> httpx.Response:
        headers = {**self._headers, "Accept": accept}
        try:
            response = await self._client.get(url, params=params, headers=headers)
        except httpx.HTTPError as exc:
            raise GitHubAPIError.transport_error(url, exc) from exc
        if response.status_code >= _HTTP_ERROR_STATUS_THRESHOLD:
            raise GitHubAPIError.http_error(
                response.status_code,
                str(response.request.url),
                remaining=response.headers.get("x-ratelimit-remaining"),
            )
        return response
