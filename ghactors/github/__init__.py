"""GitHub REST client, records and errors."""

from __future__ import annotations

from .client import MAX_PER_PAGE, GitHubRESTClient, GitHubRESTConfig
from .errors import GitHubAPIError, GitHubConfigError, GitHubResponseShapeError
from .models import Actor, Commit, Fork, Issue, Page, Repository, Stargazer

__all__ = [
    "MAX_PER_PAGE",
    "Actor",
    "Commit",
    "Fork",
    "GitHubAPIError",
    "GitHubConfigError",
    "GitHubRESTClient",
    "GitHubRESTConfig",
    "GitHubResponseShapeError",
    "Issue",
    "Page",
    "Repository",
    "Stargazer",
]
