"""Paginated collection engine and the sources that feed it."""

from __future__ import annotations

from .engine import ActorSource, CollectionResult, collect, collect_from
from .errors import CollectionError, UserListError
from .observability import (
    CollectionEventLogger,
    CollectionEventType,
    CollectionRunContext,
    ErrorCategory,
    categorize_error,
)
from .sources import (
    CommitAuthorsSource,
    ForkersSource,
    IssueReportersSource,
    RepositoriesSource,
    StargazersSource,
    UserListSource,
    WatchersSource,
    read_user_ids,
    sorted_repository_names,
)
from .window import TimeWindow, parse_date

__all__ = [
    "ActorSource",
    "CollectionError",
    "CollectionEventLogger",
    "CollectionEventType",
    "CollectionResult",
    "CollectionRunContext",
    "CommitAuthorsSource",
    "ErrorCategory",
    "ForkersSource",
    "IssueReportersSource",
    "RepositoriesSource",
    "StargazersSource",
    "TimeWindow",
    "UserListError",
    "UserListSource",
    "WatchersSource",
    "categorize_error",
    "collect",
    "collect_from",
    "parse_date",
    "read_user_ids",
    "sorted_repository_names",
]
