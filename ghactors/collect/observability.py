"""Structured log events and error categorisation for collection runs.

Events are emitted through femtologging as ``[event] key=value`` lines so
they can be grepped or parsed by log aggregators.
"""

from __future__ import annotations

import dataclasses
import enum
import typing as typ

from ghactors.github.errors import (
    GitHubAPIError,
    GitHubConfigError,
    GitHubResponseShapeError,
)
from ghactors.logging import get_logger, log_error, log_info

from .errors import CollectionError, UserListError

if typ.TYPE_CHECKING:
    import datetime as dt

logger = get_logger(__name__)

_HTTP_SERVER_ERROR_THRESHOLD = 500


class CollectionEventType(enum.StrEnum):
    """Structured log event types for collection runs."""

    RUN_STARTED = "collection.run.started"
    RUN_COMPLETED = "collection.run.completed"
    RUN_FAILED = "collection.run.failed"


class ErrorCategory(enum.StrEnum):
    """Categories used when reporting a failed run."""

    TRANSIENT = "transient"
    RATE_LIMITED = "rate_limited"
    CLIENT_ERROR = "client_error"
    SCHEMA_DRIFT = "schema_drift"
    CONFIGURATION = "configuration"
    INVALID_INPUT = "invalid_input"
    UNKNOWN = "unknown"


_EXCEPTION_CATEGORY_MAP: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (GitHubResponseShapeError, ErrorCategory.SCHEMA_DRIFT),
    (GitHubConfigError, ErrorCategory.CONFIGURATION),
    (UserListError, ErrorCategory.INVALID_INPUT),
    (ValueError, ErrorCategory.CONFIGURATION),
)


def categorize_error(exc: BaseException) -> ErrorCategory:
    """Categorize an exception, looking through :class:`CollectionError`."""
    if isinstance(exc, CollectionError) and exc.__cause__ is not None:
        return categorize_error(exc.__cause__)

    if isinstance(exc, GitHubAPIError):
        if exc.rate_limited:
            return ErrorCategory.RATE_LIMITED
        if exc.status_code is None or exc.status_code >= _HTTP_SERVER_ERROR_THRESHOLD:
            return ErrorCategory.TRANSIENT
        return ErrorCategory.CLIENT_ERROR

    for exc_type, category in _EXCEPTION_CATEGORY_MAP:
        if isinstance(exc, exc_type):
            return category

    return ErrorCategory.UNKNOWN


@dataclasses.dataclass(frozen=True, slots=True)
class CollectionRunContext:
    """Shared context for a single collection run."""

    source: str
    page_size: int
    windowed: bool
    started_at: dt.datetime


class CollectionEventLogger:
    """Emit structured collection events via femtologging."""

    def log_run_started(self, context: CollectionRunContext) -> None:
        """Log collection run start."""
        log_info(
            logger,
            "[%s] source=%s page_size=%d windowed=%s started_at=%s",
            CollectionEventType.RUN_STARTED,
            context.source,
            context.page_size,
            context.windowed,
            context.started_at.isoformat(),
        )

    def log_run_completed(
        self,
        context: CollectionRunContext,
        *,
        pages: int,
        collected: int,
        skipped: int,
        duration: dt.timedelta,
    ) -> None:
        """Log a successful run with page and record counts."""
        log_info(
            logger,
            "[%s] source=%s duration_seconds=%.3f pages=%d collected=%d skipped=%d",
            CollectionEventType.RUN_COMPLETED,
            context.source,
            duration.total_seconds(),
            pages,
            collected,
            skipped,
        )

    def log_run_failed(
        self,
        context: CollectionRunContext,
        error: BaseException,
        duration: dt.timedelta,
    ) -> None:
        """Log a failed run with error categorisation."""
        log_error(
            logger,
            "[%s] source=%s duration_seconds=%.3f error_type=%s "
            "error_category=%s error_message=%s",
            CollectionEventType.RUN_FAILED,
            context.source,
            duration.total_seconds(),
            type(error).__name__,
            categorize_error(error),
            str(error),
            exc_info=error,
        )
