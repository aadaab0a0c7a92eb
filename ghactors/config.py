"""Run configuration for actor collection.

Values come from CLI options, falling back to environment variables:

- ``GHACTORS_OWNER`` / ``GHACTORS_REPO``: target repository.
- ``GHACTORS_START_DATE`` / ``GHACTORS_END_DATE``: optional ``YYYY-MM-DD``
  window bounds; both are needed for filtering to apply.
- ``GHACTORS_PAGE_SIZE``: items per listing request, 1 to 100.
- ``GHACTORS_LOG_LEVEL``: femtologging level name.

>>> config = CollectorConfig(owner="pingcap", repo="tidb")
>>> config.page_size
100

"""

from __future__ import annotations

import dataclasses as dc
import os
import typing as typ

from ghactors.collect.window import TimeWindow
from ghactors.common.slug import repo_slug
from ghactors.github.client import MAX_PER_PAGE


def _env_str(name: str) -> str | None:
    value = os.environ.get(name, "").strip()
    return value or None


def _parse_page_size(raw: str | None, *, source: str) -> int:
    if raw is None:
        return MAX_PER_PAGE
    try:
        value = int(raw)
    except ValueError as exc:
        msg = f"{source} must be an integer, got: {raw!r}"
        raise ValueError(msg) from exc
    return value


@dc.dataclass(frozen=True, slots=True)
class CollectorConfig:
    """Settings for one collection run.

    Attributes
    ----------
    owner, repo
        Target repository. Required by every repository-scoped source.
    start_date, end_date
        Optional ``YYYY-MM-DD`` bounds of the inclusive time window.
    page_size
        Items requested per page, between 1 and 100.
    log_level
        Raw log level name; normalised by :func:`ghactors.logging.configure_logging`.

    """

    owner: str | None = None
    repo: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    page_size: int = MAX_PER_PAGE
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        """Validate the page size bound."""
        if not 1 <= self.page_size <= MAX_PER_PAGE:
            msg = f"page_size must be between 1 and {MAX_PER_PAGE}, got {self.page_size}"
            raise ValueError(msg)

    @classmethod
    def from_env(cls, **overrides: typ.Any) -> CollectorConfig:  # noqa: ANN401
        """Create configuration from ``GHACTORS_*`` environment variables.

        ``overrides`` (typically CLI values) replace the matching variables
        before anything is validated, so an override masks a bad setting in
        the environment.
        """
        values: dict[str, typ.Any] = {
            "owner": _env_str("GHACTORS_OWNER"),
            "repo": _env_str("GHACTORS_REPO"),
            "start_date": _env_str("GHACTORS_START_DATE"),
            "end_date": _env_str("GHACTORS_END_DATE"),
            "log_level": _env_str("GHACTORS_LOG_LEVEL") or "INFO",
        }
        if "page_size" not in overrides:
            values["page_size"] = _parse_page_size(
                _env_str("GHACTORS_PAGE_SIZE"), source="GHACTORS_PAGE_SIZE"
            )
        values.update(overrides)
        return cls(**values)

    def require_repository(self) -> tuple[str, str]:
        """Return ``(owner, repo)`` or raise when either is missing."""
        if not self.owner or not self.repo:
            msg = (
                "owner and repo are required "
                "(pass owner/repo or set GHACTORS_OWNER and GHACTORS_REPO)"
            )
            raise ValueError(msg)
        return self.owner, self.repo

    @property
    def slug(self) -> str | None:
        """Return ``owner/repo`` when both are set."""
        if not self.owner or not self.repo:
            return None
        return repo_slug(self.owner, self.repo)

    def time_window(self) -> TimeWindow | None:
        """Build the optional time window from the configured dates."""
        return TimeWindow.from_dates(self.start_date, self.end_date)
