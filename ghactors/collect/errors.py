"""Collection errors."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    from pathlib import Path


class CollectionError(RuntimeError):
    """Raised when a collection run aborts.

    The failing remote call is chained as ``__cause__``; ``source`` and
    ``phase`` identify where the run stopped.
    """

    def __init__(self, message: str, *, source: str, phase: str) -> None:
        """Initialise with a message and the source/phase that failed."""
        self.source = source
        self.phase = phase
        super().__init__(message)

    @classmethod
    def page_fetch_failed(
        cls, source: str, page_token: str | None, cause: BaseException
    ) -> CollectionError:
        """Return an error for a failed page retrieval."""
        page = "first page" if page_token is None else f"page {page_token!r}"
        return cls(
            f"{source}: fetching {page} failed: {cause}",
            source=source,
            phase="page_fetch",
        )

    @classmethod
    def hydration_failed(
        cls, source: str, key: object, cause: BaseException
    ) -> CollectionError:
        """Return an error for a failed profile lookup."""
        return cls(
            f"{source}: resolving {key!r} failed: {cause}",
            source=source,
            phase="hydration",
        )


class UserListError(RuntimeError):
    """Raised when a user-list file cannot be parsed."""

    @classmethod
    def not_numeric(cls, path: Path, line_number: int, field: str) -> UserListError:
        """Return an error for a line whose first field is not an integer."""
        return cls(f"{path}:{line_number}: expected a numeric user ID, got {field!r}")

    @classmethod
    def not_text(cls, path: Path, cause: UnicodeDecodeError) -> UserListError:
        """Return an error for a file that is not UTF-8 text."""
        return cls(f"{path}: not UTF-8 text: {cause}")
