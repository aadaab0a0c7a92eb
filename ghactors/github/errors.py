"""GitHub client errors."""

from __future__ import annotations

_HTTP_FORBIDDEN = 403
_HTTP_TOO_MANY_REQUESTS = 429


class GitHubAPIError(RuntimeError):
    """Raised when GitHub returns an error response or cannot be reached."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        rate_limited: bool = False,
    ) -> None:
        """Initialise with a message, optional HTTP status and rate-limit flag."""
        self.status_code = status_code
        self.rate_limited = rate_limited
        super().__init__(message)

    @classmethod
    def http_error(
        cls, status_code: int, url: str, *, remaining: str | None = None
    ) -> GitHubAPIError:
        """Return an error for non-2xx HTTP responses.

        ``remaining`` is the ``X-RateLimit-Remaining`` header value; a 403
        with no remaining quota, or any 429, is flagged as rate limited.
        """
        rate_limited = status_code == _HTTP_TOO_MANY_REQUESTS or (
            status_code == _HTTP_FORBIDDEN and remaining == "0"
        )
        suffix = " (rate limit exceeded)" if rate_limited else ""
        return cls(
            f"GitHub REST HTTP {status_code} for {url}{suffix}",
            status_code=status_code,
            rate_limited=rate_limited,
        )

    @classmethod
    def transport_error(cls, url: str, exc: Exception) -> GitHubAPIError:
        """Return an error for network-level failures."""
        return cls(f"GitHub REST request to {url} failed: {exc}")


class GitHubResponseShapeError(RuntimeError):
    """Raised when GitHub responses do not match the expected shape."""

    @classmethod
    def unexpected(cls, what: str, detail: object) -> GitHubResponseShapeError:
        """Return an error for a payload that could not be decoded."""
        return cls(f"GitHub REST response for {what} has unexpected shape: {detail}")


class GitHubConfigError(RuntimeError):
    """Raised when GitHub client configuration is invalid."""

    @classmethod
    def missing_token(cls) -> GitHubConfigError:
        """Return an error when no GitHub token is configured."""
        return cls("GHACTORS_GITHUB_TOKEN (or GITHUB_TOKEN) is required for GitHub API")

    @classmethod
    def empty_token(cls) -> GitHubConfigError:
        """Return an error when the provided token is empty."""
        return cls("GitHub token must be non-empty")
