"""femtologging helpers shared by the collector, client and CLI.

Messages are interpolated eagerly with percent-style templates before they
reach femtologging, which only accepts pre-formatted strings.

Example:
>>> from ghactors.logging import get_logger, log_info
>>> logger = get_logger(__name__)
>>> log_info(logger, "Collected %d actors", 3)

"""

from __future__ import annotations

import enum
import typing as typ

from femtologging import basicConfig, get_logger


class LogLevel(enum.StrEnum):
    """Log levels accepted by ``--log-level`` and ``GHACTORS_LOG_LEVEL``."""

    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def normalize_log_level(level: str | None) -> tuple[str, bool]:
    """Normalize a log level string and report invalid inputs.

    Parameters
    ----------
    level : str | None
        Raw log level string, typically from the CLI or environment.

    Returns
    -------
    tuple[str, bool]
        The normalized level (``INFO`` when unusable) and a flag that is
        ``True`` when the input had to be replaced.

    """
    if not level:
        return ("INFO", True)

    normalized = level.strip().upper()
    if normalized in LogLevel.__members__:
        return (normalized, False)

    return ("INFO", True)


def configure_logging(level: str | None, *, force: bool = False) -> tuple[str, bool]:
    """Configure femtologging and return the normalized level.

    Parameters
    ----------
    level : str | None
        Raw log level string to normalize.
    force : bool, optional
        Whether to replace any existing handler configuration.

    Returns
    -------
    tuple[str, bool]
        The normalized log level and a flag indicating invalid input.

    """
    normalized, invalid = normalize_log_level(level)
    basicConfig(level=normalized, force=force)
    return (normalized, invalid)


def format_log_message(template: str, *args: object) -> str:
    """Interpolate ``args`` into a percent-style ``template``."""
    return template % args


class _SupportsLog(typ.Protocol):
    """Protocol for femtologging-compatible loggers."""

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> str | None: ...


def _log_at_level(
    logger: _SupportsLog,
    level: str,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    logger.log(
        level,
        format_log_message(template, *args),
        exc_info=exc_info,
        stack_info=False,
    )


def log_debug(logger: _SupportsLog, template: str, *args: object) -> None:
    """Log a DEBUG message with percent-style formatting."""
    _log_at_level(logger, "DEBUG", template, *args)


def log_info(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an INFO message with percent-style formatting.

    Parameters
    ----------
    logger : _SupportsLog
        Logger that receives the formatted message.
    template : str
        Message template using percent-style placeholders.
    *args : object
        Values to interpolate into the template.
    exc_info : object | None, optional
        Exception information to attach to the log record.

    """
    _log_at_level(logger, "INFO", template, *args, exc_info=exc_info)


def log_warning(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log a WARNING message with percent-style formatting."""
    _log_at_level(logger, "WARNING", template, *args, exc_info=exc_info)


def log_error(
    logger: _SupportsLog,
    template: str,
    *args: object,
    exc_info: object | None = None,
) -> None:
    """Log an ERROR message with percent-style formatting."""
    _log_at_level(logger, "ERROR", template, *args, exc_info=exc_info)


def log_exception(logger: _SupportsLog, message: str, exc: BaseException) -> None:
    """Log a pre-formatted message at ERROR with ``exc`` attached as exc_info."""
    logger.log("ERROR", message, exc_info=exc, stack_info=False)


__all__ = [
    "LogLevel",
    "configure_logging",
    "format_log_message",
    "get_logger",
    "log_debug",
    "log_error",
    "log_exception",
    "log_info",
    "log_warning",
    "normalize_log_level",
]
