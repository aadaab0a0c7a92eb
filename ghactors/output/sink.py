"""RowSink protocol and adapters for emitting formatted rows.

Usage
-----
Write rows to standard output:

>>> import sys
>>> StreamRowSink(sys.stdout).write_rows("users", ["1\\toctocat"])
1	octocat

"""

from __future__ import annotations

import typing as typ

from ghactors.logging import get_logger, log_info

if typ.TYPE_CHECKING:
    import collections.abc as cabc

logger = get_logger(__name__)


@typ.runtime_checkable
class RowSink(typ.Protocol):
    """Destination for a labelled block of formatted rows."""

    def write_rows(self, label: str, rows: cabc.Sequence[str]) -> None:
        """Write ``rows``; ``label`` names the block (``users``, ``repos``)."""
        ...


class _SupportsWrite(typ.Protocol):
    def write(self, text: str, /) -> object: ...


class StreamRowSink:
    """Write one row per line to a text stream."""

    def __init__(self, stream: _SupportsWrite) -> None:
        """Wrap ``stream``; it is not closed by the sink."""
        self._stream = stream

    def write_rows(self, label: str, rows: cabc.Sequence[str]) -> None:
        """Write rows followed by newlines; ``label`` is not printed."""
        del label
        for row in rows:
            self._stream.write(f"{row}\n")


class LogRowSink:
    """Emit the whole block as one INFO record headed by ``[label]``."""

    def __init__(self, sink_logger: typ.Any | None = None) -> None:  # noqa: ANN401
        """Use ``sink_logger`` or the module logger."""
        self._logger = sink_logger if sink_logger is not None else logger

    def write_rows(self, label: str, rows: cabc.Sequence[str]) -> None:
        """Log ``[label]`` followed by the rows, one per line."""
        log_info(self._logger, "[%s]\n%s", label, "\n".join(rows))
