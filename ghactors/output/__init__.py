"""Row formatting and output sinks."""

from __future__ import annotations

from .formatting import (
    PLACEHOLDER,
    format_actor_rows,
    format_contact_rows,
    format_id_rows,
)
from .sink import LogRowSink, RowSink, StreamRowSink

__all__ = [
    "PLACEHOLDER",
    "LogRowSink",
    "RowSink",
    "StreamRowSink",
    "format_actor_rows",
    "format_contact_rows",
    "format_id_rows",
]
