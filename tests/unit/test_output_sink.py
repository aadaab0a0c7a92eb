"""Unit tests for row sinks."""

from __future__ import annotations

import io

from ghactors.output import LogRowSink, RowSink, StreamRowSink


class _FakeLogger:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def log(
        self,
        level: str,
        message: str,
        /,
        *,
        exc_info: object | None = None,
        stack_info: bool = False,
    ) -> None:
        self.calls.append((level, message))


def test_stream_sink_writes_one_row_per_line() -> None:
    """Rows are newline-terminated and the label is not printed."""
    stream = io.StringIO()

    StreamRowSink(stream).write_rows("users", ["1\toctocat", "2\thubot"])

    assert stream.getvalue() == "1\toctocat\n2\thubot\n"


def test_stream_sink_writes_nothing_for_no_rows() -> None:
    """An empty result produces empty output."""
    stream = io.StringIO()

    StreamRowSink(stream).write_rows("repos", [])

    assert stream.getvalue() == ""


def test_log_sink_emits_labelled_block() -> None:
    """The whole block is one INFO record headed by the label."""
    fake = _FakeLogger()

    LogRowSink(fake).write_rows("user ids", ["7", "8"])

    assert fake.calls == [("INFO", "[user ids]\n7\n8")]


def test_sinks_satisfy_protocol() -> None:
    """Both adapters are RowSinks."""
    assert isinstance(StreamRowSink(io.StringIO()), RowSink)
    assert isinstance(LogRowSink(_FakeLogger()), RowSink)
