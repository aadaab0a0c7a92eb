"""Paginated collection engine.

:func:`collect` walks a cursor-paginated listing to completion and turns it
into an ordered, deduplicated, optionally time-filtered and optionally
hydrated sequence of records. It knows nothing about GitHub: callers inject
the page fetcher and the per-item strategies, usually through an
:class:`ActorSource` implementation from :mod:`ghactors.collect.sources`.

A run either returns every record or raises :class:`CollectionError`. There
is no partial result and no retry; the first failed page fetch or hydration
aborts the run.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses
import datetime as dt
import typing as typ

from ghactors.common.time import utcnow
from ghactors.logging import get_logger, log_debug

from .errors import CollectionError
from .observability import CollectionEventLogger, CollectionRunContext

if typ.TYPE_CHECKING:
    from ghactors.github.models import Page

    from .window import TimeWindow

logger = get_logger(__name__)

RawT = typ.TypeVar("RawT")
ResultT = typ.TypeVar("ResultT")

FetchPage = cabc.Callable[[str | None, int], cabc.Awaitable["Page[RawT]"]]
TimestampOf = cabc.Callable[[RawT], dt.datetime]
IdentityKey = cabc.Callable[[RawT], cabc.Hashable]
Hydrate = cabc.Callable[[RawT], cabc.Awaitable[ResultT]]


@dataclasses.dataclass(frozen=True, slots=True)
class CollectionResult(typ.Generic[ResultT]):
    """Records in first-seen order with positionally aligned timestamps.

    ``timestamps`` is empty for sources that carry no event time; otherwise
    ``timestamps[i]`` belongs to ``records[i]``.
    """

    records: tuple[ResultT, ...]
    timestamps: tuple[dt.datetime, ...] = ()

    def __post_init__(self) -> None:
        """Reject misaligned timestamp sequences."""
        if self.timestamps and len(self.timestamps) != len(self.records):
            msg = (
                f"timestamps ({len(self.timestamps)}) must align with "
                f"records ({len(self.records)})"
            )
            raise ValueError(msg)

    def __len__(self) -> int:
        """Return the number of collected records."""
        return len(self.records)


class ActorSource(typ.Protocol[RawT, ResultT]):
    """Strategy binding one listing endpoint to the collection engine.

    ``timestamp_of``, ``identity_key`` and ``hydrate`` may be ``None`` to
    disable time tracking, deduplication and hydration respectively.
    """

    @property
    def name(self) -> str:
        """Short source name used in logs and errors."""
        ...

    async def fetch_page(self, page_token: str | None, page_size: int) -> Page[RawT]:
        """Fetch one page; ``page_token`` is ``None`` for the first page."""
        ...

    @property
    def timestamp_of(self) -> TimestampOf[RawT] | None:
        """Return the event-time extractor, if the source is timestamped."""
        ...

    @property
    def identity_key(self) -> IdentityKey[RawT] | None:
        """Return the deduplication key extractor, if any."""
        ...

    @property
    def hydrate(self) -> Hydrate[RawT, ResultT] | None:
        """Return the profile resolver, if records need hydrating."""
        ...


@dataclasses.dataclass(slots=True)
class _RunState(typ.Generic[ResultT]):
    records: list[ResultT] = dataclasses.field(default_factory=list)
    timestamps: list[dt.datetime] = dataclasses.field(default_factory=list)
    seen: set[cabc.Hashable] = dataclasses.field(default_factory=set)
    pages: int = 0
    skipped: int = 0


async def collect(  # noqa: PLR0913
    fetch_page: FetchPage[RawT],
    *,
    page_size: int,
    window: TimeWindow | None = None,
    timestamp_of: TimestampOf[RawT] | None = None,
    identity_key: IdentityKey[RawT] | None = None,
    hydrate: Hydrate[RawT, ResultT] | None = None,
    source: str = "collection",
    event_logger: CollectionEventLogger | None = None,
) -> CollectionResult[ResultT]:
    """Collect every record a paginated listing yields.

    Parameters
    ----------
    fetch_page
        Coroutine function ``(page_token, page_size) -> Page``. It is called
        with ``None`` first and then with each page's ``next_token`` until a
        page reports no successor.
    page_size
        Requested items per page, passed through to ``fetch_page``.
    window
        Optional inclusive time window. Requires ``timestamp_of``.
    timestamp_of
        Extracts an item's event time. When given, timestamps are returned
        alongside the records.
    identity_key
        Extracts a deduplication key. Items whose key was already seen in
        this run are skipped before hydration.
    hydrate
        Resolves a raw item into its final record. When omitted the raw item
        is returned as-is.
    source
        Name used in log events and error messages.
    event_logger
        Receiver for run lifecycle events.

    Returns
    -------
    CollectionResult
        Records in first-seen order, with aligned timestamps when tracked.

    Raises
    ------
    CollectionError
        If any page fetch or hydration fails. The original exception is
        chained as ``__cause__``.
    ValueError
        If ``page_size`` is not positive, or ``window`` is given without
        ``timestamp_of``.

    """
    if page_size < 1:
        msg = f"page_size must be positive, got {page_size}"
        raise ValueError(msg)
    if window is not None and timestamp_of is None:
        msg = f"{source}: a time window needs a timestamp extractor"
        raise ValueError(msg)

    events = event_logger or CollectionEventLogger()
    context = CollectionRunContext(
        source=source,
        page_size=page_size,
        windowed=window is not None,
        started_at=utcnow(),
    )
    events.log_run_started(context)

    state: _RunState[ResultT] = _RunState()
    try:
        page_token: str | None = None
        while True:
            try:
                page = await fetch_page(page_token, page_size)
            except Exception as exc:
                raise CollectionError.page_fetch_failed(
                    source, page_token, exc
                ) from exc
            state.pages += 1
            log_debug(
                logger,
                "%s: page %d returned %d items",
                source,
                state.pages,
                len(page.items),
            )

            for item in page.items:
                await _process_item(
                    item,
                    state,
                    window=window,
                    timestamp_of=timestamp_of,
                    identity_key=identity_key,
                    hydrate=hydrate,
                    source=source,
                )

            if page.is_last:
                break
            page_token = page.next_token
    except CollectionError as exc:
        events.log_run_failed(context, exc, utcnow() - context.started_at)
        raise

    result = CollectionResult(
        records=tuple(state.records),
        timestamps=tuple(state.timestamps),
    )
    events.log_run_completed(
        context,
        pages=state.pages,
        collected=len(result),
        skipped=state.skipped,
        duration=utcnow() - context.started_at,
    )
    return result


async def _process_item(  # noqa: PLR0913
    item: RawT,
    state: _RunState[ResultT],
    *,
    window: TimeWindow | None,
    timestamp_of: TimestampOf[RawT] | None,
    identity_key: IdentityKey[RawT] | None,
    hydrate: Hydrate[RawT, ResultT] | None,
    source: str,
) -> None:
    timestamp = timestamp_of(item) if timestamp_of is not None else None
    if window is not None and timestamp is not None and not window.contains(timestamp):
        state.skipped += 1
        return

    key: cabc.Hashable | None = None
    if identity_key is not None:
        key = identity_key(item)
        if key in state.seen:
            state.skipped += 1
            return
        state.seen.add(key)

    if hydrate is None:
        record = typ.cast("ResultT", item)
    else:
        try:
            record = await hydrate(item)
        except Exception as exc:
            raise CollectionError.hydration_failed(
                source, key if key is not None else item, exc
            ) from exc

    state.records.append(record)
    if timestamp is not None:
        state.timestamps.append(timestamp)


async def collect_from(
    source: ActorSource[RawT, ResultT],
    *,
    page_size: int,
    window: TimeWindow | None = None,
    event_logger: CollectionEventLogger | None = None,
) -> CollectionResult[ResultT]:
    """Run :func:`collect` with the strategies provided by ``source``."""
    return await collect(
        source.fetch_page,
        page_size=page_size,
        window=window,
        timestamp_of=source.timestamp_of,
        identity_key=source.identity_key,
        hydrate=source.hydrate,
        source=source.name,
        event_logger=event_logger,
    )
