"""Cursor-driven pagination and partition merging.

Architecture:
    A CursorStream turns a single-page fetch function into a lazy async
    iterator over items. It is a small state machine:

        NEED_FETCH(cursor) --page with cursor--> NEED_FETCH(next cursor)
        NEED_FETCH(cursor) --page without cursor--> EXHAUSTED
        NEED_FETCH(cursor) --error--> FAILED

    merge_streams runs several streams (one per partition) concurrently and
    yields their items as they arrive.

Design Decisions:
    - The query is copied when the stream is created; the caller's object is
      never mutated and a new stream always starts from the first page
    - A page is fetched only when the buffered items run out
    - A fetch error is raised once from __anext__; afterwards the stream is
      FAILED and ends, it never silently truncates
    - Within a stream order is preserved; across merged streams it is not
    - Closing the merged iterator cancels every partition task and closes its stream
    - The merge queue is bounded, so partitions fetch only as fast as items are consumed
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from enum import Enum
from time import perf_counter
from typing import Any, Generic, TypeVar

from ...models.filters import Partition
from ...models.items import ItemsWithCursor
from .telemetry import log_page_fetched, log_stream_complete, log_stream_error

T = TypeVar("T")
Q = TypeVar("Q")

FetchPage = Callable[[Q], Awaitable[ItemsWithCursor[T]]]


class StreamState(str, Enum):
    NEED_FETCH = "need_fetch"
    EXHAUSTED = "exhausted"
    FAILED = "failed"


def _copy_query(query: Any) -> Any:
    copy = getattr(query, "model_copy", None)
    if callable(copy):
        return copy(deep=True)
    return query


class CursorStream(Generic[T]):
    """Lazy async iterator over every item of a cursor-paginated listing.

    Example:
        >>> stream = CursorStream(fetch, LimitCursorQuery(limit=1000))
        >>> async for item in stream:
        ...     process(item)
    """

    def __init__(self, fetch_page: FetchPage[Any, T], query: Any, *, source: str = "stream") -> None:
        self._fetch_page = fetch_page
        self._query = _copy_query(query)
        self._source = source
        self._buffer: deque[T] = deque()
        self._state = StreamState.NEED_FETCH
        self._cursor: str | None = None
        self._pages = 0
        self._total = 0

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def pages_fetched(self) -> int:
        return self._pages

    def __aiter__(self) -> CursorStream[T]:
        return self

    async def __anext__(self) -> T:
        while not self._buffer:
            if self._state is not StreamState.NEED_FETCH:
                raise StopAsyncIteration
            await self._fetch_next()
        return self._buffer.popleft()

    async def _fetch_next(self) -> None:
        if self._pages > 0:
            self._query.set_cursor(self._cursor)
        start = perf_counter()
        try:
            page = await self._fetch_page(self._query)
        except Exception as e:
            self._state = StreamState.FAILED
            log_stream_error(
                source=self._source,
                page_index=self._pages,
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise

        self._buffer.extend(page.items)
        self._cursor = page.next_cursor
        log_page_fetched(
            source=self._source,
            page_index=self._pages,
            items=len(page.items),
            has_next=page.next_cursor is not None,
            latency_ms=(perf_counter() - start) * 1000.0,
        )
        self._pages += 1
        self._total += len(page.items)
        if page.next_cursor is None:
            self._state = StreamState.EXHAUSTED
            log_stream_complete(source=self._source, pages=self._pages, total_items=self._total)


async def collect(stream: AsyncIterator[T]) -> list[T]:
    """Drain an async iterator into a list."""
    return [item async for item in stream]


def partition_queries(query: Any, partitions: int) -> list[Any]:
    """Clone `query` once per partition (1..n of n), each with its cursor reset."""
    if partitions < 1:
        raise ValueError("partitions must be >= 1")
    return [query.with_partition(Partition(index=i, count=partitions)) for i in range(1, partitions + 1)]


_DONE = object()


async def merge_streams(
    streams: Sequence[AsyncIterator[T]], buffer_size: int = 1
) -> AsyncIterator[T]:
    """Yield items from all streams as they arrive.

    Each stream is drained by its own task into a shared queue. The first error
    from any stream cancels the others and is raised to the consumer.

    Args:
        streams: Async iterators to merge
        buffer_size: Max queued items (0 for unbounded). Producers block on a
            full queue, so a small buffer keeps each stream close to demand.
    """
    queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=buffer_size)

    async def drain(stream: AsyncIterator[T]) -> None:
        try:
            async for item in stream:
                await queue.put(item)
        except Exception as e:
            await queue.put(_Failure(e))
            return
        finally:
            # A cancelled producer may be parked on a full queue, outside the stream.
            aclose = getattr(stream, "aclose", None)
            if aclose is not None:
                await aclose()
        await queue.put(_DONE)

    tasks = [asyncio.create_task(drain(s)) for s in streams]
    remaining = len(tasks)
    try:
        while remaining:
            item = await queue.get()
            if item is _DONE:
                remaining -= 1
            elif isinstance(item, _Failure):
                raise item.error
            else:
                yield item
    finally:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)


class _Failure:
    __slots__ = ("error",)

    def __init__(self, error: BaseException) -> None:
        self.error = error
