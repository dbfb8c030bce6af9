"""Generic CRUD, listing and search capabilities.

Every capability is defined once here and parameterized by its request and
response types. Resources declare the ones they support (see base.py).

Endpoints, relative to the resource base path:
    - Create:                          POST {base}
    - Retrieve*:                       POST {base}/byids
    - Update, Upsert (update half):    POST {base}/update
    - Delete*:                         POST {base}/delete
    - List:                            GET  {base}
    - FilterItems, FilterWithRequest:  POST {base}/list
    - Search:                          POST {base}/search

Capabilities never retry on their own; the retry middleware handles transient
failures. The only errors they recover from are the documented duplicate and
missing identity flows (`ignore_duplicates`, `ignore_unknown_ids`, Upsert).
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable, Sequence
from typing import Any, Generic, TypeVar

from pydantic import TypeAdapter
from pydantic.alias_generators import to_camel

from ..core.enums import HttpMethod
from ..core.exceptions import ConflictError, get_duplicates, get_missing
from ..models.base import to_payload
from ..models.filters import Filter, Search as SearchRequest
from ..models.identity import Identity
from ..models.items import ItemsWithCursor, ItemsWithoutCursor
from ..models.patch import Patch
from ..runtime.pagination.streams import CursorStream, collect, merge_streams, partition_queries
from ..runtime.rest.transport import ApiClient
from .base import Capability

T = TypeVar("T")
TIn = TypeVar("TIn")
TOut = TypeVar("TOut")
TKey = TypeVar("TKey")
TQuery = TypeVar("TQuery")


# Shared request helpers


async def post_items(
    api_client: ApiClient,
    path: str,
    items: Iterable[Any],
    output: Any,
    *,
    idempotent: bool = True,
    **extra: Any,
) -> list[Any]:
    """POST `{"items": [...], **extra}` and return the `items` of the response.

    Keys of `extra` are camel-cased, so `ignore_unknown_ids=True` is sent as
    `"ignoreUnknownIds": true`.

    With `output` None the response body is discarded and an empty list returned.
    """
    body = {"items": to_payload(list(items))}
    body.update((to_camel(key), value) for key, value in to_payload(extra).items())
    if output is None:
        await api_client.post(path, body, idempotent=idempotent)
        return []
    response = await api_client.post(
        path, body, ItemsWithoutCursor[output], idempotent=idempotent
    )
    return response.items


async def fetch_page(
    api_client: ApiClient, method: HttpMethod, path: str, query: Any, output: Any
) -> ItemsWithCursor[Any]:
    """Fetch one page of a cursor-paginated listing.

    GET sends the query as URL parameters, POST as the JSON body.
    """
    envelope = ItemsWithCursor[output]
    if method is HttpMethod.GET:
        return await api_client.get(path, envelope, params=query)
    return await api_client.post(path, query, envelope, idempotent=True)


def _coerce(tp: Any, values: Iterable[Any]) -> list[Any]:
    adapter = TypeAdapter(tp)
    result = []
    for value in values:
        if isinstance(tp, type) and isinstance(value, tp):
            result.append(value)
        else:
            result.append(adapter.validate_python(value))
    return result


def _without(items: Sequence[T], identities: list[Identity]) -> list[T]:
    return [item for item in items if not any(item.matches(i) for i in identities)]  # type: ignore[attr-defined]


# Create / Upsert


class Create(Capability, Generic[TIn, TOut]):
    """Create items in one request: `await resource.create(items)`."""

    def __init__(self, input_type: type[TIn], output: type[TOut]) -> None:
        self.input_type = input_type
        self.output = output

    async def __call__(self, items: Sequence[TIn]) -> list[TOut]:
        return await post_items(
            self.api_client, self.path(), items, self.output, idempotent=False
        )

    async def ignore_duplicates(self, items: Sequence[TIn]) -> list[TOut]:
        """Create items, skipping any the API reports as already existing.

        Returns an empty list when every item was a duplicate.
        """
        try:
            return await self(items)
        except ConflictError as e:
            duplicates = get_duplicates(e)
            if not duplicates:
                raise
            remaining = _without(items, duplicates)
            if not remaining:
                if len(duplicates) == len(items):
                    return []
                raise
            return await self(remaining)


class Upsert(Capability):
    """Create items, updating the ones that already exist.

    Uses the resource's create and update capabilities (by attribute name).
    Items must provide `matches(identity)` and `to_patch(ignore_nulls)`.
    """

    def __init__(self, create_attr: str = "create", update_attr: str = "update") -> None:
        self.create_attr = create_attr
        self.update_attr = update_attr

    async def __call__(self, items: Sequence[Any], ignore_nulls: bool = False) -> list[Any]:
        create: Create[Any, Any] = getattr(self.resource, self.create_attr)
        update: Update[Any, Any] = getattr(self.resource, self.update_attr)
        try:
            return await create(items)
        except ConflictError as e:
            duplicates = get_duplicates(e)
            if not duplicates:
                raise

        to_create: list[Any] = []
        to_update: list[Patch[Any]] = []
        for item in items:
            identity = next((i for i in duplicates if item.matches(i)), None)
            if identity is None:
                to_create.append(item)
            else:
                to_update.append(Patch(id=identity, update=item.to_patch(ignore_nulls)))

        result: list[Any] = []
        if to_create:
            result.extend(await create(to_create))
        if to_update:
            result.extend(await update(to_update))
        return result


# Retrieve


class Retrieve(Capability, Generic[TKey, TOut]):
    """Retrieve items by key: `await resource.retrieve([Identity.of_id(1)])`."""

    def __init__(self, key_type: Any, output: type[TOut]) -> None:
        self.key_type = key_type
        self.output = output

    async def __call__(self, ids: Sequence[Any]) -> list[TOut]:
        return await post_items(
            self.api_client, self.path("byids"), _coerce(self.key_type, ids), self.output
        )


class RetrieveWithIgnoreUnknownIds(Retrieve[TKey, TOut]):
    """Retrieve by key; with `ignore_unknown_ids` unknown keys are dropped instead of failing."""

    async def __call__(self, ids: Sequence[Any], ignore_unknown_ids: bool = False) -> list[TOut]:
        return await post_items(
            self.api_client,
            self.path("byids"),
            _coerce(self.key_type, ids),
            self.output,
            ignore_unknown_ids=ignore_unknown_ids,
        )


class RetrieveWithRequest(Capability, Generic[TIn, TOut]):
    """Retrieve with a caller-built request body, returning the whole decoded response."""

    def __init__(self, request_type: type[TIn], output: Any) -> None:
        self.request_type = request_type
        self.output = output

    async def __call__(self, request: TIn) -> Any:
        return await self.api_client.post(
            self.path("byids"), request, self.output, idempotent=True
        )


# Update


class Update(Capability, Generic[TIn, TOut]):
    """Apply patches: `await resource.update([Patch(id=..., update=...)])`."""

    def __init__(self, patch_type: Any, output: type[TOut]) -> None:
        self.patch_type = patch_type
        self.output = output

    async def __call__(self, patches: Sequence[TIn]) -> list[TOut]:
        return await post_items(self.api_client, self.path("update"), patches, self.output)

    async def ignore_unknown_ids(self, patches: Sequence[TIn]) -> list[TOut]:
        """Apply patches, skipping any whose target the API reports as missing."""
        try:
            return await self(patches)
        except Exception as e:
            missing = get_missing(e)
            if not missing:
                raise
            remaining = _without(patches, missing)
            if not remaining:
                if len(missing) == len(patches):
                    return []
                raise
            return await self(remaining)


# Delete


class Delete(Capability, Generic[TKey]):
    """Delete by key: `await resource.delete(ids)`."""

    def __init__(self, key_type: Any) -> None:
        self.key_type = key_type

    async def __call__(self, ids: Sequence[Any]) -> None:
        await post_items(
            self.api_client, self.path("delete"), _coerce(self.key_type, ids), None
        )


class DeleteWithIgnoreUnknownIds(Delete[TKey]):
    """Delete by key; with `ignore_unknown_ids` deleting unknown keys succeeds."""

    async def __call__(self, ids: Sequence[Any], ignore_unknown_ids: bool = False) -> None:
        await post_items(
            self.api_client,
            self.path("delete"),
            _coerce(self.key_type, ids),
            None,
            ignore_unknown_ids=ignore_unknown_ids,
        )


class DeleteWithRequest(Capability, Generic[TIn]):
    """Delete with a caller-built request body."""

    def __init__(self, request_type: type[TIn]) -> None:
        self.request_type = request_type

    async def __call__(self, request: TIn) -> None:
        await self.api_client.post(self.path("delete"), request, idempotent=True)


class DeleteWithResponse(Capability, Generic[TKey, TOut]):
    """Delete by key and return what the API reports as deleted."""

    def __init__(self, key_type: Any, output: type[TOut]) -> None:
        self.key_type = key_type
        self.output = output

    async def __call__(self, ids: Sequence[Any]) -> list[TOut]:
        return await post_items(
            self.api_client, self.path("delete"), _coerce(self.key_type, ids), self.output
        )


# Listing


class _Paginated(Capability, Generic[TQuery, TOut]):
    """Single-page fetch plus the streaming helpers built on it.

    Subclasses set `method`, `suffix` and `output`.
    """

    method: HttpMethod = HttpMethod.POST
    suffix: str = "list"
    output: Any = None

    async def fetch(self, query: TQuery) -> ItemsWithCursor[TOut]:
        return await fetch_page(self.api_client, self.method, self.path(self.suffix), query, self.output)

    def stream(self, query: TQuery) -> CursorStream[TOut]:
        """Lazily iterate every item, following cursors."""
        return CursorStream(self.fetch, query, source=self.source)

    async def all(self, query: TQuery) -> list[TOut]:
        """Fetch every page and return all items."""
        return await collect(self.stream(query))

    def stream_partitioned(
        self, query: TQuery, partitions: int, buffer_size: int = 1
    ) -> AsyncIterator[TOut]:
        """Iterate `partitions` disjoint partitions concurrently, merged without ordering.

        Each partition runs at most about one page ahead of the consumer.
        """
        return merge_streams(
            [self.stream(q) for q in partition_queries(query, partitions)], buffer_size
        )

    async def partitioned(self, query: TQuery, partitions: int) -> list[TOut]:
        """Fetch all partitions concurrently; items are grouped by partition.

        The first failing partition cancels the others and its error is raised.
        """
        tasks = [asyncio.create_task(self.all(q)) for q in partition_queries(query, partitions)]
        try:
            done, _ = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
            failed = [t for t in done if not t.cancelled() and t.exception() is not None]
            if failed:
                raise failed[0].exception()
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
        return [item for task in tasks for item in task.result()]


class List(_Paginated[TQuery, TOut]):
    """List with URL query parameters (`GET {base}`); one page per call."""

    method = HttpMethod.GET
    suffix = ""

    def __init__(self, query_type: type[TQuery], output: type[TOut]) -> None:
        self.query_type = query_type
        self.output = output

    async def __call__(self, query: TQuery | None = None) -> ItemsWithCursor[TOut]:
        return await self.fetch(query if query is not None else self.query_type())

    def stream(self, query: TQuery | None = None) -> CursorStream[TOut]:
        return super().stream(query if query is not None else self.query_type())

    async def all(self, query: TQuery | None = None) -> list[TOut]:
        return await super().all(query if query is not None else self.query_type())


class FilterWithRequest(_Paginated[TQuery, TOut]):
    """Filter with a caller-built request body (`POST {base}/list`); one page per call."""

    def __init__(self, request_type: type[TQuery], output: type[TOut]) -> None:
        self.request_type = request_type
        self.output = output

    async def __call__(self, request: TQuery) -> ItemsWithCursor[TOut]:
        return await self.fetch(request)


class FilterItems(_Paginated[Filter[Any], TOut]):
    """Filter with a structured filter, cursor and limit (`POST {base}/list`).

    The helpers take a Filter, e.g. `resource.filter.all(Filter(filter=f, limit=1000))`.
    """

    def __init__(self, filter_type: type[Any], output: type[TOut]) -> None:
        self.filter_type = filter_type
        self.output = output

    async def __call__(
        self, filter: Any, cursor: str | None = None, limit: int | None = None
    ) -> ItemsWithCursor[TOut]:
        return await self.fetch(Filter(filter=filter, cursor=cursor, limit=limit))


class Search(Capability, Generic[TIn, TQuery, TOut]):
    """Fuzzy search (`POST {base}/search`); returns one bounded page."""

    def __init__(self, filter_type: Any, search_type: Any, output: type[TOut]) -> None:
        self.filter_type = filter_type
        self.search_type = search_type
        self.output = output

    async def __call__(
        self, filter: Any = None, search: Any = None, limit: int | None = None
    ) -> list[TOut]:
        request = SearchRequest(filter=filter, search=search, limit=limit)
        response = await self.api_client.post(
            self.path("search"), request, ItemsWithoutCursor[self.output], idempotent=True
        )
        return response.items
