"""Query, filter and search request shapes.

Paginated requests expose `set_cursor` so the pagination engine can thread the
opaque cursor between pages, and partitionable requests expose
`with_partition`, which clones the request with the cursor reset.
"""

from __future__ import annotations

from typing import Any, Generic, Protocol, TypeVar, runtime_checkable

from pydantic import model_serializer, model_validator

from .base import CdfModel

T = TypeVar("T")
TFilter = TypeVar("TFilter")
TSearch = TypeVar("TSearch")


class Partition(CdfModel):
    """One of `count` disjoint partitions, numbered from 1. Wire form: "index/count"."""

    index: int
    count: int

    @model_validator(mode="before")
    @classmethod
    def _parse_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            index, _, count = data.partition("/")
            return {"index": int(index), "count": int(count)}
        return data

    @model_validator(mode="after")
    def _check_range(self) -> Partition:
        if self.count < 1 or not 1 <= self.index <= self.count:
            raise ValueError(f"Invalid partition {self.index}/{self.count}")
        return self

    @model_serializer
    def _serialize(self) -> str:
        return str(self)

    def __str__(self) -> str:
        return f"{self.index}/{self.count}"


@runtime_checkable
class SetCursor(Protocol):
    def set_cursor(self, cursor: str | None) -> None: ...


@runtime_checkable
class WithPartition(Protocol):
    def with_partition(self, partition: Partition) -> Any: ...


class CursorMixin:
    """set_cursor for models with a `cursor` field."""

    def set_cursor(self, cursor: str | None) -> None:
        self.cursor = cursor  # type: ignore[attr-defined]


class PartitionMixin(CursorMixin):
    """with_partition for models with `cursor` and `partition` fields."""

    def with_partition(self, partition: Partition) -> Any:
        return self.model_copy(update={"cursor": None, "partition": partition})  # type: ignore[attr-defined]


class LimitCursorQuery(CursorMixin, CdfModel):
    """Query parameters for simple `GET {base}` listings."""

    limit: int | None = None
    cursor: str | None = None


class LimitCursorPartitionQuery(PartitionMixin, CdfModel):
    limit: int | None = None
    cursor: str | None = None
    partition: Partition | None = None


class Filter(CursorMixin, CdfModel, Generic[TFilter]):
    """Body of `POST {base}/list`: a structured filter plus cursor and limit."""

    filter: TFilter
    cursor: str | None = None
    limit: int | None = None

    def with_partition(self, partition: Partition) -> PartitionedFilter[TFilter]:
        return PartitionedFilter(
            filter=self.filter, cursor=None, limit=self.limit, partition=partition
        )


class PartitionedFilter(PartitionMixin, Filter[TFilter], Generic[TFilter]):
    partition: Partition | None = None


class Search(CdfModel, Generic[TFilter, TSearch]):
    """Body of `POST {base}/search`: structural filter plus fuzzy search."""

    filter: TFilter | None = None
    search: TSearch | None = None
    limit: int | None = None
