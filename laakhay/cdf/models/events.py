"""Event DTOs."""

from __future__ import annotations

from .base import CdfModel
from .common import Range
from .filters import Partition, PartitionMixin
from .identity import Identity, identity_of, matches_identity
from .patch import (
    Patch,
    UpdateList,
    UpdateMap,
    UpdateSetNull,
    set_list,
    set_map,
    set_null,
)


class Event(CdfModel):
    """Information about a set of assets over a period of time."""

    id: int
    external_id: str | None = None
    data_set_id: int | None = None
    start_time: int | None = None
    end_time: int | None = None
    type: str | None = None
    subtype: str | None = None
    description: str | None = None
    metadata: dict[str, str] | None = None
    asset_ids: list[int] | None = None
    source: str | None = None
    created_time: int | None = None
    last_updated_time: int | None = None

    @property
    def identity(self) -> Identity:
        return identity_of(self.id, self.external_id)


class AddEvent(CdfModel):
    external_id: str | None = None
    data_set_id: int | None = None
    start_time: int | None = None
    end_time: int | None = None
    type: str | None = None
    subtype: str | None = None
    description: str | None = None
    metadata: dict[str, str] | None = None
    asset_ids: list[int] | None = None
    source: str | None = None

    def matches(self, identity: Identity) -> bool:
        return matches_identity(identity, None, self.external_id)

    def to_patch(self, ignore_nulls: bool) -> PatchEvent:
        return PatchEvent(
            external_id=set_null(self.external_id, ignore_nulls),
            data_set_id=set_null(self.data_set_id, ignore_nulls),
            start_time=set_null(self.start_time, ignore_nulls),
            end_time=set_null(self.end_time, ignore_nulls),
            type=set_null(self.type, ignore_nulls),
            subtype=set_null(self.subtype, ignore_nulls),
            description=set_null(self.description, ignore_nulls),
            metadata=set_map(self.metadata, ignore_nulls),
            asset_ids=set_list(self.asset_ids, ignore_nulls),
            source=set_null(self.source, ignore_nulls),
        )


class PatchEvent(CdfModel):
    external_id: UpdateSetNull[str] | None = None
    data_set_id: UpdateSetNull[int] | None = None
    start_time: UpdateSetNull[int] | None = None
    end_time: UpdateSetNull[int] | None = None
    type: UpdateSetNull[str] | None = None
    subtype: UpdateSetNull[str] | None = None
    description: UpdateSetNull[str] | None = None
    metadata: UpdateMap[str, str] | None = None
    asset_ids: UpdateList[int, int] | None = None
    source: UpdateSetNull[str] | None = None


PatchEventItem = Patch[PatchEvent]


class EventFilter(CdfModel):
    start_time: Range[int] | None = None
    end_time: Range[int] | None = None
    active_at_time: Range[int] | None = None
    metadata: dict[str, str] | None = None
    asset_ids: list[int] | None = None
    asset_external_ids: list[str] | None = None
    asset_subtree_ids: list[Identity] | None = None
    source: str | None = None
    created_time: Range[int] | None = None
    last_updated_time: Range[int] | None = None
    external_id_prefix: str | None = None
    type: str | None = None
    subtype: str | None = None
    data_set_ids: list[Identity] | None = None


class EventFilterQuery(PartitionMixin, CdfModel):
    """Body of `POST /events/list`."""

    filter: EventFilter | None = None
    limit: int | None = None
    sort: list[str] | None = None
    cursor: str | None = None
    partition: Partition | None = None


class EventSearch(CdfModel):
    description: str | None = None


class EventCount(CdfModel):
    count: int


class AggregatedEventsCountRequest(CdfModel):
    filter: EventFilter | None = None
