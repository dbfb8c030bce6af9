"""Time series and datapoint DTOs.

Datapoints travel either as JSON (the models in this module) or as protobuf
messages. The protobuf schema is not bundled; callers pass their compiled
message classes to the `*_proto` methods of the time series resource.
"""

from __future__ import annotations

from pydantic import Field

from .base import CdfModel
from .common import Range
from .filters import Partition, PartitionMixin
from .identity import Identity, IdentityKeyed, identity_of, matches_identity
from .patch import (
    Patch,
    UpdateList,
    UpdateMap,
    UpdateSet,
    UpdateSetNull,
    set_list,
    set_map,
    set_null,
    set_required,
)


class TimeSeries(CdfModel):
    id: int
    external_id: str | None = None
    name: str | None = None
    is_string: bool = False
    metadata: dict[str, str] | None = None
    unit: str | None = None
    asset_id: int | None = None
    is_step: bool = False
    description: str | None = None
    security_categories: list[int] | None = None
    created_time: int
    last_updated_time: int
    data_set_id: int | None = None

    @property
    def identity(self) -> Identity:
        return identity_of(self.id, self.external_id)


class AddTimeSeries(CdfModel):
    external_id: str | None = None
    name: str | None = None
    is_string: bool = False
    metadata: dict[str, str] | None = None
    unit: str | None = None
    asset_id: int | None = None
    is_step: bool = False
    description: str | None = None
    security_categories: list[int] | None = None
    data_set_id: int | None = None

    def matches(self, identity: Identity) -> bool:
        return matches_identity(identity, None, self.external_id)

    def to_patch(self, ignore_nulls: bool) -> PatchTimeSeries:
        return PatchTimeSeries(
            name=set_null(self.name, ignore_nulls),
            external_id=set_null(self.external_id, ignore_nulls),
            metadata=set_map(self.metadata, ignore_nulls),
            unit=set_null(self.unit, ignore_nulls),
            asset_id=set_null(self.asset_id, ignore_nulls),
            description=set_null(self.description, ignore_nulls),
            security_categories=set_list(self.security_categories, ignore_nulls),
            data_set_id=set_null(self.data_set_id, ignore_nulls),
            is_step=set_required(self.is_step),
        )


class PatchTimeSeries(CdfModel):
    name: UpdateSetNull[str] | None = None
    external_id: UpdateSetNull[str] | None = None
    metadata: UpdateMap[str, str] | None = None
    unit: UpdateSetNull[str] | None = None
    asset_id: UpdateSetNull[int] | None = None
    description: UpdateSetNull[str] | None = None
    security_categories: UpdateList[int, int] | None = None
    data_set_id: UpdateSetNull[int] | None = None
    is_step: UpdateSet[bool] | None = None


PatchTimeSeriesItem = Patch[PatchTimeSeries]


class TimeSeriesQuery(PartitionMixin, CdfModel):
    """Query parameters for `GET /timeseries`."""

    limit: int | None = None
    include_metadata: bool | None = None
    cursor: str | None = None
    partition: Partition | None = None
    asset_ids: list[int] | None = None
    root_asset_ids: list[int] | None = None
    external_id_prefix: str | None = None


class TimeSeriesFilter(CdfModel):
    name: str | None = None
    unit: str | None = None
    is_string: bool | None = None
    is_step: bool | None = None
    metadata: dict[str, str] | None = None
    asset_ids: list[int] | None = None
    asset_external_ids: list[str] | None = None
    root_asset_ids: list[int] | None = None
    asset_subtree_ids: list[Identity] | None = None
    data_set_ids: list[Identity] | None = None
    external_id_prefix: str | None = None
    created_time: Range[int] | None = None
    last_updated_time: Range[int] | None = None


class TimeSeriesSearch(CdfModel):
    name: str | None = None
    description: str | None = None
    query: str | None = None


class Datapoint(CdfModel):
    """Numeric or string datapoint; timestamps are milliseconds since epoch."""

    timestamp: int
    value: float | str


class AddDatapoints(IdentityKeyed):
    """Datapoints to insert into one time series, keyed by its identity."""

    datapoints: list[Datapoint] = Field(default_factory=list)


class DatapointsResponse(CdfModel):
    id: int
    external_id: str | None = None
    is_string: bool = False
    is_step: bool = False
    unit: str | None = None
    datapoints: list[Datapoint] = Field(default_factory=list)


class LatestDatapointsQuery(IdentityKeyed):
    """Latest datapoint before `before` (e.g. "now" or "2d-ago") for one time series."""

    before: str | None = None


class DeleteDatapointsQuery(IdentityKeyed):
    """Delete the datapoints of one time series in `[inclusive_begin, exclusive_end)`."""

    inclusive_begin: int
    exclusive_end: int | None = None


class DatapointsQuery(IdentityKeyed):
    """Per-series overrides inside a DatapointsFilter."""

    start: int | str | None = None
    end: int | str | None = None
    limit: int | None = None
    aggregates: list[str] | None = None
    granularity: str | None = None


class DatapointsFilter(CdfModel):
    """Body of `POST /timeseries/data/list`.

    Top-level `start`, `end` and `limit` apply to every item that does not set
    its own.
    """

    items: list[DatapointsQuery] = Field(default_factory=list)
    start: int | str | None = None
    end: int | str | None = None
    limit: int | None = None
    aggregates: list[str] | None = None
    granularity: str | None = None
    ignore_unknown_ids: bool | None = None
