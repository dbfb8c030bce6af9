"""Asset DTOs.

Assets represent objects or groups of objects from the physical world,
organized in hierarchies.
"""

from __future__ import annotations

from pydantic import Field

from .base import CdfModel
from .common import LabelsFilter, Range
from .filters import Partition, PartitionMixin
from .identity import CogniteExternalId, Identity, identity_of, matches_identity
from .items import ItemsWithIgnoreUnknownIds
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


class AssetAggregate(CdfModel):
    child_count: int | None = None
    depth: int | None = None
    path: list[dict[str, int]] | None = None


class Asset(CdfModel):
    id: int
    name: str
    external_id: str | None = None
    parent_id: int | None = None
    parent_external_id: str | None = None
    description: str | None = None
    metadata: dict[str, str] | None = None
    source: str | None = None
    created_time: int
    last_updated_time: int
    root_id: int | None = None
    aggregates: AssetAggregate | None = None
    data_set_id: int | None = None
    labels: list[CogniteExternalId] | None = None

    @property
    def identity(self) -> Identity:
        return identity_of(self.id, self.external_id)


class AddAsset(CdfModel):
    name: str
    external_id: str | None = None
    parent_id: int | None = None
    parent_external_id: str | None = None
    description: str | None = None
    metadata: dict[str, str] | None = None
    source: str | None = None
    data_set_id: int | None = None
    labels: list[CogniteExternalId] | None = None

    def matches(self, identity: Identity) -> bool:
        return matches_identity(identity, None, self.external_id)

    def to_patch(self, ignore_nulls: bool) -> PatchAsset:
        return PatchAsset(
            external_id=set_null(self.external_id, ignore_nulls),
            name=set_required(self.name),
            description=set_null(self.description, ignore_nulls),
            data_set_id=set_null(self.data_set_id, ignore_nulls),
            metadata=set_map(self.metadata, ignore_nulls),
            source=set_null(self.source, ignore_nulls),
            parent_id=set_required(self.parent_id),
            parent_external_id=set_required(self.parent_external_id),
            labels=set_list(self.labels, ignore_nulls),
        )


class PatchAsset(CdfModel):
    external_id: UpdateSetNull[str] | None = None
    name: UpdateSet[str] | None = None
    description: UpdateSetNull[str] | None = None
    data_set_id: UpdateSetNull[int] | None = None
    metadata: UpdateMap[str, str] | None = None
    source: UpdateSetNull[str] | None = None
    parent_id: UpdateSet[int] | None = None
    parent_external_id: UpdateSet[str] | None = None
    labels: UpdateList[CogniteExternalId, CogniteExternalId] | None = None


PatchAssetItem = Patch[PatchAsset]


class AssetFilter(CdfModel):
    name: str | None = None
    parent_ids: list[int] | None = None
    parent_external_ids: list[str] | None = None
    root_ids: list[Identity] | None = None
    asset_subtree_ids: list[Identity] | None = None
    data_set_ids: list[Identity] | None = None
    metadata: dict[str, str] | None = None
    source: str | None = None
    created_time: Range[int] | None = None
    last_updated_time: Range[int] | None = None
    external_id_prefix: str | None = None
    root: bool | None = None
    labels: LabelsFilter | None = None


class AssetSearch(CdfModel):
    name: str | None = None
    description: str | None = None
    query: str | None = None


class AssetQuery(PartitionMixin, CdfModel):
    """Query parameters for `GET /assets`."""

    limit: int | None = None
    cursor: str | None = None
    include_metadata: bool | None = None
    name: str | None = None
    source: str | None = None
    root: bool | None = None
    min_created_time: int | None = None
    max_created_time: int | None = None
    external_id_prefix: str | None = None
    partition: Partition | None = None


class FilterAssetsRequest(PartitionMixin, CdfModel):
    """Body of `POST /assets/list`."""

    filter: AssetFilter | None = None
    limit: int | None = None
    cursor: str | None = None
    aggregated_properties: list[str] | None = None
    partition: Partition | None = None


class RetrieveAssetsRequest(ItemsWithIgnoreUnknownIds[Identity]):
    aggregated_properties: list[str] | None = None


class DeleteAssetsRequest(ItemsWithIgnoreUnknownIds[Identity]):
    recursive: bool = Field(default=False)
