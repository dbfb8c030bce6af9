"""Data models for API requests and responses.

Architecture:
    This module exports the Pydantic v2 models used throughout the library.
    Generic shapes (identities, envelopes, patches, queries) are shared by
    every resource; the per-resource DTOs build on them.

Design Decisions:
    - Pydantic v2: Validation on decode, alias-driven camelCase wire form
    - None means "not specified" and is never sent on the wire
    - Identity keys are frozen so they can be used in sets and dict keys

Model Categories:
    - Keys: Identity, CogniteId, CogniteExternalId
    - Envelopes: Items, ItemsWithCursor, ItemsWithIgnoreUnknownIds
    - Patches: UpdateSet, UpdateSetNull, UpdateList, UpdateMap, Patch
    - Queries: Partition, Filter, PartitionedFilter, Search, LimitCursorQuery
    - Resources: assets, events, time series, files, labels, spaces
"""

from .assets import (
    AddAsset,
    Asset,
    AssetFilter,
    AssetQuery,
    AssetSearch,
    DeleteAssetsRequest,
    FilterAssetsRequest,
    PatchAsset,
    PatchAssetItem,
    RetrieveAssetsRequest,
)
from .base import CdfModel, to_params, to_payload
from .common import LabelsFilter, Range
from .events import (
    AddEvent,
    Event,
    EventFilter,
    EventFilterQuery,
    EventSearch,
    PatchEvent,
    PatchEventItem,
)
from .files import (
    AddFile,
    FileDownloadUrl,
    FileFilter,
    FileMetadata,
    FileSearch,
    PatchFile,
    PatchFileItem,
)
from .filters import (
    Filter,
    LimitCursorPartitionQuery,
    LimitCursorQuery,
    Partition,
    PartitionedFilter,
    Search,
    SetCursor,
    WithPartition,
)
from .identity import (
    CogniteExternalId,
    CogniteId,
    EqIdentity,
    Identity,
    IdentityKeyed,
    identity_of,
)
from .items import Items, ItemsWithCursor, ItemsWithIgnoreUnknownIds, ItemsWithoutCursor
from .labels import AddLabel, Label, LabelFilter
from .patch import (
    IntoPatch,
    Patch,
    UpdateList,
    UpdateMap,
    UpdateSet,
    UpdateSetNull,
)
from .spaces import Space, SpaceCreate, SpaceId
from .time_series import (
    AddDatapoints,
    AddTimeSeries,
    Datapoint,
    DatapointsFilter,
    DatapointsQuery,
    DatapointsResponse,
    DeleteDatapointsQuery,
    LatestDatapointsQuery,
    PatchTimeSeries,
    PatchTimeSeriesItem,
    TimeSeries,
    TimeSeriesFilter,
    TimeSeriesQuery,
    TimeSeriesSearch,
)

__all__ = [
    "CdfModel",
    "to_payload",
    "to_params",
    # Keys
    "Identity",
    "IdentityKeyed",
    "CogniteId",
    "CogniteExternalId",
    "EqIdentity",
    "identity_of",
    # Envelopes
    "Items",
    "ItemsWithoutCursor",
    "ItemsWithCursor",
    "ItemsWithIgnoreUnknownIds",
    # Patches
    "UpdateSet",
    "UpdateSetNull",
    "UpdateList",
    "UpdateMap",
    "Patch",
    "IntoPatch",
    # Queries
    "Partition",
    "Filter",
    "PartitionedFilter",
    "Search",
    "LimitCursorQuery",
    "LimitCursorPartitionQuery",
    "SetCursor",
    "WithPartition",
    "Range",
    "LabelsFilter",
    # Assets
    "Asset",
    "AddAsset",
    "PatchAsset",
    "PatchAssetItem",
    "AssetFilter",
    "AssetSearch",
    "AssetQuery",
    "FilterAssetsRequest",
    "RetrieveAssetsRequest",
    "DeleteAssetsRequest",
    # Events
    "Event",
    "AddEvent",
    "PatchEvent",
    "PatchEventItem",
    "EventFilter",
    "EventFilterQuery",
    "EventSearch",
    # Time series
    "TimeSeries",
    "AddTimeSeries",
    "PatchTimeSeries",
    "PatchTimeSeriesItem",
    "TimeSeriesQuery",
    "TimeSeriesFilter",
    "TimeSeriesSearch",
    "Datapoint",
    "AddDatapoints",
    "DatapointsFilter",
    "DatapointsQuery",
    "DatapointsResponse",
    "LatestDatapointsQuery",
    "DeleteDatapointsQuery",
    # Files
    "FileMetadata",
    "AddFile",
    "PatchFile",
    "PatchFileItem",
    "FileFilter",
    "FileSearch",
    "FileDownloadUrl",
    # Labels
    "Label",
    "AddLabel",
    "LabelFilter",
    # Spaces
    "Space",
    "SpaceCreate",
    "SpaceId",
]
