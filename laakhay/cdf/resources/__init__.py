"""Resources and the capabilities they are composed from."""

from .assets import AssetsResource
from .base import Capability, Resource
from .capabilities import (
    Create,
    Delete,
    DeleteWithIgnoreUnknownIds,
    DeleteWithRequest,
    DeleteWithResponse,
    FilterItems,
    FilterWithRequest,
    List,
    Retrieve,
    RetrieveWithIgnoreUnknownIds,
    RetrieveWithRequest,
    Search,
    Update,
    Upsert,
    fetch_page,
    post_items,
)
from .events import EventsResource
from .files import FilesResource
from .labels import LabelsResource
from .spaces import SpacesResource
from .time_series import TimeSeriesResource

__all__ = [
    "Resource",
    "Capability",
    # Capabilities
    "Create",
    "Retrieve",
    "RetrieveWithIgnoreUnknownIds",
    "RetrieveWithRequest",
    "Update",
    "Upsert",
    "Delete",
    "DeleteWithIgnoreUnknownIds",
    "DeleteWithRequest",
    "DeleteWithResponse",
    "List",
    "FilterItems",
    "FilterWithRequest",
    "Search",
    "post_items",
    "fetch_page",
    # Resources
    "AssetsResource",
    "EventsResource",
    "TimeSeriesResource",
    "FilesResource",
    "LabelsResource",
    "SpacesResource",
]
