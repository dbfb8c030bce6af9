"""Time series resource and datapoint operations.

Architecture:
    Time series metadata uses the generic capabilities. Datapoints have their
    own endpoints under `timeseries/data` and travel either as JSON (the
    models in models/time_series.py) or as protobuf. The protobuf methods
    take caller-compiled message classes; no schema is bundled.

Endpoints:
    - POST timeseries/data           insert (JSON or protobuf body)
    - POST timeseries/data/list      retrieve (JSON or protobuf response)
    - POST timeseries/data/latest    latest datapoint before a time
    - POST timeseries/data/delete    delete a time range
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

from google.protobuf.message import Message

from ..core.exceptions import get_missing
from ..models.identity import Identity
from ..models.items import ItemsWithoutCursor
from ..models.time_series import (
    AddDatapoints,
    AddTimeSeries,
    DatapointsFilter,
    DatapointsResponse,
    DeleteDatapointsQuery,
    LatestDatapointsQuery,
    PatchTimeSeriesItem,
    TimeSeries,
    TimeSeriesFilter,
    TimeSeriesQuery,
    TimeSeriesSearch,
)
from .base import Resource
from .capabilities import (
    Create,
    DeleteWithIgnoreUnknownIds,
    FilterItems,
    List,
    RetrieveWithIgnoreUnknownIds,
    Search,
    Update,
    Upsert,
    post_items,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=Message)

TimeSeriesGenerator = Callable[[list[Identity]], Iterable[AddTimeSeries]]


class TimeSeriesResource(Resource):
    base_path = "timeseries"

    list = List(TimeSeriesQuery, TimeSeries)
    create = Create(AddTimeSeries, TimeSeries)
    filter = FilterItems(TimeSeriesFilter, TimeSeries)
    search = Search(TimeSeriesFilter, TimeSeriesSearch, TimeSeries)
    retrieve = RetrieveWithIgnoreUnknownIds(Identity, TimeSeries)
    update = Update(PatchTimeSeriesItem, TimeSeries)
    upsert = Upsert()
    delete = DeleteWithIgnoreUnknownIds(Identity)

    # Insert

    async def insert_datapoints(self, items: Sequence[AddDatapoints]) -> None:
        """Insert datapoints; existing datapoints with the same timestamp are overwritten."""
        await post_items(self.api_client, self.path("data"), items, None)

    async def insert_datapoints_proto(self, message: Message) -> None:
        """Insert datapoints from a protobuf `DataPointInsertionRequest` message."""
        await self.api_client.post_protobuf(self.path("data"), message, idempotent=True)

    async def insert_datapoints_ignore_missing(self, items: Sequence[AddDatapoints]) -> None:
        """Insert datapoints, dropping series the API reports as missing and retrying once."""
        try:
            await self.insert_datapoints(items)
        except Exception as e:
            missing = get_missing(e)
            if not missing:
                raise
            remaining = [item for item in items if not any(item.matches(m) for m in missing)]
            logger.info(
                "datapoints_missing_series",
                extra={"missing": len(missing), "remaining": len(remaining)},
            )
            if remaining:
                await self.insert_datapoints(remaining)

    async def insert_datapoints_create_missing(
        self, items: Sequence[AddDatapoints], generator: TimeSeriesGenerator
    ) -> None:
        """Insert datapoints, creating any missing time series first.

        `generator` receives the missing identities and returns the time
        series to create for them, e.g.

            lambda ids: [AddTimeSeries(external_id=i.external_id) for i in ids]
        """
        try:
            await self.insert_datapoints(items)
        except Exception as e:
            missing = get_missing(e)
            if not missing:
                raise
            await self.create(list(generator(missing)))
            await self.insert_datapoints(items)

    # Retrieve

    async def retrieve_datapoints(self, filter: DatapointsFilter) -> list[DatapointsResponse]:
        response = await self.api_client.post(
            self.path("data/list"),
            filter,
            ItemsWithoutCursor[DatapointsResponse],
            idempotent=True,
        )
        return response.items

    async def retrieve_datapoints_proto(self, filter: DatapointsFilter, message_type: type[M]) -> M:
        """Retrieve datapoints decoded into `message_type` (a `DataPointListResponse`)."""
        return await self.api_client.post_expect_protobuf(self.path("data/list"), filter, message_type)

    async def retrieve_latest_datapoints(
        self, items: Sequence[LatestDatapointsQuery], ignore_unknown_ids: bool = False
    ) -> list[DatapointsResponse]:
        return await post_items(
            self.api_client,
            self.path("data/latest"),
            items,
            DatapointsResponse,
            ignore_unknown_ids=ignore_unknown_ids,
        )

    # Delete

    async def delete_datapoints(self, items: Sequence[DeleteDatapointsQuery]) -> None:
        await post_items(self.api_client, self.path("data/delete"), items, None)
