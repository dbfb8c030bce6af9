"""Events resource.

Events store information about assets over a time period, such as alarms,
process data and logs.
"""

from __future__ import annotations

from ..models.events import (
    AddEvent,
    AggregatedEventsCountRequest,
    Event,
    EventCount,
    EventFilter,
    EventFilterQuery,
    EventSearch,
    PatchEventItem,
)
from ..models.identity import Identity
from ..models.items import ItemsWithoutCursor
from .base import Resource
from .capabilities import (
    Create,
    DeleteWithIgnoreUnknownIds,
    FilterWithRequest,
    RetrieveWithIgnoreUnknownIds,
    Search,
    Update,
    Upsert,
)


class EventsResource(Resource):
    base_path = "events"

    create = Create(AddEvent, Event)
    retrieve = RetrieveWithIgnoreUnknownIds(Identity, Event)
    update = Update(PatchEventItem, Event)
    upsert = Upsert()
    delete = DeleteWithIgnoreUnknownIds(Identity)
    search = Search(EventFilter, EventSearch, Event)
    filter = FilterWithRequest(EventFilterQuery, Event)

    async def aggregated_count(self, filter: EventFilter | None = None) -> int:
        """Count the events matching `filter` (0 when the API returns no bucket)."""
        response = await self.api_client.post(
            self.path("aggregate"),
            AggregatedEventsCountRequest(filter=filter or EventFilter()),
            ItemsWithoutCursor[EventCount],
            idempotent=True,
        )
        return response.items[0].count if response.items else 0
