"""Integration tests for listing and streaming against a live project."""

import os

import pytest

from laakhay.cdf.models import AssetQuery, EventFilter, FilterAssetsRequest, LabelFilter

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        os.environ.get("RUN_LAAKHAY_NETWORK_TESTS") != "1",
        reason="Requires network access and COGNITE_* credentials",
    ),
]


class TestLiveListing:
    """Read-only checks that need no fixtures in the project."""

    @pytest.mark.asyncio
    async def test_list_one_page(self, live_client):
        page = await live_client.assets.list(AssetQuery(limit=5))
        assert len(page.items) <= 5

    @pytest.mark.asyncio
    async def test_stream_respects_page_size(self, live_client):
        count = 0
        async for _ in live_client.assets.list.stream(AssetQuery(limit=2)):
            count += 1
            if count >= 5:
                break
        assert count <= 5

    @pytest.mark.asyncio
    async def test_partitioned_filter_has_no_duplicates(self, live_client):
        assets = await live_client.assets.filter.partitioned(FilterAssetsRequest(limit=100), 3)
        assert len({asset.id for asset in assets}) == len(assets)

    @pytest.mark.asyncio
    async def test_labels_page(self, live_client):
        page = await live_client.labels.filter(LabelFilter(), limit=10)
        assert len(page.items) <= 10

    @pytest.mark.asyncio
    async def test_event_count(self, live_client):
        assert await live_client.events.aggregated_count(EventFilter()) >= 0
