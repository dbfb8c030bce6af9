"""Shared fixtures for integration tests.

These run against a live project configured through the COGNITE_* environment
variables (see CdfClient.from_env).
"""

import os

import pytest
import pytest_asyncio

from laakhay.cdf import CdfClient

# Skip all integration tests unless RUN_LAAKHAY_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_LAAKHAY_NETWORK_TESTS") != "1",
    reason="Requires network access. Set RUN_LAAKHAY_NETWORK_TESTS=1 to run",
)


@pytest_asyncio.fixture
async def live_client():
    async with CdfClient.from_env("laakhay-cdf-integration-tests") as client:
        yield client
