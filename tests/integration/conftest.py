"""Shared fixtures for integration tests."""

import os

import pytest
import pytest_asyncio

from baseline.webstatus import ClientConfig, WebStatusAPI

# Skip all integration tests unless RUN_WEBSTATUS_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_WEBSTATUS_NETWORK_TESTS") != "1",
    reason="Requires network access. Set RUN_WEBSTATUS_NETWORK_TESTS=1 to run",
)


@pytest_asyncio.fixture
async def api():
    """Live client honouring WEBSTATUS_* overrides."""
    async with WebStatusAPI(ClientConfig.from_env()) as client:
        yield client
