"""Integration tests against the live Web Platform Status API."""

import os

import pytest

from baseline.webstatus import BaselineStatus, CancellationToken, Cancelled, RequestContext, q

pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_WEBSTATUS_NETWORK_TESTS") != "1",
    reason="Requires network access to query api.webstatus.dev",
)


class TestWebStatusLive:
    """Test shortcuts and traversal against the real endpoint."""

    @pytest.mark.asyncio
    async def test_first_page_shape(self, api):
        page = await api.fetch_page(q().by_status(BaselineStatus.WIDELY))

        assert len(page.records) > 0
        record = page.records[0]
        assert "feature_id" in record
        assert "name" in record

    @pytest.mark.asyncio
    async def test_traversal_crosses_pages(self, api):
        stream = api.pages(q().by_status(BaselineStatus.WIDELY))
        pages = [page async for page in stream]

        assert stream.pages_fetched >= 1
        ids = [r["feature_id"] for page in pages for r in page.records]
        assert len(ids) == len(set(ids))

    @pytest.mark.asyncio
    async def test_by_id(self, api):
        grid = await api.by_id("grid")

        assert grid is not None
        assert grid["feature_id"] == "grid"
        assert await api.by_id("no-such-feature-xyz") is None

    @pytest.mark.asyncio
    async def test_css_newly(self, api):
        records = await api.css(BaselineStatus.NEWLY)
        assert all(r.get("baseline", {}).get("status") == "newly" for r in records)

    @pytest.mark.asyncio
    async def test_cancel_stops_traversal(self, api):
        token = CancellationToken()
        stream = api.records("", RequestContext(cancellation=token))

        first = await stream.next()
        assert first is not None
        token.cancel()

        with pytest.raises(Cancelled):
            while await stream.next() is not None:
                pass
