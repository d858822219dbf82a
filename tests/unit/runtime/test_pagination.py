"""Unit tests for PageStream, RecordStream and Paginator.

Tests drive traversals through a scripted transport and check the request
sequence as well as what the caller sees.
"""

import asyncio

import pytest
from fakes import FakeTransport, error_response, page_response, slow

from baseline.webstatus.core import (
    BackoffPolicy,
    CancellationToken,
    Cancelled,
    ClientConfig,
    HTTPError,
    PaginationError,
    RequestContext,
    RetryPolicy,
)
from baseline.webstatus.runtime import PageStream, Paginator, RecordStream
from baseline.webstatus.runtime.rest import RetryingFetcher


def _paginator(transport: FakeTransport) -> Paginator:
    config = ClientConfig(
        retry=RetryPolicy(
            max_attempts=2,
            per_attempt_timeout_ms=1_000,
            backoff=BackoffPolicy(base_ms=0, jitter=False),
        )
    )
    return Paginator(RetryingFetcher(transport, config))


A, B, C = {"feature_id": "a"}, {"feature_id": "b"}, {"feature_id": "c"}


class TestPageStream:
    """Test page-level traversal."""

    @pytest.mark.asyncio
    async def test_follows_tokens_until_last_page(self):
        transport = FakeTransport(page_response([A, B], next_token="t1"), page_response([C]))
        stream = _paginator(transport).pages("group:css")

        pages = [page async for page in stream]

        assert [p.records for p in pages] == [[A, B], [C]]
        assert transport.tokens == [None, "t1"]
        assert all(call["params"]["q"] == "group:css" for call in transport.calls)
        assert stream.finished
        assert stream.pages_fetched == 2
        assert stream.records_yielded == 3

    @pytest.mark.asyncio
    async def test_next_returns_none_after_end(self):
        transport = FakeTransport(page_response([A]))
        stream = _paginator(transport).pages("")

        first = await stream.next()
        assert first is not None and first.records == [A]
        assert await stream.next() is None
        assert await stream.next() is None
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_empty_page_with_token_terminates(self):
        transport = FakeTransport(page_response([A], next_token="t1"), page_response([], next_token="t2"))
        pages = await _paginator(transport).pages("").collect()

        assert [p.records for p in pages] == [[A]]
        assert transport.call_count == 2

    @pytest.mark.asyncio
    async def test_empty_first_page_yields_nothing(self):
        transport = FakeTransport(page_response([]))
        assert await _paginator(transport).pages("id:none").collect() == []

    @pytest.mark.asyncio
    async def test_repeated_token_raises(self):
        transport = FakeTransport(
            page_response([A], next_token="t1"),
            page_response([B], next_token="t2"),
            page_response([C], next_token="t1"),
        )
        stream = _paginator(transport).pages("")

        assert (await stream.next()).records == [A]
        assert (await stream.next()).records == [B]
        with pytest.raises(PaginationError) as exc_info:
            await stream.next()

        assert exc_info.value.token == "t1"
        assert transport.call_count == 3
        assert await stream.next() is None

    @pytest.mark.asyncio
    async def test_fetch_error_ends_stream(self):
        transport = FakeTransport(page_response([A], next_token="t1"), error_response(404, "Not Found"))
        stream = _paginator(transport).pages("")

        await stream.next()
        with pytest.raises(HTTPError):
            await stream.next()

        assert stream.finished
        assert await stream.next() is None
        assert transport.call_count == 2

    @pytest.mark.asyncio
    async def test_cannot_restart(self):
        transport = FakeTransport(page_response([A]))
        stream = _paginator(transport).pages("")

        async for _ in stream:
            pass

        with pytest.raises(RuntimeError):
            async for _ in stream:
                pass

    @pytest.mark.asyncio
    async def test_cannot_iterate_after_next(self):
        transport = FakeTransport(page_response([A], next_token="t1"))
        stream = _paginator(transport).pages("")
        await stream.next()

        with pytest.raises(RuntimeError):
            stream.__aiter__()

    @pytest.mark.asyncio
    async def test_lazy_until_pulled(self):
        transport = FakeTransport()
        stream = _paginator(transport).pages("group:css")

        assert isinstance(stream, PageStream)
        assert not stream.started
        assert transport.call_count == 0


class TestRecordStream:
    """Test record-level traversal."""

    @pytest.mark.asyncio
    async def test_flattens_in_order(self):
        transport = FakeTransport(page_response([A, B], next_token="t1"), page_response([C]))
        records = await _paginator(transport).records("").collect()

        assert records == [A, B, C]
        assert transport.call_count == 2

    @pytest.mark.asyncio
    async def test_next_page_requested_only_when_buffer_empty(self):
        transport = FakeTransport(page_response([A, B], next_token="t1"), page_response([C]))
        stream = _paginator(transport).records("")

        assert await stream.next() == A
        assert await stream.next() == B
        assert transport.call_count == 1
        assert await stream.next() == C
        assert transport.call_count == 2
        assert await stream.next() is None

    @pytest.mark.asyncio
    async def test_cancel_between_pages(self):
        token = CancellationToken()
        transport = FakeTransport(page_response([A, B], next_token="t1"), page_response([C]))
        stream = _paginator(transport).records("", RequestContext(cancellation=token))

        seen = []
        with pytest.raises(Cancelled):
            async for record in stream:
                seen.append(record)
                if len(seen) == 2:
                    token.cancel()

        assert seen == [A, B]
        assert transport.call_count == 1

    @pytest.mark.asyncio
    async def test_cancel_in_flight(self):
        token = CancellationToken()
        transport = FakeTransport(page_response([A], next_token="t1"), slow(page_response([B]), 5.0))
        stream = _paginator(transport).records("", RequestContext(cancellation=token))

        assert await stream.next() == A
        pending = asyncio.create_task(stream.next())
        await asyncio.sleep(0.01)
        token.cancel("user navigated away")

        with pytest.raises(Cancelled):
            await asyncio.wait_for(pending, timeout=1.0)
        assert transport.call_count == 2

    @pytest.mark.asyncio
    async def test_collect_fails_as_a_whole(self):
        transport = FakeTransport(
            page_response([A], next_token="t1"),
            error_response(503), error_response(503), error_response(503),
        )

        with pytest.raises(HTTPError):
            await _paginator(transport).collect_records("")

        assert transport.call_count == 4

    @pytest.mark.asyncio
    async def test_cannot_restart(self):
        transport = FakeTransport(page_response([A]))
        stream = _paginator(transport).records("")
        await stream.collect()

        assert isinstance(stream, RecordStream)
        with pytest.raises(RuntimeError):
            async for _ in stream:
                pass
