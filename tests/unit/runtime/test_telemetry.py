"""Unit tests for fetch and traversal logging."""

import logging

import pytest
from fakes import FakeTransport, error_response, page_response

from baseline.webstatus.core import BackoffPolicy, ClientConfig, HTTPError, RetryPolicy
from baseline.webstatus.runtime import Paginator
from baseline.webstatus.runtime.rest import RetryingFetcher

LOGGER = "baseline.webstatus.runtime.telemetry"


@pytest.mark.asyncio
async def test_retry_and_completion_events(caplog):
    """Test a retried traversal emits structured events at the right levels."""
    transport = FakeTransport(error_response(503), page_response([{"feature_id": "a"}]))
    config = ClientConfig(
        retry=RetryPolicy(max_attempts=1, backoff=BackoffPolicy(base_ms=0, jitter=False))
    )
    paginator = Paginator(RetryingFetcher(transport, config))

    with caplog.at_level(logging.DEBUG, logger=LOGGER):
        await paginator.collect_records("group:css")

    ours = [r for r in caplog.records if r.name == LOGGER]
    events = [(r.levelno, r.getMessage()) for r in ours]
    assert events == [
        (logging.WARNING, "fetch_retry_scheduled"),
        (logging.DEBUG, "page_fetched"),
        (logging.INFO, "traversal_complete"),
    ]
    retry = next(r for r in ours if r.getMessage() == "fetch_retry_scheduled")
    assert retry.error_type == "RetryableHTTPError"
    assert retry.query == "group:css"
    done = ours[-1]
    assert (done.pages, done.records, done.reason) == (1, 1, "last_page")


@pytest.mark.asyncio
async def test_fatal_failure_logged_at_error(caplog):
    """Test a non-retryable status logs fetch_failed once."""
    transport = FakeTransport(error_response(400, "Bad Request"))
    fetcher = RetryingFetcher(transport, ClientConfig())

    with caplog.at_level(logging.DEBUG, logger=LOGGER), pytest.raises(HTTPError):
        await fetcher.fetch_page("bad::query")

    failed = [r for r in caplog.records if r.getMessage() == "fetch_failed"]
    assert len(failed) == 1
    assert failed[0].levelno == logging.ERROR
    assert failed[0].attempts == 1


@pytest.mark.asyncio
async def test_exhaustion_logs_each_retry_then_one_failure(caplog):
    """Test the final retryable failure raises without another backoff."""
    transport = FakeTransport(*[error_response(503)] * 3)
    config = ClientConfig(
        retry=RetryPolicy(max_attempts=2, backoff=BackoffPolicy(base_ms=0, jitter=False))
    )
    fetcher = RetryingFetcher(transport, config)

    with caplog.at_level(logging.DEBUG, logger=LOGGER), pytest.raises(HTTPError):
        await fetcher.fetch_page("")

    ours = [r for r in caplog.records if r.name == LOGGER]
    assert [r.getMessage() for r in ours] == [
        "fetch_retry_scheduled",
        "fetch_retry_scheduled",
        "fetch_failed",
    ]
    assert ours[-1].attempts == 3
    assert transport.call_count == 3
