"""Single-page fetch with per-attempt timeout, retry and backoff.

Architecture:
    Each attempt races the HTTP request against a per-attempt timer and the
    caller's cancellation token, then classifies what happened into an
    explicit outcome value. The retry loop only inspects outcomes:

    - AttemptSuccess: return the page
    - AttemptRetryable: back off and try again while attempts remain
    - AttemptFatal: raise immediately

Retry Classification:
    - Timeout, connection failure, 429 and 5xx are retryable
    - Other non-2xx statuses, unparseable 2xx bodies and cancellation are fatal
    - Exhausting the budget raises the last retryable error

See Also:
    - RetryPolicy / BackoffPolicy: Budget and delay schedule
    - Paginator: Drives fetch_page across continuation tokens
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Mapping
from dataclasses import dataclass
from time import perf_counter
from typing import Any, Union

from pydantic import ValidationError

from ...core.cancellation import CancellationToken
from ...core.config import BackoffPolicy, ClientConfig, RequestContext
from ...core.exceptions import (
    AttemptTimeoutError,
    Cancelled,
    HTTPError,
    MalformedResponse,
    RetryableHTTPError,
    TransportError,
    WebStatusError,
)
from ...models.page import Page
from ..telemetry import log_cancelled, log_fetch_failed, log_page_fetched, log_retry_scheduled
from .http_client import HTTPResponse
from .transport import RESTTransport

JITTER_RATIO = 0.2
# Cap on the body kept on errors, enough for any API error document
MAX_ERROR_BODY = 4096


@dataclass(frozen=True)
class AttemptSuccess:
    page: Page


@dataclass(frozen=True)
class AttemptRetryable:
    error: WebStatusError


@dataclass(frozen=True)
class AttemptFatal:
    error: WebStatusError


AttemptOutcome = Union[AttemptSuccess, AttemptRetryable, AttemptFatal]


def is_retryable_status(status: int) -> bool:
    return status == 429 or 500 <= status <= 599


def compute_backoff_delay(
    policy: BackoffPolicy,
    attempt: int,
    rng: random.Random | None = None,
) -> float:
    """Delay in milliseconds before the attempt following ``attempt``.

    ``min(max_ms, base_ms * factor ** attempt)``, minus a random amount in
    ``[0, 0.2 * delay]`` when jitter is enabled. Never negative.
    """
    try:
        raw = policy.base_ms * policy.factor**attempt
    except OverflowError:
        raw = policy.max_ms
    delay = min(policy.max_ms, raw)
    if policy.jitter and delay > 0:
        delay -= (rng or random).uniform(0, JITTER_RATIO * delay)
    return max(0.0, delay)


def build_params(filter_string: str, continuation_token: str | None = None) -> dict[str, str]:
    """Query parameters for one page request; ``q`` is always sent."""
    params = {"q": filter_string}
    if continuation_token:
        params["page_token"] = continuation_token
    return params


def _discard(task: asyncio.Future[Any]) -> None:
    """Stop a task whose result is no longer wanted."""
    if not task.done():
        task.cancel()
    elif not task.cancelled():
        # Mark a late exception as retrieved
        task.exception()


class RetryingFetcher:
    """Fetch one page of results, hiding transient failures from the caller."""

    def __init__(
        self,
        transport: RESTTransport,
        config: ClientConfig | None = None,
        *,
        rng: random.Random | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            transport: HTTP transport shared across calls
            config: Client configuration (defaults to ClientConfig())
            rng: Random source for jitter (seed it for reproducible delays)
        """
        self._transport = transport
        self._config = config or ClientConfig()
        self._rng = rng

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def fetch_page(
        self,
        filter_string: str,
        continuation_token: str | None = None,
        context: RequestContext | None = None,
    ) -> Page:
        """Fetch the page for ``filter_string`` at ``continuation_token``.

        Raises:
            Cancelled: The context's cancellation token fired
            HTTPError: Non-retryable status
            RetryableHTTPError: 429/5xx on every attempt
            AttemptTimeoutError: Last attempt timed out
            TransportError: Last attempt failed to connect
            MalformedResponse: 2xx body is not a page
        """
        ctx = context or RequestContext()
        policy = ctx.resolve_retry(self._config.retry)
        params = build_params(filter_string, continuation_token)
        headers = ctx.resolve_headers(self._config.headers)

        attempt = 0
        while True:
            if ctx.cancelled:
                log_cancelled(query=filter_string, stage="before_attempt")
                raise Cancelled("Request cancelled by caller")

            started = perf_counter()
            outcome = await self._attempt(
                params, headers, policy.per_attempt_timeout_ms, ctx.cancellation
            )

            if isinstance(outcome, AttemptSuccess):
                log_page_fetched(
                    query=filter_string,
                    page_token=continuation_token,
                    records=len(outcome.page.records),
                    attempt=attempt,
                    latency_ms=(perf_counter() - started) * 1000.0,
                )
                return outcome.page

            if isinstance(outcome, AttemptFatal):
                if isinstance(outcome.error, Cancelled):
                    log_cancelled(query=filter_string, stage="in_flight")
                else:
                    log_fetch_failed(
                        query=filter_string,
                        attempts=attempt + 1,
                        error_type=type(outcome.error).__name__,
                        error_message=str(outcome.error),
                    )
                raise outcome.error

            error = outcome.error
            if attempt >= policy.max_attempts:
                log_fetch_failed(
                    query=filter_string,
                    attempts=policy.total_attempts,
                    error_type=type(error).__name__,
                    error_message=str(error),
                )
                raise error

            delay_ms = compute_backoff_delay(policy.backoff, attempt, self._rng)
            log_retry_scheduled(
                query=filter_string,
                attempt=attempt,
                max_attempts=policy.max_attempts,
                delay_ms=delay_ms,
                error_type=type(error).__name__,
                error_message=str(error),
            )
            await self._backoff(delay_ms, ctx.cancellation, filter_string)
            attempt += 1

    async def _attempt(
        self,
        params: Mapping[str, str],
        headers: Mapping[str, str],
        timeout_ms: int,
        cancellation: CancellationToken | None,
    ) -> AttemptOutcome:
        request = asyncio.ensure_future(
            self._transport.get(self._config.base_url, params=params, headers=headers)
        )
        waiters: set[asyncio.Future[Any]] = {request}
        cancel_waiter: asyncio.Future[Any] | None = None
        if cancellation is not None:
            cancel_waiter = asyncio.ensure_future(cancellation.wait())
            waiters.add(cancel_waiter)

        try:
            done, _ = await asyncio.wait(
                waiters, timeout=timeout_ms / 1000.0, return_when=asyncio.FIRST_COMPLETED
            )
        except BaseException:
            _discard(request)
            raise
        finally:
            if cancel_waiter is not None:
                _discard(cancel_waiter)

        # Cancellation wins any tie with a completed request
        if cancellation is not None and cancellation.cancelled:
            _discard(request)
            return AttemptFatal(Cancelled("Request cancelled by caller"))

        if request not in done:
            _discard(request)
            return AttemptRetryable(
                AttemptTimeoutError(f"Attempt timed out after {timeout_ms} ms", timeout_ms)
            )

        try:
            response = request.result()
        except (AttemptTimeoutError, TransportError) as e:
            return AttemptRetryable(e)
        except OSError as e:
            error = TransportError(f"Connection failed: {e}")
            error.__cause__ = e
            return AttemptRetryable(error)

        return self._classify(response)

    def _classify(self, response: HTTPResponse) -> AttemptOutcome:
        if response.ok:
            try:
                return AttemptSuccess(Page.from_payload(response.json()))
            except (ValueError, ValidationError) as e:
                error = MalformedResponse(
                    f"Response body is not a valid page: {e}",
                    body=response.body[:MAX_ERROR_BODY],
                )
                error.__cause__ = e
                return AttemptFatal(error)

        body = response.body[:MAX_ERROR_BODY] or None
        message = f"HTTP {response.status}"
        if response.reason:
            message = f"{message} {response.reason}"

        if is_retryable_status(response.status):
            return AttemptRetryable(
                RetryableHTTPError(
                    message, status_code=response.status, reason=response.reason, body=body
                )
            )
        return AttemptFatal(
            HTTPError(message, status_code=response.status, reason=response.reason, body=body)
        )

    async def _backoff(
        self,
        delay_ms: float,
        cancellation: CancellationToken | None,
        filter_string: str,
    ) -> None:
        if cancellation is None:
            await asyncio.sleep(delay_ms / 1000.0)
            return
        try:
            await asyncio.wait_for(cancellation.wait(), timeout=delay_ms / 1000.0)
        except asyncio.TimeoutError:
            return
        log_cancelled(query=filter_string, stage="backoff")
        raise Cancelled("Request cancelled by caller during backoff")
