"""Structured logging for fetch and pagination operations.

This module provides telemetry hooks for the fetch engine, emitting
structured logs with event names as messages and context in ``extra``.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def log_page_fetched(
    *,
    query: str,
    page_token: str | None,
    records: int,
    attempt: int,
    latency_ms: float | None = None,
) -> None:
    """Log a successfully fetched page.

    Args:
        query: Filter string sent as ``q``
        page_token: Token the page was requested with (None for the first page)
        records: Number of records in the page
        attempt: Zero-based attempt that succeeded
        latency_ms: Latency of the successful attempt
    """
    logger.debug(
        "page_fetched",
        extra={
            "query": query,
            "page_token": page_token,
            "records": records,
            "attempt": attempt,
            "latency_ms": latency_ms,
        },
    )


def log_retry_scheduled(
    *,
    query: str,
    attempt: int,
    max_attempts: int,
    delay_ms: float,
    error_type: str,
    error_message: str,
) -> None:
    """Log a retryable failure and the backoff before the next attempt."""
    logger.warning(
        "fetch_retry_scheduled",
        extra={
            "query": query,
            "attempt": attempt,
            "max_attempts": max_attempts,
            "delay_ms": delay_ms,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_fetch_failed(
    *,
    query: str,
    attempts: int,
    error_type: str,
    error_message: str,
) -> None:
    """Log a page request that failed for good.

    Args:
        query: Filter string sent as ``q``
        attempts: Number of attempts made
        error_type: Exception class name
        error_message: Exception message
    """
    logger.error(
        "fetch_failed",
        extra={
            "query": query,
            "attempts": attempts,
            "error_type": error_type,
            "error_message": error_message,
        },
    )


def log_cancelled(*, query: str, stage: str) -> None:
    logger.info("fetch_cancelled", extra={"query": query, "stage": stage})


def log_traversal_complete(
    *,
    query: str,
    pages: int,
    records: int,
    reason: str,
) -> None:
    """Log the end of a traversal.

    Args:
        query: Filter string of the traversal
        pages: Pages fetched, including a terminating empty page
        records: Records yielded
        reason: "last_page" or "empty_page"
    """
    logger.info(
        "traversal_complete",
        extra={
            "query": query,
            "pages": pages,
            "records": records,
            "reason": reason,
        },
    )
