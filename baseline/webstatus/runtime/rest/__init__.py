"""REST runtime abstractions."""

from .fetcher import (
    AttemptFatal,
    AttemptOutcome,
    AttemptRetryable,
    AttemptSuccess,
    RetryingFetcher,
    build_params,
    compute_backoff_delay,
    is_retryable_status,
)
from .http_client import HTTPClient, HTTPResponse
from .transport import RESTTransport

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "RESTTransport",
    "RetryingFetcher",
    "AttemptOutcome",
    "AttemptSuccess",
    "AttemptRetryable",
    "AttemptFatal",
    "build_params",
    "compute_backoff_delay",
    "is_retryable_status",
]
