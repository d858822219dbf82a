"""Core components."""

from .cancellation import CancellationToken
from .config import (
    API_BASE_URL,
    BackoffPolicy,
    ClientConfig,
    RequestContext,
    RetryPolicy,
)
from .enums import BaselineStatus, FeatureGroup
from .exceptions import (
    AttemptTimeoutError,
    Cancelled,
    HTTPError,
    MalformedResponse,
    PaginationError,
    RetryableHTTPError,
    TransportError,
    WebStatusError,
)
from .query import FeatureQuery, QueryBuilder, QueryInput, normalize, q, quote_value

__all__ = [
    "API_BASE_URL",
    "BaselineStatus",
    "FeatureGroup",
    # Configuration
    "BackoffPolicy",
    "RetryPolicy",
    "ClientConfig",
    "RequestContext",
    "CancellationToken",
    # Errors
    "WebStatusError",
    "Cancelled",
    "AttemptTimeoutError",
    "HTTPError",
    "RetryableHTTPError",
    "TransportError",
    "MalformedResponse",
    "PaginationError",
    # Queries
    "FeatureQuery",
    "QueryBuilder",
    "QueryInput",
    "normalize",
    "q",
    "quote_value",
]
