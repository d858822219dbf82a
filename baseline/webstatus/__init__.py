"""Baseline Web Status - async client for the Web Platform Status API."""

from .api import WebStatusAPI, create_webstatus_api
from .core import (
    API_BASE_URL,
    AttemptTimeoutError,
    BackoffPolicy,
    BaselineStatus,
    CancellationToken,
    Cancelled,
    ClientConfig,
    FeatureGroup,
    FeatureQuery,
    HTTPError,
    MalformedResponse,
    PaginationError,
    QueryBuilder,
    QueryInput,
    RequestContext,
    RetryableHTTPError,
    RetryPolicy,
    TransportError,
    WebStatusError,
    normalize,
    q,
    quote_value,
)
from .models import (
    BaselineSummary,
    Feature,
    FeatureSupport,
    GroupCount,
    Page,
    Record,
    StatusCounts,
    Timeframe,
    TrendCounts,
)
from .runtime import (
    HTTPClient,
    HTTPResponse,
    PageStream,
    Paginator,
    RecordStream,
    RESTTransport,
    RetryingFetcher,
)
from .utils import DateRange, format_date, format_date_range

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Facade
    "WebStatusAPI",
    "create_webstatus_api",
    # Queries
    "q",
    "normalize",
    "quote_value",
    "QueryBuilder",
    "QueryInput",
    "FeatureQuery",
    "BaselineStatus",
    "FeatureGroup",
    # Configuration
    "API_BASE_URL",
    "ClientConfig",
    "RetryPolicy",
    "BackoffPolicy",
    "RequestContext",
    "CancellationToken",
    # Runtime
    "HTTPClient",
    "HTTPResponse",
    "RESTTransport",
    "RetryingFetcher",
    "Paginator",
    "PageStream",
    "RecordStream",
    # Models
    "Page",
    "Record",
    "Feature",
    "BaselineSummary",
    "StatusCounts",
    "TrendCounts",
    "Timeframe",
    "GroupCount",
    "FeatureSupport",
    "DateRange",
    "format_date",
    "format_date_range",
    # Errors
    "WebStatusError",
    "Cancelled",
    "AttemptTimeoutError",
    "HTTPError",
    "RetryableHTTPError",
    "TransportError",
    "MalformedResponse",
    "PaginationError",
]
