"""Runtime: HTTP transport, retrying fetcher and pagination."""

from .pagination import PageStream, Paginator, RecordStream
from .rest import HTTPClient, HTTPResponse, RESTTransport, RetryingFetcher

__all__ = [
    "HTTPClient",
    "HTTPResponse",
    "RESTTransport",
    "RetryingFetcher",
    "Paginator",
    "PageStream",
    "RecordStream",
]
