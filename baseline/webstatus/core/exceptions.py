"""Custom exception hierarchy."""

from __future__ import annotations


class WebStatusError(Exception):
    """Base exception for all library errors."""

    pass


class Cancelled(WebStatusError):
    """The caller cancelled the operation.

    Never retried. Raised as soon as the caller's cancellation token fires,
    whether a request is in flight or the fetcher is sleeping between attempts.
    """

    pass


class AttemptTimeoutError(WebStatusError, TimeoutError):
    """A single attempt exceeded its per-attempt budget."""

    def __init__(self, message: str, timeout_ms: int) -> None:
        super().__init__(message)
        self.timeout_ms = timeout_ms


class HTTPError(WebStatusError):
    """Server answered with a non-2xx status that is not retryable."""

    def __init__(
        self,
        message: str,
        status_code: int,
        reason: str | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason
        self.body = body


class RetryableHTTPError(HTTPError):
    """Server answered with a transient status (429 or 5xx)."""

    pass


class TransportError(WebStatusError):
    """Connection-level failure before any status code was received."""

    pass


class MalformedResponse(WebStatusError):
    """A 2xx body could not be parsed as a page."""

    def __init__(self, message: str, body: str | None = None) -> None:
        super().__init__(message)
        self.body = body


class PaginationError(WebStatusError):
    """Server repeated a continuation token within one traversal."""

    def __init__(self, message: str, token: str | None = None) -> None:
        super().__init__(message)
        self.token = token
