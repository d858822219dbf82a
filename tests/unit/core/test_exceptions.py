"""Precise unit tests for exception hierarchy.

Tests focus on meaningful behavior, not just field access.
"""

from baseline.webstatus.core import (
    AttemptTimeoutError,
    Cancelled,
    HTTPError,
    MalformedResponse,
    PaginationError,
    RetryableHTTPError,
    TransportError,
    WebStatusError,
)


def test_http_error_carries_response_details():
    """Test HTTPError keeps status, reason and body."""
    error = HTTPError("HTTP 404 Not Found", status_code=404, reason="Not Found", body="{}")
    assert str(error) == "HTTP 404 Not Found"
    assert error.status_code == 404
    assert error.reason == "Not Found"
    assert error.body == "{}"
    assert isinstance(error, WebStatusError)


def test_retryable_http_error_is_http_error():
    """Test RetryableHTTPError can be handled as HTTPError."""
    error = RetryableHTTPError("HTTP 503", status_code=503)
    assert isinstance(error, HTTPError)
    assert error.body is None


def test_timeout_error_is_builtin_timeout():
    """Test AttemptTimeoutError is catchable as TimeoutError."""
    error = AttemptTimeoutError("timed out", timeout_ms=250)
    assert error.timeout_ms == 250
    assert isinstance(error, TimeoutError)
    assert isinstance(error, WebStatusError)


def test_pagination_and_malformed_context():
    """Test PaginationError and MalformedResponse keep their context."""
    assert PaginationError("loop", token="t1").token == "t1"
    assert MalformedResponse("bad", body="<html>").body == "<html>"


def test_all_errors_share_root():
    """Test every taxonomy member derives from WebStatusError."""
    for cls in (Cancelled, TransportError, MalformedResponse, PaginationError):
        assert issubclass(cls, WebStatusError)
