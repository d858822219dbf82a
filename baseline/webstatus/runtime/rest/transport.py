"""Transport protocol consumed by the fetch engine."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from .http_client import HTTPResponse


@runtime_checkable
class RESTTransport(Protocol):
    """Anything that can issue a GET and hand back the raw response.

    HTTPClient is the default implementation. Tests and callers with their
    own HTTP stack substitute any object with these two coroutines.

    Implementations return non-2xx responses instead of raising, raise
    TransportError for connection failures, and must be safe to share across
    concurrent calls.
    """

    async def get(
        self,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        ...

    async def close(self) -> None:
        ...
