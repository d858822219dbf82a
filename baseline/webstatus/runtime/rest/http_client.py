"""HTTP client helper."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from ...core.exceptions import AttemptTimeoutError, TransportError


@dataclass(frozen=True)
class HTTPResponse:
    """Status, reason and body of one completed HTTP exchange.

    ``body`` is decoded leniently for diagnostics; ``content`` keeps the bytes
    as received so JSON parsing can reject invalid encodings.
    """

    status: int
    reason: str | None = None
    body: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes | None = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body as JSON, strictly from ``content`` when present.

        Raises:
            ValueError: If the body is not valid JSON or not valid UTF-8
        """
        if self.content is not None:
            return json.loads(self.content)
        return json.loads(self.body)


class HTTPClient:
    """Async HTTP client wrapper.

    Returns every response, whatever its status, so the caller decides what
    is retryable. Connection failures are raised as TransportError and the
    session-level timeout as AttemptTimeoutError.

    Pass ``timeout=None`` when the caller enforces its own per-request budget.
    """

    def __init__(self, base_url: str | None = None, timeout: float | None = 30.0) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    async def get(
        self,
        url: str,
        *,
        params: Mapping[str, str] | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> HTTPResponse:
        """GET request."""
        # If base_url is set and url is relative, combine them
        if self.base_url and not url.startswith("http"):
            url = f"{self.base_url}{url}"

        try:
            async with self.session.get(url, params=params, headers=headers) as response:
                raw = await response.read()
                return HTTPResponse(
                    status=response.status,
                    reason=response.reason,
                    body=raw.decode(response.charset or "utf-8", errors="replace"),
                    headers=dict(response.headers),
                    content=raw,
                )
        except asyncio.TimeoutError as e:
            total = self.timeout.total or 0
            raise AttemptTimeoutError(
                f"GET {url} timed out after {total}s", timeout_ms=int(total * 1000)
            ) from e
        except aiohttp.ClientError as e:
            raise TransportError(f"GET {url} failed: {e}") from e

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
