"""Caller-owned cancellation token."""

from __future__ import annotations

import asyncio


class CancellationToken:
    """One-shot signal shared by every suspension point of a traversal.

    Cancelling is idempotent. Once cancelled, the token stays cancelled; create
    a new token for a new operation.

    Example:
        >>> token = CancellationToken()
        >>> stream = api.records("group:css", RequestContext(cancellation=token))
        >>> async for record in stream:
        ...     if done(record):
        ...         token.cancel()
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    def cancel(self, reason: str | None = None) -> None:
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        return self._reason

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()
