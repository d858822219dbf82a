"""Lazy traversal of paginated results.

Architecture:
    PageStream pulls one page per ``next()`` call, feeding each page's
    continuation token into the following request. RecordStream flattens a
    PageStream into individual records. Both are single-use: they carry the
    traversal's progress (current token, consumed tokens) and cannot restart.

Termination:
    - A page without a continuation token ends the traversal after it is yielded
    - A page with zero records ends the traversal and is not yielded, even if
      it carries a token
    - A token that repeats one already consumed raises PaginationError

Cancellation:
    The context's cancellation token is checked before every page request and
    is threaded into the fetcher, so a cancelled traversal issues no further
    requests. Items already yielded stay valid.
"""

from __future__ import annotations

from collections import deque

from ..core.config import RequestContext
from ..core.exceptions import Cancelled, PaginationError
from ..models.page import Page, Record
from .rest.fetcher import RetryingFetcher
from .telemetry import log_cancelled, log_traversal_complete


class PageStream:
    """Single-use async iterator over the pages of one traversal.

    ``await stream.next()`` returns the next Page, or None once the traversal
    has ended; errors raise. ``async for`` works on top of the same contract.
    """

    def __init__(
        self,
        fetcher: RetryingFetcher,
        filter_string: str,
        context: RequestContext | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._filter = filter_string
        self._context = context or RequestContext()
        self._token: str | None = None
        self._consumed_tokens: set[str] = set()
        self._started = False
        self._iterating = False
        self._finished = False
        self.pages_fetched = 0
        self.records_yielded = 0

    @property
    def filter_string(self) -> str:
        return self._filter

    @property
    def started(self) -> bool:
        return self._started

    @property
    def finished(self) -> bool:
        return self._finished

    async def next(self) -> Page | None:
        """Fetch the next page of the traversal.

        Returns:
            The next non-empty Page, or None when the traversal has ended

        Raises:
            Cancelled: The traversal was cancelled
            PaginationError: The server repeated a continuation token
            WebStatusError: Any fetch failure from RetryingFetcher
        """
        self._started = True
        if self._finished:
            return None

        if self._context.cancelled:
            self._finished = True
            log_cancelled(query=self._filter, stage="between_pages")
            raise Cancelled("Traversal cancelled by caller")

        try:
            page = await self._fetcher.fetch_page(self._filter, self._token, self._context)
        except BaseException:
            self._finished = True
            raise
        self.pages_fetched += 1

        if not page.records:
            self._finish("empty_page")
            return None

        token = page.continuation_token
        if token is None:
            self._finish("last_page")
        elif token in self._consumed_tokens:
            self._finished = True
            raise PaginationError(
                f"Continuation token {token!r} repeated within one traversal", token=token
            )
        else:
            self._consumed_tokens.add(token)
            self._token = token

        self.records_yielded += len(page.records)
        return page

    def _finish(self, reason: str) -> None:
        self._finished = True
        log_traversal_complete(
            query=self._filter,
            pages=self.pages_fetched,
            records=self.records_yielded,
            reason=reason,
        )

    async def collect(self) -> list[Page]:
        """Drain the remaining pages into a list."""
        pages: list[Page] = []
        while True:
            page = await self.next()
            if page is None:
                return pages
            pages.append(page)

    to_list = collect

    def __aiter__(self) -> PageStream:
        if self._started or self._iterating:
            raise RuntimeError("PageStream cannot be restarted; start a new traversal")
        self._iterating = True
        return self

    async def __anext__(self) -> Page:
        page = await self.next()
        if page is None:
            raise StopAsyncIteration
        return page


class RecordStream:
    """Single-use async iterator over the records of one traversal.

    Records come out in page order, and within a page in server order. The
    next page is only requested once the current page's records are used up.
    """

    def __init__(self, pages: PageStream) -> None:
        self._pages = pages
        self._buffer: deque[Record] = deque()
        self._iterating = False

    @property
    def pages(self) -> PageStream:
        return self._pages

    async def next(self) -> Record | None:
        """Return the next record, or None when the traversal has ended."""
        while not self._buffer:
            page = await self._pages.next()
            if page is None:
                return None
            self._buffer.extend(page.records)
        return self._buffer.popleft()

    async def collect(self) -> list[Record]:
        """Drain the remaining records into a list.

        Fails as a whole if any page fails; records gathered so far are lost
        to the caller.
        """
        records: list[Record] = []
        while True:
            record = await self.next()
            if record is None:
                return records
            records.append(record)

    to_list = collect

    def __aiter__(self) -> RecordStream:
        if self._iterating or self._pages.started:
            raise RuntimeError("RecordStream cannot be restarted; start a new traversal")
        self._iterating = True
        return self

    async def __anext__(self) -> Record:
        record = await self.next()
        if record is None:
            raise StopAsyncIteration
        return record


class Paginator:
    """Factory for traversals over one fetcher."""

    def __init__(self, fetcher: RetryingFetcher) -> None:
        self._fetcher = fetcher

    def pages(self, filter_string: str, context: RequestContext | None = None) -> PageStream:
        return PageStream(self._fetcher, filter_string, context)

    def records(self, filter_string: str, context: RequestContext | None = None) -> RecordStream:
        return RecordStream(self.pages(filter_string, context))

    async def collect_records(
        self, filter_string: str, context: RequestContext | None = None
    ) -> list[Record]:
        return await self.records(filter_string, context).collect()
