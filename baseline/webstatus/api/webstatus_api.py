"""Ergonomic WebStatusAPI facade for feature queries.

The WebStatusAPI wraps the fetch engine with named shortcuts (by status,
group, snapshot, id, date range) and a few aggregate helpers built on them.

Architecture:
    This module implements the Facade pattern over three pieces:
    - normalize()/QueryBuilder turn caller input into a filter string
    - RetryingFetcher executes one page request with retry and backoff
    - Paginator walks continuation tokens lazily

Design Decisions:
    - Transport injection allows testing with fake transports
    - Shortcuts drain the record stream; pages()/records() stay lazy
    - Aggregates fan out one traversal per query; a failure cancels the rest
    - Context manager closes the transport when the facade created it

See Also:
    - RetryingFetcher: Retry and timeout semantics
    - PageStream / RecordStream: Lazy traversal contract
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from collections.abc import Awaitable, Iterable, Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from ..core.config import ClientConfig, RequestContext
from ..core.enums import BaselineStatus, FeatureGroup
from ..core.exceptions import MalformedResponse
from ..core.query import FeatureQuery, QueryInput, normalize, q
from ..models.feature import Feature
from ..models.page import Page, Record
from ..models.summary import (
    BaselineSummary,
    FeatureSupport,
    GroupCount,
    StatusCounts,
    Timeframe,
    TrendCounts,
)
from ..runtime.pagination import PageStream, Paginator, RecordStream
from ..runtime.rest.fetcher import RetryingFetcher
from ..runtime.rest.http_client import HTTPClient
from ..runtime.rest.transport import RESTTransport
from ..utils.dates import DateRange, days_back, format_date_range

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def _gather(*aws: Awaitable[T]) -> list[T]:
    """Run ``aws`` concurrently and return their results in order.

    On the first failure the remaining tasks are cancelled and awaited before
    the original exception is raised, so no request outlives the call.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []
    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    if pending:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    error: BaseException | None = None
    for task in tasks:
        if task in done and not task.cancelled():
            exc = task.exception()
            if exc is not None and error is None:
                error = exc
    if error is not None:
        raise error
    return [task.result() for task in tasks]


class WebStatusAPI:
    """High-level client for the Web Platform Status features endpoint.

    Example:
        >>> async with WebStatusAPI() as api:
        ...     widely_css = await api.css(BaselineStatus.WIDELY)
        ...
        ...     # Lazy traversal, page by page
        ...     async for record in api.records(q().by_group("css")):
        ...         print(record["name"])
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: RESTTransport | None = None,
    ) -> None:
        """Initialize the WebStatusAPI.

        Args:
            config: Immutable client configuration (defaults to ClientConfig())
            transport: Optional transport (an HTTPClient is created if not provided)

        Note:
            A transport passed in is owned by the caller and is not closed by close().
        """
        self._config = config or ClientConfig()
        self._owns_transport = transport is None
        # Per-attempt timeouts are enforced by RetryingFetcher, not the session
        self._transport: RESTTransport = transport or HTTPClient(timeout=None)
        self._fetcher = RetryingFetcher(self._transport, self._config)
        self._paginator = Paginator(self._fetcher)
        self._closed = False

    @property
    def config(self) -> ClientConfig:
        return self._config

    # --- Core contract --------------------------------------------------------

    @staticmethod
    def normalize(query: QueryInput) -> str:
        return normalize(query)

    async def fetch_page(
        self,
        query: QueryInput = None,
        continuation_token: str | None = None,
        context: RequestContext | None = None,
    ) -> Page:
        """Fetch a single page; see RetryingFetcher.fetch_page."""
        return await self._fetcher.fetch_page(normalize(query), continuation_token, context)

    def pages(self, query: QueryInput = None, context: RequestContext | None = None) -> PageStream:
        """Start a lazy page traversal."""
        return self._paginator.pages(normalize(query), context)

    def records(
        self, query: QueryInput = None, context: RequestContext | None = None
    ) -> RecordStream:
        """Start a lazy record traversal."""
        return self._paginator.records(normalize(query), context)

    async def features(
        self, query: QueryInput = None, context: RequestContext | None = None
    ) -> list[Record]:
        """Fetch every record matching ``query`` across all pages."""
        return await self.records(query, context).collect()

    # --- Raw queries ----------------------------------------------------------

    async def query(self, query_string: str, context: RequestContext | None = None) -> list[Record]:
        return await self.features(query_string, context)

    async def search(self, term: str, context: RequestContext | None = None) -> list[Record]:
        """Free-text search; the term is sent as a raw filter expression."""
        return await self.query(term, context)

    async def by_criteria(
        self,
        criteria: FeatureQuery | Mapping[str, Any],
        context: RequestContext | None = None,
    ) -> list[Record]:
        return await self.features(criteria, context)

    # --- Baseline status ------------------------------------------------------

    async def baseline(
        self, status: BaselineStatus | str, context: RequestContext | None = None
    ) -> list[Record]:
        return await self.features(q().by_status(status), context)

    async def newly_baseline(self, context: RequestContext | None = None) -> list[Record]:
        return await self.baseline(BaselineStatus.NEWLY, context)

    async def widely_baseline(self, context: RequestContext | None = None) -> list[Record]:
        return await self.baseline(BaselineStatus.WIDELY, context)

    async def all_baseline(self, context: RequestContext | None = None) -> list[Record]:
        """Features that reached either newly or widely status."""
        return await self.features(
            q().raw(f"-baseline_status:{BaselineStatus.LIMITED.value}"), context
        )

    # --- Groups, snapshots, ids ---------------------------------------------

    async def by_group(
        self,
        group: FeatureGroup | str,
        status: BaselineStatus | str | None = None,
        context: RequestContext | None = None,
    ) -> list[Record]:
        builder = q()
        if status:
            builder.by_status(status)
        builder.by_group(str(group))
        return await self.features(builder, context)

    async def css(
        self, status: BaselineStatus | str | None = None, context: RequestContext | None = None
    ) -> list[Record]:
        return await self.by_group(FeatureGroup.CSS, status, context)

    async def javascript(
        self, status: BaselineStatus | str | None = None, context: RequestContext | None = None
    ) -> list[Record]:
        return await self.by_group(FeatureGroup.JAVASCRIPT, status, context)

    async def html(
        self, status: BaselineStatus | str | None = None, context: RequestContext | None = None
    ) -> list[Record]:
        return await self.by_group(FeatureGroup.HTML, status, context)

    async def by_snapshot(
        self,
        snapshot: str,
        status: BaselineStatus | str | None = None,
        context: RequestContext | None = None,
    ) -> list[Record]:
        builder = q()
        if status:
            builder.by_status(status)
        builder.by_snapshot(snapshot)
        return await self.features(builder, context)

    async def by_id(
        self, feature_id: str, context: RequestContext | None = None
    ) -> Record | None:
        """Return the feature with ``feature_id``, or None if there is none."""
        records = await self.features(q().by_id(feature_id), context)
        return records[0] if records else None

    # --- Date ranges ----------------------------------------------------------

    async def in_date_range(
        self,
        date_range: DateRange | str,
        status: BaselineStatus | str = BaselineStatus.WIDELY,
        context: RequestContext | None = None,
    ) -> list[Record]:
        """Features that reached ``status`` inside ``date_range``.

        ``date_range`` is a DateRange or a preformatted ``start..end`` string.
        """
        builder = q().by_status(status).raw(f"baseline_date:{format_date_range(date_range)}")
        return await self.features(builder, context)

    async def added_between(
        self,
        start: str,
        end: str,
        status: BaselineStatus | str = BaselineStatus.NEWLY,
        context: RequestContext | None = None,
    ) -> list[Record]:
        return await self.features(q().by_status(status).by_date_range(start, end), context)

    async def recent(
        self,
        days: int = 90,
        status: BaselineStatus | str = BaselineStatus.NEWLY,
        context: RequestContext | None = None,
    ) -> list[Record]:
        """Features that reached ``status`` within the last ``days`` days."""
        window = days_back(days)
        return await self.added_between(window.start, window.end, status, context)

    # --- Aggregates -----------------------------------------------------------

    async def baseline_summary(self, context: RequestContext | None = None) -> BaselineSummary:
        newly, widely = await _gather(
            self.newly_baseline(context),
            self.widely_baseline(context),
        )
        return BaselineSummary(
            newly=len(newly), widely=len(widely), total=len(newly) + len(widely)
        )

    async def baseline_summary_by_group(
        self, groups: Iterable[FeatureGroup | str], context: RequestContext | None = None
    ) -> BaselineSummary:
        """Newly/widely counts per group plus overall totals."""
        names = [str(group) for group in groups]

        async def count_group(group: str) -> StatusCounts:
            newly, widely = await _gather(
                self.by_group(group, BaselineStatus.NEWLY, context),
                self.by_group(group, BaselineStatus.WIDELY, context),
            )
            return StatusCounts(newly=len(newly), widely=len(widely))

        counts = await _gather(*(count_group(name) for name in names))
        by_group = dict(zip(names, counts))
        newly = sum(c.newly for c in counts)
        widely = sum(c.widely for c in counts)
        return BaselineSummary(
            newly=newly, widely=widely, total=newly + widely, by_group=by_group
        )

    async def baseline_trends(
        self,
        timeframes: Iterable[Timeframe | Mapping[str, Any]],
        context: RequestContext | None = None,
    ) -> dict[str, TrendCounts]:
        """Newly/widely counts for each look-back window, keyed by label."""
        frames = [
            tf if isinstance(tf, Timeframe) else Timeframe.model_validate(tf) for tf in timeframes
        ]

        async def count_window(frame: Timeframe) -> TrendCounts:
            window = days_back(frame.days)
            newly, widely = await _gather(
                self.added_between(window.start, window.end, BaselineStatus.NEWLY, context),
                self.added_between(window.start, window.end, BaselineStatus.WIDELY, context),
            )
            return TrendCounts(newly=len(newly), widely=len(widely), total=len(newly) + len(widely))

        counts = await _gather(*(count_window(frame) for frame in frames))
        return {frame.label: trend for frame, trend in zip(frames, counts)}

    async def top_feature_groups(
        self, limit: int = 5, context: RequestContext | None = None
    ) -> list[GroupCount]:
        """Groups with the most baselined features, largest first."""
        records = await self.all_baseline(context)
        counts = Counter(record["group"] for record in records if record.get("group"))
        return [GroupCount(group=group, count=count) for group, count in counts.most_common(limit)]

    async def compare_feature_support(
        self, feature_ids: Iterable[str], context: RequestContext | None = None
    ) -> dict[str, FeatureSupport]:
        """Name, status and baseline date for each id found; unknown ids are omitted."""
        ids = list(feature_ids)
        found = await _gather(*(self.by_id(feature_id, context) for feature_id in ids))

        result: dict[str, FeatureSupport] = {}
        for feature_id, record in zip(ids, found):
            if record is None:
                continue
            try:
                feature = Feature.model_validate(record)
            except ValidationError as e:
                raise MalformedResponse(
                    f"Feature {feature_id!r} does not match the feature schema: {e}"
                ) from e
            result[feature_id] = FeatureSupport(
                name=feature.name,
                status=feature.status,
                date=feature.baseline.high_date if feature.baseline else None,
            )
        return result

    # --- Lifecycle ------------------------------------------------------------

    async def close(self) -> None:
        """Close the transport if this facade created it."""
        if self._closed:
            return
        if self._owns_transport:
            await self._transport.close()
        self._closed = True
        logger.debug("WebStatusAPI closed")

    async def __aenter__(self) -> WebStatusAPI:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


async def create_webstatus_api(
    config: ClientConfig | None = None,
    *,
    transport: RESTTransport | None = None,
) -> WebStatusAPI:
    """Factory for a configured WebStatusAPI."""
    return WebStatusAPI(config, transport=transport)
