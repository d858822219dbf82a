"""Filter-string builder for the Web Status ``q`` parameter.

This module provides a fluent API for composing filter terms and a single
normalization function that turns any accepted query input into the
canonical filter string sent to the server.

Architecture:
    The builder implements the Builder pattern over an ordered list of terms.
    Rendering joins the terms with " AND "; an empty builder renders to the
    empty string, which the server treats as "match all".

Design Decisions:
    - Pure appends: no I/O and no validation beyond quoting
    - Enum values are never quoted; free-text values are quoted on demand
    - raw() covers negation and OR, which the typed surface does not model
    - QueryInput is a closed union dispatched in one place (normalize)

Example:
    >>> q().by_status(BaselineStatus.WIDELY).by_group("css").to_string()
    'baseline_status:widely AND group:css'
    >>> q().by_id("my feature").raw("-baseline_status:limited").to_string()
    'id:"my feature" AND -baseline_status:limited'
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Union

from pydantic import BaseModel, ConfigDict

from ..utils.dates import DateRange
from .enums import BaselineStatus

__all__ = [
    "FeatureQuery",
    "QueryBuilder",
    "QueryInput",
    "normalize",
    "q",
    "quote_value",
]

_NEEDS_QUOTING = re.compile(r'[\s":()]')


def quote_value(value: str) -> str:
    """Quote ``value`` if it contains whitespace, quotes, colons or parentheses.

    Embedded double quotes are backslash-escaped inside the quoted form.
    """
    if not _NEEDS_QUOTING.search(value):
        return value
    escaped = value.replace('"', '\\"')
    return f'"{escaped}"'


class FeatureQuery(BaseModel):
    """Structured predicates, expanded through the builder's typed appends."""

    baseline_status: BaselineStatus | None = None
    baseline_date_range: DateRange | None = None
    feature_id: str | None = None
    group: str | None = None
    snapshot: str | None = None
    custom_query: str | None = None

    model_config = ConfigDict(frozen=True, extra="forbid")


class QueryBuilder:
    """Fluent builder of ``field:value`` terms joined with AND.

    Every predicate method appends one term and returns the builder, so calls
    chain. Rendering is idempotent and reflects all terms appended so far.
    """

    def __init__(self) -> None:
        self._terms: list[str] = []

    def _push(self, term: str | None) -> QueryBuilder:
        if term:
            stripped = term.strip()
            if stripped:
                self._terms.append(stripped)
        return self

    def by_status(self, status: BaselineStatus | str) -> QueryBuilder:
        """Append ``baseline_status:<status>`` (never quoted)."""
        value = status.value if isinstance(status, BaselineStatus) else status
        return self._push(f"baseline_status:{value}")

    def by_date_range(self, start: str, end: str) -> QueryBuilder:
        """Append ``baseline_date:<start>..<end>``.

        Dates are passed through as given; the server rejects malformed ones.
        """
        return self._push(f"baseline_date:{start}..{end}")

    def by_id(self, feature_id: str) -> QueryBuilder:
        return self._push(f"id:{quote_value(feature_id)}")

    def by_group(self, group: str) -> QueryBuilder:
        return self._push(f"group:{quote_value(str(group))}")

    def by_snapshot(self, snapshot: str) -> QueryBuilder:
        return self._push(f"snapshot:{quote_value(snapshot)}")

    def raw(self, term: str) -> QueryBuilder:
        """Append an already formatted term verbatim (e.g. ``-group:css``)."""
        return self._push(term)

    def apply(self, criteria: FeatureQuery) -> QueryBuilder:
        """Expand structured predicates in their canonical order."""
        if criteria.baseline_status is not None:
            self.by_status(criteria.baseline_status)
        if criteria.baseline_date_range is not None:
            self.by_date_range(criteria.baseline_date_range.start, criteria.baseline_date_range.end)
        if criteria.feature_id:
            self.by_id(criteria.feature_id)
        if criteria.group:
            self.by_group(criteria.group)
        if criteria.snapshot:
            self.by_snapshot(criteria.snapshot)
        if criteria.custom_query:
            self.raw(criteria.custom_query)
        return self

    @property
    def terms(self) -> tuple[str, ...]:
        return tuple(self._terms)

    def to_string(self) -> str:
        return " AND ".join(self._terms)

    def clone(self) -> QueryBuilder:
        copy = QueryBuilder()
        copy._terms = list(self._terms)
        return copy

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"QueryBuilder({self.to_string()!r})"

    def __len__(self) -> int:
        return len(self._terms)


QueryInput = Union[str, FeatureQuery, Mapping[str, Any], QueryBuilder, None]


def q(initial: QueryInput = None) -> QueryBuilder:
    """Create a builder, optionally seeded from any query input."""
    builder = QueryBuilder()
    if isinstance(initial, FeatureQuery):
        return builder.apply(initial)
    if isinstance(initial, Mapping):
        return builder.apply(FeatureQuery.model_validate(initial))
    return builder.raw(normalize(initial))


def normalize(query: QueryInput) -> str:
    """Return the canonical filter string for any accepted query input.

    - ``None`` renders to the empty string
    - a string is a pre-rendered expression and passes through (stripped)
    - a FeatureQuery, or a mapping of its fields, is expanded via the builder
    - a QueryBuilder is rendered

    Raises:
        TypeError: If ``query`` is none of the above
        pydantic.ValidationError: If a mapping has unknown or invalid fields
    """
    if query is None:
        return ""
    if isinstance(query, str):
        return query.strip()
    if isinstance(query, QueryBuilder):
        return query.to_string()
    if isinstance(query, FeatureQuery):
        return QueryBuilder().apply(query).to_string()
    if isinstance(query, Mapping):
        return QueryBuilder().apply(FeatureQuery.model_validate(query)).to_string()
    raise TypeError(f"Unsupported query input: {type(query).__name__}")
