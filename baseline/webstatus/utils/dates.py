"""Date helpers for baseline date filters."""

from __future__ import annotations

import re
from datetime import UTC, date, datetime, timedelta

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class DateRange(BaseModel):
    """Inclusive baseline date window, rendered as ``start..end``."""

    start: str
    end: str

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("start", "end")
    @classmethod
    def validate_iso(cls, v: str) -> str:
        """Require YYYY-MM-DD strings."""
        if not _ISO_DATE.match(v):
            raise ValueError(f"expected YYYY-MM-DD, got {v!r}")
        return v

    @model_validator(mode="after")
    def validate_order(self) -> DateRange:
        if self.start > self.end:
            raise ValueError("start must be <= end")
        return self

    def __str__(self) -> str:
        return f"{self.start}..{self.end}"


def format_date(value: date | datetime) -> str:
    """Format a date or datetime as YYYY-MM-DD (datetimes converted to UTC)."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.date().isoformat()
    return value.isoformat()


def format_date_range(date_range: DateRange | str) -> str:
    """Render a DateRange; preformatted ``start..end`` strings pass through."""
    if isinstance(date_range, str):
        return date_range
    return str(date_range)


def create_date_range(start: str, end: str) -> DateRange:
    return DateRange(start=start, end=end)


def days_back(days: int, *, now: datetime | None = None) -> DateRange:
    """Window covering the last ``days`` days up to today (UTC)."""
    if days < 0:
        raise ValueError("days must be >= 0")
    end = now or datetime.now(UTC)
    start = end - timedelta(days=days)
    return DateRange(start=format_date(start), end=format_date(end))
