"""Aggregate result models for summary and comparison shortcuts."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import BaselineStatus


class StatusCounts(BaseModel):
    """Feature counts for the two baselined statuses."""

    newly: int = Field(0, ge=0)
    widely: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True)

    @property
    def total(self) -> int:
        return self.newly + self.widely


class BaselineSummary(BaseModel):
    """Counts of newly and widely baselined features, optionally per group."""

    newly: int = Field(0, ge=0)
    widely: int = Field(0, ge=0)
    total: int = Field(0, ge=0)
    by_group: dict[str, StatusCounts] | None = None

    model_config = ConfigDict(frozen=True)


class TrendCounts(BaseModel):
    newly: int = Field(0, ge=0)
    widely: int = Field(0, ge=0)
    total: int = Field(0, ge=0)

    model_config = ConfigDict(frozen=True)


class Timeframe(BaseModel):
    """Look-back window used by baseline trend analysis."""

    label: str = Field(..., min_length=1)
    days: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)


class GroupCount(BaseModel):
    group: str
    count: int = Field(..., ge=0)

    model_config = ConfigDict(frozen=True)


class FeatureSupport(BaseModel):
    """Support snapshot of one feature for side-by-side comparison."""

    name: str
    status: BaselineStatus
    date: str | None = None

    model_config = ConfigDict(frozen=True)
