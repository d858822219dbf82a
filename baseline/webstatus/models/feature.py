"""Typed view over feature records.

The fetch engine passes records through untouched; callers that want typed
access validate a record into a Feature explicitly.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..core.enums import BaselineStatus


class BaselineInfo(BaseModel):
    """Baseline status and the dates it was reached."""

    status: BaselineStatus
    low_date: str | None = None
    high_date: str | None = None

    model_config = ConfigDict(frozen=True)


class BrowserDetails(BaseModel):
    status: str
    date: str | None = None
    version: str | None = None

    model_config = ConfigDict(frozen=True)


class BrowserImplementations(BaseModel):
    chrome: BrowserDetails | None = None
    edge: BrowserDetails | None = None
    firefox: BrowserDetails | None = None
    safari: BrowserDetails | None = None

    model_config = ConfigDict(frozen=True)


class SpecLink(BaseModel):
    link: str

    model_config = ConfigDict(frozen=True)


class SpecInfo(BaseModel):
    links: list[SpecLink] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)


class Feature(BaseModel):
    """A web platform feature as returned by the features endpoint."""

    feature_id: str = Field(..., min_length=1)
    name: str
    baseline: BaselineInfo | None = None
    browser_implementations: BrowserImplementations | None = None
    spec: SpecInfo | None = None
    usage: dict[str, Any] | None = None
    wpt: Any = None
    group: str | None = None
    snapshot: str | None = None

    model_config = ConfigDict(frozen=True, extra="allow")

    @property
    def status(self) -> BaselineStatus:
        """Baseline status, LIMITED when the record carries none."""
        return self.baseline.status if self.baseline else BaselineStatus.LIMITED
