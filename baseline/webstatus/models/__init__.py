"""Data models for Web Status responses.

Architecture:
    Pydantic v2 models, frozen so results cannot be modified after parsing.
    The fetch engine only needs Page; Feature and the summary models serve
    the convenience layer.

Model Categories:
    - Transport: Page, Record
    - Features: Feature, BaselineInfo, BrowserDetails, BrowserImplementations
    - Aggregates: BaselineSummary, StatusCounts, TrendCounts, GroupCount, FeatureSupport
"""

from .feature import (
    BaselineInfo,
    BrowserDetails,
    BrowserImplementations,
    Feature,
    SpecInfo,
    SpecLink,
)
from .page import Page, Record
from .summary import (
    BaselineSummary,
    FeatureSupport,
    GroupCount,
    StatusCounts,
    Timeframe,
    TrendCounts,
)

__all__ = [
    "Page",
    "Record",
    "Feature",
    "BaselineInfo",
    "BrowserDetails",
    "BrowserImplementations",
    "SpecInfo",
    "SpecLink",
    "BaselineSummary",
    "StatusCounts",
    "TrendCounts",
    "Timeframe",
    "GroupCount",
    "FeatureSupport",
]
