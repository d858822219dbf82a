"""Core enumerations for the Web Platform Status API.

Architecture:
    String enums keep wire values and Python values identical, so an enum
    member can be dropped straight into a filter string without conversion.

See Also:
    - QueryBuilder: Renders BaselineStatus values unquoted
    - WebStatusAPI: Uses BaselineStatus for named shortcuts
"""

from enum import Enum


class BaselineStatus(str, Enum):
    """Baseline status of a web platform feature.

    - LIMITED: not yet supported across the core browser set
    - NEWLY: interoperable across core browsers recently
    - WIDELY: interoperable for long enough to be considered safe to use
    """

    LIMITED = "limited"
    NEWLY = "newly"
    WIDELY = "widely"

    def __str__(self) -> str:
        return self.value


class FeatureGroup(str, Enum):
    """Technology groups exposed as named shortcuts."""

    CSS = "css"
    JAVASCRIPT = "javascript"
    HTML = "html"

    def __str__(self) -> str:
        return self.value
