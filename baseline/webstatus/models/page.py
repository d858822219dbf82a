"""Page model and wire-format parsing."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

Record = dict[str, Any]


class _WireMetadata(BaseModel):
    next_page_token: str | None = None
    total: int | None = None

    model_config = ConfigDict(extra="ignore")


class _WirePage(BaseModel):
    data: list[Record]
    metadata: _WireMetadata | None = None

    model_config = ConfigDict(extra="ignore")


class Page(BaseModel):
    """One page of records plus the token for the next page.

    ``continuation_token`` is None on the final page. Records are opaque JSON
    objects passed through exactly as the server returned them.
    """

    records: list[Record] = Field(default_factory=list)
    continuation_token: str | None = None
    total: int | None = None

    model_config = ConfigDict(frozen=True)

    @field_validator("continuation_token")
    @classmethod
    def blank_token_is_none(cls, v: str | None) -> str | None:
        """An empty token carries no continuation."""
        return v or None

    @classmethod
    def from_payload(cls, payload: Any) -> Page:
        """Parse ``{"data": [...], "metadata": {...}}``.

        Raises:
            pydantic.ValidationError: If the payload does not have a page shape
        """
        wire = _WirePage.model_validate(payload)
        metadata = wire.metadata or _WireMetadata()
        return cls(
            records=wire.data,
            continuation_token=metadata.next_page_token,
            total=metadata.total,
        )

    @property
    def is_last(self) -> bool:
        return self.continuation_token is None

    def __len__(self) -> int:
        return len(self.records)
