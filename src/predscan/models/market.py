"""Market - upstream listing record plus per-response enrichment."""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator

from predscan.models.news import NewsItem
from predscan.models.price import PriceQuote

_ENRICHMENT_FIELDS = {"news", "relevant_live_price"}


class Market(BaseModel):
    """Gamma market record. Unknown upstream fields are kept as-is."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    id: str
    question: str | None = None
    volume_24hr: float | None = Field(None, alias="volume24hr", description="24h traded volume")
    active: bool = False
    closed: bool = False
    # Enrichment, attached in place before the response is emitted
    news: list[NewsItem] | None = None
    relevant_live_price: PriceQuote | None = Field(None, alias="relevantLivePrice")

    # Upstream record exactly as received; emitted unchanged by to_json
    _raw: dict[str, Any] | None = PrivateAttr(default=None)

    @classmethod
    def from_raw(cls, row: dict[str, Any]) -> Market:
        market = cls.model_validate(row)
        market._raw = dict(row)
        return market

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, v: Any) -> Any:
        return market_key(v)

    @field_validator("volume_24hr", mode="before")
    @classmethod
    def _unparseable_volume_is_none(cls, v: Any) -> Any:
        if v is None or isinstance(v, bool):
            return None
        try:
            f = float(v)
        except (TypeError, ValueError):
            return None
        return f if math.isfinite(f) else None

    @field_validator("active", "closed", mode="before")
    @classmethod
    def _null_flag_is_false(cls, v: Any) -> Any:
        return False if v is None else v

    @property
    def activity(self) -> float:
        """Ranking metric; missing volume counts as zero."""
        return self.volume_24hr or 0.0

    def to_json(self) -> dict[str, Any]:
        """Upstream record as received, plus enrichment when attached."""
        enrichment = self.model_dump(
            mode="json", by_alias=True, exclude_unset=True, include=_ENRICHMENT_FIELDS
        )
        if self._raw is None:
            base = self.model_dump(mode="json", by_alias=True, exclude_unset=True, exclude=_ENRICHMENT_FIELDS)
        else:
            base = dict(self._raw)
        base.update(enrichment)
        return base


def market_key(v: Any) -> Any:
    """Identity key: numeric ids compare equal to their string form."""
    if isinstance(v, (int, float)) and not isinstance(v, bool):
        return str(v)
    return v
