"""PriceQuote, LivePrices - reference asset prices."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PriceQuote(BaseModel):
    """Point-in-time price and 24h change for one tracked asset or index."""

    model_config = ConfigDict(populate_by_name=True)

    label: str | None = None  # set by the correlator
    price: float
    change_24h: float = Field(0.0, alias="change24h", description="24h change in percent")
    market_open: bool | None = Field(None, alias="marketOpen")


class LivePrices(BaseModel):
    """Quotes keyed by asset code (btc, eth, sol, xrp, gold, sp500)."""

    quotes: dict[str, PriceQuote] = Field(default_factory=dict)
    fetched_at: str | None = None  # ISO-8601 UTC

    def to_json(self) -> dict[str, Any]:
        """Flat shape: {btc: {...}, ..., fetchedAt: "..."}."""
        out: dict[str, Any] = {
            code: q.model_dump(mode="json", by_alias=True, exclude_none=True)
            for code, q in self.quotes.items()
        }
        out["fetchedAt"] = self.fetched_at
        return out
