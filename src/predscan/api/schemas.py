"""Pydantic schemas for API request/response consistency and OpenAPI docs."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from predscan.models import NewsItem


# --- Health ---
class HealthResponse(BaseModel):
    status: str = "ok"


# --- Error (consistent shape for 4xx/5xx) ---
class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human-readable message")
    code: str | None = Field(None, description="Machine-readable code, e.g. missing_query, upstream_error")


# --- Markets ---
class MarketsResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    count: int
    markets: list[dict[str, Any]] = Field(..., description="Gamma market records, plus news / relevantLivePrice when matched")
    live_prices: dict[str, Any] | None = Field(None, alias="livePrices")


# --- News ---
class NewsResponse(BaseModel):
    query: str = Field(..., description="Normalized search query actually sent to the feed")
    items: list[NewsItem]
