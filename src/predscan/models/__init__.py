"""Canonical schema (Pydantic) - Market, NewsItem, PriceQuote."""

from predscan.models.market import Market
from predscan.models.news import NewsItem
from predscan.models.price import LivePrices, PriceQuote

__all__ = [
    "Market",
    "NewsItem",
    "PriceQuote",
    "LivePrices",
]
