"""Polymarket Gamma API client - paginated market listing."""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from predscan.models import Market
from predscan.models.market import market_key

log = structlog.get_logger(__name__)

GAMMA_API_BASE = "https://gamma-api.polymarket.com"


def _markets_url(base_url: str | None) -> str:
    base = (base_url or GAMMA_API_BASE).rstrip("/")
    return base if base.endswith("/markets") else base + "/markets"


async def fetch_page(
    client: httpx.AsyncClient,
    offset: int,
    limit: int,
    base_url: str | None = None,
) -> list[dict[str, Any]]:
    """One listing page, open markets by 24h volume desc. Any failure -> []."""
    params = {
        "closed": "false",
        "limit": limit,
        "offset": offset,
        "order": "volume24hr",
        "ascending": "false",
    }
    try:
        resp = await client.get(_markets_url(base_url), params=params)
        if not resp.is_success:
            log.warning("gamma_page_failed", offset=offset, status=resp.status_code)
            return []
        data = resp.json()
    except Exception as e:
        log.warning("gamma_page_failed", offset=offset, error=str(e) or type(e).__name__)
        return []
    if not isinstance(data, list):
        log.warning("gamma_page_unexpected_body", offset=offset, body_type=type(data).__name__)
        return []
    return [row for row in data if isinstance(row, dict)]


def parse_markets(rows: Iterable[dict[str, Any]]) -> list[Market]:
    """Validate raw Gamma records; records without a usable id are skipped."""
    markets = []
    for row in rows:
        try:
            markets.append(Market.from_raw(row))
        except ValidationError as e:
            log.warning("skip_market", market_id=row.get("id"), error=str(e))
    return markets


def dedupe_rows(rows: Iterable[dict[str, Any]]) -> list[dict[str, Any]]:
    """Keep the first raw record of each id, preserving order. Runs before validation."""
    seen: set[str] = set()
    out: list[dict[str, Any]] = []
    for row in rows:
        key = market_key(row.get("id"))
        if isinstance(key, str):
            if key in seen:
                continue
            seen.add(key)
        out.append(row)
    return out


async def fetch_listing(
    client: httpx.AsyncClient,
    page_size: int = 100,
    pages: int = 3,
    base_url: str | None = None,
) -> list[Market]:
    """Fetch pages concurrently, concatenate in page order, dedupe by id, then validate. Never raises on upstream errors."""
    results = await asyncio.gather(
        *(fetch_page(client, i * page_size, page_size, base_url) for i in range(pages))
    )
    rows = [row for page in results for row in page]
    markets = parse_markets(dedupe_rows(rows))
    log.info("gamma_listing_fetched", pages=pages, rows=len(rows), markets=len(markets))
    return markets


def select_candidates(markets: list[Market], limit: int = 50) -> list[Market]:
    """Open markets with a question, by 24h volume desc (missing = 0), top limit. Ties keep listing order."""
    eligible = [m for m in markets if m.question and m.active and not m.closed]
    eligible.sort(key=lambda m: m.activity, reverse=True)
    return eligible[:limit]
