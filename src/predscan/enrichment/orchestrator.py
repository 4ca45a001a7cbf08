"""Attach related headlines and a reference price to listed markets."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass

import httpx
import structlog

from predscan.config import Settings
from predscan.ingestion.polymarket.gamma import fetch_listing, select_candidates
from predscan.ingestion.rate_limit import gather_in_batches
from predscan.models import LivePrices, Market, NewsItem, PriceQuote
from predscan.news.client import NewsFeedClient
from predscan.news.query import extract_search_terms
from predscan.prices.cache import PriceCache
from predscan.prices.correlate import correlate_price

log = structlog.get_logger(__name__)

Lookup = Callable[[str], Awaitable[list[NewsItem]]]


@dataclass
class EnrichmentStats:
    candidates: int = 0
    queries: int = 0
    queries_dropped: int = 0
    lookups_ok: int = 0
    lookups_empty: int = 0


def attach_prices(markets: list[Market], quotes: Mapping[str, PriceQuote]) -> int:
    """Set relevant_live_price on every market with a matching quote. Returns the match count."""
    matched = 0
    for m in markets:
        quote = correlate_price(m.question or "", quotes)
        if quote is not None:
            m.relevant_live_price = quote
            matched += 1
    return matched


def group_by_query(candidates: list[Market]) -> dict[str, list[str]]:
    """Search query -> ids of candidates sharing it, in first-seen query order."""
    query_map: dict[str, list[str]] = {}
    for m in candidates:
        query_map.setdefault(extract_search_terms(m.question or ""), []).append(m.id)
    return query_map


async def enrich_markets(
    markets: list[Market],
    lookup: Lookup,
    quotes: Mapping[str, PriceQuote] | None = None,
    *,
    candidate_limit: int = 50,
    max_queries: int = 25,
    batch_size: int = 10,
    lookup_timeout_sec: float | None = 5.0,
    max_items: int = 5,
) -> EnrichmentStats:
    """
    Enrich markets in place.

    Every market gets price correlation. News goes only to the top
    candidate_limit open markets by volume; their questions are collapsed to
    distinct search queries, at most max_queries of which are looked up,
    batch_size at a time. A query whose lookup fails or times out simply
    contributes no news.
    """
    stats = EnrichmentStats()
    if quotes:
        attach_prices(markets, quotes)

    candidates = select_candidates(markets, limit=candidate_limit)
    query_map = group_by_query(candidates)
    queries = list(query_map)[:max_queries]
    stats.candidates = len(candidates)
    stats.queries = len(queries)
    stats.queries_dropped = len(query_map) - len(queries)

    results = await gather_in_batches(queries, lookup, batch_size=batch_size, timeout=lookup_timeout_sec)

    by_id = {m.id: m for m in markets}
    for query in queries:
        items = (results.get(query) or [])[:max_items]
        if not items:
            stats.lookups_empty += 1
            continue
        stats.lookups_ok += 1
        for market_id in query_map[query]:
            market = by_id.get(market_id)
            if market is not None:
                market.news = list(items)

    log.info(
        "enrichment_done",
        markets=len(markets),
        candidates=stats.candidates,
        queries=stats.queries,
        queries_dropped=stats.queries_dropped,
        lookups_ok=stats.lookups_ok,
        lookups_empty=stats.lookups_empty,
    )
    return stats


async def scan_markets(
    http: httpx.AsyncClient,
    settings: Settings,
    prices: PriceCache | None = None,
) -> tuple[list[Market], LivePrices | None]:
    """Fetch the listing, then enrich it. Upstream failures only reduce enrichment."""
    markets = await fetch_listing(
        http,
        page_size=settings.gamma_page_size,
        pages=settings.gamma_pages,
        base_url=settings.gamma_api_base,
    )
    live: LivePrices | None = None
    if prices is not None:
        try:
            live = await prices.get()
        except Exception as e:
            log.warning("prices_unavailable", error=str(e) or type(e).__name__)
    news = NewsFeedClient.from_settings(http, settings)
    await enrich_markets(
        markets,
        news.lookup,
        live.quotes if live is not None else None,
        candidate_limit=settings.news_candidate_limit,
        max_queries=settings.news_max_queries,
        batch_size=settings.news_batch_size,
        lookup_timeout_sec=settings.news_lookup_timeout_sec,
        max_items=settings.news_max_items,
    )
    return markets, live
