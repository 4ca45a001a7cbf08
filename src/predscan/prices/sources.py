"""Upstream reference price fetchers - CoinGecko (crypto, gold) and Yahoo (S&P 500).

Each fetcher returns whatever quotes it could build; an upstream failure just
means fewer entries.
"""

from __future__ import annotations

import asyncio
import time
from datetime import datetime, timezone
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from predscan.models.price import LivePrices, PriceQuote

log = structlog.get_logger(__name__)

COINGECKO_PRICE_URL = "https://api.coingecko.com/api/v3/simple/price"
YAHOO_CHART_URLS = (
    "https://query1.finance.yahoo.com/v8/finance/chart/%5EGSPC",
    "https://query2.finance.yahoo.com/v8/finance/chart/%5EGSPC",
)
USER_AGENT = "PolymarketScanner/1.0"

# CoinGecko id -> asset code
CRYPTO_IDS = {"bitcoin": "btc", "ethereum": "eth", "solana": "sol", "ripple": "xrp"}
GOLD_ID = "tether-gold"


async def _get_json(
    client: httpx.AsyncClient, url: str, params: dict[str, str] | None, timeout: float
) -> Any:
    resp = await client.get(url, params=params, headers={"User-Agent": USER_AGENT}, timeout=timeout)
    resp.raise_for_status()
    return resp.json()


def _coingecko_quote(entry: Any) -> PriceQuote | None:
    if not isinstance(entry, dict) or entry.get("usd") is None:
        return None
    return PriceQuote(price=entry["usd"], change_24h=entry.get("usd_24h_change") or 0.0)


async def _fetch_coingecko(client: httpx.AsyncClient, ids: dict[str, str], timeout: float) -> dict[str, PriceQuote]:
    params = {"ids": ",".join(ids), "vs_currencies": "usd", "include_24hr_change": "true"}
    try:
        data = await _get_json(client, COINGECKO_PRICE_URL, params, timeout)
    except Exception as e:
        log.warning("coingecko_fetch_failed", ids=list(ids), error=str(e))
        return {}
    out: dict[str, PriceQuote] = {}
    if not isinstance(data, dict):
        return out
    for cg_id, code in ids.items():
        try:
            quote = _coingecko_quote(data.get(cg_id))
        except (ValidationError, ValueError, TypeError) as e:
            # one malformed entry costs only that asset
            log.warning("coingecko_entry_invalid", id=cg_id, error=str(e))
            continue
        if quote is not None:
            out[code] = quote
    return out


async def fetch_crypto(client: httpx.AsyncClient, timeout: float = 8.0) -> dict[str, PriceQuote]:
    return await _fetch_coingecko(client, CRYPTO_IDS, timeout)


async def fetch_gold(client: httpx.AsyncClient, timeout: float = 5.0) -> dict[str, PriceQuote]:
    return await _fetch_coingecko(client, {GOLD_ID: "gold"}, timeout)


def parse_chart_meta(data: Any, now: float | None = None, with_session: bool = True) -> PriceQuote | None:
    """S&P quote from a Yahoo chart payload. Change is vs previous close; 0 when unknown. Malformed -> None."""
    try:
        meta = data["chart"]["result"][0]["meta"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(meta, dict) or meta.get("regularMarketPrice") is None:
        return None
    try:
        price = float(meta["regularMarketPrice"])
        prev_close = meta.get("chartPreviousClose") or (meta.get("previousClose") if with_session else None)
        change = ((price - float(prev_close)) / float(prev_close)) * 100 if prev_close else 0.0
        market_open = False
        if with_session:
            regular = (meta.get("currentTradingPeriod") or {}).get("regular")
            if isinstance(regular, dict) and regular.get("start") is not None and regular.get("end") is not None:
                ts = int(now if now is not None else time.time())
                market_open = regular["start"] <= ts <= regular["end"]
        return PriceQuote(price=price, change_24h=change, market_open=market_open)
    except (ValidationError, ValueError, TypeError, AttributeError) as e:
        log.warning("yahoo_chart_invalid", error=str(e))
        return None


async def fetch_sp500(client: httpx.AsyncClient) -> dict[str, PriceQuote]:
    """Yahoo query1 first; query2 as fallback (no trading-session info)."""
    params = {"interval": "1d", "range": "1d"}
    for url, timeout, with_session in ((YAHOO_CHART_URLS[0], 8.0, True), (YAHOO_CHART_URLS[1], 5.0, False)):
        try:
            data = await _get_json(client, url, params, timeout)
        except Exception as e:
            log.warning("yahoo_fetch_failed", url=url, error=str(e))
            continue
        quote = parse_chart_meta(data, with_session=with_session)
        if quote is not None:
            return {"sp500": quote}
    return {}


async def fetch_live_prices(client: httpx.AsyncClient) -> LivePrices:
    """All sources concurrently, merged into one LivePrices stamped with the fetch time."""
    results = await asyncio.gather(
        fetch_crypto(client), fetch_gold(client), fetch_sp500(client), return_exceptions=True
    )
    quotes: dict[str, PriceQuote] = {}
    for part in results:
        if isinstance(part, BaseException):
            log.warning("price_source_failed", error=str(part) or type(part).__name__)
            continue
        quotes.update(part)
    return LivePrices(quotes=quotes, fetched_at=datetime.now(timezone.utc).isoformat())
