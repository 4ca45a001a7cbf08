"""Google News RSS search client."""

from __future__ import annotations

import asyncio

import httpx
import structlog

from predscan.config import Settings
from predscan.models.news import NewsItem
from predscan.news.feed import parse_rss_items

log = structlog.get_logger(__name__)

RSS_SEARCH_URL = "https://news.google.com/rss/search"
USER_AGENT = "Mozilla/5.0 (compatible; PolymarketScanner/1.0)"


class NewsFetchError(Exception):
    """News feed unreachable or returned a non-success status."""


def feed_params(query: str) -> dict[str, str]:
    return {"q": query, "hl": "en-US", "gl": "US", "ceid": "US:en"}


class NewsFeedClient:
    """One feed request per query, bounded by a per-request timeout."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        rss_base: str = RSS_SEARCH_URL,
        user_agent: str = USER_AGENT,
        timeout_sec: float = 5.0,
        max_items: int = 5,
    ) -> None:
        self.http = http
        self.rss_base = rss_base
        self.user_agent = user_agent
        self.timeout_sec = timeout_sec
        self.max_items = max_items

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: Settings) -> NewsFeedClient:
        return cls(
            http,
            rss_base=settings.news_rss_base,
            user_agent=settings.news_user_agent,
            timeout_sec=settings.news_lookup_timeout_sec,
            max_items=settings.news_max_items,
        )

    async def search(self, query: str) -> list[NewsItem]:
        """Fetch and parse headlines for query. Raises NewsFetchError on upstream failure."""
        try:
            resp = await asyncio.wait_for(
                self.http.get(
                    self.rss_base,
                    params=feed_params(query),
                    headers={"User-Agent": self.user_agent},
                ),
                timeout=self.timeout_sec,
            )
        except TimeoutError as e:
            raise NewsFetchError(f"timed out after {self.timeout_sec}s") from e
        except httpx.HTTPError as e:
            raise NewsFetchError(str(e) or type(e).__name__) from e
        if not resp.is_success:
            raise NewsFetchError(f"status {resp.status_code}")
        return parse_rss_items(resp.text, limit=self.max_items)

    async def lookup(self, query: str) -> list[NewsItem]:
        """Like search, but any failure means no headlines for this query."""
        try:
            return await self.search(query)
        except NewsFetchError as e:
            log.warning("news_lookup_failed", query=query, error=str(e))
        except Exception as e:
            log.warning("news_lookup_error", query=query, error=str(e), error_type=type(e).__name__)
        return []
