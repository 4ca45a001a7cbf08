"""FastAPI backend - enriched market listing, news lookup, live prices."""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

import httpx
import structlog
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from predscan.api.schemas import ErrorResponse, HealthResponse, MarketsResponse, NewsResponse
from predscan.config import Settings, get_settings
from predscan.enrichment.orchestrator import scan_markets
from predscan.news.client import NewsFeedClient, NewsFetchError
from predscan.news.query import extract_search_terms
from predscan.prices.cache import PriceCache
from predscan.prices.sources import fetch_live_prices

log = structlog.get_logger(__name__)

# Set by run_api() so the app built at import time picks up the profile and config dir.
_config_profile: str | None = None
_config_dir: Path | None = None

# Edge-cache hints (s-maxage, stale-while-revalidate)
LISTING_CACHE = "s-maxage=30, stale-while-revalidate=60"
NEWS_CACHE = "s-maxage=300, stale-while-revalidate=600"

router = APIRouter()


def _json(content: Any, cache_control: str, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=content, headers={"Cache-Control": cache_control})


def _error_json(code: str, message: str, status_code: int = 500) -> JSONResponse:
    """Return consistent error JSON: { error, code }."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message, code=code).model_dump(),
    )


@router.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok")


@router.get(
    "/markets",
    response_model=MarketsResponse,
    responses={500: {"model": ErrorResponse}},
)
async def markets_list(
    request: Request,
    prices: bool = Query(True, description="Attach the best-matching live price to each market"),
):
    """Current markets (deduplicated, all pages) with news for the most active ones."""
    state = request.app.state
    try:
        markets, live = await scan_markets(state.http, state.settings, state.prices if prices else None)
        body: dict[str, Any] = {"count": len(markets), "markets": [m.to_json() for m in markets]}
        if live is not None:
            body["livePrices"] = live.to_json()
        return _json(body, LISTING_CACHE)
    except Exception as e:
        log.exception("markets_list_failed")
        return _error_json("internal_error", str(e) or type(e).__name__)


@router.get(
    "/news",
    response_model=NewsResponse,
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def news_search(
    request: Request,
    q: str | None = Query(None, description="Free-text market question"),
):
    """Headlines for one question, searched by its normalized query."""
    if not q or not q.strip():
        return _error_json("missing_query", "Missing q parameter", status_code=400)
    state = request.app.state
    try:
        query = extract_search_terms(q)
        items = await NewsFeedClient.from_settings(state.http, state.settings).search(query)
        body = NewsResponse(query=query, items=items)
        return _json(body.model_dump(mode="json", by_alias=True), NEWS_CACHE)
    except NewsFetchError as e:
        log.warning("news_search_upstream_failed", q=q, error=str(e))
        return _error_json("upstream_error", "Failed to fetch news", status_code=502)
    except Exception as e:
        log.exception("news_search_failed", q=q)
        return _error_json("internal_error", str(e) or type(e).__name__)


@router.get("/prices", responses={500: {"model": ErrorResponse}})
async def live_prices(request: Request):
    """Live reference quotes keyed by asset code, plus fetchedAt."""
    try:
        live = await request.app.state.prices.get()
        return _json(live.to_json(), LISTING_CACHE)
    except Exception as e:
        log.exception("live_prices_failed")
        return _error_json("internal_error", str(e) or type(e).__name__)


def create_app(settings: Settings | None = None, http: httpx.AsyncClient | None = None) -> FastAPI:
    """Build the app. A caller-supplied http client is used as-is and not closed on shutdown."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings or get_settings(_config_profile, _config_dir)
        owns_http = http is None
        client = http or httpx.AsyncClient(timeout=app.state.settings.gamma_timeout_sec, follow_redirects=True)
        app.state.http = client
        app.state.prices = PriceCache(
            lambda: fetch_live_prices(client),
            ttl_sec=app.state.settings.prices_ttl_sec,
        )
        yield
        if owns_http:
            await client.aclose()

    app = FastAPI(title="predscan API", version="0.1.0", lifespan=lifespan)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET"], allow_headers=["*"])
    app.include_router(router)
    return app


app = create_app()


def run_api(
    host: str = "127.0.0.1",
    port: int = 8000,
    profile: str | None = None,
    config_dir: Path | None = None,
) -> None:
    global _config_profile, _config_dir
    _config_profile = profile
    _config_dir = config_dir
    import uvicorn

    uvicorn.run("predscan.api.main:app", host=host, port=port, reload=False)
