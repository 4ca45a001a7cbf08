"""Markets subcommand: enriched listing."""

from __future__ import annotations

import asyncio

import httpx
import typer

from predscan.enrichment.orchestrator import scan_markets
from predscan.prices.cache import PriceCache
from predscan.prices.sources import fetch_live_prices

app = typer.Typer(help="Market listing with news and live prices")


async def _scan(settings, with_prices: bool):
    async with httpx.AsyncClient(timeout=settings.gamma_timeout_sec, follow_redirects=True) as http:
        cache = PriceCache(lambda: fetch_live_prices(http), ttl_sec=settings.prices_ttl_sec) if with_prices else None
        markets, _ = await scan_markets(http, settings, cache)
        return markets


@app.command("list")
def list_markets(
    ctx: typer.Context,
    limit: int = typer.Option(25, "--limit", "-n", help="Rows to print (by 24h volume)"),
    with_prices: bool = typer.Option(True, "--prices/--no-prices", help="Correlate live reference prices"),
    show_news: bool = typer.Option(False, "--news", help="Print headlines under each market"),
) -> None:
    """Fetch the current listing, enrich it, and print the most active markets."""
    settings = ctx.obj["settings"]
    markets = asyncio.run(_scan(settings, with_prices))
    rows = sorted(markets, key=lambda m: m.activity, reverse=True)[:limit]
    for m in rows:
        question = (m.question or "")[:60]
        price = ""
        if m.relevant_live_price is not None:
            p = m.relevant_live_price
            price = f"  [{p.label} {p.price:,.2f} {p.change_24h:+.2f}%]"
        n_news = len(m.news) if m.news else 0
        typer.echo(f"  {m.id[:12]:<12}  {m.activity:>14,.0f}  {n_news} news  {question}{price}")
        if show_news and m.news:
            for item in m.news:
                typer.echo(f"      - {item.title[:90]} ({item.source})")
    typer.echo(f"Total: {len(markets)} markets")
