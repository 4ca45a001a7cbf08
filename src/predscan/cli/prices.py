"""Prices subcommand: live reference quotes."""

from __future__ import annotations

import asyncio

import httpx
import typer

from predscan.prices.sources import fetch_live_prices

app = typer.Typer(help="Live reference prices")


@app.command("show")
def show(ctx: typer.Context) -> None:
    """Fetch and print current quotes."""

    async def _run():
        async with httpx.AsyncClient(follow_redirects=True) as http:
            return await fetch_live_prices(http)

    live = asyncio.run(_run())
    for code, q in live.quotes.items():
        session = ""
        if q.market_open is not None:
            session = "  open" if q.market_open else "  closed"
        typer.echo(f"  {code:<6} {q.price:>14,.2f}  {q.change_24h:+.2f}%{session}")
    typer.echo(f"Fetched at {live.fetched_at}")
