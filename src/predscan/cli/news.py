"""News subcommand: single-question headline lookup."""

from __future__ import annotations

import asyncio

import httpx
import typer

from predscan.news.client import NewsFeedClient, NewsFetchError
from predscan.news.query import extract_search_terms

app = typer.Typer(help="News search for a market question")


@app.command("search")
def search(
    ctx: typer.Context,
    question: str = typer.Argument(..., help="Market question, e.g. 'Will BTC reach $100k by December 31?'"),
) -> None:
    """Normalize the question and print matching headlines."""
    settings = ctx.obj["settings"]
    query = extract_search_terms(question)
    typer.echo(f"Query: {query}")

    async def _run():
        async with httpx.AsyncClient(follow_redirects=True) as http:
            return await NewsFeedClient.from_settings(http, settings).search(query)

    try:
        items = asyncio.run(_run())
    except NewsFetchError as e:
        typer.echo(f"News feed unavailable: {e}", err=True)
        raise typer.Exit(code=1)
    for item in items:
        typer.echo(f"  {item.title}")
        typer.echo(f"    {item.source}  {item.published_at}  {item.url}")
    typer.echo(f"Total: {len(items)} items")
