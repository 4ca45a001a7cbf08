"""Shared fixtures: RSS text builders and Gamma market records."""

from __future__ import annotations

from typing import Any

import pytest


def rss_item(
    title: str | None = "Headline",
    link: str | None = "https://example.com/a",
    pub_date: str | None = "Mon, 06 Jan 2025 10:00:00 GMT",
    source: str | None = "Example News",
    description: str | None = "Summary",
    cdata_title: bool = False,
) -> str:
    parts = []
    if title is not None:
        parts.append(f"<title><![CDATA[{title}]]></title>" if cdata_title else f"<title>{title}</title>")
    if link is not None:
        parts.append(f"<link>{link}</link>")
    if pub_date is not None:
        parts.append(f"<pubDate>{pub_date}</pubDate>")
    if description is not None:
        parts.append(f"<description>{description}</description>")
    if source is not None:
        parts.append(f'<source url="https://example.com">{source}</source>')
    return "<item>" + "".join(parts) + "</item>"


def rss_feed(*items: str) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?><rss version="2.0"><channel>'
        "<title>Google News</title>" + "\n".join(items) + "</channel></rss>"
    )


def gamma_market(
    id: str | int,
    question: str | None = "Will it happen?",
    volume24hr: float | None = 100.0,
    active: bool = True,
    closed: bool = False,
    **extra: Any,
) -> dict[str, Any]:
    row: dict[str, Any] = {"id": id, "question": question, "active": active, "closed": closed}
    if volume24hr is not None:
        row["volume24hr"] = volume24hr
    row.update(extra)
    return row


@pytest.fixture
def sample_feed() -> str:
    return rss_feed(
        rss_item(title="Bitcoin tops $100k", source="CoinDesk"),
        rss_item(title="ETF inflows &amp; outflows", cdata_title=True),
        rss_item(title=None),
        rss_item(title="Third headline", link=None, pub_date=None, source=None, description=None),
    )
