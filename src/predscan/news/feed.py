"""RSS item extraction - tolerant of malformed or partial markup.

Pattern-based rather than a full XML parse: search feeds regularly ship
unescaped ampersands and truncated bodies, and one bad item must not cost the
others. Malformed input yields fewer items, never an exception.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Any

from predscan.models.news import NewsItem

DESCRIPTION_MAX_LEN = 200

_ITEM_RE = re.compile(r"<item>(.*?)</item>", re.DOTALL)
_TAG_STRIP_RE = re.compile(r"<[^>]*>")

# Decoded in this order; "&amp;" first.
_ENTITIES: list[tuple[str, str]] = [
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&#x27;", "'"),
]


@lru_cache(maxsize=32)
def _tag_pattern(tag: str) -> re.Pattern[str]:
    t = re.escape(tag)
    return re.compile(rf"<{t}[^>]*>\s*(?:<!\[CDATA\[)?(.*?)(?:\]\]>)?\s*</{t}>", re.DOTALL)


def iter_item_blocks(xml: str):
    """Yield the inner text of each <item>...</item> block, in feed order."""
    for m in _ITEM_RE.finditer(xml):
        yield m.group(1)


def extract_tag(block: str, tag: str) -> str | None:
    """First <tag ...>value</tag> in block, CDATA unwrapped and trimmed. None if absent."""
    m = _tag_pattern(tag).search(block)
    return m.group(1).strip() if m else None


def decode_entities(s: str) -> str:
    for entity, char in _ENTITIES:
        s = s.replace(entity, char)
    return s


def _clean_description(raw: str | None) -> str:
    if not raw:
        return ""
    return _TAG_STRIP_RE.sub("", raw)[:DESCRIPTION_MAX_LEN]


def parse_item_block(block: str) -> NewsItem | None:
    """Build a NewsItem from one item block; None when it has no title."""
    title = extract_tag(block, "title")
    if not title:
        return None
    source = extract_tag(block, "source")
    return NewsItem(
        title=decode_entities(title),
        url=extract_tag(block, "link") or "",
        published_at=extract_tag(block, "pubDate") or "",
        source=decode_entities(source) if source else "",
        description=decode_entities(_clean_description(extract_tag(block, "description"))),
    )


def parse_rss_items(xml: Any, limit: int | None = None) -> list[NewsItem]:
    """Parse feed text into NewsItems in feed order, optionally capped at limit."""
    if not isinstance(xml, str):
        return []
    items: list[NewsItem] = []
    for block in iter_item_blocks(xml):
        if limit is not None and len(items) >= limit:
            break
        item = parse_item_block(block)
        if item is not None:
            items.append(item)
    return items
