"""Market question -> news search query.

Best-effort text rewrites: drop the "Will ..." framing, deadline phrases and
resolution verbs, then expand ticker abbreviations so the search feed sees
plain names. Rule order matters; abbreviations are expanded last so that the
verb/date rules never touch the expanded text.
"""

from __future__ import annotations

import re

MAX_QUERY_LEN = 100

_MONTHS = (
    "january|february|march|april|may|june|july|august|september|october|november|december"
)

_REMOVALS: list[re.Pattern[str]] = [
    re.compile(r"^will\s+", re.IGNORECASE),
    re.compile(r"\?$"),
    re.compile(rf"\bby\s+({_MONTHS})\s+\d{{1,2}}(,?\s*\d{{4}})?\b", re.IGNORECASE),
    re.compile(rf"\bin\s+({_MONTHS})(\s+\d{{4}})?\b", re.IGNORECASE),
    re.compile(rf"\bafter the\s+({_MONTHS})\s+\d{{4}}\s+meeting\b", re.IGNORECASE),
    re.compile(r"\b(reach|hit|close above|end above|end up on)\b", re.IGNORECASE),
    re.compile(r"\b(before|after|by|on)\s+\d{1,2}/\d{1,2}\b", re.IGNORECASE),
    re.compile(r"\b\d{1,2}/\d{1,2}(/\d{2,4})?\b"),
]

# Exact-case, whole-word. Tuned for crypto/macro markets; extend by hand.
ABBREVIATIONS: dict[str, str] = {
    "S&P": "S&P 500",
    "ETH": "Ethereum",
    "BTC": "Bitcoin",
    "Fed": "Federal Reserve",
}

_EXPANSIONS = [(re.compile(rf"\b{re.escape(k)}\b"), v) for k, v in ABBREVIATIONS.items()]


def extract_search_terms(question: str) -> str:
    """Return the canonical search query for a market question. Never raises."""
    if not isinstance(question, str):
        return ""
    q = question
    for pattern in _REMOVALS:
        q = pattern.sub("", q)
    q = q.strip()
    for pattern, expansion in _EXPANSIONS:
        q = pattern.sub(expansion, q)
    return q[:MAX_QUERY_LEN]
