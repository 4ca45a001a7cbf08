"""Match a market question to one tracked reference asset."""

from __future__ import annotations

import re
from collections.abc import Mapping

from predscan.models.price import PriceQuote

# (pattern, asset code, label). Checked top to bottom; order is significant
# when a question mentions several assets.
PRICE_PATTERNS: list[tuple[re.Pattern[str], str, str]] = [
    (re.compile(r"\bbtc\b|bitcoin"), "btc", "Bitcoin"),
    (re.compile(r"\beth\b|ethereum"), "eth", "Ethereum"),
    (re.compile(r"\bsol\b|solana"), "sol", "Solana"),
    (re.compile(r"\bxrp\b|ripple"), "xrp", "XRP"),
    (re.compile(r"s&p|sp500|sp 500|\bspx\b"), "sp500", "S&P 500"),
    (re.compile(r"\bgold\b"), "gold", "Gold"),
]


def correlate_price(question: str, quotes: Mapping[str, PriceQuote]) -> PriceQuote | None:
    """First pattern matching the question whose asset has a quote; labelled copy or None."""
    if not question or not quotes:
        return None
    q = question.lower()
    for pattern, code, label in PRICE_PATTERNS:
        quote = quotes.get(code)
        if quote is not None and pattern.search(q):
            return quote.model_copy(update={"label": label})
    return None
