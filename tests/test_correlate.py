"""Question -> reference price matching."""

import pytest

from predscan.models import PriceQuote
from predscan.prices.correlate import correlate_price


@pytest.fixture
def quotes():
    return {
        "btc": PriceQuote(price=97000.0, change_24h=1.5),
        "eth": PriceQuote(price=3400.0, change_24h=-0.4),
        "sol": PriceQuote(price=190.0, change_24h=2.0),
        "xrp": PriceQuote(price=2.1, change_24h=0.0),
        "sp500": PriceQuote(price=5900.0, change_24h=0.3, market_open=True),
        "gold": PriceQuote(price=2650.0, change_24h=0.1),
    }


@pytest.mark.parametrize(
    "question, label",
    [
        ("Will BTC reach $100k by December 31?", "Bitcoin"),
        ("Bitcoin above 90k on Friday?", "Bitcoin"),
        ("Will ETH flip?", "Ethereum"),
        ("Solana ETF approved?", "Solana"),
        ("Will XRP hit $3?", "XRP"),
        ("Ripple lawsuit settled?", "XRP"),
        ("Will the S&P 500 close above 6000?", "S&P 500"),
        ("SPX up in January?", "S&P 500"),
        ("Will gold hit $3000?", "Gold"),
    ],
)
def test_matches_asset(question, label, quotes):
    quote = correlate_price(question, quotes)
    assert quote is not None
    assert quote.label == label


def test_returns_labelled_copy(quotes):
    quote = correlate_price("will btc reach 100k", quotes)
    assert quote.price == 97000.0
    assert quotes["btc"].label is None


def test_short_tickers_need_word_boundary(quotes):
    assert correlate_price("Will the solution be adopted?", quotes) is None
    assert correlate_price("Will the method change?", quotes) is None
    assert correlate_price("Goldman Sachs layoffs?", quotes) is None


def test_priority_order_for_overlapping_patterns(quotes):
    assert correlate_price("Will the S&P or gold do better?", quotes).label == "S&P 500"
    assert correlate_price("Will gold outperform bitcoin?", quotes).label == "Bitcoin"


def test_skips_pattern_without_quote(quotes):
    only_gold = {"gold": quotes["gold"]}
    assert correlate_price("Bitcoin or gold in 2025?", only_gold).label == "Gold"
    assert correlate_price("Bitcoin above 100k?", only_gold) is None


def test_no_quotes_or_question(quotes):
    assert correlate_price("Will BTC reach 100k?", {}) is None
    assert correlate_price("", quotes) is None
    assert correlate_price("Who wins the election?", quotes) is None
