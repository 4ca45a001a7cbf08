"""Gamma listing aggregation: pagination, dedupe, degraded pages, candidate ranking."""

import asyncio

import httpx
import pytest

from predscan.ingestion.polymarket.gamma import (
    dedupe_rows,
    fetch_listing,
    fetch_page,
    parse_markets,
    select_candidates,
)
from predscan.models import Market
from tests.conftest import gamma_market


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def _paged(pages: dict[int, object], status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        offset = int(request.url.params["offset"])
        body = pages.get(offset)
        if isinstance(body, Exception):
            raise body
        if body is None:
            return httpx.Response(500, json={"error": "boom"})
        return httpx.Response(status, json=body)

    return handler


@pytest.mark.asyncio
async def test_fetch_page_sends_listing_params():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        seen["path"] = request.url.path
        return httpx.Response(200, json=[gamma_market("1")])

    async with _client(handler) as client:
        rows = await fetch_page(client, offset=200, limit=100)
    assert rows == [gamma_market("1")]
    assert seen["path"] == "/markets"
    assert seen["closed"] == "false"
    assert seen["offset"] == "200"
    assert seen["limit"] == "100"
    assert seen["order"] == "volume24hr"
    assert seen["ascending"] == "false"


@pytest.mark.asyncio
async def test_pages_concatenated_in_order_and_deduped():
    pages = {
        0: [gamma_market("1", question="first"), gamma_market("2", question="two (page 0)")],
        2: [gamma_market("2", question="two (page 1)"), gamma_market("3")],
        4: [gamma_market("4"), gamma_market("1", question="dup")],
    }
    async with _client(_paged(pages)) as client:
        markets = await fetch_listing(client, page_size=2, pages=3)
    assert [m.id for m in markets] == ["1", "2", "3", "4"]
    assert markets[0].question == "first"
    assert markets[1].question == "two (page 0)"


@pytest.mark.asyncio
async def test_order_independent_of_completion_order():
    async def handler(request):
        offset = int(request.url.params["offset"])
        # first page finishes last
        await asyncio.sleep({0: 0.05, 1: 0.0, 2: 0.02}[offset])
        return httpx.Response(200, json=[gamma_market(str(offset))])

    async with _client(handler) as client:
        markets = await fetch_listing(client, page_size=1, pages=3)
    assert [m.id for m in markets] == ["0", "1", "2"]


@pytest.mark.asyncio
async def test_failed_pages_degrade_to_empty():
    pages = {
        0: httpx.ConnectError("refused"),
        100: [gamma_market("a")],
        # offset 200 -> 500
    }
    async with _client(_paged(pages)) as client:
        markets = await fetch_listing(client)
    assert [m.id for m in markets] == ["a"]


@pytest.mark.asyncio
async def test_all_pages_failing_yields_no_markets():
    async with _client(_paged({})) as client:
        assert await fetch_listing(client) == []


@pytest.mark.asyncio
async def test_non_list_body_is_empty_page():
    async with _client(_paged({0: {"data": [gamma_market("x")]}})) as client:
        assert await fetch_page(client, 0, 100) == []


@pytest.mark.asyncio
async def test_invalid_json_is_empty_page():
    def handler(request):
        return httpx.Response(200, content=b"<html>maintenance</html>")

    async with _client(handler) as client:
        assert await fetch_page(client, 0, 100) == []


def test_parse_markets_skips_records_without_id_and_keeps_extras():
    markets = parse_markets([{"question": "no id"}, gamma_market(42, slug="btc-100k")])
    assert len(markets) == 1
    m = markets[0]
    assert m.id == "42"
    assert m.to_json()["slug"] == "btc-100k"
    assert "news" not in m.to_json()


def test_dedupe_keeps_first():
    rows = [{"id": "1", "question": "a"}, {"id": 1, "question": "b"}, {"id": "2"}, {"question": "x"}, {"question": "y"}]
    out = dedupe_rows(rows)
    assert out == [{"id": "1", "question": "a"}, {"id": "2"}, {"question": "x"}, {"question": "y"}]


@pytest.mark.asyncio
async def test_first_occurrence_wins_even_with_unparseable_volume():
    pages = {0: [{"id": "7", "question": "first", "volume24hr": "n/a"}, {"id": "7", "question": "second"}]}
    async with _client(_paged(pages)) as client:
        markets = await fetch_listing(client, page_size=100, pages=1)
    assert [(m.id, m.question) for m in markets] == [("7", "first")]
    assert markets[0].volume_24hr is None
    assert markets[0].activity == 0.0


def test_to_json_emits_upstream_values_unchanged():
    (m,) = parse_markets([{"id": 42, "question": "q", "volume24hr": "n/a", "active": None}])
    assert m.id == "42"
    body = m.to_json()
    assert body == {"id": 42, "question": "q", "volume24hr": "n/a", "active": None}
    m.news = []
    assert m.to_json()["news"] == []
    assert m.to_json()["id"] == 42


def test_to_json_without_raw_record():
    m = Market(id="9", question="built locally")
    assert m.to_json() == {"id": "9", "question": "built locally"}


def test_select_candidates_filters_and_ranks():
    markets = parse_markets(
        [
            gamma_market("low", volume24hr=10),
            gamma_market("none", volume24hr=None),
            gamma_market("high", volume24hr=500),
            gamma_market("closed", volume24hr=9999, closed=True),
            gamma_market("inactive", volume24hr=9999, active=False),
            gamma_market("blank", volume24hr=9999, question=""),
            gamma_market("tie-a", volume24hr=10),
        ]
    )
    ranked = select_candidates(markets)
    assert [m.id for m in ranked] == ["high", "low", "tie-a", "none"]
    assert [m.activity for m in ranked] == sorted((m.activity for m in ranked), reverse=True)


def test_select_candidates_limit():
    markets = parse_markets([gamma_market(str(i), volume24hr=i) for i in range(80)])
    top = select_candidates(markets, limit=50)
    assert len(top) == 50
    assert top[0].id == "79"
    assert top[-1].id == "30"
