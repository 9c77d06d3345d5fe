from datetime import date

import httpx
import pytest

from clients.price_client import PriceClient
from exceptions import PriceFetchError
from schemas.prices import Sample, Timespan

BASE_URL = "https://api.test"


def make_client(handler):
    return httpx.AsyncClient(base_url=BASE_URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_get_prices_builds_request_and_sorts_rows():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["params"] = dict(request.url.params)
        return httpx.Response(200, json={
            "ticker": "AAPL",
            "status": "OK",
            "resultsCount": 3,
            "results": [
                {"t": 3000, "o": 3, "h": 3, "l": 3, "c": 3.5, "v": 30},
                {"t": 1000, "o": 1, "h": 1, "l": 1, "c": 1.5, "v": 10},
                {"t": 3000, "o": 9, "h": 9, "l": 9, "c": 9.0, "v": 90},
            ],
        })

    async with make_client(handler) as http:
        bars = await PriceClient(client=http, api_key="k").get_prices(
            "AAPL", date(2024, 3, 14), date(2024, 3, 15), Timespan.MINUTE, 5
        )

    assert seen["path"] == "/v2/aggs/ticker/AAPL/range/5/minute/2024-03-14/2024-03-15"
    assert seen["params"] == {"adjusted": "true", "sort": "asc", "apiKey": "k"}
    assert [b.timestamp for b in bars] == [1000, 3000]
    assert bars[1].close == 3.5


@pytest.mark.asyncio
async def test_missing_results_give_empty_list():
    def handler(request):
        return httpx.Response(200, json={"ticker": "AAPL", "status": "OK", "resultsCount": 0})

    async with make_client(handler) as http:
        assert await PriceClient(client=http, api_key="k").get_prices("AAPL", "2024-03-01", "2024-03-15") == []


@pytest.mark.parametrize("response", [
    httpx.Response(500, json={"error": "upstream down"}),
    httpx.Response(403, text="forbidden"),
    httpx.Response(200, text="not json"),
    httpx.Response(200, json={"results": [{"o": 1, "c": 2}]}),
])
@pytest.mark.asyncio
async def test_bad_responses_raise_fetch_error(response):
    async with make_client(lambda request: response) as http:
        with pytest.raises(PriceFetchError):
            await PriceClient(client=http, api_key="k").get_prices("AAPL", "2024-03-01", "2024-03-15")


@pytest.mark.asyncio
async def test_transport_error_raises_fetch_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with make_client(handler) as http:
        with pytest.raises(PriceFetchError):
            await PriceClient(client=http, api_key="k").get_prices("AAPL", "2024-03-01", "2024-03-15")


def test_rows_to_samples_keeps_first_duplicate():
    rows = [Sample(t=2, c=2.0), Sample(t=1, c=1.0), Sample(t=2, c=5.0)]
    assert [s.close for s in PriceClient.rows_to_samples(rows)] == [1.0, 2.0]


@pytest.mark.asyncio
async def test_bars_without_close_are_skipped():
    def handler(request):
        return httpx.Response(200, json={
            "ticker": "AAPL",
            "status": "OK",
            "resultsCount": 3,
            "results": [
                {"t": 1000, "o": 1, "c": 1.5},
                {"t": 2000, "o": 2, "c": None},
                {"t": 3000, "o": 3},
            ],
        })

    async with make_client(handler) as http:
        bars = await PriceClient(client=http, api_key="k").get_prices("AAPL", "2024-03-01", "2024-03-15")

    assert [(b.timestamp, b.close) for b in bars] == [(1000, 1.5)]


def test_sample_requires_close():
    with pytest.raises(ValueError):
        Sample(t=1000, o=1.0)
    assert Sample(t=1000, c=2.0, o=None, v=None).open == 0.0
