import httpx
import logging
from datetime import date
from typing import Optional, Dict, Any, List
from nicegui import app

from config import settings
from exceptions import PriceFetchError
from schemas.prices import AggregatesResponse, Sample, Timespan
from utils.utils import handle_api_error

logger = logging.getLogger(__name__)


class PriceClient:
    """
    Thin async client for Polygon-compatible aggregate bars.

    Uses a shared `httpx.AsyncClient` stored in `app.state.price_httpx`
    unless a client is passed explicitly (tests pass one backed by
    `httpx.MockTransport`).
    """
    AGGREGATES_PATH = "/v2/aggs/ticker/{ticker}/range/{multiplier}/{timespan}/{date_from}/{date_to}"

    def __init__(self, client: Optional[httpx.AsyncClient] = None, api_key: Optional[str] = None) -> None:
        """
        Bind this client to an AsyncClient.

        Args:
            client: Explicit AsyncClient; defaults to `app.state.price_httpx`.
            api_key: API key sent as `apiKey`; defaults to `settings.POLYGON_API_KEY`.
        """
        self.client: httpx.AsyncClient = client if client is not None else app.state.price_httpx
        self.api_key = settings.POLYGON_API_KEY if api_key is None else api_key
        logger.info("PriceClient initialized with shared httpx.AsyncClient")

    async def _request(
        self,
        method: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response | None:
        """
        Perform an HTTP request to the market data service.

        Args:
            method: HTTP method (e.g., "GET").
            url: Path or absolute URL. If path-like, the client's base_url is used.
            params: Query parameters.

        Returns:
            httpx.Response on success, or None if a timeout/HTTP error/other exception occurred.
        """
        try:
            resp = await self.client.request(method, url, params=params)
        except (httpx.ConnectTimeout, httpx.ReadTimeout):
            logger.warning(f"Market data service timeout {url}")
            return None
        except httpx.HTTPError:
            logger.error(f"Market data service HTTP error {url}")
            return None
        except Exception:
            logger.exception(f"Market data service unexpected error {url}")
            return None

        return resp

    @staticmethod
    def rows_to_samples(rows: List[Sample]) -> List[Sample]:
        """
        Sort bars ascending by timestamp and drop duplicate timestamps.

        The first bar seen for a timestamp wins.
        """
        out: List[Sample] = []
        seen: set[int] = set()
        for row in sorted(rows, key=lambda s: s.timestamp):
            if row.timestamp in seen:
                continue
            seen.add(row.timestamp)
            out.append(row)
        return out

    async def get_prices(
        self,
        ticker: str,
        date_from: date | str,
        date_to: date | str,
        timespan: Timespan | str = Timespan.DAY,
        multiplier: int = 1,
    ) -> List[Sample]:
        """
        Fetch OHLCV aggregate bars for a ticker.

        Args:
            ticker: Ticker symbol (e.g. "AAPL").
            date_from: First day of the window (YYYY-MM-DD or date).
            date_to: Last day of the window (YYYY-MM-DD or date).
            timespan: Bar size unit ("minute", "hour", "day", "week").
            multiplier: Number of timespan units per bar.

        Returns:
            Bars sorted ascending by timestamp with unique timestamps
            (possibly empty).

        Raises:
            PriceFetchError: on timeout, transport error, non-200 status
                or a payload that cannot be decoded.
        """
        logger.info(
            f"get_prices: ticker={ticker!r}, from={date_from}, to={date_to}, "
            f"timespan={timespan}, multiplier={multiplier}"
        )
        path = self.AGGREGATES_PATH.format(
            ticker=ticker,
            multiplier=multiplier,
            timespan=Timespan(timespan).value,
            date_from=str(date_from),
            date_to=str(date_to),
        )
        params = {"adjusted": "true", "sort": "asc", "apiKey": self.api_key}

        resp = await self._request("GET", path, params=params)
        if resp is None:
            logger.warning(f"get_prices({ticker!r}): no response from service")
            raise PriceFetchError()

        if resp.status_code != 200:
            logger.error(
                f"get_prices({ticker!r}) unexpected status {resp.status_code}: {handle_api_error(resp)}"
            )
            raise PriceFetchError()

        try:
            parsed = AggregatesResponse.model_validate(resp.json())
        except ValueError:
            logger.exception(f"Failed to decode JSON for get_prices({ticker!r})")
            raise PriceFetchError()

        dropped = parsed.results_count - len(parsed.results)
        if dropped > 0:
            logger.warning(f"get_prices({ticker!r}): skipped {dropped} bars without a close price")

        samples = self.rows_to_samples(parsed.results)
        logger.info(f"get_prices({ticker!r}) -> {len(samples)} bars")
        return samples
