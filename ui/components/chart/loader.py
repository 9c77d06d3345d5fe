import logging
import random
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Awaitable, Callable, Optional
from zoneinfo import ZoneInfo

from config import settings
from exceptions import PriceFetchError
from schemas.prices import Period, Sample, Timespan
from utils.dates import period_window
from .normalizer import normalize
from .render_model import ChartModel, build_series

logger = logging.getLogger(__name__)

FetchPrices = Callable[[str, date, date, Timespan, int], Awaitable[list[Sample]]]

FETCH_ERROR_MESSAGE = "Failed to load price data"


class ViewStatus(StrEnum):
    LOADING = "loading"
    ERROR = "error"
    INSUFFICIENT = "insufficient"
    READY = "ready"


@dataclass(frozen=True)
class ChartView:
    """Everything the chart needs to render one (ticker, period) load."""
    status: ViewStatus
    ticker: str
    period: Period
    token: int
    series: tuple[Sample, ...] = ()
    model: Optional[ChartModel] = None
    raw_count: int = 0
    error: Optional[str] = None


@dataclass
class PriceSeriesLoader:
    """
    Fetch -> normalize -> build pipeline with stale-response protection.

    Every `load` call takes the next request token; when the awaited fetch
    completes after a newer `load` has started, its result is dropped without
    touching `view` or notifying subscribers.
    """
    fetch: FetchPrices
    target: int = settings.CHART_TARGET_POINTS
    seed: int = settings.CHART_JITTER_SEED
    tz: Optional[ZoneInfo] = None
    view: Optional[ChartView] = None
    _token: int = 0
    _listeners: list[Callable[[ChartView], None]] = field(default_factory=list)

    @property
    def token(self) -> int:
        return self._token

    def subscribe(self, callback: Callable[[ChartView], None]) -> None:
        self._listeners.append(callback)

    def _publish(self, view: ChartView) -> None:
        self.view = view
        for callback in self._listeners:
            callback(view)

    async def load(self, ticker: str, period: Period, today: Optional[date] = None) -> Optional[ChartView]:
        """
        Load and prepare the series for `ticker` over `period`.

        Args:
            ticker: Ticker symbol.
            period: Chart period, selects the fetch window and labels.
            today: Reference day for the fetch window (tests pin it).

        Returns:
            The published view, or None when the result was superseded.
        """
        self._token += 1
        token = self._token
        window = period_window(period, today)
        logger.info(
            f"PriceSeriesLoader.load: token={token}, ticker={ticker!r}, period={period}, "
            f"from={window.date_from}, to={window.date_to}, "
            f"timespan={window.timespan}, multiplier={window.multiplier}"
        )
        self._publish(ChartView(status=ViewStatus.LOADING, ticker=ticker, period=period, token=token))

        try:
            raw = await self.fetch(ticker, window.date_from, window.date_to, window.timespan, window.multiplier)
        except PriceFetchError as e:
            if token != self._token:
                logger.info(f"PriceSeriesLoader.load: discarding stale failure token={token}")
                return None
            logger.warning(f"PriceSeriesLoader.load: fetch failed for {ticker!r}: {e}")
            view = ChartView(status=ViewStatus.ERROR, ticker=ticker, period=period,
                             token=token, error=FETCH_ERROR_MESSAGE)
            self._publish(view)
            return view

        if token != self._token:
            logger.info(f"PriceSeriesLoader.load: discarding stale result token={token}, current={self._token}")
            return None

        series = normalize(raw, period, target=self.target, rng=random.Random(self.seed))
        if len(series) < 2:
            view = ChartView(status=ViewStatus.INSUFFICIENT, ticker=ticker, period=period,
                             token=token, series=series, raw_count=len(raw))
        else:
            view = ChartView(status=ViewStatus.READY, ticker=ticker, period=period, token=token,
                             series=series, model=build_series(series, period, self.tz), raw_count=len(raw))
        self._publish(view)
        return view
