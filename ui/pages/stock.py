from nicegui import ui

from components.navbar_footer import nav, footer
from components.price_chart import StockPriceChart
from exceptions import BadRequestError
from schemas.prices import Period
from static.style import add_style
from utils.utils import normalize_ticker

import logging

logger = logging.getLogger(__name__)


@ui.page('/stock/{ticker}')
async def stock_page(ticker: str, period: str = Period.ONE_DAY.value):
    symbol = normalize_ticker(ticker)
    if symbol is None:
        raise BadRequestError(f"Invalid ticker symbol: {ticker!r}")
    try:
        active = Period(period.upper())
    except ValueError:
        raise BadRequestError(f"Unknown period: {period!r}")

    logger.info(f"stock_page: ticker={symbol}, period={active}")
    add_style()
    nav(symbol)
    with ui.column().classes('page-body'):
        StockPriceChart(symbol, period=active)
    footer()
