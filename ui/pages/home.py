from nicegui import ui

from components.navbar_footer import nav, footer
from static.style import add_style
from utils.utils import normalize_ticker

import logging

logger = logging.getLogger(__name__)


@ui.page('/')
async def home():
    add_style()
    nav("Home")

    def open_chart():
        ticker = normalize_ticker(ticker_input.value)
        if ticker is None:
            logger.info(f"home: rejected ticker input {ticker_input.value!r}")
            ui.notify('Enter a valid ticker symbol, e.g. AAPL or BRK.B', type='warning')
            return
        ui.navigate.to(f'/stock/{ticker}')

    with ui.column().classes('page-body items-center'):
        with ui.card().classes('search-card items-center'):
            ui.label('Stock price chart').classes('text-h5 text-bold')
            ui.label('Drag across the chart to measure the change between two points.') \
                .classes('text-grey-5 q-mb-md')
            with ui.row().classes('items-center gap-2'):
                ticker_input = ui.input('Ticker', placeholder='AAPL') \
                    .props('dark outlined dense autofocus') \
                    .on('keydown.enter', open_chart)
                ui.button('Show chart', on_click=open_chart).props('color=positive unelevated')
    footer()
