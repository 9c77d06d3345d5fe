from nicegui import ui
import logging

logger = logging.getLogger(__name__)


def nav(current: str = ''):
    with ui.element('div').classes('navbar'):
        with ui.element('div').classes('nav-left'):
            ui.link('StockView', '/').classes('brand')
        with ui.element('div').classes('nav-right'):
            if current != 'Home':
                ui.link('Search', '/')
            if current and current != 'Home':
                ui.label(current).classes('text-grey-5')


def footer():
    with ui.element('footer').classes('footer'):
        ui.html('<div><strong>StockView</strong> © 2025</div>')
        ui.html('<div>Market data: Polygon.io</div>')
