from nicegui import ui
from fastapi import Request

from components.navbar_footer import nav, footer
from static.style import add_style

import logging

logger = logging.getLogger(__name__)

TITLES = {
    400: 'That ticker or period is not valid.',
    404: 'Page not found.',
}


def error_title(status_code: int) -> str:
    return TITLES.get(status_code, 'Something went wrong.')


def error_page(status_code: int, message: str):
    add_style()
    nav()
    with ui.column().classes('page-body items-center'):
        with ui.card().classes('search-card items-center text-center'):
            ui.label(str(status_code)).classes('text-h2 text-bold text-grey-7')
            ui.label(error_title(status_code)).classes('text-h6 text-negative')
            ui.label(message).classes('q-mt-sm text-grey-5')
            ui.button('Back to search', on_click=lambda: ui.navigate.to('/')) \
                .props('color=positive unelevated no-caps') \
                .classes('q-mt-lg')
    footer()


@ui.page('/error')
def dynamic_error_page(request: Request):
    try:
        code = int(request.query_params.get('status', 500))
    except ValueError:
        code = 500
    message = request.query_params.get('message', 'Unexpected error')
    logger.info(f"dynamic_error_page: status={code}, message={message!r}")

    error_page(code, message)
