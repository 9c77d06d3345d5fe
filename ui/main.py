from pythonjsonlogger.json import JsonFormatter
import logging
import os
import httpx
from fastapi import Request
from fastapi.responses import Response

import pages.home
import pages.stock
import pages.error

from middleware.middleware import RequestLogMiddleware
from exceptions import BadRequestError, InternalServerError
from config import settings

from nicegui import ui, app
from nicegui.client import Client
from nicegui.page import page

ROOT_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__)))

log_dir = os.path.join(ROOT_DIR, settings.LOG_DIR)
os.makedirs(log_dir, exist_ok=True)
log_file = os.path.join(log_dir, 'ui.json')

logger = logging.getLogger()
logHandler = logging.FileHandler(log_file, encoding='utf-8')

log_format = (
    '%(levelname)s %(name)-12s %(asctime)s %(module)s %(process)d %(thread)d %(message)s'
)

formatter = JsonFormatter(log_format)
logHandler.setFormatter(formatter)

if logger.hasHandlers():
    logger.handlers.clear()

logger.addHandler(logHandler)
logger.setLevel(settings.LOG_LEVEL)

app.add_middleware(RequestLogMiddleware)


async def startup_httpx():
    app.state.price_httpx = httpx.AsyncClient(
        base_url=settings.POLYGON_API_URL.rstrip('/'),
        timeout=httpx.Timeout(connect=3.0, read=settings.HTTP_TIMEOUT_READ, write=5.0, pool=5.0),
        limits=httpx.Limits(max_keepalive_connections=10, max_connections=100),
        headers={'User-Agent': 'stock-price-chart/1.0'},
    )


async def shutdown_httpx():
    await app.state.price_httpx.aclose()

app.on_startup(startup_httpx)
app.on_shutdown(shutdown_httpx)


@app.exception_handler(Exception)
async def _exception_handler(request: Request, exception: Exception) -> Response:
    logger.info(f"exception_handler: {exception}/{type(exception)}")
    status = 400 if isinstance(exception, BadRequestError) else 500
    with Client(page(''), request=request) as client:
        pages.error.error_page(status, str(exception))
    return client.build_response(request, status)


@app.on_page_exception
def handle_page_error(exception: Exception) -> None:
    logger.exception(f'Unhandled page exception: {type(exception)}',
                     exc_info=(type(exception), exception, exception.__traceback__))

    if isinstance(exception, (NameError, TypeError, AttributeError, RuntimeError)):
        raise InternalServerError("Unexpected error occurred on the page.")


if __name__ in {"__main__", "__mp_main__"}:

    ui.run(host="0.0.0.0", port=8501, title="StockView – price chart",
           storage_secret=settings.SECRET_KEY or None, reload=settings.ENVIRONMENT == "local")
