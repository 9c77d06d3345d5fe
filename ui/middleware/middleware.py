from fastapi import Request

from starlette.middleware.base import BaseHTTPMiddleware
import logging

logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next):
        logger.info(f"request: {request.method} {request.url} client={request.client}")
        response = await call_next(request)
        logger.debug(f"response: {request.method} {request.url.path} status={response.status_code}")
        return response
