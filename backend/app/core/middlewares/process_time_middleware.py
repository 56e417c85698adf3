import logging
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger("app.requests")


class ProcessingTimeMiddleware(BaseHTTPMiddleware):
    """Logs every request and reports its duration in ``X-Process-Time-MS``."""

    def __init__(self, app: ASGIApp):
        super().__init__(app)

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()

        response = await call_next(request)

        processing_time = round((time.perf_counter() - start_time) * 1000, 2)
        response.headers["X-Process-Time-MS"] = str(processing_time)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {processing_time}ms"
        )
        return response
