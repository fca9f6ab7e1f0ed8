# troop_manager/middleware/request_logging.py
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with its status and duration, tagged with a request id"""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        started = time.perf_counter()

        response = await call_next(request)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} "
            f"{duration_ms}ms request_id={request_id}"
        )
        response.headers["X-Request-ID"] = request_id
        return response
