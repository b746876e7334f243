"""
Request logging middleware for CodeZetta
Logs every request with its status and timing
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings
from app.core.logging import LoggerFactory

logger = LoggerFactory.get_request_logger()

QUIET_PATHS = {"/health", f"{settings.API_V1_STR}/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log HTTP requests and responses
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        request_id = getattr(request.state, "request_id", "unknown")
        context = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else "unknown",
        }

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed",
                extra={
                    **context,
                    "process_time": round(time.perf_counter() - start_time, 3),
                    "error": str(e),
                },
                exc_info=True,
            )
            raise

        process_time = time.perf_counter() - start_time
        level = "warning" if response.status_code >= 500 else "info"
        getattr(logger, level)(
            "Request completed",
            extra={
                **context,
                "status_code": response.status_code,
                "process_time": round(process_time, 3),
            },
        )

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response
