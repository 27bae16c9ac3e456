"""
Performance tracking middleware for monitoring request/response metrics
"""
import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("hospitalflow")

# Claim change-feed requests hold the connection open on purpose.
LONG_POLL_PATHS = ("/hmo/claims/changes",)


class PerformanceMiddleware(BaseHTTPMiddleware):
    """
    Middleware to track latency for all requests
    """

    def __init__(self, app, slow_request_seconds: float = 1.0):
        super().__init__(app)
        self.slow_request_seconds = slow_request_seconds

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        process_time_ms = round(process_time * 1000, 2)

        logger.info(
            f"PERFORMANCE: method={request.method} path={request.url.path} "
            f"status={response.status_code} latency={process_time_ms}ms "
            f"request_id={getattr(request.state, 'request_id', 'unknown')}"
        )

        response.headers["X-Process-Time"] = str(process_time_ms)

        if process_time > self.slow_request_seconds and request.url.path not in LONG_POLL_PATHS:
            logger.warning(
                f"SLOW_REQUEST: method={request.method} path={request.url.path} "
                f"latency={process_time_ms}ms"
            )

        return response
