"""
Request logging middleware for FastAPI using Loguru.

Every request gets an id (taken from an incoming ``X-Request-ID`` header or
generated) that is bound into the Loguru context while the request is being
handled, so handler and repository logs carry it too.
"""

import time
import uuid

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log method, path, status and latency of each request under a request id."""

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

        with logger.contextualize(request_id=request_id):
            start_time = time.perf_counter()
            response = await call_next(request)
            process_time_ms = round((time.perf_counter() - start_time) * 1000, 2)

            # Get client IP with forwarded headers consideration
            client_ip = request.client.host if request.client else "unknown"
            if "X-Forwarded-For" in request.headers:
                client_ip = request.headers["X-Forwarded-For"].split(",")[0].strip()

            logger.bind(
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                client_ip=client_ip,
                process_time_ms=process_time_ms,
            ).info("request completed")

        # Add request ID to response headers for traceability
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
