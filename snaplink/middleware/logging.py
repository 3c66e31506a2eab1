"""
Request logging middleware for FastAPI using Loguru.

This middleware tags each request with an ID and writes one REQUEST-level
record per response with method, path, status and latency.
"""

import time
import uuid
from contextvars import ContextVar

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

# Context variable to store request ID across async context
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_client_ip(request: Request) -> str:
    """Client address, preferring the first hop of X-Forwarded-For."""
    client_ip = request.client.host if request.client else "unknown"
    if "X-Forwarded-For" in request.headers:
        forwarded_ips = request.headers["X-Forwarded-For"].split(",")
        if forwarded_ips and forwarded_ips[0].strip():
            client_ip = forwarded_ips[0].strip()
    return client_ip


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Request logging middleware.

    Features:
    - Unique request ID, echoed back in the X-Request-ID header
    - Processing time measurement
    - Client IP with forwarded header consideration
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        token = request_id_var.set(request_id)

        start_time = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            request_id_var.reset(token)

        process_time = time.perf_counter() - start_time

        # Add request ID to response headers for traceability
        response.headers["X-Request-ID"] = request_id

        logger.log(
            "REQUEST",
            "{method} {path} {status_code} {process_time_ms}ms {client_ip} {request_id}",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            process_time_ms=round(process_time * 1000, 2),
            client_ip=get_client_ip(request),
            request_id=request_id,
        )

        return response


def add_logging_middleware(app) -> None:
    """Add the request logging middleware to the FastAPI application."""
    app.add_middleware(LoggingMiddleware)
