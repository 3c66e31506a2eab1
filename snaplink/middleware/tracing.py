"""Custom tracing middleware for snaplink."""

import time

from fastapi import Request
from opentelemetry.trace import SpanKind, Status, StatusCode
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from snaplink.core.telemetry import get_meter, get_tracer

# Get tracer and meter from OpenTelemetry
tracer = get_tracer("snaplink.middleware")
meter = get_meter("snaplink.middleware")

request_counter = meter.create_counter(
    name="snaplink.http.requests",
    description="Number of HTTP requests",
    unit="1",
)

request_duration = meter.create_histogram(
    name="snaplink.http.duration",
    description="Duration of HTTP requests",
    unit="ms",
)


def _route_template(request: Request) -> str:
    """Route path like ``/{short_code}`` so codes do not explode span names."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class TracingMiddleware(BaseHTTPMiddleware):
    """Middleware that adds a server span and request metrics for each request."""

    def __init__(self, app: ASGIApp) -> None:
        super().__init__(app)

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.perf_counter()
        method = request.method

        attributes = {
            "http.method": method,
            "http.flavor": request.scope.get("http_version", ""),
            "http.host": request.headers.get("host", ""),
            "http.user_agent": request.headers.get("user-agent", ""),
        }
        with tracer.start_as_current_span(
            f"{method} request",
            attributes=attributes,
            kind=SpanKind.SERVER,
        ) as span:
            response = await call_next(request)

            route = _route_template(request)
            span.update_name(f"{method} {route}")
            span.set_attribute("http.route", route)
            span.set_attribute("http.status_code", response.status_code)
            if response.status_code >= 500:
                span.set_status(Status(StatusCode.ERROR))

            metric_attributes = {
                "http.method": method,
                "http.route": route,
                "http.status_code": response.status_code,
            }
            duration_ms = (time.perf_counter() - start_time) * 1000
            request_counter.add(1, metric_attributes)
            request_duration.record(duration_ms, metric_attributes)

            return response
