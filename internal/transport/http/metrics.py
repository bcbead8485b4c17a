"""
Metrics collection middleware for HTTP requests.

Collects metrics for all HTTP requests using Prometheus.
"""

import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from internal.infrastructure.metrics import (
    HTTP_REQUESTS_TOTAL,
    HTTP_REQUEST_DURATION,
)


UNMATCHED_ROUTE = "unmatched"


def route_label(request: Request) -> str:
    """
    Get the route template for a request.

    Browse paths carry arbitrary slugs, so raw URL paths would explode
    label cardinality.

    Args:
        request: Handled HTTP request.

    Returns:
        Route path template, e.g. "/api/v1/browse/{path:path}".
    """
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    return path or UNMATCHED_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    """
    Middleware to collect HTTP request metrics.

    Tracks request count and duration per route template.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        """
        Process request and collect metrics.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler in chain.

        Returns:
            HTTP response.
        """
        start_time = time.perf_counter()

        response = await call_next(request)

        duration = time.perf_counter() - start_time
        route = route_label(request)
        method = request.method

        HTTP_REQUESTS_TOTAL.labels(
            method=method,
            route=route,
            status_code=response.status_code,
        ).inc()

        HTTP_REQUEST_DURATION.labels(
            method=method,
            route=route,
        ).observe(duration)

        return response
