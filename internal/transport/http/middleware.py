"""
HTTP Middleware for Browse Resolver Service.

Provides middleware components for request processing.
"""

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from pkg.logger.logger import set_request_id, set_session_id

from .metrics import MetricsMiddleware

REQUEST_ID_HEADER = "X-Request-ID"
SESSION_ID_HEADER = "X-Session-ID"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Put request and browse session IDs into the logging context.

    The request ID is generated when the client sends none and is
    echoed back in the response headers.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        set_request_id(request_id)
        set_session_id(request.headers.get(SESSION_ID_HEADER))

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


__all__ = [
    "MetricsMiddleware",
    "RequestContextMiddleware",
    "REQUEST_ID_HEADER",
    "SESSION_ID_HEADER",
]
