"""Error handling for the ASGI host.

Maps HTTPError exceptions and unexpected failures to completed
Response objects.
"""

import logging

from detour.errors import HTTPError
from detour.http.request import Request
from detour.http.response import Response

logger = logging.getLogger("detour.server")


def handle_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a plain-text Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    response = Response(body=exc.detail or f"Error {exc.status}", content_type="text/plain; charset=utf-8")
    response = response.with_status(exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response.complete()


def handle_internal_error(exc: Exception, request: Request) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)
    return Response(
        body="Internal Server Error",
        status=500,
        content_type="text/plain; charset=utf-8",
    ).complete()
