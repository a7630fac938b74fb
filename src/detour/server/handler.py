"""ASGI handler: translates ASGI scope/messages to detour types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, dispatches through the middleware chain,
and sends the Response back through ASGI send().
"""

from collections.abc import Callable
from typing import Any

from detour._internal.asgi import Receive, Scope, Send
from detour.errors import HTTPError, NotFound
from detour.http.request import Request
from detour.http.response import Response
from detour.middleware.protocol import Next
from detour.server.errors import handle_http_error, handle_internal_error
from detour.server.sender import send_response


async def _not_found(request: Request) -> Response:
    """Innermost handler: nothing in the chain answered."""
    raise NotFound(f"No file or route for {request.path}")


def build_pipeline(middleware: tuple[Callable[..., Any], ...], endpoint: Next = _not_found) -> Next:
    """Wrap *middleware* around *endpoint*, first entry outermost."""
    handler = endpoint
    for mw in reversed(middleware):
        outer = handler

        async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> Response:
            return await _mw(req, _next)

        handler = make_next
    return handler


async def handle_request(
    scope: Scope,
    receive: Receive,  # noqa: ARG001
    send: Send,
    *,
    pipeline: Next,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope)

    try:
        response = await pipeline(request)
    except HTTPError as exc:
        response = handle_http_error(exc, request)
    except Exception as exc:
        response = handle_internal_error(exc, request)

    await send_response(response, send)
