"""Middleware protocol and Next type alias.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. The host checks the shape, not the lineage.
``next`` always returns a completed ``Response``.
"""

from collections.abc import Awaitable, Callable
from typing import Protocol, TypeAlias

from detour.http.request import Request
from detour.http.response import Response

# The next handler in the middleware chain
Next: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for detour middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def server_header(request: Request, next: Next) -> Response:
            response = await next(request)
            return replace(response, headers=(*response.headers, ("Server", "detour")))

        # Class middleware
        class StaticFallback:
            async def __call__(self, request: Request, next: Next) -> Response:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...
