"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    StaticFallback -- Serve from disk, redirect misses to remote storage
    StaticFiles -- Serve static files from a directory
"""

from detour.middleware.fallback import StaticFallback, matches, redirect
from detour.middleware.protocol import Middleware, Next
from detour.middleware.static import StaticFiles

__all__ = [
    "Middleware",
    "Next",
    "StaticFallback",
    "StaticFiles",
    "matches",
    "redirect",
]
