"""Static files with a redirect to remote storage on a local miss.

An upload pipeline may move an object from local disk to remote storage
after a client already received the local URL. A plain static handler
then answers 404. ``StaticFallback`` tries the local file first and,
when nothing on disk answers, redirects (301) to where the object lives
now::

    app.add_middleware(StaticFallback(
        "./uploads",
        prefix="/uploads",
        storage=S3URLBuilder("mybucket"),
    ))

The redirect is best effort: the remote URL is not checked for existence.
"""

import html
import logging
from pathlib import Path
from typing import Any
from urllib.parse import quote

from detour.config import MountConfig
from detour.http.request import Request
from detour.http.response import Response
from detour.middleware.protocol import Next
from detour.middleware.static import StaticFiles

logger = logging.getLogger("detour.fallback")

# Printable ASCII passes through; everything else is percent-encoded as UTF-8.
_HEADER_SAFE = "".join(chr(code) for code in range(0x21, 0x7F))


def matches(path: str, prefix: str) -> bool:
    """Whether *path* falls under the mount *prefix*.

    A literal string prefix test, not segment-aware: ``"/assets"``
    matches ``"/assets-extra/x"`` as well as ``"/assets/x"``.
    """
    if not path.startswith("/"):
        path = "/" + path
    return path.startswith(prefix)


def redirect_body(url: str) -> str:
    """HTML body for the fallback redirect, with the URL escaped."""
    escaped = html.escape(url, quote=True).replace("&#x27;", "&#39;")
    return f'<html><body>You are being <a href="{escaped}">redirected</a>.</body></html>'


def location_header(url: str) -> str:
    """*url* made safe for a ``Location`` header value."""
    return quote(url, safe=_HEADER_SAFE)


def redirect(url: str, response: Response | None = None) -> Response:
    """Complete *response* as a permanent redirect to *url*.

    The ``Location`` header carries *url* with any non-ASCII or control
    characters percent-encoded, since header values must be Latin-1.
    The body link keeps the unquoted URL, HTML-escaped.
    """
    if response is None:
        response = Response()
    return (
        response.with_status(301)
        .with_header("Location", location_header(url))
        .with_content_type("text/html")
        .with_body(redirect_body(url))
        .complete()
    )


class StaticFallback:
    """Serve a mount from disk; redirect misses to remote storage.

    The storage binding is required and checked here, so a misconfigured
    mount fails at startup instead of on the first request. Accepts the
    same local options as ``StaticFiles`` plus ``storage``.
    """

    __slots__ = ("_config", "_local", "_storage")

    def __init__(self, directory: str | Path, *, storage: Any = None, prefix: str = "/", **options: Any) -> None:
        config = MountConfig(directory=directory, storage=storage, prefix=prefix, **options)
        config.validate()
        self._config = config
        self._storage = config.storage
        self._local = StaticFiles(**config.static_options())

    @classmethod
    def from_config(cls, config: MountConfig) -> "StaticFallback":
        """Build from an existing ``MountConfig``."""
        options = config.static_options()
        return cls(options.pop("directory"), storage=config.storage, **options)

    @property
    def config(self) -> MountConfig:
        return self._config

    @property
    def local(self) -> StaticFiles:
        return self._local

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve, redirect, or fall through for paths outside the mount."""
        response = await self.handle(request)
        if response.completed:
            return response
        return await next(request)

    async def handle(self, request: Request, response: Response | None = None) -> Response:
        """Run one request through the mount.

        Returns *response* unchanged for paths outside the prefix, the
        local server's completed response on a hit, and a completed
        redirect otherwise. Collaborator errors propagate as raised.
        """
        if response is None:
            response = Response()
        if response.completed:
            return response

        path = request.relative_path
        if not matches(path, self._config.prefix):
            return response

        response = await self._local.serve(request, response)
        if response.completed:
            return response

        url = self._storage.build(path)
        logger.info("local miss, redirecting %s -> %s", request.path, url)
        return redirect(url, response)

    def __repr__(self) -> str:
        return f"StaticFallback(prefix={self._config.prefix!r}, storage={self._storage!r})"
