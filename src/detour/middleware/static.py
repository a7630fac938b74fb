"""Static file serving: the local half of a detour mount.

Serves files from a directory for matching URL prefixes. Supports
root-level serving (``prefix="/"``), index file resolution and weak
ETags with ``If-None-Match`` revalidation.

A miss never writes anything: ``serve()`` hands back the open response
it was given, so the caller decides what happens next.
"""

import logging
import mimetypes
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.parse import quote

import anyio.to_thread

from detour.http.request import Request
from detour.http.response import Response
from detour.middleware.protocol import Next

logger = logging.getLogger("detour.static")


def _run_sync(func: Any, *args: Any) -> Any:
    """Run a blocking filesystem call in an anyio worker thread."""
    return anyio.to_thread.run_sync(func, *args)


@dataclass(frozen=True, slots=True)
class _Lookup:
    """Outcome of resolving a request path against the directory."""

    kind: str  # "file" | "miss" | "forbidden" | "slash"
    path: Path | None = None
    size: int = 0
    mtime_ns: int = 0


class StaticFiles:
    """Serves static files from a directory.

    Usable on its own as middleware (misses fall through to the next
    handler) or as the local server inside ``StaticFallback``.

    Security: resolves symlinks and verifies the final path
    is within the configured directory to prevent path traversal.

    Usage::

        app.add_middleware(StaticFiles(
            directory="./static",
            prefix="/static",
        ))
    """

    __slots__ = ("_cache_control", "_directory", "_etag", "_headers", "_index", "_prefix")

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
        etag: bool = True,
        headers: Iterable[tuple[str, str]] = (),
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._cache_control = cache_control
        self._etag = etag
        self._headers = tuple(headers)

        # Normalize prefix: ensure leading slash, strip trailing.
        # Root prefix "/" normalizes to "" (every path is a candidate).
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    @property
    def directory(self) -> Path:
        return self._directory

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve a static file or fall through."""
        response = await self.serve(request)
        if response.completed:
            return response
        return await next(request)

    async def serve(self, request: Request, response: Response | None = None) -> Response:
        """Answer *request* from disk, or return *response* untouched on a miss."""
        if response is None:
            response = Response()

        # Only serve GET and HEAD, and never overwrite a finished response
        if response.completed or request.method not in ("GET", "HEAD"):
            return response

        relative = self._relative(request.path)
        if relative is None:
            return response

        found: _Lookup = await _run_sync(self._lookup, relative)

        if found.kind == "miss":
            logger.debug("static miss: %s", request.path)
            return response
        if found.kind == "forbidden":
            return response.with_body("Forbidden").with_status(403).complete()
        if found.kind == "slash":
            return (
                response.with_body("")
                .with_status(301)
                .with_header("Location", quote(request.path + "/", safe="/"))
                .complete()
            )

        assert found.path is not None
        etag = f'W/"{found.size:x}-{found.mtime_ns:x}"' if self._etag else None
        if etag is not None and _etag_matches(request.header("if-none-match"), etag):
            return (
                response.with_body(b"")
                .with_status(304)
                .with_header("ETag", etag)
                .with_header("Cache-Control", self._cache_control)
                .complete()
            )

        body: bytes = await _run_sync(found.path.read_bytes)
        logger.debug("static hit: %s -> %s", request.path, found.path)
        return self._file_response(response, found.path, body, etag)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _relative(self, path: str) -> str | None:
        """File path relative to the directory, or None when outside the prefix."""
        if not self._prefix:
            # Root prefix: every path is a candidate
            return path.lstrip("/")
        if not path.startswith(self._prefix + "/") and path != self._prefix:
            return None
        return path[len(self._prefix) :].lstrip("/")

    def _lookup(self, relative: str) -> _Lookup:
        """Resolve *relative* on disk. Blocking; runs in a worker thread."""
        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            return _Lookup("forbidden")

        if file_path.is_dir():
            index_path = file_path / self._index
            if not index_path.is_file():
                return _Lookup("miss")
            # Redirect to the trailing-slash URL so relative links resolve
            if relative and not relative.endswith("/"):
                return _Lookup("slash")
            file_path = index_path

        if not file_path.is_file():
            return _Lookup("miss")

        stat = file_path.stat()
        return _Lookup("file", file_path, stat.st_size, stat.st_mtime_ns)

    def _file_response(self, response: Response, file_path: Path, body: bytes, etag: str | None) -> Response:
        """Build the completed response for a served file."""
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"

        response = (
            response.with_body(body)
            .with_status(200)
            .with_content_type(content_type)
            .with_header("Cache-Control", self._cache_control)
        )
        if etag is not None:
            response = response.with_header("ETag", etag)
        for name, value in self._headers:
            response = response.with_header(name, value)
        return response.complete()


def _etag_matches(header: str | None, etag: str) -> bool:
    """Weak comparison of an ``If-None-Match`` header against *etag*."""
    if not header:
        return False
    if header.strip() == "*":
        return True
    opaque = etag.removeprefix("W/")
    return any(candidate.strip().removeprefix("W/") == opaque for candidate in header.split(","))
