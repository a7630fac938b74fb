"""Immutable HTTP request.

Frozen metadata only. Detour never reads request bodies, so the request
carries what the dispatch decision needs: method, path and headers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from detour._internal.asgi import Scope


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the raw (percent-decoded) ASGI path. ``headers`` is a
    read-only mapping with lower-cased names.
    """

    method: str
    path: str
    headers: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    query_string: bytes = b""

    # -- Computed properties --

    @property
    def path_info(self) -> tuple[str, ...]:
        """The path split into its non-empty segments."""
        return tuple(segment for segment in self.path.split("/") if segment)

    @property
    def relative_path(self) -> str:
        """Segments joined by ``/``, without a leading slash."""
        return "/".join(self.path_info)

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return a header value by case-insensitive name."""
        return self.headers.get(name.lower(), default)

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope) -> Request:
        """Create a Request from an ASGI ``http`` scope."""
        headers: dict[str, str] = {}
        for raw_name, raw_value in scope.get("headers", ()):
            name = raw_name.decode("latin-1").lower()
            value = raw_value.decode("latin-1")
            # Repeated headers fold into one comma-separated value
            headers[name] = f"{headers[name]}, {value}" if name in headers else value
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=MappingProxyType(headers),
            query_string=scope.get("query_string", b""),
        )

    @classmethod
    def build(cls, path: str, *, method: str = "GET", headers: Mapping[str, Any] | None = None) -> Request:
        """Create a Request directly, without an ASGI scope."""
        normalized = {name.lower(): str(value) for name, value in (headers or {}).items()}
        return cls(method=method.upper(), path=path, headers=MappingProxyType(normalized))
