"""Detour exception hierarchy.

Shared across the middleware, the storage builders and the ASGI host so
every module raises and catches the same types.
"""

from dataclasses import dataclass


class DetourError(Exception):
    """Base for all detour-specific errors."""


class ConfigurationError(DetourError):
    """Raised when a mount is misconfigured.

    Always raised while the middleware is being constructed, never
    while a request is in flight.
    """


class ResponseCompletedError(DetourError, RuntimeError):
    """A write was attempted on a response that is already completed."""


@dataclass(frozen=True, slots=True)
class HTTPError(DetourError):
    """An error that maps directly to an HTTP status code.

    Raised by the innermost handler of the ASGI host when nothing in the
    middleware chain answered the request.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: nothing served the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)
