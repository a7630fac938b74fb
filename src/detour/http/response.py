"""HTTP response with chainable .with_*() transformation API.

Each transformation returns a new Response. A response starts ``OPEN``
and is built incrementally; ``complete()`` finalizes it, after which
every further write raises ``ResponseCompletedError``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum

from detour.errors import ResponseCompletedError


class ResponseState(Enum):
    """Whether a final response has been written."""

    OPEN = "open"
    COMPLETED = "completed"


@dataclass(frozen=True, slots=True)
class Response:
    """An HTTP response built through immutable transformations.

    A bare ``Response()`` is the open sink handed down a pipeline: no
    stage has answered yet. Whichever stage answers chains ``.with_*()``
    calls and ends with ``.complete()``.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/html; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()
    state: ResponseState = ResponseState.OPEN

    @property
    def completed(self) -> bool:
        return self.state is ResponseState.COMPLETED

    # -- Chainable transformations --

    def with_status(self, status: int) -> Response:
        """Return a new Response with a different status code."""
        self._check_open()
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Return a new Response with an additional header."""
        self._check_open()
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: Mapping[str, str]) -> Response:
        """Return a new Response with additional headers."""
        self._check_open()
        new = tuple(headers.items())
        return replace(self, headers=(*self.headers, *new))

    def with_content_type(self, content_type: str) -> Response:
        """Return a new Response with a different content type."""
        self._check_open()
        return replace(self, content_type=content_type)

    def with_body(self, body: str | bytes) -> Response:
        """Return a new Response with a different body."""
        self._check_open()
        return replace(self, body=body)

    def complete(self) -> Response:
        """Return a completed copy. Completing twice is an error."""
        self._check_open()
        return replace(self, state=ResponseState.COMPLETED)

    def _check_open(self) -> None:
        if self.completed:
            msg = f"Response already completed with status {self.status}; no further writes allowed."
            raise ResponseCompletedError(msg)

    # -- Lookup helpers --

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first value for a header, matched case-insensitively."""
        wanted = name.lower()
        for key, value in self.headers:
            if key.lower() == wanted:
                return value
        return default

    @property
    def body_bytes(self) -> bytes:
        """Body as bytes."""
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        """Body as string."""
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body
