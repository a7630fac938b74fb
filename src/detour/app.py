"""Detour ASGI application.

A thin host for detour middleware. Mutable during setup, frozen when
the first lifespan or HTTP scope arrives.
"""

import threading
from collections.abc import Callable, Iterable
from typing import Any

from detour._internal.asgi import Receive, Scope, Send
from detour.middleware.protocol import Middleware, Next
from detour.server.handler import build_pipeline, handle_request


class App:
    """An ASGI application serving a middleware pipeline.

    Requests nothing answers get a 404. Mount a fallback and run it under
    any ASGI server::

        app = App()
        app.add_middleware(StaticFallback("./uploads", prefix="/uploads", storage=builder))

    Thread safety:
        Setup is single-threaded. The freeze transition uses a Lock +
        double-check so exactly one thread compiles the pipeline, even
        when several workers call ``__call__()`` on first request.
    """

    __slots__ = ("_freeze_lock", "_frozen", "_middleware", "_middleware_list", "_pipeline")

    def __init__(self, middleware: Iterable[Middleware] = ()) -> None:
        self._middleware_list: list[Middleware] = list(middleware)
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._middleware: tuple[Callable[..., Any], ...] = ()
        self._pipeline: Next | None = None

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the pipeline. The first added runs outermost."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    @property
    def middleware(self) -> tuple[Callable[..., Any], ...]:
        self._ensure_frozen()
        return self._middleware

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._pipeline is not None

        await handle_request(scope, receive, send, pipeline=self._pipeline)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup, before the first HTTP request.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif msg_type == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the pipeline. MUST only be called while holding _freeze_lock."""
        self._middleware = tuple(self._middleware_list)
        self._pipeline = build_pipeline(self._middleware)
        self._frozen = True

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Add middleware before the first request."
            )
            raise RuntimeError(msg)
