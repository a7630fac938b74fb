"""Detour: static files that redirect to remote storage on a local miss.

An upload pipeline may move an object to remote storage after a client
was handed its local URL. Detour serves the file while it is still on
disk and answers ``301 Moved Permanently`` with the remote URL once it
is gone.

Basic usage::

    from detour import App, S3URLBuilder, StaticFallback

    app = App()
    app.add_middleware(StaticFallback(
        "./uploads",
        prefix="/uploads",
        storage=S3URLBuilder("mybucket"),
    ))

Private buckets (``pip install detour[s3]``)::

    from detour import PresignedS3URLBuilder
    storage = PresignedS3URLBuilder("mybucket", expires_in=600)
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "ConfigurationError",
    "DetourError",
    "HTTPError",
    "Middleware",
    "MountConfig",
    "Next",
    "NotFound",
    "PresignedS3URLBuilder",
    "RemoteURLBuilder",
    "Request",
    "Response",
    "ResponseCompletedError",
    "ResponseState",
    "S3URLBuilder",
    "StaticFallback",
    "StaticFiles",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import detour`` fast while providing a clean top-level API.
    """
    if name == "App":
        from detour.app import App

        return App

    if name == "MountConfig":
        from detour.config import MountConfig

        return MountConfig

    if name == "Request":
        from detour.http.request import Request

        return Request

    if name in ("Response", "ResponseState"):
        from detour.http import response as _response

        return getattr(_response, name)

    if name in ("StaticFallback", "StaticFiles", "Middleware", "Next"):
        import detour.middleware as _middleware

        return getattr(_middleware, name)

    if name in ("RemoteURLBuilder", "S3URLBuilder", "PresignedS3URLBuilder"):
        from detour import storage as _storage

        return getattr(_storage, name)

    if name in ("DetourError", "ConfigurationError", "ResponseCompletedError", "HTTPError", "NotFound"):
        from detour import errors as _errors

        return getattr(_errors, name)

    msg = f"module 'detour' has no attribute {name!r}"
    raise AttributeError(msg)
