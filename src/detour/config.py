"""Mount configuration.

MountConfig is a frozen dataclass: immutable after creation, shared by
every request, no string-key dict lookups.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from detour.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class MountConfig:
    """Configuration for one static mount with a remote fallback.

    ``storage`` is required; everything else has a default::

        config = MountConfig(
            directory="./uploads",
            prefix="/uploads",
            storage=S3URLBuilder("mybucket"),
        )
    """

    directory: str | Path
    storage: Any = None
    prefix: str = "/"

    # Local serving
    index: str = "index.html"
    cache_control: str = "public, max-age=3600"
    etag: bool = True
    headers: tuple[tuple[str, str], ...] = ()

    def validate(self) -> None:
        """Raise ``ConfigurationError`` unless the mount can serve traffic."""
        if self.storage is None:
            msg = (
                "Missing required storage binding: pass storage=<builder> "
                "(an object with a build(path) -> str method)."
            )
            raise ConfigurationError(msg)
        if not callable(getattr(self.storage, "build", None)):
            msg = f"Storage binding {self.storage!r} has no build(path) method."
            raise ConfigurationError(msg)
        if not self.prefix.startswith("/"):
            msg = f"Mount prefix must start with '/', got {self.prefix!r}."
            raise ConfigurationError(msg)

    def static_options(self) -> dict[str, Any]:
        """Options for the local file server, without the storage binding."""
        return {
            "directory": self.directory,
            "prefix": self.prefix,
            "index": self.index,
            "cache_control": self.cache_control,
            "etag": self.etag,
            "headers": self.headers,
        }
