"""Remote URL builders: map a relative path to an absolute storage URL.

A builder is any object with a ``build(path) -> str`` method. No base
class required::

    class CDNBuilder:
        def build(self, path: str) -> str:
            return f"https://cdn.example.com/{path}"

Builders receive their configuration (bucket, region, key prefix) when
they are constructed. Nothing here reads global application state.
"""

from typing import Any, Protocol, runtime_checkable
from urllib.parse import quote

from detour.errors import ConfigurationError


@runtime_checkable
class RemoteURLBuilder(Protocol):
    """Protocol for remote URL builders."""

    def build(self, path: str) -> str: ...


def _object_key(key_prefix: str, path: str) -> str:
    """Join a key prefix and a relative path without doubling slashes."""
    path = path.lstrip("/")
    if key_prefix:
        return f"{key_prefix.strip('/')}/{path}"
    return path


def _require_bucket(bucket: str) -> str:
    if not bucket or not bucket.strip():
        msg = "A storage bucket name is required."
        raise ConfigurationError(msg)
    return bucket.strip()


class S3URLBuilder:
    """Public, virtual-hosted style S3 object URLs.

    Usage::

        S3URLBuilder("mybucket").build("uploads/img/42.png")
        # "https://mybucket.s3.amazonaws.com/uploads/img/42.png"

    With ``region`` the regional endpoint is used. ``key_prefix`` is
    prepended to every object key.
    """

    __slots__ = ("_bucket", "_key_prefix", "_region")

    def __init__(self, bucket: str, *, region: str | None = None, key_prefix: str = "") -> None:
        self._bucket = _require_bucket(bucket)
        self._region = region
        self._key_prefix = key_prefix

    @property
    def host(self) -> str:
        if self._region:
            return f"{self._bucket}.s3.{self._region}.amazonaws.com"
        return f"{self._bucket}.s3.amazonaws.com"

    def build(self, path: str) -> str:
        key = _object_key(self._key_prefix, path)
        return f"https://{self.host}/{quote(key, safe='/')}"

    def __repr__(self) -> str:
        return f"S3URLBuilder(bucket={self._bucket!r}, region={self._region!r})"


class PresignedS3URLBuilder:
    """Presigned ``get_object`` URLs for private buckets.

    Signing happens locally in boto3; no request is made to S3. Pass an
    existing ``client`` to share credentials and connection settings,
    otherwise one is created from the default credential chain.

    Requires ``boto3`` (``pip install detour[s3]``).
    """

    __slots__ = ("_bucket", "_client", "_expires_in", "_key_prefix")

    def __init__(
        self,
        bucket: str,
        *,
        client: Any = None,
        expires_in: int = 3600,
        key_prefix: str = "",
        region: str | None = None,
    ) -> None:
        self._bucket = _require_bucket(bucket)
        if expires_in <= 0:
            msg = f"expires_in must be positive, got {expires_in}."
            raise ConfigurationError(msg)
        self._expires_in = expires_in
        self._key_prefix = key_prefix

        if client is None:
            try:
                import boto3
            except ImportError:
                msg = (
                    "PresignedS3URLBuilder requires the 'boto3' package. "
                    "Install it with: pip install detour[s3]"
                )
                raise ConfigurationError(msg) from None
            client = boto3.client("s3", region_name=region)
        self._client = client

    def build(self, path: str) -> str:
        key = _object_key(self._key_prefix, path)
        return self._client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self._bucket, "Key": key},
            ExpiresIn=self._expires_in,
        )

    def __repr__(self) -> str:
        return f"PresignedS3URLBuilder(bucket={self._bucket!r}, expires_in={self._expires_in})"
