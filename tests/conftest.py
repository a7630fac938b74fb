"""Shared fixtures for detour tests."""

import pytest


class RecordingBuilder:
    """URL builder that records every path it was asked for."""

    def __init__(self, base: str = "https://mybucket.s3.amazonaws.com") -> None:
        self.base = base
        self.calls: list[str] = []

    def build(self, path: str) -> str:
        self.calls.append(path)
        return f"{self.base}/{path}"


@pytest.fixture
def builder() -> RecordingBuilder:
    return RecordingBuilder()


@pytest.fixture
def upload_dir(tmp_path):
    """A local upload directory with a few files still on disk."""
    uploads = tmp_path / "uploads"
    uploads.mkdir()
    (uploads / "readme.txt").write_text("still here")

    img = uploads / "img"
    img.mkdir()
    (img / "1.png").write_bytes(b"\x89PNG\r\n\x1a\n")

    gallery = uploads / "gallery"
    gallery.mkdir()
    (gallery / "index.html").write_text("<h1>Gallery</h1>")

    return uploads
