"""Tests for detour.storage: remote URL builders."""

import pytest

from detour.errors import ConfigurationError
from detour.storage import PresignedS3URLBuilder, RemoteURLBuilder, S3URLBuilder


class FakeS3Client:
    def __init__(self) -> None:
        self.calls: list[tuple[str, dict, int]] = []

    def generate_presigned_url(self, operation: str, Params: dict, ExpiresIn: int) -> str:  # noqa: N803
        self.calls.append((operation, Params, ExpiresIn))
        return f"https://{Params['Bucket']}.s3.amazonaws.com/{Params['Key']}?X-Amz-Signature=abc"


class TestS3URLBuilder:
    def test_virtual_hosted_url(self) -> None:
        builder = S3URLBuilder("mybucket")
        assert builder.build("uploads/img/42.png") == "https://mybucket.s3.amazonaws.com/uploads/img/42.png"

    def test_regional_endpoint(self) -> None:
        builder = S3URLBuilder("mybucket", region="eu-west-1")
        assert builder.build("a.png") == "https://mybucket.s3.eu-west-1.amazonaws.com/a.png"

    def test_key_prefix(self) -> None:
        builder = S3URLBuilder("mybucket", key_prefix="/media/")
        assert builder.build("/uploads/a.png") == "https://mybucket.s3.amazonaws.com/media/uploads/a.png"

    def test_quotes_unsafe_characters(self) -> None:
        builder = S3URLBuilder("mybucket")
        assert builder.build("uploads/my photo#1.png") == (
            "https://mybucket.s3.amazonaws.com/uploads/my%20photo%231.png"
        )

    def test_empty_bucket_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="bucket"):
            S3URLBuilder("  ")

    def test_satisfies_protocol(self) -> None:
        assert isinstance(S3URLBuilder("mybucket"), RemoteURLBuilder)


class TestPresignedS3URLBuilder:
    def test_uses_client(self) -> None:
        client = FakeS3Client()
        builder = PresignedS3URLBuilder("mybucket", client=client, expires_in=600)

        url = builder.build("uploads/img/42.png")

        assert url.startswith("https://mybucket.s3.amazonaws.com/uploads/img/42.png?")
        assert client.calls == [("get_object", {"Bucket": "mybucket", "Key": "uploads/img/42.png"}, 600)]

    def test_key_prefix(self) -> None:
        client = FakeS3Client()
        builder = PresignedS3URLBuilder("mybucket", client=client, key_prefix="media")

        builder.build("uploads/a.png")

        assert client.calls[0][1]["Key"] == "media/uploads/a.png"

    def test_non_positive_expiry_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="expires_in"):
            PresignedS3URLBuilder("mybucket", client=FakeS3Client(), expires_in=0)

    def test_empty_bucket_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            PresignedS3URLBuilder("", client=FakeS3Client())

    def test_signs_with_boto3(self, monkeypatch) -> None:
        pytest.importorskip("boto3")
        monkeypatch.setenv("AWS_ACCESS_KEY_ID", "AKIDEXAMPLE")
        monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "secret")

        builder = PresignedS3URLBuilder("mybucket", region="us-east-1", expires_in=60)
        url = builder.build("uploads/img/42.png")

        assert "mybucket" in url
        assert "uploads/img/42.png" in url
        assert "Signature" in url

    def test_satisfies_protocol(self) -> None:
        assert isinstance(PresignedS3URLBuilder("mybucket", client=FakeS3Client()), RemoteURLBuilder)
