"""Tests for detour.server.sender response emission rules."""

from detour.http.response import Response
from detour.server.sender import send_response


class TestSendResponse:
    async def test_redirect_headers(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        response = (
            Response()
            .with_status(301)
            .with_header("Location", "https://mybucket.s3.amazonaws.com/a.png")
            .with_content_type("text/html")
            .with_body("<html></html>")
            .complete()
        )
        await send_response(response, send)

        start = messages[0]
        assert start["type"] == "http.response.start"
        assert start["status"] == 301
        headers = dict(start["headers"])
        assert headers[b"location"] == b"https://mybucket.s3.amazonaws.com/a.png"
        assert headers[b"content-type"] == b"text/html"
        assert headers[b"content-length"] == b"13"
        assert messages[1] == {"type": "http.response.body", "body": b"<html></html>"}

    async def test_304_drops_body_and_sets_zero_content_length(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("unexpected-body").with_status(304).complete(), send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"0"
        assert messages[1]["body"] == b""

    async def test_200_preserves_body(self) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        await send_response(Response("ok").complete(), send)

        headers = dict(messages[0]["headers"])
        assert headers[b"content-length"] == b"2"
        assert messages[1]["body"] == b"ok"

    async def test_open_response_is_sent_with_warning(self, caplog) -> None:
        messages: list[dict] = []

        async def send(message: dict) -> None:
            messages.append(message)

        with caplog.at_level("WARNING", logger="detour.server"):
            await send_response(Response("half"), send)

        assert "never completed" in caplog.text
        assert messages[1]["body"] == b"half"
