"""Tests for detour.http.response: Response chaining and completion."""

import pytest

from detour.errors import ResponseCompletedError
from detour.http.response import Response, ResponseState


class TestResponse:
    def test_defaults(self) -> None:
        r = Response()
        assert r.body == ""
        assert r.status == 200
        assert r.content_type == "text/html; charset=utf-8"
        assert r.headers == ()
        assert r.state is ResponseState.OPEN
        assert not r.completed

    def test_with_status(self) -> None:
        r = Response().with_status(201)
        assert r.status == 201

    def test_chained_headers(self) -> None:
        r = Response().with_header("A", "1").with_header("B", "2")
        assert r.headers == (("A", "1"), ("B", "2"))

    def test_with_headers_dict(self) -> None:
        r = Response().with_headers({"A": "1", "B": "2"})
        assert ("A", "1") in r.headers
        assert ("B", "2") in r.headers

    def test_with_content_type(self) -> None:
        r = Response().with_content_type("application/json")
        assert r.content_type == "application/json"

    def test_chaining_returns_new_objects(self) -> None:
        r1 = Response()
        r2 = r1.with_status(404)
        assert r1.status == 200
        assert r2.status == 404

    def test_header_lookup_is_case_insensitive(self) -> None:
        r = Response().with_header("Location", "/x")
        assert r.header("location") == "/x"
        assert r.header("missing") is None
        assert r.header("missing", "d") == "d"

    def test_body_helpers(self) -> None:
        assert Response(body="héllo").body_bytes == "héllo".encode()
        assert Response(body=b"abc").text == "abc"


class TestCompletion:
    def test_complete(self) -> None:
        r = Response(body="done").complete()
        assert r.completed
        assert r.state is ResponseState.COMPLETED

    def test_complete_leaves_original_open(self) -> None:
        r = Response()
        r.complete()
        assert not r.completed

    @pytest.mark.parametrize(
        "write",
        [
            lambda r: r.with_status(500),
            lambda r: r.with_header("X", "1"),
            lambda r: r.with_headers({"X": "1"}),
            lambda r: r.with_content_type("text/plain"),
            lambda r: r.with_body("again"),
            lambda r: r.complete(),
        ],
    )
    def test_writes_after_completion_raise(self, write) -> None:
        done = Response(body="done").complete()
        with pytest.raises(ResponseCompletedError, match="already completed"):
            write(done)

    def test_completed_error_is_runtime_error(self) -> None:
        with pytest.raises(RuntimeError):
            Response().complete().complete()
