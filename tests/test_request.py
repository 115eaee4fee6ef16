"""Tests for bindparams.http.request — the binding request."""

import io

import pytest

from bindparams.http.request import Request


class TestBuild:
    def test_splits_path_and_query(self) -> None:
        request = Request.build("get", "/user/1234?filterInt=10&filterStr=hello")
        assert request.method == "GET"
        assert request.path == "/user/1234"
        assert request.query["filterInt"] == "10"
        assert request.url == "/user/1234?filterInt=10&filterStr=hello"

    def test_bytes_body_becomes_stream(self) -> None:
        request = Request.build("POST", "/", body=b'{"a":1}')
        assert request.body.read() == b'{"a":1}'

    def test_stream_body_kept(self) -> None:
        stream = io.BytesIO(b"x")
        assert Request.build("POST", "/", body=stream).body is stream

    def test_empty_path(self) -> None:
        request = Request.build("GET", "?a=1")
        assert request.path == "/"

    def test_frozen(self) -> None:
        request = Request.build("GET", "/")
        with pytest.raises(AttributeError):
            request.path = "/other"  # type: ignore[misc]


class TestPathParam:
    def test_lookup(self) -> None:
        request = Request.build("GET", "/", path_params=(("id", "1"), ("postId", "2")))
        assert request.path_param("id") == "1"
        assert request.path_param("postId") == "2"

    def test_case_insensitive(self) -> None:
        request = Request.build("GET", "/", path_params=(("postId", "2"),))
        assert request.path_param("POSTID") == "2"
        assert request.path_param("post_id") == ""

    def test_last_match_wins(self) -> None:
        request = Request.build("GET", "/", path_params=(("id", "first"), ("ID", "second")))
        assert request.path_param("Id") == "second"

    def test_missing_is_empty_string(self) -> None:
        assert Request.build("GET", "/").path_param("id") == ""

    def test_with_path_params_copies(self) -> None:
        request = Request.build("GET", "/")
        bound = request.with_path_params((("id", "9"),))
        assert bound.path_param("id") == "9"
        assert request.path_param("id") == ""
        assert bound.body is request.body
