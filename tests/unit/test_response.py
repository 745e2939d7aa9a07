"""
Unit tests for HTTP response building.
"""

import json
from datetime import datetime, timezone

from pageserver.http.response import (
    HTTPResponse,
    ResponseBuilder,
    HTTPStatus,
    format_http_date,
    method_not_allowed,
    not_found,
    internal_error,
)


class TestHTTPResponse:
    """Tests for HTTPResponse class."""

    def test_status_line(self):
        assert HTTPResponse(status=HTTPStatus.OK).status_line == "HTTP/1.1 200 OK"
        assert HTTPResponse(status=HTTPStatus.NOT_FOUND).status_line == "HTTP/1.1 404 Not Found"

    def test_to_bytes(self):
        response = HTTPResponse(headers={"Content-Type": "text/css"}, body=b"body{}")
        result = response.to_bytes("pageserver/test")

        assert result.startswith(b"HTTP/1.1 200 OK\r\n")
        assert b"Content-Type: text/css\r\n" in result
        assert b"Content-Length: 6\r\n" in result
        assert b"Server: pageserver/test\r\n" in result
        assert b"Date: " in result
        assert result.endswith(b"\r\n\r\nbody{}")

    def test_explicit_headers_win(self):
        response = HTTPResponse(headers={"Server": "custom"}, body=b"")
        assert b"Server: custom\r\n" in response.to_bytes()

    def test_content_length_counts_bytes(self):
        response = ResponseBuilder().html("<p>é</p>").build()
        assert b"Content-Length: 9\r\n" in response.to_bytes()


class TestResponseBuilder:
    """Tests for ResponseBuilder."""

    def test_text_with_content_type(self):
        response = (ResponseBuilder()
            .status(HTTPStatus.OK)
            .text("body {}", content_type="text/css")
            .build())

        assert response.headers["Content-Type"] == "text/css"
        assert response.body == b"body {}"

    def test_html(self):
        response = ResponseBuilder().html("<h1>Hi</h1>").build()
        assert response.headers["Content-Type"] == "text/html; charset=utf-8"

    def test_status_from_int(self):
        assert ResponseBuilder().status(404).build().status is HTTPStatus.NOT_FOUND

    def test_close_connection(self):
        response = ResponseBuilder().close_connection().build()
        assert response.headers["Connection"] == "close"

    def test_build_copies_headers(self):
        builder = ResponseBuilder().header("X-One", "1")
        first = builder.build()
        first.set_header("X-Two", "2")

        assert "X-Two" not in builder.build().headers


class TestHelpers:
    """Tests for error helpers and date formatting."""

    def test_method_not_allowed(self):
        response = method_not_allowed(["GET"])

        assert response.status == HTTPStatus.METHOD_NOT_ALLOWED
        assert response.headers["Allow"] == "GET"
        assert json.loads(response.body)["allowed"] == ["GET"]

    def test_not_found(self):
        response = not_found("No route")
        assert response.status == 404
        assert json.loads(response.body) == {"error": "No route"}

    def test_internal_error(self):
        assert internal_error().status == HTTPStatus.INTERNAL_SERVER_ERROR

    def test_format_http_date(self):
        dt = datetime(2026, 10, 19, 8, 5, 3, tzinfo=timezone.utc)
        assert format_http_date(dt) == "Mon, 19 Oct 2026 08:05:03 GMT"
