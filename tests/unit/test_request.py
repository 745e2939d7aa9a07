"""
Unit tests for HTTP request parsing.
"""

import pytest

from pageserver.http.request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    parse_request,
)


@pytest.fixture
def browser_request() -> bytes:
    return (
        b"GET /blog/post%201?ref=home HTTP/1.1\r\n"
        b"Host: localhost:8015\r\n"
        b"User-Agent: pytest\r\n"
        b"Accept: text/html\r\n"
        b"Connection: keep-alive\r\n"
        b"\r\n"
    )


class TestRequestParser:
    """Tests for RequestParser class."""

    def test_parse_simple_get(self, browser_request: bytes):
        request = RequestParser().parse(browser_request, ("127.0.0.1", 12345))

        assert request.method == "GET"
        assert request.path == "/blog/post 1"
        assert request.version == "HTTP/1.1"
        assert request.client_address == ("127.0.0.1", 12345)

    def test_parse_headers(self, browser_request: bytes):
        request = parse_request(browser_request)

        assert request.headers["host"] == "localhost:8015"
        assert request.user_agent == "pytest"
        assert request.get_header("Accept") == "text/html"
        assert request.is_keep_alive is True

    def test_parse_query_params(self, browser_request: bytes):
        request = parse_request(browser_request)
        assert request.query_params == {"ref": ["home"]}

    def test_dotdot_is_not_rejected(self):
        request = parse_request(b"GET /../../etc/passwd HTTP/1.1\r\nHost: t\r\n\r\n")
        assert request.path == "/../../etc/passwd"

    def test_encoded_dotdot_is_decoded(self):
        request = parse_request(b"GET /%2e%2e/secret HTTP/1.1\r\nHost: t\r\n\r\n")
        assert request.path == "/../secret"

    def test_repeated_headers_are_joined(self):
        raw = b"GET / HTTP/1.1\r\nAccept: text/html\r\nAccept: text/css\r\n\r\n"
        assert parse_request(raw).headers["accept"] == "text/html, text/css"

    def test_body_uses_content_length(self):
        raw = b"POST / HTTP/1.1\r\nContent-Length: 5\r\n\r\nhello"
        assert parse_request(raw).body == b"hello"

    def test_invalid_method(self):
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(b"BREW /pot HTTP/1.1\r\nHost: test\r\n\r\n")
        assert exc_info.value.status_code == 405

    def test_invalid_request_line(self):
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(b"GET\r\nHost: test\r\n\r\n")
        assert exc_info.value.status_code == 400

    def test_unsupported_version(self):
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(b"GET / HTTP/2.0\r\nHost: test\r\n\r\n")
        assert exc_info.value.status_code == 505

    def test_missing_header_terminator(self):
        with pytest.raises(HTTPParseError):
            parse_request(b"GET / HTTP/1.1\r\nHost: test\r\n")

    def test_bad_content_length(self):
        with pytest.raises(HTTPParseError):
            parse_request(b"POST / HTTP/1.1\r\nContent-Length: lots\r\n\r\n")

    def test_request_too_large(self):
        raw = b"GET / HTTP/1.1\r\nX-Pad: " + b"a" * 200 + b"\r\n\r\n"
        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw, max_size=100)
        assert exc_info.value.status_code == 413


class TestHTTPRequest:
    """Tests for HTTPRequest properties."""

    @pytest.mark.parametrize("version,connection,expected", [
        ("HTTP/1.1", "", True),
        ("HTTP/1.1", "close", False),
        ("HTTP/1.0", "", False),
        ("HTTP/1.0", "keep-alive", True),
    ])
    def test_is_keep_alive(self, version, connection, expected):
        headers = {"connection": connection} if connection else {}
        request = HTTPRequest(method="GET", path="/", version=version, headers=headers)
        assert request.is_keep_alive is expected
