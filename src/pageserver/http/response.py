"""
=============================================================================
HTTP RESPONSE BUILDING
=============================================================================

HTTPResponse holds status, headers and body; ResponseBuilder assembles one
fluently; to_bytes() serializes it for the socket.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    SERIALIZED RESPONSE                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   HTTP/1.1 200 OK\r\n                          ← status line        │
    │   Content-Type: text/html; charset=utf-8\r\n   ← set by handler     │
    │   Content-Length: 1432\r\n                     ┐                    │
    │   Date: Mon, 19 Oct 2026 10:00:00 GMT\r\n      ├ added by to_bytes  │
    │   Server: pageserver/1.0\r\n                   ┘                    │
    │   \r\n                                                               │
    │   <!DOCTYPE html>...                           ← body               │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Usage:

    response = (ResponseBuilder()
        .status(HTTPStatus.OK)
        .html(document)
        .build())

=============================================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Union
import json

from .status_codes import HTTPStatus


DEFAULT_SERVER_NAME = "pageserver/1.0"


@dataclass
class HTTPResponse:
    """A response ready to be serialized and sent."""

    status: HTTPStatus = HTTPStatus.OK
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""
    version: str = "HTTP/1.1"

    @property
    def status_line(self) -> str:
        return f"{self.version} {int(self.status)} {self.status.phrase}"

    def set_header(self, name: str, value: str) -> "HTTPResponse":
        self.headers[name] = value
        return self

    def to_bytes(self, server_name: str = DEFAULT_SERVER_NAME) -> bytes:
        """
        Serialize to wire format.

        Content-Length, Date and Server are filled in unless the handler
        already set them.
        """
        headers = dict(self.headers)
        headers.setdefault("Content-Length", str(len(self.body)))
        headers.setdefault("Date", format_http_date(datetime.now(timezone.utc)))
        headers.setdefault("Server", server_name)

        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in headers.items())
        lines.append("")

        return "\r\n".join(lines).encode("utf-8") + b"\r\n" + self.body


class ResponseBuilder:
    """
    Fluent builder for HTTPResponse.

    Every method except build() returns the builder itself:

        ResponseBuilder().status(HTTPStatus.NOT_FOUND).text("gone").build()
    """

    def __init__(self):
        self._status = HTTPStatus.OK
        self._headers: Dict[str, str] = {}
        self._body = b""

    def status(self, status: HTTPStatus) -> "ResponseBuilder":
        self._status = HTTPStatus(status)
        return self

    def header(self, name: str, value: str) -> "ResponseBuilder":
        self._headers[name] = value
        return self

    def body(self, body: Union[str, bytes]) -> "ResponseBuilder":
        self._body = body.encode("utf-8") if isinstance(body, str) else body
        return self

    def text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> "ResponseBuilder":
        """Text body with an explicit Content-Type."""
        self._body = text.encode("utf-8")
        self._headers["Content-Type"] = content_type
        return self

    def html(self, html: str) -> "ResponseBuilder":
        return self.text(html, "text/html; charset=utf-8")

    def json(self, data) -> "ResponseBuilder":
        return self.text(json.dumps(data, ensure_ascii=False), "application/json; charset=utf-8")

    def close_connection(self) -> "ResponseBuilder":
        """Tell the client this is the last response on the connection."""
        self._headers["Connection"] = "close"
        return self

    def build(self) -> HTTPResponse:
        return HTTPResponse(
            status=self._status,
            headers=dict(self._headers),
            body=self._body,
        )


def format_http_date(dt: datetime) -> str:
    """
    Format a UTC datetime as an RFC 7231 HTTP-date.

        Mon, 19 Oct 2026 10:00:00 GMT
    """
    days = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]
    months = ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
    return (
        f"{days[dt.weekday()]}, "
        f"{dt.day:02d} {months[dt.month - 1]} {dt.year} "
        f"{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d} GMT"
    )


# =============================================================================
# ERROR RESPONSES
# =============================================================================
# Used by the router and the server loop. Page-level outcomes (including the
# site's own not-found page) are built by PageHandler instead.

def error_response(status: HTTPStatus, message: str) -> HTTPResponse:
    return ResponseBuilder().status(status).json({"error": message}).build()


def not_found(message: str = "Not Found") -> HTTPResponse:
    return error_response(HTTPStatus.NOT_FOUND, message)


def method_not_allowed(allowed_methods: list[str]) -> HTTPResponse:
    """405 with the Allow header RFC 7231 requires."""
    return (ResponseBuilder()
        .status(HTTPStatus.METHOD_NOT_ALLOWED)
        .header("Allow", ", ".join(allowed_methods))
        .json({"error": "Method Not Allowed", "allowed": allowed_methods})
        .build())


def internal_error(message: str = "Internal Server Error") -> HTTPResponse:
    return error_response(HTTPStatus.INTERNAL_SERVER_ERROR, message)
