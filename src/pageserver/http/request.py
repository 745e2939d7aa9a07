"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Turns the raw bytes read from a connection into an HTTPRequest.

=============================================================================
WHAT A BROWSER SENDS
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    HTTP/1.1 REQUEST                                 │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET /blog/post%201?ref=home HTTP/1.1\r\n     ← request line       │
    │   Host: localhost:8015\r\n                      ┐                   │
    │   User-Agent: Mozilla/5.0 ...\r\n               ├ headers           │
    │   Connection: keep-alive\r\n                    ┘                   │
    │   \r\n                                          ← end of headers    │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    HTTPRequest(
        method="GET",
        path="/blog/post 1",          ← percent-decoded, no query string
        query_params={"ref": ["home"]},
        headers={"host": "localhost:8015", ...},   ← lowercase names
    )

=============================================================================
WHAT THE PARSER DOES NOT DO
=============================================================================

It does not reject "..", "//" or encoded traversal sequences. The path is
handed to the page handler exactly as decoded; confinement to the site
root is enforced on the CANONICAL filesystem path by the SecurityGuard,
which also catches symlinks a string check would miss.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Dict
from urllib.parse import parse_qs, urlparse, unquote
import re

from .status_codes import HTTPStatus


class HTTPParseError(Exception):
    """
    Raised when request bytes are not a valid HTTP/1.x request.

    Carries the status code the server should answer with before
    closing the connection.
    """

    def __init__(self, message: str, status_code: HTTPStatus = HTTPStatus.BAD_REQUEST):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Header names are stored lowercase; path_params is filled in by the
    router after a route matches.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"
    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""
    path_params: Dict[str, str] = field(default_factory=dict)
    client_address: tuple[str, int] = ("", 0)

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def is_keep_alive(self) -> bool:
        """
        Whether the client wants the connection kept open.

            HTTP/1.1: keep alive unless "Connection: close"
            HTTP/1.0: close unless "Connection: keep-alive"
        """
        connection = self.headers.get("connection", "").lower()
        if self.version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

    Steps:
        1. Size check                       → 413
        2. Split headers / body at CRLFCRLF → 400 if missing
        3. Request line                     → 400 / 405 / 505
        4. Headers (lowercased, repeats joined with ", ")
        5. Body, exactly Content-Length bytes
    """

    VALID_METHODS = {"GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"}

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(self, max_request_size: int = 1024 * 1024):
        self.max_request_size = max_request_size

    def parse(self, data: bytes, client_address: tuple[str, int] = ("", 0)) -> HTTPRequest:
        """
        Parse one complete request.

        Args:
            data: Request bytes as returned by Connection.read_request().
            client_address: (ip, port) of the peer, for logging.

        Raises:
            HTTPParseError: The request is malformed or too large.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                HTTPStatus.PAYLOAD_TOO_LARGE,
            )

        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("utf-8", errors="replace")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        method, path, query_params, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        try:
            content_length = int(headers.get("content-length", 0))
        except ValueError:
            raise HTTPParseError("Invalid Content-Length header")
        if content_length < 0 or len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            query_params=query_params,
            body=body[:content_length],
            client_address=client_address,
        )

    def _parse_request_line(self, line: str) -> tuple[str, str, Dict[str, list[str]], str]:
        """
        Split "METHOD SP URI SP VERSION" and decode the URI.

            "GET /blog/post%201?ref=home HTTP/1.1"
             ─┬─ ─────────┬─────────── ────┬───
              │           │                └── must be HTTP/1.0 or 1.1
              │           └── path "/blog/post 1", query {"ref": ["home"]}
              └── must be a known method
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line!r}")

        method, uri, version = match.groups()

        if method not in self.VALID_METHODS:
            raise HTTPParseError(f"Invalid method: {method}", HTTPStatus.METHOD_NOT_ALLOWED)

        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                HTTPStatus.HTTP_VERSION_NOT_SUPPORTED,
            )

        parsed = urlparse(uri)
        path = unquote(parsed.path) or "/"
        query_params = parse_qs(parsed.query, keep_blank_values=True)

        return method, path, query_params, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse "Name: value" lines.

        Names are lowercased. A repeated header is joined with ", ".
        Lines starting with whitespace continue the previous header
        (obsolete folding). Malformed lines are skipped.
        """
        headers: Dict[str, str] = {}
        current_name = None

        for line in lines:
            if not line:
                continue

            if line[0] in (" ", "\t"):
                if current_name is not None:
                    headers[current_name] += " " + line.strip()
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()
            current_name = name

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    max_size: int = 1024 * 1024,
) -> HTTPRequest:
    """One-shot helper around RequestParser.parse()."""
    return RequestParser(max_request_size=max_size).parse(data, client_address)
