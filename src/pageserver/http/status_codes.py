"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The status codes this server actually sends.

    ┌───────────┬──────────────────────────────────────────────────────────┐
    │   Code    │  Sent when                                               │
    ├───────────┼──────────────────────────────────────────────────────────┤
    │  200      │  page, listing, stylesheet (and not-found by default)    │
    │  400      │  malformed request line or headers                       │
    │  404      │  unknown route, or missing page with --strict-404        │
    │  405      │  any method other than GET                               │
    │  408      │  client connected but never finished its request         │
    │  413      │  request larger than max_request_size                    │
    │  500      │  filesystem error or handler crash                       │
    │  503      │  worker queue is full                                    │
    │  505      │  anything other than HTTP/1.0 or HTTP/1.1                │
    └───────────┴──────────────────────────────────────────────────────────┘

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes with their reason phrases.

    IntEnum, so members compare equal to plain integers:

        >>> HTTPStatus.NOT_FOUND == 404
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200

    BAD_REQUEST = 400
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    REQUEST_TIMEOUT = 408
    PAYLOAD_TOO_LARGE = 413

    INTERNAL_SERVER_ERROR = 500
    SERVICE_UNAVAILABLE = 503
    HTTP_VERSION_NOT_SUPPORTED = 505

    @property
    def phrase(self) -> str:
        """Reason phrase for the status line ("HTTP/1.1 404 Not Found")."""
        return _STATUS_PHRASES.get(self, "Unknown")

    @property
    def is_success(self) -> bool:
        return 200 <= self < 300

    @property
    def is_error(self) -> bool:
        return self >= 400


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.BAD_REQUEST: "Bad Request",
    HTTPStatus.NOT_FOUND: "Not Found",
    HTTPStatus.METHOD_NOT_ALLOWED: "Method Not Allowed",
    HTTPStatus.REQUEST_TIMEOUT: "Request Timeout",
    HTTPStatus.PAYLOAD_TOO_LARGE: "Payload Too Large",
    HTTPStatus.INTERNAL_SERVER_ERROR: "Internal Server Error",
    HTTPStatus.SERVICE_UNAVAILABLE: "Service Unavailable",
    HTTPStatus.HTTP_VERSION_NOT_SUPPORTED: "HTTP Version Not Supported",
}
