"""
=============================================================================
HTTP LAYER
=============================================================================

Bytes in, bytes out. The page engine never sees anything from here except
a decoded path string.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   raw bytes ──► RequestParser ──► HTTPRequest                        │
    │                                       │                              │
    │                                       ▼                              │
    │                                    Router ──► handler                │
    │                                       │                              │
    │                                       ▼                              │
    │   raw bytes ◄── to_bytes() ◄──── HTTPResponse                        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    request.py        HTTPRequest, RequestParser, HTTPParseError
    response.py       HTTPResponse, ResponseBuilder, error helpers
    router.py         Router, Route, RouteMatch
    status_codes.py   HTTPStatus

=============================================================================
"""

from .request import HTTPRequest, RequestParser, HTTPParseError, parse_request
from .response import (
    HTTPResponse,
    ResponseBuilder,
    format_http_date,
    error_response,
    not_found,
    method_not_allowed,
    internal_error,
)
from .router import Router, Route, RouteMatch
from .status_codes import HTTPStatus

__all__ = [
    "HTTPRequest",
    "RequestParser",
    "HTTPParseError",
    "parse_request",
    "HTTPResponse",
    "ResponseBuilder",
    "format_http_date",
    "error_response",
    "not_found",
    "method_not_allowed",
    "internal_error",
    "Router",
    "Route",
    "RouteMatch",
    "HTTPStatus",
]
