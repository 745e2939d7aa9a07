"""
=============================================================================
ACCESS LOG MIDDLEWARE
=============================================================================

One log line per request on the "pageserver.access" logger.

    text:  127.0.0.1 - - [19/Oct/2026:10:00:00 +0000] "GET /blog/post1" 200 1432 0.84ms
    json:  {"request_id": "3f2a9c1e", "method": "GET", "path": "/blog/post1", ...}

The access logger is separate from the "pageserver.pages" loggers so it
can be routed or silenced on its own:

    logging.getLogger("pageserver.access").setLevel(logging.WARNING)

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional
import json
import logging
import time
import uuid

from .base import Middleware, NextHandler
from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger("pageserver.access")


@dataclass
class RequestLog:
    """One access log entry."""

    request_id: str
    method: str
    path: str
    client_ip: str
    user_agent: str
    status_code: int
    content_length: int
    duration_ms: float
    timestamp: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "method": self.method,
            "path": self.path,
            "client_ip": self.client_ip,
            "user_agent": self.user_agent,
            "status_code": self.status_code,
            "content_length": self.content_length,
            "duration_ms": round(self.duration_ms, 2),
            "timestamp": self.timestamp,
        }

    def to_text(self) -> str:
        """Common log format plus the duration."""
        return (
            f'{self.client_ip} - - [{self.timestamp}] '
            f'"{self.method} {self.path}" {self.status_code} '
            f'{self.content_length} {self.duration_ms:.2f}ms'
        )


class LoggingMiddleware(Middleware):
    """
    Times each request and writes an access log entry.

    Should be first in the pipeline so its timing covers everything else.

    Args:
        log_format: "text" or "json".
        include_request_id: Add an X-Request-ID header to every response.
        log_level: Level the access lines are logged at.
        skip_paths: Exact paths that are served but not logged.
    """

    def __init__(
        self,
        log_format: str = "text",
        include_request_id: bool = True,
        log_level: int = logging.INFO,
        skip_paths: Optional[list[str]] = None,
    ):
        self.log_format = log_format
        self.include_request_id = include_request_id
        self.log_level = log_level
        self.skip_paths = set(skip_paths or [])

    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        request_id = uuid.uuid4().hex[:8]
        start = time.perf_counter()

        try:
            response = next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.error(
                f"Request failed: {request.method} {request.path} "
                f"- {type(e).__name__}: {e} ({duration_ms:.2f}ms)"
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000

        if self.include_request_id:
            response.set_header("X-Request-ID", request_id)

        if request.path in self.skip_paths:
            return response

        entry = RequestLog(
            request_id=request_id,
            method=request.method,
            path=request.path,
            client_ip=request.client_address[0] or "-",
            user_agent=request.user_agent or "-",
            status_code=int(response.status),
            content_length=len(response.body),
            duration_ms=duration_ms,
            timestamp=time.strftime("%d/%b/%Y:%H:%M:%S %z"),
        )

        if self.log_format == "json":
            logger.log(self.log_level, json.dumps(entry.to_dict()))
        else:
            logger.log(self.log_level, entry.to_text())

        return response
