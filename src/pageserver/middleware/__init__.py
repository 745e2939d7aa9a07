"""
Request/response middleware.

    base.py      Middleware, MiddlewarePipeline
    logging.py   LoggingMiddleware (access log)
"""

from .base import Middleware, MiddlewarePipeline, NextHandler
from .logging import LoggingMiddleware, RequestLog

__all__ = [
    "Middleware",
    "MiddlewarePipeline",
    "NextHandler",
    "LoggingMiddleware",
    "RequestLog",
]
