"""
=============================================================================
MIDDLEWARE BASE
=============================================================================

A middleware sees every request on its way in and every response on its
way out:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   request ──► LoggingMiddleware ──► router.handle ──► PageHandler    │
    │                    │                                      │          │
    │   response ◄───────┘◄─────────────────────────────────────┘          │
    │              (status, size and duration logged here)                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

First added is outermost.

=============================================================================
"""

from abc import ABC, abstractmethod
from typing import Callable, List
import logging

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse


logger = logging.getLogger(__name__)

NextHandler = Callable[[HTTPRequest], HTTPResponse]


class Middleware(ABC):
    """
    Base class for middleware.

    Subclasses implement __call__ and must call next(request) unless
    they answer the request themselves:

        class Timing(Middleware):
            def __call__(self, request, next):
                start = time.perf_counter()
                response = next(request)
                response.set_header("X-Elapsed", f"{time.perf_counter() - start:.3f}")
                return response
    """

    @abstractmethod
    def __call__(self, request: HTTPRequest, next: NextHandler) -> HTTPResponse:
        ...

    @property
    def name(self) -> str:
        return self.__class__.__name__


class MiddlewarePipeline:
    """
    Ordered list of middleware wrapped around a final handler.

        pipeline = MiddlewarePipeline().add(LoggingMiddleware())
        handler = pipeline.wrap(router.handle)

    wrap() folds from the innermost outward, so [A, B] around h gives
    A(B(h)).
    """

    def __init__(self):
        self._middleware: List[Middleware] = []

    def add(self, middleware: Middleware) -> "MiddlewarePipeline":
        self._middleware.append(middleware)
        logger.debug(f"Added middleware: {middleware.name}")
        return self

    def use(self, *middleware: Middleware) -> "MiddlewarePipeline":
        for mw in middleware:
            self.add(mw)
        return self

    def wrap(self, handler: NextHandler) -> NextHandler:
        current = handler
        for middleware in reversed(self._middleware):
            current = self._bind(middleware, current)
        return current

    @staticmethod
    def _bind(middleware: Middleware, next_handler: NextHandler) -> NextHandler:
        def wrapped(request: HTTPRequest) -> HTTPResponse:
            return middleware(request, next_handler)
        return wrapped

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self):
        return iter(self._middleware)
