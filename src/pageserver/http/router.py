"""
=============================================================================
URL ROUTER
=============================================================================

Maps (method, path) to a handler. Three kinds of pattern segment:

    /style.css     static    exact match
    /:name         param     one path segment
    /*path         wildcard  everything after, slashes included

=============================================================================
THE PAGE SERVER'S ROUTE TABLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    FIRST REGISTERED, FIRST MATCHED                  │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   GET  /            → PageHandler.handle_index                       │
    │   GET  /style.css   → PageHandler.handle_stylesheet                  │
    │   GET  /*path       → PageHandler.handle                             │
    │                                                                      │
    │   GET  /blog/post1  → skips "/" and "/style.css", matches /*path     │
    │                       path_params = {"path": "blog/post1"}           │
    │                                                                      │
    │   POST /anything    → path matches, method doesn't → 405 + Allow     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

/style.css must be registered before the wildcard or the wildcard would
swallow it and look for a page called "style.css" under the site root.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional
import re

from .request import HTTPRequest
from .response import HTTPResponse, method_not_allowed, not_found


Handler = Callable[[HTTPRequest], HTTPResponse]

ALL_METHODS = ["DELETE", "GET", "HEAD", "OPTIONS", "PATCH", "POST", "PUT"]


@dataclass
class Route:
    """
    A URL pattern bound to a handler.

        Route(path="/*path", method="GET", handler=pages.handle)
    """

    path: str
    method: Optional[str]           # None accepts any method
    handler: Handler
    name: Optional[str] = None

    _pattern: Optional[re.Pattern] = field(default=None, repr=False)
    _param_names: List[str] = field(default_factory=list, repr=False)


@dataclass
class RouteMatch:
    """
    A route plus the parameters it captured.

        Pattern: /*path
        Path:    /blog/post1
        Result:  RouteMatch(route=<Route>, params={"path": "blog/post1"})
    """
    route: Route
    params: Dict[str, str]


class Router:
    """
    Ordered route table with decorator registration.

        router = Router()

        @router.get("/")
        def index(request):
            ...

    Registration order is match order.
    """

    def __init__(self):
        self._routes: List[Route] = []

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def add_route(
        self,
        path: str,
        handler: Handler,
        method: Optional[str] = None,
        name: Optional[str] = None,
    ) -> Route:
        pattern, param_names = self._compile_pattern(path)
        route = Route(
            path=path,
            method=method.upper() if method else None,
            handler=handler,
            name=name,
            _pattern=pattern,
            _param_names=param_names,
        )
        self._routes.append(route)
        return route

    def route(self, path: str, method: Optional[str] = None, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        """Decorator form of add_route(). Returns the handler unchanged."""
        def decorator(handler: Handler) -> Handler:
            self.add_route(path, handler, method, name)
            return handler
        return decorator

    def get(self, path: str, name: Optional[str] = None) -> Callable[[Handler], Handler]:
        return self.route(path, "GET", name)

    def _compile_pattern(self, path: str) -> tuple[re.Pattern, List[str]]:
        """
        Compile a route pattern to an anchored regex.

            "/*path"       → ^/(?P<path>.*)$
            "/style.css"   → ^/style\\.css$
            "/"            → ^/$

        A wildcard ends the pattern; anything after it is ignored.
        """
        param_names: List[str] = []
        regex_parts = ["^"]

        for segment in path.split("/"):
            if not segment:
                continue

            regex_parts.append("/")

            if segment.startswith(":"):
                name = segment[1:]
                param_names.append(name)
                regex_parts.append(f"(?P<{name}>[^/]+)")
            elif segment.startswith("*"):
                name = segment[1:] or "wildcard"
                param_names.append(name)
                regex_parts.append(f"(?P<{name}>.*)")
                break
            else:
                regex_parts.append(re.escape(segment))

        if len(regex_parts) == 1:
            regex_parts.append("/")
        regex_parts.append("$")

        return re.compile("".join(regex_parts)), param_names

    # =========================================================================
    # MATCHING
    # =========================================================================

    @staticmethod
    def _normalize(path: str) -> str:
        # One leading slash, no trailing slash: "//blog/" → "/blog"
        return "/" + path.strip("/")

    def match(self, method: str, path: str) -> Optional[RouteMatch]:
        """First route whose method and pattern both match, or None."""
        path = self._normalize(path)

        for route in self._routes:
            if route.method and route.method != method.upper():
                continue
            found = route._pattern.match(path)
            if found:
                return RouteMatch(route=route, params=found.groupdict())

        return None

    def get_allowed_methods(self, path: str) -> List[str]:
        """Methods registered for patterns matching path. Feeds the Allow header."""
        path = self._normalize(path)
        methods = set()

        for route in self._routes:
            if route._pattern.match(path):
                if route.method is None:
                    return list(ALL_METHODS)
                methods.add(route.method)

        return sorted(methods)

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """
        Dispatch a request.

            route found            → handler(request), path_params filled in
            path known, wrong verb → 405 with Allow
            nothing matches        → 404
        """
        found = self.match(request.method, request.path)
        if found:
            request.path_params = found.params
            return found.route.handler(request)

        allowed = self.get_allowed_methods(request.path)
        if allowed:
            return method_not_allowed(allowed)

        return not_found(f"No route matches {request.path}")

    def routes(self) -> List[Route]:
        return list(self._routes)
