"""
=============================================================================
PAGE HANDLER
=============================================================================

Serves the site: the composition point between the HTTP layer and the
resolution engine in pageserver.pages.

=============================================================================
REQUEST STATE MACHINE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    ONE REQUEST, ONE TERMINAL OUTCOME                │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Start ──► Resolve                                                  │
    │               │                                                      │
    │               ├── NOT_FOUND ─────────────────► NotFoundResponse      │
    │               │                                                      │
    │               └──► SecurityCheck                                     │
    │                       │                                              │
    │                       ├── IOFailure ─────────► ErrorResponse (500)   │
    │                       ├── NotFoundError ─────► NotFoundResponse      │
    │                       ├── PathEscapeError ───► NotFoundResponse      │
    │                       ├── directory ─────────► DirectoryListing      │
    │                       └── file ──────────────► TemplatedFile (200)   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Every PageError is turned into a response HERE. Nothing raised by the
engine reaches the worker thread.

=============================================================================
NOT FOUND STATUS
=============================================================================

The not-found page is the literal text "404 - Not Found". By default it
goes out with status 200, which existing clients of this server rely on.
Pass strict_not_found=True (CLI: --strict-404) to send a real 404.

=============================================================================
USAGE
=============================================================================

    handler = PageHandler(SiteRoot.from_path("/srv/site"))

    router.get("/")(handler.handle_index)
    router.get("/style.css")(handler.handle_stylesheet)
    router.get("/*path")(handler.handle)

=============================================================================
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..http.request import HTTPRequest
from ..http.response import HTTPResponse, ResponseBuilder
from ..http.status_codes import HTTPStatus
from ..pages import (
    ConfigurationError,
    DirectoryLister,
    IOFailure,
    NotFoundError,
    PageTemplate,
    PathEscapeError,
    PathResolver,
    SecurityGuard,
    SiteRoot,
    load_stylesheet,
)


logger = logging.getLogger(__name__)

NOT_FOUND_BODY = "404 - Not Found"
HTML_CONTENT_TYPE = "text/html; charset=utf-8"
CSS_CONTENT_TYPE = "text/css"


@dataclass(frozen=True)
class PageResponse:
    """Status and body produced for one request, before HTTP framing."""
    status: HTTPStatus
    body: str
    content_type: str = HTML_CONTENT_TYPE


class PageHandler:
    """
    Orchestrates resolver → guard → (lister | template) for each request.

    All collaborators are built once and only read afterwards, so a
    single PageHandler is shared by every worker thread.
    """

    def __init__(
        self,
        root: SiteRoot,
        template: Optional[PageTemplate] = None,
        stylesheet: Optional[str] = None,
        strict_not_found: bool = False,
    ):
        """
        Args:
            root: Canonical site root. Required.
            template: Page template. Defaults to the bundled one.
            stylesheet: CSS served at /style.css. Defaults to the bundled one.
            strict_not_found: Send 404 instead of 200 for missing pages.

        Raises:
            ConfigurationError: No root was given or assets are missing.
        """
        if root is None:
            raise ConfigurationError("PageHandler used before the site root was configured")

        self.root = root
        self.template = template or PageTemplate.load()
        self.stylesheet = stylesheet if stylesheet is not None else load_stylesheet()
        self.not_found_status = HTTPStatus.NOT_FOUND if strict_not_found else HTTPStatus.OK

        self.guard = SecurityGuard(root)
        self.resolver = PathResolver(root)
        self.lister = DirectoryLister(root, self.guard)

    # =========================================================================
    # CORE: path in, PageResponse out
    # =========================================================================

    def respond(self, request_path: str) -> PageResponse:
        """
        Produce the response for a request path.

        Args:
            request_path: Decoded URL path ("/blog/post1").

        Returns:
            PageResponse. Never raises for per-request failures.
        """
        try:
            entry = self.resolver.resolve(request_path)
            if not entry.found:
                return self.not_found()

            canonical = self.guard.check(entry.path, request_path)

            if entry.is_directory:
                return self._listing(canonical)
            return self._page(canonical)

        except (NotFoundError, PathEscapeError):
            return self.not_found()
        except IOFailure as e:
            logger.debug(f"I/O failure serving {request_path}: {e}")
            return PageResponse(HTTPStatus.INTERNAL_SERVER_ERROR, str(e))

    def index(self) -> PageResponse:
        """Listing of the site root."""
        return self.respond("/")

    def not_found(self) -> PageResponse:
        return PageResponse(self.not_found_status, NOT_FOUND_BODY)

    def _listing(self, directory: Path) -> PageResponse:
        return PageResponse(HTTPStatus.OK, self.lister.render(directory))

    def _page(self, path: Path) -> PageResponse:
        """Read a page file and wrap it in the template."""
        try:
            content = path.read_text(encoding="utf-8")
        except (FileNotFoundError, NotADirectoryError):
            # Removed after the guard looked at it
            raise NotFoundError(str(path))
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Cannot read {path}: {e}")
            raise IOFailure.from_error(e)

        return PageResponse(HTTPStatus.OK, self.template.render(content))

    # =========================================================================
    # HTTP ADAPTERS: registered on the router
    # =========================================================================

    def handle(self, request: HTTPRequest) -> HTTPResponse:
        """Route handler for /*path."""
        path = request.path_params.get("path", request.path)
        return self._to_http(self.respond(path))

    def handle_index(self, request: HTTPRequest) -> HTTPResponse:
        """Route handler for /."""
        return self._to_http(self.index())

    def handle_stylesheet(self, request: HTTPRequest) -> HTTPResponse:
        """Route handler for /style.css."""
        return (ResponseBuilder()
            .status(HTTPStatus.OK)
            .text(self.stylesheet, content_type=CSS_CONTENT_TYPE)
            .build())

    @staticmethod
    def _to_http(page: PageResponse) -> HTTPResponse:
        return (ResponseBuilder()
            .status(page.status)
            .text(page.body, content_type=page.content_type)
            .build())


# =============================================================================
# MODULE SUMMARY
# =============================================================================
#
# PageHandler is the only place where resolution errors become responses:
#
# 1. Missing pages and escape attempts → the same not-found page
# 2. Unexpected filesystem errors → 500 with the OS error kind
# 3. Directories → listing, files → templated page
#
# The respond() method is transport-free and is what the tests drive;
# handle*() only adapt it to HTTPRequest/HTTPResponse.
# =============================================================================
