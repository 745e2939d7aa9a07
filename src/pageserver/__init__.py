"""
=============================================================================
PAGESERVER - Templated Page Server
=============================================================================

Serves a directory of HTML fragments as a browsable site. Each fragment is
wrapped in a shared header/footer template; directories become link
listings; nothing outside the configured root is ever served.

=============================================================================
WHAT A REQUEST TURNS INTO
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   GET /             listing of the root                              │
    │   GET /style.css    bundled stylesheet (text/css)                    │
    │   GET /about        <root>/about, else <root>/about.html, templated  │
    │   GET /blog         listing of <root>/blog                           │
    │   GET /../secret    "404 - Not Found"                                │
    │   GET /missing      "404 - Not Found"                                │
    │   read error        500 with the error text                          │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    pageserver/
    ├── __main__.py          CLI (pageserver ./site)
    ├── app.py               create_app(): server + page routes
    ├── server.py            HTTPServer
    ├── config.py            ServerConfig
    ├── core/                sockets, connections, worker pool
    ├── http/                parsing, responses, routing
    ├── middleware/          pipeline + access log
    ├── handlers/pages.py    PageHandler
    └── pages/               root, guard, resolver, listing, template

=============================================================================
"""

__version__ = "1.0.0"

from .config import ServerConfig
from .server import HTTPServer
from .app import create_app
from .handlers import PageHandler, PageResponse
from .pages import (
    SiteRoot,
    SecurityGuard,
    PathResolver,
    DirectoryLister,
    PageTemplate,
    PageError,
    NotFoundError,
    PathEscapeError,
    IOFailure,
    ConfigurationError,
)

__all__ = [
    "__version__",
    "ServerConfig",
    "HTTPServer",
    "create_app",
    "PageHandler",
    "PageResponse",
    "SiteRoot",
    "SecurityGuard",
    "PathResolver",
    "DirectoryLister",
    "PageTemplate",
    "PageError",
    "NotFoundError",
    "PathEscapeError",
    "IOFailure",
    "ConfigurationError",
]
