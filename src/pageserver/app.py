"""
Application factory: a configured HTTPServer with the page routes.

    server = create_app(ServerConfig(root_dir="./site"))
    server.run()
"""

from typing import Optional
import logging

from .config import ServerConfig
from .handlers import PageHandler
from .middleware import LoggingMiddleware
from .pages import PageTemplate, SiteRoot
from .server import HTTPServer


logger = logging.getLogger(__name__)


def create_app(
    config: ServerConfig,
    template: Optional[PageTemplate] = None,
    stylesheet: Optional[str] = None,
) -> HTTPServer:
    """
    Build the server for config.root_dir.

    The root is canonicalized here, once; config.root_dir is rewritten to
    the canonical form so the startup log shows what is really served.

    Args:
        config: Server settings. root_dir is required.
        template: Page template; defaults to the bundled one.
        stylesheet: CSS for /style.css; defaults to the bundled one.

    Raises:
        ConfigurationError: Bad config, missing root or missing assets.
    """
    config.validate()
    root = SiteRoot.from_path(config.root_dir)
    config.root_dir = str(root)

    pages = PageHandler(
        root,
        template=template,
        stylesheet=stylesheet,
        strict_not_found=config.strict_not_found,
    )

    server = HTTPServer(config)
    server.use(LoggingMiddleware(log_format=config.log_format))

    # /style.css before the wildcard, or the wildcard takes it
    server.get("/")(pages.handle_index)
    server.get("/style.css")(pages.handle_stylesheet)
    server.get("/*path")(pages.handle)

    logger.debug(f"Site root resolved to {root}")
    return server
