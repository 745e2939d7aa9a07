"""
=============================================================================
HTTP SERVER
=============================================================================

Ties the layers together: sockets in core/, parsing and routing in http/,
middleware, and whatever handlers are registered on the router.

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer.accept()                                              │
    │        │                                                             │
    │        ▼                                                             │
    │   _handle_connection ──queue full──► 503, close                      │
    │        │                                                             │
    │        ▼  (worker thread)                                            │
    │   _process_connection                                                │
    │        │                                                             │
    │        ├── read_request() ── timeout ──────────► 408, close          │
    │        │                  ── too large ────────► 413, close          │
    │        ├── parse ────────── HTTPParseError ────► 400/405/505, close  │
    │        ├── middleware → router → handler                             │
    │        │                  └── exception ───────► 500 (logged)        │
    │        ├── send                                                      │
    │        └── keep-alive? ──yes──► loop  ──no──► close                  │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Nothing a single client does can take down a worker or the accept loop.

=============================================================================
"""

from typing import Callable, Optional, Tuple
import logging

from .config import ServerConfig
from .core import Connection, RequestTooLargeError, SocketServer, ThreadPool
from .http import (
    HTTPParseError,
    HTTPRequest,
    HTTPResponse,
    HTTPStatus,
    RequestParser,
    ResponseBuilder,
    Router,
)
from .middleware import Middleware, MiddlewarePipeline


logger = logging.getLogger(__name__)


class HTTPServer:
    """
    Threaded HTTP/1.1 server.

        server = HTTPServer(config)
        server.router.get("/")(index)
        server.use(LoggingMiddleware())
        server.run()            # blocks until SIGINT/SIGTERM or shutdown()

    Usually built by pageserver.app.create_app(), which registers the
    page routes.
    """

    def __init__(self, config: Optional[ServerConfig] = None):
        """
        Raises:
            ConfigurationError: config.validate() failed.
        """
        self.config = config or ServerConfig()
        self.config.validate()

        self._socket_server = SocketServer(self.config)
        self._thread_pool = ThreadPool(
            min_workers=self.config.min_workers,
            max_workers=self.config.max_workers,
            queue_size=self.config.queue_size,
        )
        self._parser = RequestParser(max_request_size=self.config.max_request_size)
        self._router = Router()
        self._middleware = MiddlewarePipeline()
        self._handler: Optional[Callable[[HTTPRequest], HTTPResponse]] = None
        self._running = False

    @property
    def router(self) -> Router:
        return self._router

    @property
    def address(self) -> Tuple[str, int]:
        """Bound address; the real port once listening, even when configured as 0."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._running

    def use(self, middleware: Middleware) -> "HTTPServer":
        self._middleware.add(middleware)
        return self

    def get(self, path: str, **kwargs):
        return self._router.get(path, **kwargs)

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def run(self) -> None:
        """
        Serve until shutdown.

        Raises:
            OSError: The configured address could not be bound.
        """
        self._setup_logging()
        self._handler = self._middleware.wrap(self._router.handle)
        self._running = True
        self._thread_pool.start()

        try:
            self._socket_server.start(self._handle_connection, on_listening=self._log_listening)
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")
        finally:
            self._shutdown()

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        return self._socket_server.wait_until_listening(timeout)

    def shutdown(self) -> None:
        """Ask the accept loop to stop; run() returns once workers drain."""
        self._socket_server.shutdown()

    def _log_listening(self, address: Tuple[str, int]) -> None:
        host, port = address
        logger.info(f"Listening on {host}:{port}, serving dir {self.config.root_dir}")
        logger.debug(
            f"Workers: {self.config.min_workers}-{self.config.max_workers}, "
            f"routes: {', '.join(r.path for r in self._router.routes())}"
        )

    def _setup_logging(self) -> None:
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        logging.getLogger("pageserver").setLevel(level)

    def _shutdown(self) -> None:
        logger.info("Shutting down server...")
        self._running = False
        self._thread_pool.shutdown(wait=True, timeout=self.config.keep_alive_timeout + 1.0)
        logger.info("Server stopped")

    # =========================================================================
    # CONNECTION HANDLING
    # =========================================================================

    def _handle_connection(self, conn: Connection) -> None:
        """Runs on the accept thread: hand the connection to a worker."""
        if not self._thread_pool.submit(self._process_connection, args=(conn,)):
            logger.warning(f"[{conn.id}] Thread pool full, rejecting connection")
            self._send_error(conn, HTTPStatus.SERVICE_UNAVAILABLE, "Server overloaded")
            conn.close()

    def _process_connection(self, conn: Connection) -> None:
        """Runs on a worker: the keep-alive request loop for one client."""
        with conn:
            while self._running:
                try:
                    raw = conn.read_request()
                except TimeoutError:
                    self._send_error(conn, HTTPStatus.REQUEST_TIMEOUT, "Request timeout")
                    break
                except RequestTooLargeError as e:
                    self._send_error(conn, HTTPStatus.PAYLOAD_TOO_LARGE, str(e))
                    break
                except OSError as e:
                    logger.debug(f"[{conn.id}] Read failed: {e}")
                    break

                if raw is None:
                    break

                try:
                    request = self._parser.parse(raw, conn.address)
                except HTTPParseError as e:
                    logger.info(f"[{conn.id}] Bad request from {conn.client_ip}: {e}")
                    self._send_error(conn, e.status_code, str(e))
                    break

                response = self._dispatch(conn, request)
                keep_alive = request.is_keep_alive and self.config.keep_alive

                if keep_alive:
                    response.headers.setdefault("Connection", "keep-alive")
                    response.headers.setdefault(
                        "Keep-Alive", f"timeout={int(self.config.keep_alive_timeout)}"
                    )
                else:
                    response.headers["Connection"] = "close"

                if not conn.send_response(response.to_bytes(self.config.server_name)):
                    break
                if not keep_alive:
                    break

                conn.set_keep_alive()

    def _dispatch(self, conn: Connection, request: HTTPRequest) -> HTTPResponse:
        try:
            return self._handler(request)
        except Exception as e:
            logger.exception(f"[{conn.id}] Handler error: {e}")
            return (ResponseBuilder()
                .status(HTTPStatus.INTERNAL_SERVER_ERROR)
                .json({"error": "Internal Server Error"})
                .build())

    def _send_error(self, conn: Connection, status: HTTPStatus, message: str) -> None:
        """Error sent before (or instead of) routing; always closes."""
        response = (ResponseBuilder()
            .status(status)
            .json({"error": message})
            .close_connection()
            .build())
        conn.send_response(response.to_bytes(self.config.server_name))
