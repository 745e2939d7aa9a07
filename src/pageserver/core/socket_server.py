"""
=============================================================================
TCP SOCKET SERVER
=============================================================================

Owns the listening socket and the accept loop. Every accepted socket is
wrapped in a Connection and handed to a callback; what happens next is
the HTTP server's business.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      ACCEPT LOOP                                    │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   start()                                                            │
    │     ├── socket()  SO_REUSEADDR, TCP_NODELAY, 1s accept timeout       │
    │     ├── bind() / listen()                                            │
    │     ├── SIGINT / SIGTERM → shutdown()   (main thread only)           │
    │     ├── on_listening(address)                                        │
    │     │                                                                │
    │     └── while running:                                               │
    │            accept() ──timeout──► check running, loop                 │
    │               │                                                      │
    │               └──► connection_handler(Connection(...))               │
    │                                                                      │
    │   shutdown()  flips running; the loop notices within a second        │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Signal handlers can only be installed from the main thread. When the
server is started from any other thread (tests, embedding) it skips them
and relies on shutdown() being called.

=============================================================================
"""

from typing import Callable, Optional, Tuple
import logging
import signal
import socket
import threading

from ..config import ServerConfig
from .connection import Connection


logger = logging.getLogger(__name__)


class SocketServer:
    """
    Blocking TCP accept loop.

        server = SocketServer(config)
        server.start(handle_connection)   # returns after shutdown()
    """

    def __init__(self, config: ServerConfig):
        self.config = config
        self._socket: Optional[socket.socket] = None
        self._running = False
        self._listening = threading.Event()
        self._shutdown_event = threading.Event()
        self._original_handlers: dict = {}

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        Bound (host, port). With port 0 this is the port the OS picked,
        once the socket is bound.
        """
        if self._socket is not None:
            host, port = self._socket.getsockname()[:2]
            return (host, port)
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        # accept() wakes up once a second to notice shutdown()
        sock.settimeout(1.0)
        return sock

    # =========================================================================
    # SIGNALS
    # =========================================================================

    def _setup_signals(self) -> None:
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, leaving signal handlers alone")
            return

        def shutdown_handler(signum, frame):
            logger.info(f"Received {signal.Signals(signum).name}, initiating shutdown...")
            self.shutdown()

        for sig in (signal.SIGTERM, signal.SIGINT):
            self._original_handlers[sig] = signal.signal(sig, shutdown_handler)

    def _restore_signals(self) -> None:
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers.clear()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(
        self,
        connection_handler: Callable[[Connection], None],
        on_listening: Optional[Callable[[Tuple[str, int]], None]] = None,
    ) -> None:
        """
        Bind, listen and run the accept loop until shutdown().

        Args:
            connection_handler: Called with each accepted Connection.
            on_listening: Called once with the bound address, before the
                first accept().

        Raises:
            OSError: The address could not be bound.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)
        self._running = True
        self._shutdown_event.clear()
        self._setup_signals()

        if on_listening is not None:
            on_listening(self.address)
        self._listening.set()

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]) -> None:
        while self._running:
            try:
                client_socket, client_address = self._socket.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self._running:
                    logger.error(f"Accept error: {e}")
                break

            logger.debug(f"Accepted connection from {client_address[0]}:{client_address[1]}")
            conn = Connection(
                socket=client_socket,
                address=client_address,
                buffer_size=self.config.buffer_size,
                timeout=self.config.timeout,
                keep_alive_timeout=self.config.keep_alive_timeout,
                max_request_size=self.config.max_request_size,
            )
            connection_handler(conn)

    def shutdown(self) -> None:
        """Stop accepting. Safe to call more than once and from any thread."""
        if self._running:
            logger.info("Shutting down socket server...")
        self._running = False
        self._shutdown_event.set()

    def _cleanup(self) -> None:
        self._restore_signals()
        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass
            self._socket = None
        self._listening.clear()
        logger.info("Socket server stopped")

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        """Block until the socket is bound and accepting. False on timeout."""
        return self._listening.wait(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        return self._shutdown_event.wait(timeout)
