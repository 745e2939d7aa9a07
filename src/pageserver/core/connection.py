"""
=============================================================================
CLIENT CONNECTION
=============================================================================

Wraps an accepted socket: buffers reads until a full request is in hand,
sends responses whole, and closes cleanly.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONNECTION LIFECYCLE                             │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   NEW ──► READING ──► PROCESSING ──► WRITING ──┬──► CLOSING ──► CLOSED
    │              ▲                                 │                     │
    │              └──────────── KEEP_ALIVE ◄────────┘                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

TCP delivers bytes in arbitrary chunks, so read_request() keeps reading
until the header terminator (and Content-Length body bytes) have arrived.
Bytes past the end of one request stay in the buffer for the next one.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import logging
import socket
import time
import uuid


logger = logging.getLogger(__name__)


class RequestTooLargeError(ValueError):
    """The client sent more than max_request_size bytes for one request."""


class ConnectionState(Enum):
    NEW = "new"
    READING = "reading"
    PROCESSING = "processing"
    WRITING = "writing"
    KEEP_ALIVE = "keep_alive"
    CLOSING = "closing"
    CLOSED = "closed"


@dataclass
class Connection:
    """
    One client connection.

    Usable as a context manager; leaving the block closes the socket:

        with Connection(sock, addr) as conn:
            data = conn.read_request()
            conn.send_response(payload)
    """

    socket: socket.socket
    address: tuple[str, int]

    id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)
    requests_handled: int = 0

    buffer_size: int = 8192
    timeout: float = 30.0              # first request
    keep_alive_timeout: float = 5.0    # every request after that
    max_request_size: int = 1024 * 1024

    _buffer: bytes = field(default=b"", repr=False)

    def __post_init__(self):
        self.socket.setblocking(True)
        if self.timeout:
            self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        return self.address[0]

    @property
    def age(self) -> float:
        return time.time() - self.created_at

    # =========================================================================
    # READING
    # =========================================================================

    def read_request(self) -> Optional[bytes]:
        """
        Read one complete request.

        Returns:
            The request bytes, or None if the client closed the connection
            (or went quiet on a keep-alive connection).

        Raises:
            TimeoutError: The first request never completed.
            RequestTooLargeError: The request exceeds max_request_size.
        """
        self.state = ConnectionState.READING

        if self.requests_handled > 0:
            self.socket.settimeout(self.keep_alive_timeout)

        try:
            while b"\r\n\r\n" not in self._buffer:
                chunk = self._recv()
                if not chunk:
                    return None
                self._append(chunk)

            header_end = self._buffer.find(b"\r\n\r\n")
            body_start = header_end + 4
            content_length = self._content_length(self._buffer[:header_end])

            while len(self._buffer) - body_start < content_length:
                chunk = self._recv()
                if not chunk:
                    break
                self._append(chunk)

            request_end = body_start + content_length
            data = self._buffer[:request_end]
            self._buffer = self._buffer[request_end:]

            self.requests_handled += 1
            self.state = ConnectionState.PROCESSING
            return data

        except socket.timeout:
            if self.requests_handled > 0:
                logger.debug(f"[{self.id}] Keep-alive timeout")
                return None
            raise TimeoutError("Request read timeout")

        finally:
            self.socket.settimeout(self.timeout)

    def _append(self, chunk: bytes) -> None:
        self._buffer += chunk
        if len(self._buffer) > self.max_request_size:
            raise RequestTooLargeError(f"Request too large: {len(self._buffer)} bytes")

    def _recv(self) -> bytes:
        try:
            return self.socket.recv(self.buffer_size)
        except (ConnectionResetError, BrokenPipeError):
            return b""

    @staticmethod
    def _content_length(headers: bytes) -> int:
        # Needed before the request is parsed; RequestParser validates it properly
        for line in headers.decode("latin-1").lower().split("\r\n"):
            if line.startswith("content-length:"):
                try:
                    return max(int(line.split(":", 1)[1].strip()), 0)
                except ValueError:
                    return 0
        return 0

    # =========================================================================
    # WRITING
    # =========================================================================

    def send_response(self, data: bytes) -> bool:
        """sendall() the payload. False if the client has gone away."""
        self.state = ConnectionState.WRITING
        try:
            self.socket.sendall(data)
            return True
        except OSError as e:
            logger.warning(f"[{self.id}] Send failed: {e}")
            return False

    def set_keep_alive(self) -> None:
        self.state = ConnectionState.KEEP_ALIVE

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self) -> None:
        """
        Half-close, drain what the client still sends, then release the fd.

        Idempotent.
        """
        if self.state == ConnectionState.CLOSED:
            return

        self.state = ConnectionState.CLOSING

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass

        try:
            self.socket.settimeout(0.5)
            while self.socket.recv(1024):
                pass
        except OSError:
            pass

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        logger.debug(f"[{self.id}] Connection closed after {self.requests_handled} requests")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
