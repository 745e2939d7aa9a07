"""
=============================================================================
CORE NETWORKING
=============================================================================

    socket_server.py   SocketServer   listening socket + accept loop
    connection.py      Connection     buffered reads, whole writes, close
    thread_pool.py     ThreadPool     workers that serve connections

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   SocketServer.accept() ──► Connection ──► ThreadPool.submit()       │
    │                                                 │                    │
    │                                                 ▼                    │
    │                                   HTTPServer._process_connection     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .connection import Connection, ConnectionState, RequestTooLargeError
from .socket_server import SocketServer
from .thread_pool import ThreadPool, Worker, WorkerState, Task

__all__ = [
    "Connection",
    "ConnectionState",
    "RequestTooLargeError",
    "SocketServer",
    "ThreadPool",
    "Worker",
    "WorkerState",
    "Task",
]
