"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Everything tunable lives in one dataclass, built from CLI flags or the
environment and validated once at startup.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    WHERE SETTINGS COME FROM                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   pageserver ./site -p 9000        →  __main__.build_config()        │
    │   PAGESERVER_PORT=9000 ...         →  ServerConfig.from_env()        │
    │   ServerConfig(root_dir="./site")  →  tests, embedding               │
    │                                                                      │
    │                    all three ──► validate() ──► HTTPServer           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

The config is read-only once the server starts; workers share it without
locking.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional
import os

from .pages.errors import ConfigurationError


DEFAULT_PORT = 8015
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("text", "json")


@dataclass
class ServerConfig:
    """
    Configuration for the page server.

    =========================================================================
    GROUPS
    =========================================================================

    NETWORK     host, port, backlog, buffer_size, timeout
    HTTP        keep_alive, keep_alive_timeout, max_request_size, server_name
    THREADING   min_workers, max_workers, queue_size
    SITE        root_dir, strict_not_found
    LOGGING     log_level, log_format

    =========================================================================
    """

    # Network
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    backlog: int = 128
    buffer_size: int = 8192
    timeout: Optional[float] = 30.0

    # HTTP
    keep_alive: bool = True
    keep_alive_timeout: float = 5.0
    max_request_size: int = 1024 * 1024
    server_name: str = "pageserver/1.0"

    # Threading
    min_workers: int = 4
    max_workers: int = 8
    queue_size: int = 100

    # Site
    root_dir: Optional[str] = None
    """Directory of page fragments. Required; checked by validate()."""

    strict_not_found: bool = False
    """Answer missing pages with 404 instead of 200."""

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Build a config from environment variables.

            PAGESERVER_HOST         bind address (default 127.0.0.1)
            PAGESERVER_PORT         port (default 8015)
            PAGESERVER_ROOT         site root directory
            PAGESERVER_WORKERS      worker threads; max is twice this (default 4)
            PAGESERVER_TIMEOUT      first-request read timeout, seconds (default 30)
            PAGESERVER_LOG_LEVEL    DEBUG/INFO/WARNING/ERROR (default INFO)
            PAGESERVER_STRICT_404   "1"/"true"/"yes" to send real 404s

        Raises:
            ConfigurationError: A numeric variable does not parse.
        """
        try:
            workers = int(os.getenv("PAGESERVER_WORKERS", "4"))
            return cls(
                host=os.getenv("PAGESERVER_HOST", "127.0.0.1"),
                port=int(os.getenv("PAGESERVER_PORT", str(DEFAULT_PORT))),
                root_dir=os.getenv("PAGESERVER_ROOT"),
                min_workers=workers,
                max_workers=workers * 2,
                timeout=float(os.getenv("PAGESERVER_TIMEOUT", "30")),
                log_level=os.getenv("PAGESERVER_LOG_LEVEL", "INFO").upper(),
                strict_not_found=_env_flag("PAGESERVER_STRICT_404"),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment setting: {e}")

    def validate(self) -> None:
        """
        Fail fast on values the server cannot run with.

        Raises:
            ConfigurationError: Describes the first bad value found.
        """
        if not self.root_dir:
            raise ConfigurationError("No site root directory given")
        if not 0 <= self.port < 65536:
            raise ConfigurationError(f"Invalid port: {self.port}. Must be 0-65535.")
        if self.min_workers < 1:
            raise ConfigurationError("min_workers must be >= 1")
        if self.max_workers < self.min_workers:
            raise ConfigurationError("max_workers must be >= min_workers")
        if self.queue_size < 1:
            raise ConfigurationError("queue_size must be >= 1")
        if self.buffer_size < 1024:
            raise ConfigurationError("buffer_size must be >= 1024")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError("timeout must be > 0")
        if self.log_level.upper() not in LOG_LEVELS:
            raise ConfigurationError(f"Unknown log level: {self.log_level}")
        if self.log_format not in LOG_FORMATS:
            raise ConfigurationError(f"Unknown log format: {self.log_format}")


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes", "on")
