"""
=============================================================================
PAGE RESOLUTION ERRORS
=============================================================================

Every failure the resolution engine can hit is one of these exceptions.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    ERROR TAXONOMY                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   PageError                                                          │
    │   ├── NotFoundError        missing page, or vanished mid-request    │
    │   ├── PathEscapeError      canonical path is outside the root       │
    │   ├── IOFailure            any other filesystem error   → 500       │
    │   └── ConfigurationError   bad root / template assets   → startup   │
    │                                                                      │
    │   NotFoundError and PathEscapeError look the SAME to the client.    │
    │   IOFailure carries the OS error kind (no paths) for the 500 body.  │
    │   ConfigurationError never happens per-request.                     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""


class PageError(Exception):
    """Base class for all resolution engine errors."""


class NotFoundError(PageError):
    """
    The requested page does not exist.

    Raised when neither the path nor its `.html` fallback exists, or when
    the target disappeared between resolution and canonicalization.
    """


class PathEscapeError(PageError):
    """
    The request resolved to a location outside the site root.

    This is a security violation, not a crash: the handler answers it
    exactly like NotFoundError so a client cannot tell which paths
    exist outside the root.

    Attributes:
        requested: The untrusted path the client asked for (log only).
        resolved: The canonical path it pointed at (log only).
    """

    def __init__(self, requested: str, resolved: str):
        super().__init__(f"Path escapes site root: {requested}")
        self.requested = requested
        self.resolved = resolved


class IOFailure(PageError):
    """
    Any filesystem error that is not "file is missing".

    Permission problems, symlink loops, unreadable files. The message is
    sent back in the 500 response body, so it carries the error kind
    ("File name too long") and never the filename.
    """

    @classmethod
    def from_error(cls, error: Exception) -> "IOFailure":
        if isinstance(error, OSError):
            return cls(error.strerror or str(error))
        if isinstance(error, UnicodeDecodeError):
            return cls(f"{error.encoding} codec can't decode page content")
        return cls(type(error).__name__)


class ConfigurationError(PageError):
    """
    Startup configuration is unusable.

    Missing root directory, missing template files, invalid config values.
    Fatal: aborts startup, never reachable from a request.
    """
