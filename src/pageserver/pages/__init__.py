"""
=============================================================================
PAGES - REQUEST-TO-FILE RESOLUTION ENGINE
=============================================================================

Everything that decides WHAT to send for a URL path. Nothing in here
knows about sockets or HTTP parsing.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    RESOLUTION PIPELINE                              │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   "/blog/post1"                                                      │
    │        │                                                             │
    │        ▼                                                             │
    │   PathResolver ──── NOT_FOUND ───────────────────────► 404 page     │
    │        │                                                             │
    │        ▼                                                             │
    │   SecurityGuard ─── escape / vanished ───────────────► 404 page     │
    │        │        └── other I/O error ─────────────────► 500          │
    │        ▼                                                             │
    │   directory? ──yes──► DirectoryLister ───────────────► 200 listing  │
    │        │                                                             │
    │        no                                                            │
    │        ▼                                                             │
    │   read file ───────► PageTemplate.render ────────────► 200 page     │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    root.py       SiteRoot           immutable canonical root
    guard.py      SecurityGuard      canonicalize + confine to root
    resolver.py   PathResolver       URL path → candidate, .html fallback
    listing.py    DirectoryLister    filtered, sorted <ul> listing
    template.py   PageTemplate       ##HEADER## / ##CONTENT## / ##FOOTER##
    errors.py     PageError family

The orchestration lives in pageserver.handlers.pages.PageHandler.

=============================================================================
"""

from .errors import (
    PageError,
    NotFoundError,
    PathEscapeError,
    IOFailure,
    ConfigurationError,
)
from .root import SiteRoot
from .guard import SecurityGuard
from .resolver import PathResolver, ResolvedEntry, EntryKind
from .listing import DirectoryLister, ListingEntry
from .template import PageTemplate, load_stylesheet

__all__ = [
    "PageError",
    "NotFoundError",
    "PathEscapeError",
    "IOFailure",
    "ConfigurationError",
    "SiteRoot",
    "SecurityGuard",
    "PathResolver",
    "ResolvedEntry",
    "EntryKind",
    "DirectoryLister",
    "ListingEntry",
    "PageTemplate",
    "load_stylesheet",
]
