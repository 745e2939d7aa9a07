"""
=============================================================================
PATH RESOLVER
=============================================================================

Maps an incoming URL path to a candidate filesystem entry under the root.

=============================================================================
RESOLUTION ALGORITHM
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    URL PATH → FILESYSTEM ENTRY                      │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   "/" or ""  ─────────────────────────────────► DIRECTORY(root)     │
    │                                                                      │
    │   1. candidate = root / path.lstrip("/")        (raw join)          │
    │                                                                      │
    │   2. candidate exists?                                               │
    │        ├── directory ──────────────────────────► DIRECTORY           │
    │        └── file ───────────────────────────────► FILE                │
    │                                                                      │
    │   3. last segment has no "." and                                     │
    │      <last segment>.html exists? ──────────────► FILE (fallback)     │
    │                                                                      │
    │   4. ──────────────────────────────────────────► NOT_FOUND           │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    Root: /srv/site  (index.html, about.html, blog/post1.html)

        /about          → /srv/site/about missing → about.html  → FILE
        /about.html     → exists                                → FILE
        /blog           → exists, is a directory                → DIRECTORY
        /blog/post1     → post1 missing → post1.html            → FILE
        /missing        → missing, missing.html missing         → NOT_FOUND
        /notes.txt      → missing, has an extension             → NOT_FOUND

The result is NOT yet trusted: "/../../etc/passwd" resolves to an
existing FILE here. The SecurityGuard decides whether it may be served.

=============================================================================
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from .errors import IOFailure
from .root import SiteRoot


logger = logging.getLogger(__name__)

HTML_SUFFIX = ".html"


class EntryKind(Enum):
    """What a request path resolved to."""
    NOT_FOUND = "not_found"
    DIRECTORY = "directory"
    FILE = "file"


@dataclass(frozen=True)
class ResolvedEntry:
    """
    Outcome of resolving one request path.

    path is the raw (not yet canonical) candidate, or None for NOT_FOUND.
    """
    kind: EntryKind
    path: Optional[Path] = None

    @property
    def is_directory(self) -> bool:
        return self.kind is EntryKind.DIRECTORY

    @property
    def found(self) -> bool:
        return self.kind is not EntryKind.NOT_FOUND


class PathResolver:
    """
    Turns request paths into ResolvedEntry values.

    Usage:
        resolver = PathResolver(root)
        entry = resolver.resolve("/blog/post1")
        # ResolvedEntry(kind=EntryKind.FILE, path=/srv/site/blog/post1.html)
    """

    def __init__(self, root: SiteRoot):
        self.root = root

    def resolve(self, request_path: str) -> ResolvedEntry:
        """
        Resolve a request path to a candidate entry.

        Args:
            request_path: Decoded URL path, untrusted.

        Returns:
            ResolvedEntry (not yet security-checked).

        Raises:
            IOFailure: If the filesystem refuses the existence check.
        """
        relative = request_path.lstrip("/")

        # The index bypasses the extension fallback entirely
        if not relative:
            return ResolvedEntry(EntryKind.DIRECTORY, self.root.path)

        # Raw join: ".." and symlinks are left for the guard
        candidate = self.root.path / relative
        logger.info(f"Request for {candidate}")

        try:
            if candidate.exists():
                return self._entry_for(candidate)

            fallback = self._html_fallback(candidate)
            if fallback is not None and fallback.exists():
                logger.debug(f"Resolved {request_path} via {fallback.name}")
                return self._entry_for(fallback)
        except OSError as e:
            logger.error(f"Cannot stat {candidate}: {e}")
            raise IOFailure.from_error(e)

        return ResolvedEntry(EntryKind.NOT_FOUND)

    @staticmethod
    def _entry_for(path: Path) -> ResolvedEntry:
        kind = EntryKind.DIRECTORY if path.is_dir() else EntryKind.FILE
        return ResolvedEntry(kind, path)

    def _html_fallback(self, candidate: Path) -> Optional[Path]:
        """
        Build "<name>.html" next to the candidate.

        Only extension-less names get a fallback: "about" → "about.html",
        but "notes.txt" stays "notes.txt".
        """
        name = candidate.name
        if not name or "." in name:
            return None
        return candidate.with_name(name + HTML_SUFFIX)
