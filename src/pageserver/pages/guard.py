"""
=============================================================================
SECURITY GUARD - ROOT CONFINEMENT
=============================================================================

The single safety-critical check in the server:

    NO RESPONSE BODY OR LISTING ENTRY MAY ORIGINATE OUTSIDE THE SITE ROOT.

=============================================================================
WHAT IS PATH TRAVERSAL?
=============================================================================

The resolver joins the untrusted URL path onto the root without
interpreting it. That raw join can point anywhere:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    RAW JOIN vs CANONICAL PATH                       │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Root:     /srv/site                                               │
    │                                                                      │
    │   GET /blog/post1                                                   │
    │     raw:        /srv/site/blog/post1.html                           │
    │     canonical:  /srv/site/blog/post1.html          ✓ inside         │
    │                                                                      │
    │   GET /../../etc/passwd                                             │
    │     raw:        /srv/site/../../etc/passwd                          │
    │     canonical:  /etc/passwd                        ✗ ESCAPE         │
    │                                                                      │
    │   GET /notes     (notes -> /home/me/private, a symlink)             │
    │     raw:        /srv/site/notes                                     │
    │     canonical:  /home/me/private                   ✗ ESCAPE         │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Only the CANONICAL path (symlinks followed, ".." collapsed) can be
compared against the root. String checks on the raw path ("does it
contain ..?") miss symlinks and encoded forms.

=============================================================================
OUTCOMES
=============================================================================

    canonical inside root       → return canonical path
    canonical outside root      → PathEscapeError   (answered like 404)
    target vanished             → NotFoundError
    anything else (ELOOP, EACCES, ...) → IOFailure  (500, error kind only)

None of these abort the process. A hostile request is just another
request that gets a "not found" page.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Union

from .errors import IOFailure, NotFoundError, PathEscapeError
from .root import SiteRoot


logger = logging.getLogger(__name__)


class SecurityGuard:
    """
    Canonicalizes candidate paths and confines them to the site root.

    Usage:
        guard = SecurityGuard(root)
        safe_path = guard.check(candidate)   # raises on escape
    """

    def __init__(self, root: SiteRoot):
        self.root = root

    def contains(self, path: Path) -> bool:
        """
        Check whether an already-canonical path is the root or below it.

        relative_to() compares whole path components, so /srv/site-old
        is NOT considered inside /srv/site.
        """
        try:
            path.relative_to(self.root.path)
        except ValueError:
            return False
        return True

    def check(self, path: Union[str, Path], requested: str = "") -> Path:
        """
        Canonicalize a candidate path and verify it stays inside the root.

        Args:
            path: Raw candidate produced by the resolver.
            requested: The client's request path, used only for logging.

        Returns:
            The canonical path.

        Raises:
            NotFoundError: The target no longer exists.
            PathEscapeError: The canonical path is outside the root.
            IOFailure: Canonicalization failed for another reason.
        """
        try:
            canonical = Path(path).resolve(strict=True)
        except (FileNotFoundError, NotADirectoryError):
            raise NotFoundError(str(requested or path))
        except (OSError, RuntimeError) as e:
            # RuntimeError: symlink loop on older Pythons
            logger.error(f"Cannot canonicalize {path}: {e}")
            raise IOFailure.from_error(e)

        if not self.contains(canonical):
            logger.warning(f"Path traversal attempt: {requested or path} -> {canonical}")
            raise PathEscapeError(str(requested or path), str(canonical))

        return canonical
