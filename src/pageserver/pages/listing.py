"""
=============================================================================
DIRECTORY LISTER
=============================================================================

Renders a directory as a navigable list of its pages and sub-directories.

=============================================================================
WHAT GETS LISTED?
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    LISTING FILTER                                   │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   /srv/site/blog/                                                    │
    │   ├── drafts/          directory         ✓  "blog/drafts"           │
    │   ├── post1.html       .html page        ✓  "blog/post1"            │
    │   ├── post2.html       .html page        ✓  "blog/post2"            │
    │   ├── notes.md         other extension   ✗                          │
    │   ├── style.css        other extension   ✗                          │
    │   └── README           no extension      ✗                          │
    │                                                                      │
    │   Names are relative to the SITE ROOT (not the listed directory)    │
    │   and lose their ".html" suffix, so each link is exactly the URL    │
    │   the resolver's fallback turns back into the file.                 │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Output (sorted by name):

    <ul><li><a href="/blog/drafts">blog/drafts</a></li>...</ul>

Links are absolute ("/" + name) so they work from any listing depth
and with or without a trailing slash on the current URL.

Children that are symlinks pointing outside the root are left out, so a
listing never advertises anything the guard would refuse to serve.

=============================================================================
"""

import html
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional
from urllib.parse import quote

from .errors import IOFailure, NotFoundError
from .guard import SecurityGuard
from .resolver import HTML_SUFFIX
from .root import SiteRoot


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ListingEntry:
    """One line of a directory listing."""
    name: str       # root-relative, without ".html"

    @property
    def href(self) -> str:
        return "/" + quote(self.name)


class DirectoryLister:
    """
    Builds directory listings for security-checked directories.

    Usage:
        lister = DirectoryLister(root)
        body = lister.render(Path("/srv/site/blog"))
    """

    def __init__(self, root: SiteRoot, guard: Optional[SecurityGuard] = None):
        self.root = root
        self.guard = guard or SecurityGuard(root)

    def entries(self, directory: Path) -> List[ListingEntry]:
        """
        Collect the visible children of a directory.

        Args:
            directory: Canonical directory inside the root.

        Returns:
            Entries sorted lexicographically by display name.

        Raises:
            NotFoundError: The directory vanished.
            IOFailure: The directory could not be read.
        """
        try:
            children = list(directory.iterdir())
        except (FileNotFoundError, NotADirectoryError):
            raise NotFoundError(str(directory))
        except OSError as e:
            logger.error(f"Cannot list {directory}: {e}")
            raise IOFailure.from_error(e)

        entries = []
        for child in children:
            if not self._is_visible(child):
                continue
            relative = child.relative_to(self.root.path).as_posix()
            if relative.endswith(HTML_SUFFIX):
                relative = relative[:-len(HTML_SUFFIX)]
            entries.append(ListingEntry(relative))

        entries.sort(key=lambda entry: entry.name)
        return entries

    def render(self, directory: Path) -> str:
        """Render a directory listing as an HTML <ul> fragment."""
        items = "".join(
            f'<li><a href="{html.escape(entry.href)}">{html.escape(entry.name)}</a></li>'
            for entry in self.entries(directory)
        )
        return f"<ul>{items}</ul>"

    def _is_visible(self, child: Path) -> bool:
        """Directories and exact ".html" files that stay inside the root."""
        try:
            if not (child.is_dir() or child.suffix == HTML_SUFFIX):
                return False
            target = child.resolve(strict=True)
        except (OSError, RuntimeError):
            # Dangling or looping symlink
            return False

        if not self.guard.contains(target):
            logger.warning(f"Skipping listing entry outside root: {child}")
            return False
        return True
