"""
=============================================================================
PAGE TEMPLATE
=============================================================================

Wraps every served page fragment in the same header and footer.

=============================================================================
HOW COMPOSITION WORKS
=============================================================================

    page.html (skeleton)            header.html        footer.html
    ┌──────────────────────┐        ┌───────────┐      ┌───────────┐
    │ <html><head>...      │        │ <header>  │      │ <footer>  │
    │ ##HEADER##  ◄────────┼────────┤  ...      │      │  ...      │
    │ ##CONTENT## ◄────────┼── page file text   │      └─────┬─────┘
    │ ##FOOTER##  ◄────────┼─────────────────────────────────┘
    │ </html>              │
    └──────────────────────┘

Substitution is a single pass over the skeleton. Text inserted for one
placeholder is never scanned again, so a page that happens to contain
"##FOOTER##" is served verbatim instead of growing a second footer.

Page files are written by the site owner, not by clients, so their text
is inserted without escaping.

=============================================================================
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .errors import ConfigurationError


HEADER_TOKEN = "##HEADER##"
CONTENT_TOKEN = "##CONTENT##"
FOOTER_TOKEN = "##FOOTER##"

PLACEHOLDERS = (HEADER_TOKEN, CONTENT_TOKEN, FOOTER_TOKEN)
_PLACEHOLDER_PATTERN = re.compile("|".join(re.escape(token) for token in PLACEHOLDERS))

# Bundled assets shipped inside the package
TEMPLATE_DIR = Path(__file__).parent / "templates"
STYLESHEET_PATH = Path(__file__).parent / "static" / "style.css"


@dataclass(frozen=True)
class PageTemplate:
    """
    Immutable page skeleton plus header and footer fragments.

    Usage:
        template = PageTemplate.load()
        document = template.render("<h1>About</h1>")
    """

    page: str
    header: str
    footer: str

    @classmethod
    def load(cls, directory: Optional[Union[str, Path]] = None) -> "PageTemplate":
        """
        Read page.html, header.html and footer.html from a directory.

        Args:
            directory: Template directory. Defaults to the bundled templates.

        Raises:
            ConfigurationError: A file is missing, unreadable, or the
                skeleton does not hold each placeholder exactly once.
        """
        directory = Path(directory) if directory else TEMPLATE_DIR
        template = cls(
            page=_read_asset(directory / "page.html"),
            header=_read_asset(directory / "header.html"),
            footer=_read_asset(directory / "footer.html"),
        )
        template.validate()
        return template

    def validate(self) -> None:
        for token in PLACEHOLDERS:
            count = self.page.count(token)
            if count != 1:
                raise ConfigurationError(
                    f"Page template must contain {token} exactly once (found {count})"
                )

    def render(self, content: str) -> str:
        """
        Splice page content into the skeleton.

        Pure function of (skeleton, header, footer, content): the same
        content always renders to the same document.
        """
        replacements = {
            HEADER_TOKEN: self.header,
            CONTENT_TOKEN: content,
            FOOTER_TOKEN: self.footer,
        }
        return _PLACEHOLDER_PATTERN.sub(lambda match: replacements[match.group(0)], self.page)


def load_stylesheet(path: Optional[Union[str, Path]] = None) -> str:
    """Read the stylesheet served at /style.css (bundled by default)."""
    return _read_asset(Path(path) if path else STYLESHEET_PATH)


def _read_asset(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot load template asset {path}: {e}")
