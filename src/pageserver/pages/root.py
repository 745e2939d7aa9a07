"""
=============================================================================
SITE ROOT
=============================================================================

The one directory this server is allowed to expose.

The root is canonicalized ONCE at startup and never changes afterwards.
Every other component receives the same SiteRoot instance, so concurrent
requests can read it without any locking.

    $ python -m pageserver ./site
                             │
                             ▼
    SiteRoot.from_path("./site")
        │
        ├── resolve(strict=True)   → /home/me/site   (absolute, no symlinks)
        ├── is_dir()?              → else ConfigurationError
        │
        └── SiteRoot(path=/home/me/site)   frozen, shared by all workers

=============================================================================
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from .errors import ConfigurationError


@dataclass(frozen=True)
class SiteRoot:
    """
    Immutable, canonical root directory of the served site.

    Build it with from_path(); the constructor itself does no validation
    and is meant for callers that already hold a canonical path.
    """

    path: Path

    @classmethod
    def from_path(cls, raw: Union[str, Path]) -> "SiteRoot":
        """
        Canonicalize and validate a root directory.

        Args:
            raw: Directory given on the command line or in the environment.

        Returns:
            SiteRoot holding the absolute, symlink-free path.

        Raises:
            ConfigurationError: If the path is missing or not a directory.
        """
        if raw is None or str(raw) == "":
            raise ConfigurationError("No root directory configured")

        try:
            canonical = Path(raw).expanduser().resolve(strict=True)
        except FileNotFoundError:
            raise ConfigurationError(f"Root directory does not exist: {raw}")
        except (OSError, RuntimeError) as e:
            raise ConfigurationError(f"Cannot resolve root directory {raw}: {e}")

        if not canonical.is_dir():
            raise ConfigurationError(f"Root path is not a directory: {raw}")

        return cls(canonical)

    def __str__(self) -> str:
        return str(self.path)
