"""
pytest configuration and fixtures.
"""

import socket
import sys
import threading
from pathlib import Path
from typing import Generator

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pageserver import HTTPServer, ServerConfig, create_app
from pageserver.handlers import PageHandler
from pageserver.pages import SiteRoot


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """
    A small site plus one file just outside it.

        tmp_path/
        ├── secret.html          outside the root
        └── site/
            ├── index.html
            ├── about.html
            ├── notes.txt
            ├── readme.md
            └── blog/
                ├── post1.html
                └── draft.htm
    """
    (tmp_path / "secret.html").write_text("<p>top secret</p>", encoding="utf-8")

    site = tmp_path / "site"
    site.mkdir()
    (site / "index.html").write_text("<h1>Home</h1>", encoding="utf-8")
    (site / "about.html").write_text("<h1>About</h1>", encoding="utf-8")
    (site / "notes.txt").write_text("plain notes", encoding="utf-8")
    (site / "readme.md").write_text("# readme", encoding="utf-8")

    blog = site / "blog"
    blog.mkdir()
    (blog / "post1.html").write_text("<p>First post</p>", encoding="utf-8")
    (blog / "draft.htm").write_text("<p>draft</p>", encoding="utf-8")

    return site


@pytest.fixture
def site_root(site_dir: Path) -> SiteRoot:
    return SiteRoot.from_path(site_dir)


@pytest.fixture
def handler(site_root: SiteRoot) -> PageHandler:
    return PageHandler(site_root)


@pytest.fixture
def make_symlink():
    """Create a symlink, or skip the test where the platform refuses."""
    def _make(link: Path, target: Path) -> None:
        try:
            link.symlink_to(target)
        except (OSError, NotImplementedError) as e:
            pytest.skip(f"symlinks not available: {e}")
    return _make


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


class TestServer:
    """Runs an HTTPServer in a background thread."""

    __test__ = False

    def __init__(self, server: HTTPServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    @property
    def base_url(self) -> str:
        return f"http://127.0.0.1:{self.port}"

    def start(self) -> None:
        self._thread = threading.Thread(target=self.server.run, daemon=True)
        self._thread.start()
        if not self.server.wait_until_listening(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self) -> None:
        self.server.shutdown()
        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=10.0)


@pytest.fixture
def test_server(site_dir: Path, free_port: int) -> Generator[TestServer, None, None]:
    """The full page server on a free port, serving site_dir."""
    server = create_app(ServerConfig(
        host="127.0.0.1",
        port=free_port,
        root_dir=str(site_dir),
        min_workers=2,
        max_workers=4,
        timeout=5.0,
        keep_alive_timeout=1.0,
        log_level="WARNING",
    ))

    srv = TestServer(server)
    srv.start()

    yield srv

    srv.stop()
