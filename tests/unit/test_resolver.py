"""
Unit tests for request path resolution.
"""

import logging
from pathlib import Path

import pytest

from pageserver.pages import EntryKind, PathResolver, SiteRoot


class TestPathResolver:
    """Tests for PathResolver.resolve."""

    @pytest.mark.parametrize("request_path", ["/", ""])
    def test_index_is_root_directory(self, site_root: SiteRoot, request_path: str):
        entry = PathResolver(site_root).resolve(request_path)

        assert entry.kind is EntryKind.DIRECTORY
        assert entry.path == site_root.path

    def test_html_fallback(self, site_root: SiteRoot):
        entry = PathResolver(site_root).resolve("/about")

        assert entry.kind is EntryKind.FILE
        assert entry.path == site_root.path / "about.html"

    def test_exact_name(self, site_root: SiteRoot):
        entry = PathResolver(site_root).resolve("/about.html")

        assert entry.kind is EntryKind.FILE
        assert entry.path == site_root.path / "about.html"

    def test_nested_fallback(self, site_root: SiteRoot):
        entry = PathResolver(site_root).resolve("/blog/post1")

        assert entry.kind is EntryKind.FILE
        assert entry.path == site_root.path / "blog" / "post1.html"

    def test_directory(self, site_root: SiteRoot):
        entry = PathResolver(site_root).resolve("/blog")

        assert entry.is_directory
        assert entry.path == site_root.path / "blog"

    def test_directory_wins_over_html_file(self, site_root: SiteRoot):
        (site_root.path / "guide").mkdir()
        (site_root.path / "guide.html").write_text("<p>guide</p>", encoding="utf-8")

        entry = PathResolver(site_root).resolve("/guide")
        assert entry.kind is EntryKind.DIRECTORY

    def test_existing_non_html_file(self, site_root: SiteRoot):
        entry = PathResolver(site_root).resolve("/notes.txt")
        assert entry.kind is EntryKind.FILE

    def test_missing(self, site_root: SiteRoot):
        entry = PathResolver(site_root).resolve("/missing")

        assert entry.kind is EntryKind.NOT_FOUND
        assert entry.path is None
        assert not entry.found

    def test_no_fallback_for_names_with_extension(self, site_root: SiteRoot):
        (site_root.path / "report.pdf.html").write_text("x", encoding="utf-8")

        entry = PathResolver(site_root).resolve("/report.pdf")
        assert entry.kind is EntryKind.NOT_FOUND

    def test_fallback_only_adds_html(self, site_root: SiteRoot):
        # readme.md exists, but "/readme" only ever tries readme.html
        entry = PathResolver(site_root).resolve("/readme")
        assert entry.kind is EntryKind.NOT_FOUND

    def test_traversal_is_left_to_the_guard(self, site_root: SiteRoot):
        entry = PathResolver(site_root).resolve("/../secret")

        assert entry.kind is EntryKind.FILE
        assert entry.path == site_root.path / ".." / "secret.html"

    def test_logs_candidate(self, site_root: SiteRoot, caplog):
        with caplog.at_level(logging.INFO, logger="pageserver.pages.resolver"):
            PathResolver(site_root).resolve("/about")

        assert f"Request for {site_root.path / 'about'}" in caplog.text

    def test_fallback_names_a_directory(self, site_root: SiteRoot):
        (site_root.path / "archive.html").mkdir()

        entry = PathResolver(site_root).resolve("/archive")
        assert entry.kind is EntryKind.DIRECTORY
        assert entry.path == Path(site_root.path / "archive.html")
