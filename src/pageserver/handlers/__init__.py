"""
Request handlers registered on the router.

    pages.py   PageHandler: pages, listings, stylesheet, not-found
"""

from .pages import PageHandler, PageResponse, NOT_FOUND_BODY

__all__ = ["PageHandler", "PageResponse", "NOT_FOUND_BODY"]
