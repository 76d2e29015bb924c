# webapp_scraper/errors.py
"""
Exception hierarchy for the WebAppScraper crawl engine.

Per-URL failures (:class:`NavigationError`, :class:`ExtractionError`) are
recovered inside the crawl loop. Only :class:`ResourceError` raised while
starting the browser session propagates out of a crawl.
"""
from __future__ import annotations

from typing import Optional

__all__ = ("ScraperError", "NavigationError", "ExtractionError", "ResourceError")


class ScraperError(Exception):
    """Base class for all crawl engine errors."""


class NavigationError(ScraperError):
    """Navigation to a single URL failed (timeout, network, HTTP status)."""

    def __init__(self, url: str, reason: str, status: Optional[int] = None) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason
        self.status = status


class ExtractionError(ScraperError):
    """Links could not be extracted from a rendered page."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"{url}: {reason}")
        self.url = url
        self.reason = reason


class ResourceError(ScraperError):
    """The browser session could not be started."""
