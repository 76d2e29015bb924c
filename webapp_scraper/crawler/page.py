# webapp_scraper/crawler/page.py
"""
Page capability used by the crawler, and its Playwright adapter.

The navigation engine and the state tracker only talk to :class:`BrowserPage`;
:class:`PlaywrightPage` is the one concrete backend.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import List, Optional

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from webapp_scraper.crawler.link_extractor import extract_anchors
from webapp_scraper.crawler.models import Link
from webapp_scraper.errors import ExtractionError, NavigationError
from webapp_scraper.logger import logger as default_logger

__all__ = ("BrowserPage", "PlaywrightPage")


class BrowserPage(ABC):
    """Isolated page handle: navigate, read, screenshot, list anchors."""

    @abstractmethod
    async def navigate(self, url: str, *, timeout_ms: int, wait_until: str) -> str:
        """Load *url* and return the rendered content. Raises NavigationError."""

    @abstractmethod
    async def title(self) -> str: ...

    @abstractmethod
    async def content(self) -> str: ...

    @abstractmethod
    async def screenshot(self) -> bytes:
        """Full-page PNG of the current document."""

    @abstractmethod
    async def extract_links(self) -> List[Link]:
        """Anchors of the current document. Raises ExtractionError."""

    @abstractmethod
    async def close(self) -> None: ...


class PlaywrightPage(BrowserPage):
    """Adapter over :class:`playwright.async_api.Page`."""

    def __init__(self, page: Page, logger: Optional[logging.Logger] = None) -> None:
        self._page = page
        self.logger = logger or default_logger
        self._current_url = ""

    @property
    def raw(self) -> Page:
        return self._page

    async def navigate(self, url: str, *, timeout_ms: int, wait_until: str) -> str:
        self._current_url = url
        try:
            response = await self._page.goto(url, timeout=timeout_ms, wait_until=wait_until)
        except PlaywrightTimeoutError as exc:
            raise NavigationError(url, f"timed out after {timeout_ms} ms") from exc
        except PlaywrightError as exc:
            raise NavigationError(url, exc.message) from exc
        if response is not None and response.status >= 400:
            raise NavigationError(url, f"HTTP {response.status}", status=response.status)
        return await self.content()

    async def title(self) -> str:
        try:
            return await self._page.title()
        except PlaywrightError as exc:
            raise NavigationError(self._current_url, exc.message) from exc

    async def content(self) -> str:
        try:
            return await self._page.content()
        except PlaywrightError as exc:
            raise NavigationError(self._current_url, exc.message) from exc

    async def screenshot(self) -> bytes:
        try:
            return await self._page.screenshot(full_page=True, type="png")
        except PlaywrightError as exc:
            raise NavigationError(self._current_url, f"screenshot failed: {exc.message}") from exc

    async def extract_links(self) -> List[Link]:
        try:
            html = await self._page.content()
        except PlaywrightError as exc:
            raise ExtractionError(self._current_url, exc.message) from exc
        return extract_anchors(html)

    async def close(self) -> None:
        try:
            await self._page.close()
        except PlaywrightError as exc:
            self.logger.warning("Failed to close page %s: %s", self._current_url, exc.message)
