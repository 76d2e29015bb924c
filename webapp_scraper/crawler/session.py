# webapp_scraper/crawler/session.py
"""
Browser session lifecycle: one Playwright process, one Chromium browser and
one shared isolated context per crawl.
"""
from __future__ import annotations

import logging
from typing import Optional

from playwright.async_api import (
    Browser,
    BrowserContext,
    ConsoleMessage,
    Dialog,
    Playwright,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError

from webapp_scraper.config import CrawlerConfig
from webapp_scraper.crawler.page import BrowserPage, PlaywrightPage
from webapp_scraper.errors import ResourceError
from webapp_scraper.logger import logger as default_logger

__all__ = ("BrowserSession",)

_FORWARDED_CONSOLE_TYPES = ("error", "warning")


class BrowserSession:
    """Creates isolated pages, captures screenshots and releases the browser."""

    def __init__(self, config: CrawlerConfig, logger: Optional[logging.Logger] = None) -> None:
        self.config = config
        self.logger = logger or default_logger
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None

    @property
    def is_running(self) -> bool:
        return self._context is not None

    async def __aenter__(self) -> BrowserSession:
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def initialize(self) -> None:
        """Start the browser and the shared context unless already running."""
        if self._context is not None:
            return
        self.logger.info("Initializing browser...")
        try:
            self._playwright = await async_playwright().start()
            self._browser = await self._playwright.chromium.launch(headless=self.config.headless)
            self._context = await self._browser.new_context(
                user_agent=self.config.user_agent,
                viewport={
                    "width": self.config.viewport_width,
                    "height": self.config.viewport_height,
                },
                ignore_https_errors=True,
            )
        except PlaywrightError as exc:
            await self.close()
            raise ResourceError(f"Browser session could not be started: {exc.message}") from exc
        if self.config.respect_robots_txt:
            await self._setup_robots_handler()

    async def new_page(self) -> BrowserPage:
        """Open a new page in the shared context, starting the session if needed."""
        if self._context is None:
            await self.initialize()
        if self._context is None:
            raise ResourceError("Browser context not initialized")
        try:
            page = await self._context.new_page()
        except PlaywrightError as exc:
            raise ResourceError(f"Could not open a page: {exc.message}") from exc

        page.set_default_timeout(self.config.page_timeout_ms)
        page.on("console", self._on_console)
        page.on("dialog", self._on_dialog)
        return PlaywrightPage(page, logger=self.logger)

    async def take_screenshot(self, page: BrowserPage, name: str) -> bytes:
        """Full-page PNG of *page*; *name* only identifies the capture in logs."""
        self.logger.debug("Taking screenshot: %s", name)
        return await page.screenshot()

    async def close(self) -> None:
        """Release context, browser and Playwright. Never raises."""
        if self._context is not None:
            try:
                await self._context.close()
            except Exception as exc:
                self.logger.warning("Failed to close browser context: %s", exc)
            self._context = None

        if self._browser is not None:
            try:
                await self._browser.close()
            except Exception as exc:
                self.logger.warning("Failed to close browser: %s", exc)
            self._browser = None

        if self._playwright is not None:
            try:
                await self._playwright.stop()
            except Exception as exc:
                self.logger.warning("Failed to stop Playwright: %s", exc)
            self._playwright = None
            self.logger.info("Browser closed")

    def _on_console(self, message: ConsoleMessage) -> None:
        if message.type in _FORWARDED_CONSOLE_TYPES:
            self.logger.warning("Page console %s: %s", message.type, message.text)

    async def _on_dialog(self, dialog: Dialog) -> None:
        self.logger.info("Dialog: %s - %s", dialog.type, dialog.message)
        await dialog.dismiss()

    async def _setup_robots_handler(self) -> None:
        # robots.txt parsing and request filtering are not implemented; the gate only reports
        self.logger.info("Robots.txt handling enabled")
