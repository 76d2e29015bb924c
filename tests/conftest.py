# File: tests/conftest.py
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional

import pytest

from webapp_scraper.config import CrawlerConfig, ExtractionConfig
from webapp_scraper.crawler.models import Link
from webapp_scraper.crawler.page import BrowserPage
from webapp_scraper.errors import ExtractionError, NavigationError, ResourceError


def pytest_configure(config):
    """Register custom markers so that `--strict-markers` does not fail."""
    config.addinivalue_line(
        "markers",
        "slow: marks tests as slow (deselect with '-m \"not slow\"')",
    )


# --------------------------------------------------------------------------- #
#                               In-memory site                                #
# --------------------------------------------------------------------------- #


@dataclass
class FakeDocument:
    title: str
    hrefs: List[str] = field(default_factory=list)
    body: str = ""
    error: Optional[str] = None
    extraction_error: bool = False
    screenshot_error: bool = False

    def html(self) -> str:
        anchors = "".join(f'<a href="{h}">{h}</a>' for h in self.hrefs)
        return f"<html><head><title>{self.title}</title></head><body>{self.body}{anchors}</body></html>"


class FakeSite:
    """Normalized URL -> document. Unknown URLs answer HTTP 404."""

    def __init__(self, pages: Optional[Dict[str, FakeDocument]] = None) -> None:
        self.pages: Dict[str, FakeDocument] = dict(pages or {})

    def add(self, url: str, title: str = "", hrefs: Optional[List[str]] = None, **kwargs) -> FakeDocument:
        doc = FakeDocument(title=title or url, hrefs=list(hrefs or []), **kwargs)
        self.pages[url] = doc
        return doc


class FakeClock:
    """Sleeps are recorded, advance the time and only yield to the event loop."""

    def __init__(self) -> None:
        self.current = datetime(2024, 1, 1, tzinfo=timezone.utc)
        self.sleeps: List[float] = []

    def now(self) -> datetime:
        return self.current

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += timedelta(seconds=seconds)
        await asyncio.sleep(0)


class FakePage(BrowserPage):
    def __init__(self, session: "FakeSession") -> None:
        self.session = session
        self.url: Optional[str] = None
        self.closed = False

    def _doc(self) -> FakeDocument:
        return self.session.site.pages[self.url]

    async def navigate(self, url: str, *, timeout_ms: int, wait_until: str) -> str:
        self.url = url
        self.session.navigations.append(url)
        doc = self.session.site.pages.get(url)
        if doc is None:
            raise NavigationError(url, "HTTP 404", status=404)
        if doc.error:
            raise NavigationError(url, doc.error)
        return doc.html()

    async def title(self) -> str:
        return self._doc().title

    async def content(self) -> str:
        return self._doc().html()

    async def screenshot(self) -> bytes:
        if self._doc().screenshot_error:
            raise NavigationError(self.url, "screenshot failed: page crashed")
        return b"\x89PNG" + self.url.encode()

    async def extract_links(self) -> List[Link]:
        doc = self._doc()
        if doc.extraction_error:
            raise ExtractionError(self.url, "detached frame")
        return [Link(href=h) for h in doc.hrefs]

    async def close(self) -> None:
        self.closed = True


class FakeSession:
    """Stands in for BrowserSession; counts lifecycle calls."""

    def __init__(self, site: FakeSite, fail_initialize: bool = False) -> None:
        self.site = site
        self.fail_initialize = fail_initialize
        self.initialize_calls = 0
        self.close_calls = 0
        self.pages: List[FakePage] = []
        self.navigations: List[str] = []
        self.screenshots: List[str] = []

    async def initialize(self) -> None:
        self.initialize_calls += 1
        if self.fail_initialize:
            raise ResourceError("chromium executable not found")

    async def new_page(self) -> FakePage:
        page = FakePage(self)
        self.pages.append(page)
        return page

    async def take_screenshot(self, page: BrowserPage, name: str) -> bytes:
        self.screenshots.append(name)
        return await page.screenshot()

    async def close(self) -> None:
        self.close_calls += 1


# --------------------------------------------------------------------------- #
#                                  Fixtures                                   #
# --------------------------------------------------------------------------- #


@pytest.fixture()
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture()
def session(site) -> FakeSession:
    return FakeSession(site)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def crawler_config_factory():
    """Build a CrawlerConfig for https://ex.com with no delays by default."""

    def _make(**overrides) -> CrawlerConfig:
        values = {
            "base_url": "https://ex.com",
            "max_depth": 3,
            "max_pages": 100,
            "request_delay_ms": 0,
            "settle_ms": 0,
            "respect_robots_txt": False,
        }
        values.update(overrides)
        return CrawlerConfig(**values)

    return _make


@pytest.fixture()
def no_screenshots() -> ExtractionConfig:
    return ExtractionConfig(capture_screenshots=False)
