# webapp_scraper/crawler/navigation.py
"""
Breadth-first crawl state machine.

Each URL moves Queued -> Visiting -> Visited, or ends as Failed when its
navigation fails. The frontier is ordered by (depth, insertion order), which
with a single worker is plain FIFO, and children are always one level deeper
than their parent, so every depth-d URL is dequeued before any depth-(d+1)
URL. With several workers a URL is only dequeued while no page more than one
level shallower is still in flight. A URL is marked visited under the
frontier lock at the moment it is dequeued, so two workers never visit the
same URL.
"""
from __future__ import annotations

import asyncio
import heapq
import inspect
import itertools
import logging
import re
import time
from typing import Awaitable, Callable, Dict, List, Optional, Set, Tuple, Union

from webapp_scraper.config import CrawlerConfig, ExtractionConfig
from webapp_scraper.crawler.clock import AsyncioClock, Clock
from webapp_scraper.crawler.link_extractor import resolve_link
from webapp_scraper.crawler.models import CrawlURL, PageSnapshot
from webapp_scraper.crawler.page import BrowserPage
from webapp_scraper.crawler.session import BrowserSession
from webapp_scraper.crawler.state import StateTracker
from webapp_scraper.errors import ExtractionError, NavigationError, ScraperError
from webapp_scraper.logger import logger as default_logger
from webapp_scraper.utils import normalize_url, same_origin, screenshot_name

__all__ = ("NavigationEngine", "SnapshotHandler")

SnapshotHandler = Callable[[PageSnapshot], Union[None, Awaitable[None]]]


class NavigationEngine:
    """Drives one crawl run over a :class:`BrowserSession`."""

    def __init__(
        self,
        session: BrowserSession,
        tracker: StateTracker,
        config: CrawlerConfig,
        extraction: Optional[ExtractionConfig] = None,
        *,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
        on_snapshot: Optional[SnapshotHandler] = None,
    ) -> None:
        self.session = session
        self.tracker = tracker
        self.config = config
        self.extraction = extraction or ExtractionConfig()
        self.logger = logger or default_logger
        self._clock = clock or AsyncioClock()
        self._on_snapshot = on_snapshot

        self.seed_url = normalize_url(config.base_url)
        self._exclude = [re.compile(p) for p in config.exclude_urls]
        self._frontier: List[Tuple[int, int, CrawlURL]] = []
        self._seq = itertools.count()
        self._queued: Set[str] = set()
        # insertion order is visit order
        self._visited: Dict[str, CrawlURL] = {}
        self._failed: Dict[str, str] = {}
        # url -> depth of pages being visited
        self._in_flight: Dict[str, int] = {}
        self._cond = asyncio.Condition()
        self._stop_requested = False
        self._started = False

        self._enqueue(CrawlURL(url=self.seed_url, depth=0))

    # ------------------------------------------------------------------ #
    # public API
    # ------------------------------------------------------------------ #

    async def run(self) -> None:
        """Crawl until the frontier is empty, the page budget is spent or a stop is requested.

        The session is closed on every exit path. Only session start-up
        errors and unexpected exceptions propagate.
        """
        if self._started:
            raise ScraperError("A NavigationEngine runs a single crawl")
        self._started = True
        self.logger.info("Starting crawl at %s", self.seed_url)
        start = time.monotonic()
        try:
            await self.session.initialize()
            workers = [
                asyncio.create_task(self._worker(i)) for i in range(self.config.concurrency)
            ]
            try:
                await asyncio.gather(*workers)
            except BaseException:
                for w in workers:
                    w.cancel()
                await asyncio.gather(*workers, return_exceptions=True)
                raise
        finally:
            await self.session.close()
        duration = time.monotonic() - start
        self.logger.info(
            "Crawling complete. Visited %d pages (%d failed) in %.2f s",
            len(self._visited),
            len(self._failed),
            duration,
        )

    def request_stop(self) -> None:
        """Stop dequeuing; visits already in progress complete normally."""
        self._stop_requested = True

    def get_visited_urls(self) -> List[str]:
        return list(self._visited)

    def get_visited(self) -> List[CrawlURL]:
        return list(self._visited.values())

    def get_failed_urls(self) -> Dict[str, str]:
        return dict(self._failed)

    @property
    def pending_count(self) -> int:
        return len(self._frontier)

    # ------------------------------------------------------------------ #
    # crawl loop
    # ------------------------------------------------------------------ #

    async def _worker(self, worker_id: int) -> None:
        while True:
            item = await self._next_url()
            if item is None:
                self.logger.debug("Worker %d finished", worker_id)
                return
            try:
                await self._visit(item)
            finally:
                async with self._cond:
                    del self._in_flight[item.url]
                    self._cond.notify_all()
            await self._clock.sleep(self.config.request_delay_ms / 1000)

    async def _next_url(self) -> Optional[CrawlURL]:
        """Dequeue the next URL and mark it visited, or return None when the crawl is over."""
        async with self._cond:
            while True:
                if self._stop_requested or len(self._visited) >= self.config.max_pages:
                    self._cond.notify_all()
                    return None
                if self._frontier and self._may_dequeue(self._frontier[0][0]):
                    _, _, item = heapq.heappop(self._frontier)
                    self._queued.discard(item.url)
                    if item.url in self._visited:
                        continue
                    if item.depth > self.config.max_depth:
                        self.logger.debug("Skipping %s - max depth reached", item.url)
                        continue
                    self._visited[item.url] = item
                    self._in_flight[item.url] = item.depth
                    return item
                if not self._in_flight:
                    self._cond.notify_all()
                    return None
                # children of in-flight pages may still arrive
                await self._cond.wait()

    async def _visit(self, item: CrawlURL) -> None:
        self.logger.info("Processing %s (depth: %d)", item.url, item.depth)
        page = await self.session.new_page()
        try:
            await page.navigate(
                item.url,
                timeout_ms=self.config.navigation_timeout_ms,
                wait_until=self.config.wait_until,
            )
            await self._clock.sleep(self.config.settle_ms / 1000)
            state = await self.tracker.track_state(page, item.url)

            if item.depth < self.config.max_depth:
                await self._extract_links(page, item)

            screenshot: Optional[bytes] = None
            if self.extraction.capture_screenshots:
                screenshot = await self.session.take_screenshot(page, screenshot_name(item.url))

            if self._on_snapshot is not None:
                result = self._on_snapshot(
                    PageSnapshot(state=state, depth=item.depth, parent=item.parent, screenshot=screenshot)
                )
                if inspect.isawaitable(result):
                    await result
        except NavigationError as exc:
            self.logger.error("Error navigating to %s: %s", item.url, exc.reason)
            self._failed[item.url] = exc.reason
        finally:
            await page.close()

    # ------------------------------------------------------------------ #
    # frontier
    # ------------------------------------------------------------------ #

    async def _extract_links(self, page: BrowserPage, current: CrawlURL) -> None:
        child_depth = current.depth + 1
        if child_depth > self.config.max_depth:
            return
        try:
            links = await page.extract_links()
        except ExtractionError as exc:
            self.logger.warning("Could not extract links from %s: %s", current.url, exc.reason)
            return

        added = 0
        async with self._cond:
            for link in links:
                try:
                    url = resolve_link(link.href, current.url)
                    if url is None or not self._accepts(url):
                        continue
                except ValueError as exc:
                    self.logger.warning("Skipping link %r on %s: %s", link.href, current.url, exc)
                    continue
                if self._enqueue(CrawlURL(url=url, depth=child_depth, parent=current.url)):
                    added += 1
            if added:
                self._cond.notify_all()
        self.logger.debug("Queued %d new links from %s", added, current.url)

    def _accepts(self, url: str) -> bool:
        if not same_origin(url, self.seed_url):
            return False
        return not any(pattern.search(url) for pattern in self._exclude)

    def _enqueue(self, item: CrawlURL) -> bool:
        if item.url in self._visited or item.url in self._queued:
            return False
        heapq.heappush(self._frontier, (item.depth, next(self._seq), item))
        self._queued.add(item.url)
        return True

    def _may_dequeue(self, depth: int) -> bool:
        # in-flight pages can still enqueue URLs one level below their own depth
        return not self._in_flight or depth <= min(self._in_flight.values()) + 1
