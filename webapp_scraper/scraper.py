# File: webapp_scraper/scraper.py
"""webapp_scraper.scraper: facade wiring session, state tracker and navigation engine."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from webapp_scraper.config import ScraperConfig, build_config
from webapp_scraper.crawler.clock import AsyncioClock, Clock
from webapp_scraper.crawler.models import ContentRecord, CrawlStats
from webapp_scraper.crawler.navigation import NavigationEngine, SnapshotHandler
from webapp_scraper.crawler.session import BrowserSession
from webapp_scraper.crawler.state import StateTracker
from webapp_scraper.logger import logger as default_logger
from webapp_scraper.utils import document_id

__all__ = ["WebAppScraper", "run_scraper"]


class WebAppScraper:
    """Entry point for callers: configure, crawl, then read stats and documents."""

    def __init__(
        self,
        config: Union[ScraperConfig, Mapping[str, Any]],
        *,
        session: Optional[BrowserSession] = None,
        clock: Optional[Clock] = None,
        logger: Optional[logging.Logger] = None,
        on_snapshot: Optional[SnapshotHandler] = None,
    ) -> None:
        """Merge *config* over the defaults and build the crawl components.

        Raises pydantic.ValidationError when ``crawler.base_url`` is missing or
        any field is invalid.
        """
        self.config = build_config(config)
        self.logger = logger or default_logger
        self._clock = clock or AsyncioClock()
        self.session = session or BrowserSession(self.config.crawler, logger=self.logger)
        self.tracker = StateTracker(clock=self._clock)
        self.engine = NavigationEngine(
            self.session,
            self.tracker,
            self.config.crawler,
            self.config.extraction,
            clock=self._clock,
            logger=self.logger,
            on_snapshot=on_snapshot,
        )
        self.logger.info("WebAppScraper initialized for %s", self.config.crawler.base_url)

    async def start(self, timeout: Optional[float] = None) -> None:
        """Run the crawl to completion.

        With *timeout* seconds, dequeuing stops once the timeout elapses; the
        page being visited at that moment is finished and the browser closed.
        """
        self.logger.info("Starting web application scraping...")
        handle: Optional[asyncio.TimerHandle] = None
        if timeout is not None:
            handle = asyncio.get_running_loop().call_later(timeout, self._on_timeout, timeout)
        try:
            await self.engine.run()
        finally:
            if handle is not None:
                handle.cancel()

    def _on_timeout(self, timeout: float) -> None:
        self.logger.warning("Crawl timeout of %s s reached, stopping", timeout)
        self.engine.request_stop()

    def generate_documentation(self) -> List[ContentRecord]:
        """Map every tracked page state to a content record. No side effects.

        A page whose state was tracked before its screenshot failed still gets a
        record, although :meth:`get_failed_urls` also lists it.
        """
        documents: List[ContentRecord] = []
        for state in self.tracker.get_all_states():
            timestamp = state.captured_at.isoformat()
            documents.append(
                {
                    "id": document_id(state.url),
                    "content": f"# {state.title}\n\nURL: {state.url}\n\nScraped at: {timestamp}",
                    "metadata": {
                        "source": state.url,
                        "title": state.title,
                        "timestamp": timestamp,
                        "type": "web-page",
                    },
                }
            )
        return documents

    def get_stats(self) -> CrawlStats:
        return {
            "pagesVisited": len(self.engine.get_visited_urls()),
            "baseUrl": self.config.crawler.base_url,
            "timestamp": self._clock.now().isoformat(),
        }

    def get_visited_urls(self) -> List[str]:
        return self.engine.get_visited_urls()

    def get_failed_urls(self) -> Dict[str, str]:
        return self.engine.get_failed_urls()


async def run_scraper(
    config: Union[ScraperConfig, Mapping[str, Any]], timeout: Optional[float] = None
) -> List[ContentRecord]:
    """
    Crawl with *config* and return the generated documents.

    Parameters
    ----------
    config : ScraperConfig or mapping
        Scraper configuration; mappings are merged over the defaults.
    timeout : float, optional
        Seconds after which no further pages are dequeued.

    Returns
    -------
    List[ContentRecord]
        One record per visited page.
    """
    scraper = WebAppScraper(config)
    await scraper.start(timeout=timeout)
    documents = scraper.generate_documentation()
    scraper.logger.info("Generated %d documents from scraped content", len(documents))
    return documents
