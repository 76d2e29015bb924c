# webapp_scraper/crawler/state.py
"""
Per-URL page state storage and content change detection.
"""
from __future__ import annotations

import hashlib
from typing import Dict, List, Optional

from webapp_scraper.crawler.clock import AsyncioClock, Clock
from webapp_scraper.crawler.models import PageState
from webapp_scraper.crawler.page import BrowserPage
from webapp_scraper.utils import normalize_url

__all__ = ("StateTracker", "content_digest")


def content_digest(content: str) -> str:
    """SHA-256 hex digest of the rendered content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class StateTracker:
    """Keeps one :class:`PageState` per normalized URL, overwritten on re-visit."""

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or AsyncioClock()
        self._states: Dict[str, PageState] = {}

    async def track_state(self, page: BrowserPage, url: str) -> PageState:
        key = normalize_url(url)
        title = await page.title()
        content = await page.content()
        state = PageState(
            url=key,
            title=title,
            captured_at=self._clock.now(),
            content_hash=content_digest(content),
        )
        self._states[key] = state
        return state

    def has_visited(self, url: str) -> bool:
        return normalize_url(url) in self._states

    def get_state(self, url: str) -> Optional[PageState]:
        return self._states.get(normalize_url(url))

    def get_all_states(self) -> List[PageState]:
        return list(self._states.values())

    async def has_content_changed(self, page: BrowserPage, url: str) -> bool:
        """True when *url* was never tracked or its content digest differs."""
        previous = self._states.get(normalize_url(url))
        if previous is None:
            return True
        return content_digest(await page.content()) != previous.content_hash

    def __len__(self) -> int:
        return len(self._states)
