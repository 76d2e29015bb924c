# webapp_scraper/crawler/models.py
"""
Data models for the WebAppScraper crawler.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, TypedDict


@dataclass(slots=True, frozen=True)
class CrawlURL:
    """A frontier entry: normalized URL, distance from the seed and the page that linked it."""

    url: str
    depth: int
    parent: Optional[str] = None


@dataclass(slots=True)
class PageState:
    """Captured state of one visited page; overwritten on re-visit."""

    url: str
    title: str
    captured_at: datetime
    content_hash: str


@dataclass(slots=True, frozen=True)
class Link:
    """Raw anchor found on a rendered page (``href`` is not resolved)."""

    href: str
    text: str = ""


@dataclass(slots=True)
class PageSnapshot:
    """Per-page output handed to downstream consumers after a successful visit."""

    state: PageState
    depth: int
    parent: Optional[str] = None
    screenshot: Optional[bytes] = None


class ContentRecord(TypedDict):
    """Document generated from a PageState."""

    id: str
    content: str
    metadata: Dict[str, Any]


class CrawlStats(TypedDict):
    pagesVisited: int
    baseUrl: str
    timestamp: str
