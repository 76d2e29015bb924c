# webapp_scraper/crawler/link_extractor.py
"""
Anchor extraction and link resolution utilities for WebAppScraper.
"""
from __future__ import annotations

from typing import List, Optional
from urllib.parse import urljoin

from bs4 import BeautifulSoup
from bs4.element import Tag

from webapp_scraper.crawler.models import Link
from webapp_scraper.utils import is_http_url, normalize_url

_SKIPPED_PREFIXES = ("mailto:", "javascript:", "tel:", "data:")


def extract_anchors(html: str) -> List[Link]:
    """
    Return every ``<a href>`` of a rendered document, in document order.

    The href is returned as written in the markup; resolution against the
    page URL happens in :func:`resolve_link`.
    """
    soup = BeautifulSoup(html, "html.parser")
    links: List[Link] = []
    for tag in soup.find_all("a", href=True):
        if not isinstance(tag, Tag):
            continue
        href_val = tag.get("href")
        if not isinstance(href_val, str):
            continue
        links.append(Link(href=href_val.strip(), text=tag.get_text(" ", strip=True)))
    return links


def resolve_link(href: str, page_url: str) -> Optional[str]:
    """
    Resolve *href* against *page_url* and normalize it.

    Returns ``None`` for empty, fragment-only and non-HTTP(S) links.
    Raises ``ValueError`` when the resulting URL cannot be parsed.
    """
    raw = href.strip()
    if not raw or raw.startswith("#") or raw.lower().startswith(_SKIPPED_PREFIXES):
        return None
    absolute = urljoin(page_url, raw)
    if not is_http_url(absolute):
        return None
    return normalize_url(absolute)
