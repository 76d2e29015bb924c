"""Crawler components: browser session, page capability, state tracking and navigation."""
from webapp_scraper.crawler.clock import AsyncioClock, Clock
from webapp_scraper.crawler.models import CrawlURL, Link, PageSnapshot, PageState
from webapp_scraper.crawler.navigation import NavigationEngine
from webapp_scraper.crawler.page import BrowserPage, PlaywrightPage
from webapp_scraper.crawler.session import BrowserSession
from webapp_scraper.crawler.state import StateTracker

__all__ = [
    "AsyncioClock",
    "BrowserPage",
    "BrowserSession",
    "Clock",
    "CrawlURL",
    "Link",
    "NavigationEngine",
    "PageSnapshot",
    "PageState",
    "PlaywrightPage",
    "StateTracker",
]
