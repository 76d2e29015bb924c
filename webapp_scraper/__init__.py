"""
WebAppScraper package initializer.
Defines the package version and exposes the facade and the CLI.
"""
__version__ = "0.1.0"

from webapp_scraper.scraper import WebAppScraper, run_scraper
from webapp_scraper.cli import cli

__all__ = ["__version__", "WebAppScraper", "run_scraper", "cli"]
