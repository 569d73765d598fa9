"""Scrapers public API.

Import the registry, strategies and the page source from here.
"""

from release_notifier.scrapers.base import ReleaseScraper, parse_chapter_number
from release_notifier.scrapers.page_source import PlaywrightPageSource
from release_notifier.scrapers.registry import ScraperRegistry, build_default_registry
from release_notifier.scrapers.selector import SelectorReleaseScraper
from release_notifier.scrapers.sites import DEFAULT_SITES, SiteSelectors

__all__ = [
    "DEFAULT_SITES",
    "PlaywrightPageSource",
    "ReleaseScraper",
    "ScraperRegistry",
    "SelectorReleaseScraper",
    "SiteSelectors",
    "build_default_registry",
    "parse_chapter_number",
]
