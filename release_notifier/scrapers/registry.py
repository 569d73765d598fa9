"""Scraper strategy registry.

Maps a Website to the strategy that understands its markup. Website names
are unique case-insensitively, so the registry is keyed on the casefolded
name.

Every fetch goes through ``ScraperRegistry.fetch_latest``, which bounds it by
SCRAPE_TIMEOUT_SECONDS. Initial scrapes and scrape cycles share that limit.
"""

from __future__ import annotations

import asyncio
from typing import Mapping, Optional

from release_notifier.config import constants
from release_notifier.domain.models import CandidateRelease, Website
from release_notifier.domain.results import Errors, Result
from release_notifier.scrapers.base import ReleaseScraper
from release_notifier.scrapers.page_source import PlaywrightPageSource
from release_notifier.scrapers.selector import SelectorReleaseScraper
from release_notifier.scrapers.sites import DEFAULT_SITES, SiteSelectors


class ScraperRegistry:
    def __init__(self, timeout_seconds: float = constants.SCRAPE_TIMEOUT_SECONDS) -> None:
        self._scrapers: dict[str, ReleaseScraper] = {}
        self._timeout_seconds = timeout_seconds

    def register(self, website_name: str, scraper: ReleaseScraper) -> None:
        self._scrapers[website_name.casefold()] = scraper

    def get(self, website_name: str) -> Optional[ReleaseScraper]:
        return self._scrapers.get(website_name.casefold())

    async def fetch_latest(self, website: Website, url: str) -> Result[CandidateRelease]:
        """Fetch ``url`` with the strategy for ``website``.

        An unmapped website, a fetch exceeding the timeout and an exception
        escaping the strategy are all ``ScrapeFailed`` failures.
        """
        scraper = self.get(website.name)
        if scraper is None:
            return Result.fail(
                Errors.scrape_failed(url, f"no scraper registered for website '{website.name}'")
            )
        try:
            return await asyncio.wait_for(scraper.fetch_latest(url), timeout=self._timeout_seconds)
        except asyncio.TimeoutError:
            return Result.fail(
                Errors.scrape_failed(url, f"timed out after {self._timeout_seconds:g}s")
            )
        except Exception as exc:  # noqa: BLE001
            # A strategy bug must not take the caller down with it.
            return Result.fail(Errors.scrape_failed(url, f"{type(exc).__name__}: {exc}"))


def build_default_registry(
    page_source: PlaywrightPageSource,
    sites: Mapping[str, SiteSelectors] = DEFAULT_SITES,
    timeout_seconds: float = constants.SCRAPE_TIMEOUT_SECONDS,
) -> ScraperRegistry:
    registry = ScraperRegistry(timeout_seconds)
    for website_name, selectors in sites.items():
        registry.register(
            website_name,
            SelectorReleaseScraper(website_name, selectors, page_source),
        )
    return registry
