"""Selector-driven scraper strategy.

Loads a series page, picks the newest chapter anchor with a site-specific
CSS selector and turns its label into a ``CandidateRelease``. All failure
sub-causes (browser, HTTP status, missing element, unparsable label) are
logged with a ``reason`` and reported uniformly as ``ScrapeFailed``.
"""

from __future__ import annotations

import time
from typing import Optional
from urllib.parse import urljoin

import structlog
from playwright.async_api import Error as PlaywrightError, Page

from release_notifier.config import constants
from release_notifier.domain.exceptions import PageLoadError, ReleaseParseError, ScraperError
from release_notifier.domain.models import CandidateRelease
from release_notifier.domain.results import Errors, Result
from release_notifier.scrapers.base import parse_chapter_number
from release_notifier.scrapers.page_source import PlaywrightPageSource
from release_notifier.scrapers.sites import SiteSelectors


class SelectorReleaseScraper:
    def __init__(
        self,
        website_name: str,
        selectors: SiteSelectors,
        page_source: PlaywrightPageSource,
    ) -> None:
        self.website_name = website_name
        self._selectors = selectors
        self._page_source = page_source

    async def fetch_latest(self, url: str) -> Result[CandidateRelease]:
        log = structlog.get_logger().bind(
            service=constants.SERVICE_NAME,
            component="scraper",
            website=self.website_name,
            url=url,
        )
        started_at = time.monotonic()

        try:
            async with self._page_source.open_page(url, log=log) as page:
                candidate = await self._extract(page, url)
        except ScraperError as exc:
            duration_ms = int((time.monotonic() - started_at) * 1000)
            log.warning(
                "scraper.fetch_failed",
                status="failed",
                reason=type(exc).__name__,
                error=str(exc),
                duration_ms=duration_ms,
            )
            return Result.fail(Errors.scrape_failed(url, str(exc)))

        duration_ms = int((time.monotonic() - started_at) * 1000)
        log.info(
            "scraper.fetch_completed",
            status="completed",
            major=candidate.major,
            minor=candidate.minor,
            duration_ms=duration_ms,
        )
        return Result.ok(candidate)

    async def _extract(self, page: Page, url: str) -> CandidateRelease:
        """Read the newest chapter (and the title, if configured) from ``page``.

        Raises:
            ReleaseParseError: The chapter anchor is missing or unparsable.
            PageLoadError: Playwright failed while querying the DOM.
        """
        try:
            anchor = await page.query_selector(self._selectors.chapter_selector)
            if anchor is None:
                raise ReleaseParseError(
                    f"no element matches {self._selectors.chapter_selector!r}"
                )
            label = (await anchor.inner_text()).strip()
            href = await anchor.get_attribute("href")
            title = await self._extract_title(page)
        except PlaywrightError as exc:
            raise PageLoadError(f"DOM query failed on {url}: {exc}") from exc

        major, minor = parse_chapter_number(label, self._selectors.chapter_pattern)
        if not href:
            raise ReleaseParseError(f"chapter link {label!r} has no href")

        return CandidateRelease(
            major=major,
            minor=minor,
            release_url=urljoin(url, href.strip()),
            media_name=title,
        )

    async def _extract_title(self, page: Page) -> Optional[str]:
        if self._selectors.title_selector is None:
            return None
        title_el = await page.query_selector(self._selectors.title_selector)
        if title_el is None:
            return None
        return (await title_el.inner_text()).strip() or None
