"""Playwright page source shared by all scraper strategies.

One Chromium instance and one BrowserContext are launched lazily on first
use and shared for the lifetime of the worker process. Every fetch gets its
own Page, closed when the fetch finishes, so concurrent fetches within a
scrape cycle never interfere with each other.

State layout:
    PlaywrightPageSource instance (self)
    ├── _playwright: Playwright | None
    ├── _browser:    Browser | None
    └── _context:    BrowserContext | None

Resilience: ``_ensure_context()`` relaunches the browser transparently if it
disconnected between cycles. Launching is serialised by ``_launch_lock`` so
that parallel fetches at the start of a cycle launch a single browser.
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import structlog
from playwright.async_api import (
    Browser,
    BrowserContext,
    Error as PlaywrightError,
    Page,
    Playwright,
    async_playwright,
)

from release_notifier.config import constants
from release_notifier.domain.exceptions import PageLoadError


class PlaywrightPageSource:
    """Loads source pages in a shared headless browser.

    This class must be instantiated once per process and closed on shutdown
    (``await page_source.close()``).
    """

    def __init__(self) -> None:
        self._playwright: Optional[Playwright] = None
        self._browser: Optional[Browser] = None
        self._context: Optional[BrowserContext] = None
        self._launch_lock = asyncio.Lock()

    @asynccontextmanager
    async def open_page(
        self,
        url: str,
        log: Optional[structlog.types.FilteringBoundLogger] = None,
    ) -> AsyncIterator[Page]:
        """Yield a Page that has finished loading ``url``.

        Raises:
            PageLoadError: Browser unavailable, navigation failed, or the
                source answered with an HTTP error status.
        """
        if log is None:
            log = structlog.get_logger()

        context = await self._ensure_context(log=log)
        try:
            page = await context.new_page()
        except PlaywrightError as exc:
            raise PageLoadError(f"Failed to open a page for {url}: {exc}") from exc

        try:
            try:
                response = await page.goto(
                    url,
                    wait_until="domcontentloaded",
                    timeout=constants.BROWSER_TIMEOUT_MS,
                )
            except PlaywrightError as exc:
                raise PageLoadError(f"Failed to navigate to {url}: {exc}") from exc

            # An HTTP error response (4xx / 5xx) does not raise in Playwright;
            # check the status code explicitly so we surface it clearly.
            if response is not None and not response.ok:
                raise PageLoadError(f"Unexpected HTTP {response.status} from {url}")

            yield page
        finally:
            try:
                await page.close()
            except PlaywrightError as exc:
                log.warning("browser.page_close_error", url=url, error=str(exc))

    async def close(self, log: Optional[structlog.types.FilteringBoundLogger] = None) -> None:
        """Close all browser resources, logging (not raising) close errors.

        Called on worker shutdown and when a half-open browser has to be
        replaced. A failed teardown must not mask the original error.
        """
        if log is None:
            log = structlog.get_logger()

        for resource_name, close_coro_factory in (
            ("context", lambda: self._context.close() if self._context else None),
            ("browser", lambda: self._browser.close() if self._browser else None),
            ("playwright", lambda: self._playwright.stop() if self._playwright else None),
        ):
            coro = close_coro_factory()
            if coro is not None:
                try:
                    await coro
                except Exception as exc:  # noqa: BLE001
                    log.warning(
                        "browser.teardown_error",
                        resource=resource_name,
                        error=str(exc),
                    )

        self._context = None
        self._browser = None
        self._playwright = None

    async def _ensure_context(
        self,
        log: structlog.types.FilteringBoundLogger,
    ) -> BrowserContext:
        """Return the shared context, launching the browser if needed.

        Raises:
            PageLoadError: Playwright or Chromium could not be started.
        """
        async with self._launch_lock:
            if (
                self._context is not None
                and self._browser is not None
                and self._browser.is_connected()
            ):
                return self._context

            log.info("browser.launching", headless=constants.BROWSER_HEADLESS)

            # Tear down any half-open state from a previous failed attempt.
            await self.close(log=log)

            try:
                self._playwright = await async_playwright().start()
            except Exception as exc:  # noqa: BLE001
                raise PageLoadError(f"Failed to start Playwright runtime: {exc}") from exc

            try:
                self._browser = await self._playwright.chromium.launch(
                    headless=constants.BROWSER_HEADLESS,
                )
                self._context = await self._browser.new_context(
                    user_agent=constants.BROWSER_USER_AGENT,
                )
                self._context.set_default_timeout(constants.BROWSER_TIMEOUT_MS)
            except PlaywrightError as exc:
                await self.close(log=log)
                raise PageLoadError(f"Failed to launch Chromium: {exc}") from exc

            log.info("browser.launched", headless=constants.BROWSER_HEADLESS)
            return self._context
