"""Unit tests for release_notifier.scrapers.registry — ScraperRegistry."""

from __future__ import annotations

import asyncio

from unittest.mock import MagicMock

from release_notifier.domain.results import ErrorCode
from release_notifier.scrapers.registry import ScraperRegistry, build_default_registry
from release_notifier.scrapers.selector import SelectorReleaseScraper
from release_notifier.scrapers.sites import DEFAULT_SITES
from tests.fakes import FakeScraper, candidate, make_website


class TestScraperRegistry:
    def test_lookup_is_case_insensitive(self) -> None:
        registry = ScraperRegistry()
        scraper = FakeScraper()
        registry.register("AsuraScans", scraper)

        assert registry.get("asurascans") is scraper
        assert registry.get("FlameScans") is None

    async def test_fetch_uses_website_strategy(self) -> None:
        registry = ScraperRegistry()
        scraper = FakeScraper({"https://a.example/x": candidate(5)})
        registry.register("AsuraScans", scraper)

        result = await registry.fetch_latest(make_website("AsuraScans", "https://a.example"), "https://a.example/x")

        assert result.value.major == 5
        assert scraper.calls == ["https://a.example/x"]

    async def test_unmapped_website_is_scrape_failed(self) -> None:
        result = await ScraperRegistry().fetch_latest(
            make_website("Unknown", "https://u.example"), "https://u.example/x"
        )
        assert result.error.code is ErrorCode.SCRAPE_FAILED
        assert "no scraper registered for website 'Unknown'" in result.error.message

    async def test_slow_strategy_times_out(self) -> None:
        registry = ScraperRegistry(timeout_seconds=0.05)
        scraper = FakeScraper({"https://a.example/x": candidate(5)})
        scraper.gate = asyncio.Event()
        registry.register("AsuraScans", scraper)

        result = await registry.fetch_latest(make_website("AsuraScans", "https://a.example"), "https://a.example/x")

        assert result.error.code is ErrorCode.SCRAPE_FAILED
        assert "timed out after 0.05s" in result.error.message
        assert scraper.in_flight == 0

    async def test_raising_strategy_is_scrape_failed(self) -> None:
        registry = ScraperRegistry()
        registry.register("AsuraScans", FakeScraper({"https://a.example/x": RuntimeError("selector crashed")}))

        result = await registry.fetch_latest(make_website("AsuraScans", "https://a.example"), "https://a.example/x")

        assert result.error.code is ErrorCode.SCRAPE_FAILED
        assert "RuntimeError: selector crashed" in result.error.message


def test_default_registry_covers_every_site() -> None:
    page_source = MagicMock()
    registry = build_default_registry(page_source)

    for name in DEFAULT_SITES:
        scraper = registry.get(name)
        assert isinstance(scraper, SelectorReleaseScraper)
        assert scraper.website_name == name
