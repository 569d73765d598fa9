"""Scrape cycle handler.

One invocation of ``ScrapeNewReleasesCommand`` is one scrape cycle:

    1. Take the cycle guard, or skip the cycle if another one is in flight.
    2. Fetch every scrape target of every Media, concurrently but bounded by
       SCRAPE_CONCURRENCY. The registry bounds each fetch by SCRAPE_TIMEOUT_SECONDS.
       A failing or hung target is recorded and never blocks the others.
    3. Join. Per Media, keep the highest candidate and commit it if it is
       strictly newer than the stored release. Equal or older candidates
       are no-ops, so re-scraping unchanged pages never re-notifies.
    4. Fan out notifications for every Media that changed. A fan-out that
       fails for one Media is logged and does not stop the others.

The cycle fails only when there was at least one target and every target
failed; otherwise per-target failures are visible in the logs and in the
returned ``ScrapeCycleReport``.
"""

from __future__ import annotations

import asyncio
import time
import uuid
from typing import Optional

import structlog

from release_notifier.application.cycle_guard import CycleGuard
from release_notifier.application.notifications import NotificationFanout
from release_notifier.application.ports import MediaRepository, WebsiteRepository
from release_notifier.application.requests import (
    ScrapeCycleReport,
    ScrapeNewReleasesCommand,
    TargetFailure,
)
from release_notifier.config import constants
from release_notifier.domain.exceptions import ConcurrencyConflictError
from release_notifier.domain.models import CandidateRelease, Media, ReleaseDetails, ScrapeTarget, Website
from release_notifier.domain.results import Errors, Result
from release_notifier.scrapers.registry import ScraperRegistry

#: A release update that lost an optimistic version check is re-applied
#: against a freshly loaded Media at most this many times in total.
MAX_SAVE_ATTEMPTS: int = 2


class ScrapeNewReleasesHandler:
    def __init__(
        self,
        media_repository: MediaRepository,
        website_repository: WebsiteRepository,
        scrapers: ScraperRegistry,
        fanout: NotificationFanout,
        guard: CycleGuard,
        concurrency: int = constants.SCRAPE_CONCURRENCY,
    ) -> None:
        self._media = media_repository
        self._websites = website_repository
        self._scrapers = scrapers
        self._fanout = fanout
        self._guard = guard
        self._concurrency = max(1, concurrency)

    async def handle(self, command: ScrapeNewReleasesCommand) -> Result[ScrapeCycleReport]:
        log = structlog.get_logger().bind(
            service=constants.SERVICE_NAME,
            component="scrape_cycle",
        )

        async with self._guard.try_acquire() as acquired:
            if not acquired:
                log.info("scrape_cycle.skipped", status="skipped", reason="cycle_in_flight")
                return Result.ok(ScrapeCycleReport(skipped=True))
            return await self._run_cycle(log)

    async def _run_cycle(self, log: structlog.types.FilteringBoundLogger) -> Result[ScrapeCycleReport]:
        started_at = time.monotonic()

        media_list = await self._media.list_all()
        websites = {website.id: website for website in await self._websites.list_all()}
        targets = [target for media in media_list for target in media.scrape_targets]

        log.info(
            "scrape_cycle.started",
            status="starting",
            media_count=len(media_list),
            target_count=len(targets),
        )

        semaphore = asyncio.Semaphore(self._concurrency)
        outcomes = await asyncio.gather(
            *(
                self._fetch_target(target, websites.get(target.website_id), semaphore, log)
                for target in targets
            )
        )

        # Barrier passed: every fetch of this cycle has finished.
        failures: list[TargetFailure] = []
        newest: dict[uuid.UUID, ReleaseDetails] = {}
        for target, fetched in outcomes:
            details = fetched.bind(CandidateRelease.to_release_details)
            if details.is_failure:
                failures.append(TargetFailure(url=target.url, reason=details.error.message))
                continue
            if details.value.is_newer_than(newest.get(target.media_id)):
                newest[target.media_id] = details.value

        media_by_id = {media.id: media for media in media_list}
        changed: list[Media] = []
        for media_id, release_details in newest.items():
            updated = await self._commit_release(media_by_id[media_id], release_details, log)
            if updated is not None:
                changed.append(updated)

        notifications_sent = 0
        for media in changed:
            try:
                notifications_sent += len(await self._fanout.notify(media))
            except Exception as exc:  # noqa: BLE001
                # The release is committed; the remaining Media still get notified.
                log.error(
                    "notification.fanout_failed",
                    media_id=str(media.id),
                    media_name=media.name,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

        report = ScrapeCycleReport(
            targets_attempted=len(targets),
            targets_failed=failures,
            updated_media=[media.name for media in changed],
            notifications_sent=notifications_sent,
        )
        duration_ms = int((time.monotonic() - started_at) * 1000)

        if targets and len(failures) == len(targets):
            log.error(
                "scrape_cycle.all_targets_failed",
                status="failed",
                target_count=len(targets),
                duration_ms=duration_ms,
            )
            return Result.fail(Errors.all_scrapes_failed(len(targets)))

        log.info(
            "scrape_cycle.completed",
            status="completed",
            target_count=len(targets),
            failed_count=len(failures),
            updated_count=len(changed),
            notifications_sent=notifications_sent,
            duration_ms=duration_ms,
        )
        return Result.ok(report)

    async def _fetch_target(
        self,
        target: ScrapeTarget,
        website: Optional[Website],
        semaphore: asyncio.Semaphore,
        log: structlog.types.FilteringBoundLogger,
    ) -> tuple[ScrapeTarget, Result[CandidateRelease]]:
        async with semaphore:
            if website is None:
                result: Result[CandidateRelease] = Result.fail(
                    Errors.scrape_failed(target.url, f"website {target.website_id} does not exist")
                )
            else:
                result = await self._scrapers.fetch_latest(website, target.url)

        if result.is_failure:
            log.warning(
                "scrape_target.fetch_failed",
                status="failed",
                media_id=str(target.media_id),
                url=target.url,
                error=result.error.message,
            )
        return target, result

    async def _commit_release(
        self,
        media: Media,
        release_details: ReleaseDetails,
        log: structlog.types.FilteringBoundLogger,
    ) -> Optional[Media]:
        """Save ``release_details`` on ``media`` if newer; return the saved Media.

        Returns None when nothing changed, including when a concurrent writer
        kept winning the version check.
        """
        for attempt in range(1, MAX_SAVE_ATTEMPTS + 1):
            if not release_details.is_newer_than(media.release_details):
                return None

            updated = media.update_release_details(release_details)
            if updated.is_failure:
                log.error(
                    "media.release_update_rejected",
                    media_id=str(media.id),
                    error=updated.error.message,
                )
                return None

            try:
                saved = await self._media.save(updated.value)
            except ConcurrencyConflictError as exc:
                log.warning(
                    "media.release_update_conflict",
                    media_id=str(media.id),
                    attempt=attempt,
                    error=str(exc),
                )
                reloaded = await self._media.get(media.id)
                if reloaded is None:
                    return None
                media = reloaded
                continue

            log.info(
                "media.release_updated",
                media_id=str(saved.id),
                media_name=saved.name,
                previous=media.display_release,
                current=saved.display_release,
            )
            return saved

        log.error("media.release_update_abandoned", media_id=str(media.id), attempts=MAX_SAVE_ATTEMPTS)
        return None
