"""Media command and query handlers.

AddScrapeTarget and AddMedia share one rule: a target is only persisted after
a successful initial scrape of its page. A failed scrape leaves no trace in
storage.
"""

from __future__ import annotations

import uuid

import structlog

from release_notifier.application.ports import MediaRepository, WebsiteRepository
from release_notifier.application.requests import (
    AddMediaCommand,
    AddScrapeTargetCommand,
    AvailableMedia,
    AvailableMediaQuery,
    MediaDetails,
    MediaInformation,
    MediaQuery,
    ScrapeTargetDetails,
)
from release_notifier.config import constants
from release_notifier.domain.models import Media, ReleaseDetails, ScrapeTarget, Website
from release_notifier.domain.results import Errors, Result
from release_notifier.scrapers.registry import ScraperRegistry


def apply_release_if_newer(media: Media, release_details: ReleaseDetails) -> Result[Media]:
    """Use ``release_details`` when the Media has none yet or it is newer."""
    if release_details.is_newer_than(media.release_details):
        return media.update_release_details(release_details)
    return Result.ok(media)


def _conflicting_target_error(existing: ScrapeTarget, media_id: uuid.UUID) -> Result[None]:
    if existing.media_id == media_id:
        return Result.fail(Errors.scrape_target_exists(existing.url))
    return Result.fail(Errors.scrape_target_references_other_media(existing.url))


async def _attach_fetched_target(
    media_repository: MediaRepository,
    media: Media,
    website: Website,
    relative_path: str,
    release_details: ReleaseDetails,
) -> Result[Media]:
    attached = media.add_scrape_target(website, relative_path).bind(
        lambda updated: apply_release_if_newer(updated, release_details)
    )
    if attached.is_failure:
        return attached
    return Result.ok(await media_repository.save(attached.value))


class AddScrapeTargetHandler:
    def __init__(
        self,
        media_repository: MediaRepository,
        website_repository: WebsiteRepository,
        scrapers: ScraperRegistry,
    ) -> None:
        self._media = media_repository
        self._websites = website_repository
        self._scrapers = scrapers

    async def handle(self, command: AddScrapeTargetCommand) -> Result[None]:
        media = await self._media.get_by_name(command.media_name)
        if media is None:
            return Result.fail(Errors.not_found("Media", command.media_name))

        website = await self._websites.get_by_name(command.website_name)
        if website is None:
            return Result.fail(Errors.not_found("Website", command.website_name))

        url = website.build_url(command.relative_path)
        existing = await self._media.find_scrape_target(website.id, url)
        if existing is not None:
            return _conflicting_target_error(existing, media.id)

        fetched = await self._scrapers.fetch_latest(website, url)
        if fetched.is_failure:
            return Result.fail(fetched.error)

        release_details = fetched.value.to_release_details()
        if release_details.is_failure:
            return Result.fail(release_details.error)

        saved = await _attach_fetched_target(
            self._media, media, website, command.relative_path, release_details.value
        )
        if saved.is_failure:
            return Result.fail(saved.error)

        structlog.get_logger().bind(
            service=constants.SERVICE_NAME,
            component="media",
        ).info(
            "media.scrape_target_added",
            media_id=str(media.id),
            media_name=media.name,
            website=website.name,
            url=url,
        )
        return Result.ok()


class AddMediaHandler:
    """Create a Media from a series page.

    The media name is read from the page during the initial scrape. If a Media
    with that name already exists the page is attached to it as a new target
    instead.
    """

    def __init__(
        self,
        media_repository: MediaRepository,
        website_repository: WebsiteRepository,
        scrapers: ScraperRegistry,
    ) -> None:
        self._media = media_repository
        self._websites = website_repository
        self._scrapers = scrapers

    async def handle(self, command: AddMediaCommand) -> Result[uuid.UUID]:
        website = await self._websites.get_by_name(command.website_name)
        if website is None:
            return Result.fail(Errors.not_found("Website", command.website_name))

        url = website.build_url(command.relative_path)
        existing = await self._media.find_scrape_target(website.id, url)
        if existing is not None:
            return Result.fail(Errors.scrape_target_references_other_media(url))

        fetched = await self._scrapers.fetch_latest(website, url)
        if fetched.is_failure:
            return Result.fail(fetched.error)
        candidate = fetched.value
        if not candidate.media_name:
            return Result.fail(Errors.scrape_failed(url, "page exposes no media title"))

        release_details = candidate.to_release_details()
        if release_details.is_failure:
            return Result.fail(release_details.error)

        log = structlog.get_logger().bind(
            service=constants.SERVICE_NAME,
            component="media",
            website=website.name,
            url=url,
        )

        media = await self._media.get_by_name(candidate.media_name)
        if media is not None:
            saved = await _attach_fetched_target(
                self._media, media, website, command.relative_path, release_details.value
            )
            if saved.is_failure:
                return Result.fail(saved.error)
            log.info("media.scrape_target_added", media_id=str(media.id), media_name=media.name)
            return Result.ok(media.id)

        created = Media.create(
            uuid.uuid4(), candidate.media_name, release_details.value
        ).bind(lambda new_media: new_media.add_scrape_target(website, command.relative_path))
        if created.is_failure:
            return Result.fail(created.error)

        media = await self._media.add(created.value)
        log.info(
            "media.created",
            media_id=str(media.id),
            media_name=media.name,
            release=media.display_release,
        )
        return Result.ok(media.id)


class MediaQueryHandler:
    def __init__(
        self,
        media_repository: MediaRepository,
        website_repository: WebsiteRepository,
    ) -> None:
        self._media = media_repository
        self._websites = website_repository

    async def handle(self, query: MediaQuery) -> Result[MediaDetails]:
        media = await self._media.get(query.media_id)
        if media is None:
            return Result.fail(Errors.not_found("Media", query.media_id))

        websites = {website.id: website for website in await self._websites.list_all()}
        target_details = [
            ScrapeTargetDetails(
                website_name=websites[target.website_id].name,
                website_url=websites[target.website_id].url,
                scrape_target_url=target.url,
            )
            for target in media.scrape_targets
            if target.website_id in websites
        ]
        return Result.ok(
            MediaDetails(
                id=media.id,
                name=media.name,
                release_details=media.release_details,
                latest_release=media.display_release,
                scrape_target_details=target_details,
            )
        )


class AvailableMediaQueryHandler:
    def __init__(self, media_repository: MediaRepository) -> None:
        self._media = media_repository

    async def handle(self, query: AvailableMediaQuery) -> Result[AvailableMedia]:
        offset = (query.page_index - 1) * query.page_size
        page = await self._media.list_page(offset=offset, limit=query.page_size)
        total = await self._media.count()
        return Result.ok(
            AvailableMedia(
                media=[MediaInformation(id=media.id, name=media.name) for media in page],
                total_result_count=total,
            )
        )
