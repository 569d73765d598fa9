"""Composition root.

Builds the dispatcher with its static handler registry. Called once per
process by the worker and by the API lifespan; tests call
``build_dispatcher`` with in-memory collaborators.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from release_notifier.application.cycle_guard import CycleGuard
from release_notifier.application.dispatcher import Dispatcher
from release_notifier.application.handlers import (
    AddMediaHandler,
    AddScrapeTargetHandler,
    AvailableMediaQueryHandler,
    AvailableWebsitesQueryHandler,
    MediaQueryHandler,
    MediaSubscriptionsQueryHandler,
    ScrapeNewReleasesHandler,
    SubscribeMediaHandler,
    UnsubscribeMediaHandler,
)
from release_notifier.application.notifications import (
    LoggingNotificationTransport,
    NotificationFanout,
)
from release_notifier.application.ports import (
    MediaRepository,
    NotificationTransport,
    SubscriberRepository,
    WebsiteRepository,
)
from release_notifier.application.requests import (
    AddMediaCommand,
    AddScrapeTargetCommand,
    AvailableMediaQuery,
    AvailableWebsitesQuery,
    MediaQuery,
    MediaSubscriptionsQuery,
    ScrapeNewReleasesCommand,
    SubscribeMediaCommand,
    UnsubscribeMediaCommand,
)
from release_notifier.config import constants
from release_notifier.domain.models import NotificationChannel
from release_notifier.scrapers.page_source import PlaywrightPageSource
from release_notifier.scrapers.registry import ScraperRegistry, build_default_registry


def configured_channels(names: Iterable[str] = constants.NOTIFICATION_CHANNELS) -> tuple[NotificationChannel, ...]:
    """Parse channel names; unknown names raise ValueError at startup."""
    return tuple(NotificationChannel(name.upper()) for name in names)


def build_dispatcher(
    media_repository: MediaRepository,
    website_repository: WebsiteRepository,
    subscriber_repository: SubscriberRepository,
    scrapers: ScraperRegistry,
    transport: NotificationTransport,
    guard: Optional[CycleGuard] = None,
    channels: Optional[Iterable[NotificationChannel]] = None,
    concurrency: int = constants.SCRAPE_CONCURRENCY,
) -> Dispatcher:
    fanout = NotificationFanout(
        subscriber_repository,
        transport,
        channels if channels is not None else configured_channels(),
    )

    dispatcher = Dispatcher()
    dispatcher.register(
        AddMediaCommand,
        AddMediaHandler(media_repository, website_repository, scrapers).handle,
    )
    dispatcher.register(
        AddScrapeTargetCommand,
        AddScrapeTargetHandler(media_repository, website_repository, scrapers).handle,
    )
    dispatcher.register(
        ScrapeNewReleasesCommand,
        ScrapeNewReleasesHandler(
            media_repository,
            website_repository,
            scrapers,
            fanout,
            guard or CycleGuard(),
            concurrency=concurrency,
        ).handle,
    )
    dispatcher.register(
        SubscribeMediaCommand,
        SubscribeMediaHandler(media_repository, subscriber_repository).handle,
    )
    dispatcher.register(
        UnsubscribeMediaCommand,
        UnsubscribeMediaHandler(media_repository, subscriber_repository).handle,
    )
    dispatcher.register(
        MediaQuery,
        MediaQueryHandler(media_repository, website_repository).handle,
    )
    dispatcher.register(
        AvailableMediaQuery,
        AvailableMediaQueryHandler(media_repository).handle,
    )
    dispatcher.register(
        MediaSubscriptionsQuery,
        MediaSubscriptionsQueryHandler(media_repository, subscriber_repository).handle,
    )
    dispatcher.register(
        AvailableWebsitesQuery,
        AvailableWebsitesQueryHandler(website_repository).handle,
    )
    return dispatcher


@dataclass
class Container:
    """Process-wide singletons that need explicit shutdown."""

    dispatcher: Dispatcher
    page_source: PlaywrightPageSource

    async def close(self) -> None:
        from release_notifier.infra.db import dispose_engine

        await self.page_source.close()
        await dispose_engine()


def build_container() -> Container:
    """Wire the production collaborators (Postgres, Playwright, log transport)."""
    from release_notifier.infra.repositories import (
        PostgresMediaRepository,
        PostgresSubscriberRepository,
        PostgresWebsiteRepository,
    )

    page_source = PlaywrightPageSource()
    dispatcher = build_dispatcher(
        media_repository=PostgresMediaRepository(),
        website_repository=PostgresWebsiteRepository(),
        subscriber_repository=PostgresSubscriberRepository(),
        scrapers=build_default_registry(page_source),
        transport=LoggingNotificationTransport(),
    )
    return Container(dispatcher=dispatcher, page_source=page_source)
