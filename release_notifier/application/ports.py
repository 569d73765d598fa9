"""Collaborator interfaces consumed by the handlers.

Handlers depend on these protocols only. Production implementations live in
``release_notifier.infra`` (Postgres) and ``release_notifier.application
.notifications`` (logging transport); tests substitute in-memory fakes.

Each write is atomic. ``MediaRepository.save`` raises
``ConcurrencyConflictError`` when the stored version no longer matches
``media.version``.
"""

from __future__ import annotations

import uuid
from typing import Optional, Protocol

from release_notifier.domain.models import (
    Media,
    NotificationChannel,
    ScrapeTarget,
    Subscriber,
    Subscription,
    Website,
)


class MediaRepository(Protocol):
    async def get(self, media_id: uuid.UUID) -> Optional[Media]: ...

    async def get_by_name(self, name: str) -> Optional[Media]: ...

    async def list_all(self) -> list[Media]: ...

    async def list_page(self, offset: int, limit: int) -> list[Media]: ...

    async def count(self) -> int: ...

    async def add(self, media: Media) -> Media: ...

    async def save(self, media: Media) -> Media: ...

    async def find_scrape_target(self, website_id: uuid.UUID, url: str) -> Optional[ScrapeTarget]: ...


class WebsiteRepository(Protocol):
    async def get(self, website_id: uuid.UUID) -> Optional[Website]: ...

    async def get_by_name(self, name: str) -> Optional[Website]: ...

    async def list_all(self) -> list[Website]: ...


class SubscriberRepository(Protocol):
    """Subscriptions are written one (subscriber, media) pair at a time.

    There is no whole-Subscriber save: two commands for the same subscriber
    never overwrite each other's subscriptions.
    """

    async def get_by_external_identifier(self, external_identifier: str) -> Optional[Subscriber]: ...

    async def get_or_add(self, subscriber: Subscriber) -> Subscriber:
        """Insert ``subscriber`` unless its external identifier exists; return the stored one."""
        ...

    async def add_subscription(self, subscription: Subscription) -> bool:
        """Insert one pair; False when it was already stored."""
        ...

    async def remove_subscription(self, subscriber_id: uuid.UUID, media_id: uuid.UUID) -> int:
        """Delete one pair; returns the number of rows removed."""
        ...

    async def list_subscribed_to(self, media_id: uuid.UUID) -> list[Subscriber]: ...


class NotificationTransport(Protocol):
    """Best-effort delivery; the return value is ignored by the core."""

    async def deliver(
        self,
        subscriber_external_identifier: str,
        channel: NotificationChannel,
        message: str,
    ) -> None: ...
