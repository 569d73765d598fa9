"""Subscriber command and query handlers.

Both directions are idempotent: subscribing twice keeps one subscription,
unsubscribing from something never subscribed to succeeds without effect.

The domain model decides whether a pair changes; only that one
(subscriber, media) pair is then written, so concurrent commands for the
same subscriber cannot undo each other.
"""

from __future__ import annotations

import uuid

import structlog

from release_notifier.application.ports import MediaRepository, SubscriberRepository
from release_notifier.application.requests import (
    MediaSubscriptions,
    MediaSubscriptionsQuery,
    SubscribedMedia,
    SubscribeMediaCommand,
    UnsubscribeMediaCommand,
)
from release_notifier.config import constants
from release_notifier.domain.models import Subscriber
from release_notifier.domain.results import Errors, Result


class SubscribeMediaHandler:
    def __init__(
        self,
        media_repository: MediaRepository,
        subscriber_repository: SubscriberRepository,
    ) -> None:
        self._media = media_repository
        self._subscribers = subscriber_repository

    async def handle(self, command: SubscribeMediaCommand) -> Result[None]:
        subscriber = await self._subscribers.get_by_external_identifier(
            command.external_identifier
        )
        if subscriber is None:
            created = Subscriber.create(uuid.uuid4(), command.external_identifier)
            if created.is_failure:
                return Result.fail(created.error)
            subscriber = created.value

        media = await self._media.get_by_name(command.media_name)
        if media is None:
            return Result.fail(Errors.not_found("Media", command.media_name))

        subscribed = subscriber.subscribe(media.id)
        if subscribed is subscriber:
            return Result.ok()

        stored = await self._subscribers.get_or_add(subscriber)
        # The stored row wins over a subscriber created concurrently elsewhere.
        subscription = stored.subscribe(media.id).subscription_to(media.id)
        inserted = await self._subscribers.add_subscription(subscription)

        structlog.get_logger().bind(
            service=constants.SERVICE_NAME,
            component="subscriptions",
        ).info(
            "subscription.created" if inserted else "subscription.already_present",
            subscriber=command.external_identifier,
            media_id=str(media.id),
            media_name=media.name,
        )
        return Result.ok()


class UnsubscribeMediaHandler:
    def __init__(
        self,
        media_repository: MediaRepository,
        subscriber_repository: SubscriberRepository,
    ) -> None:
        self._media = media_repository
        self._subscribers = subscriber_repository

    async def handle(self, command: UnsubscribeMediaCommand) -> Result[None]:
        media = await self._media.get_by_name(command.media_name)
        if media is None:
            return Result.fail(Errors.not_found("Media", command.media_name))

        subscriber = await self._subscribers.get_by_external_identifier(
            command.external_identifier
        )
        if subscriber is None or not subscriber.is_subscribed_to(media.id):
            return Result.ok()

        unsubscribed = subscriber.unsubscribe(media.id, media.name)
        if unsubscribed.is_failure:
            return Result.fail(unsubscribed.error)

        removed = await self._subscribers.remove_subscription(subscriber.id, media.id)
        log = structlog.get_logger().bind(
            service=constants.SERVICE_NAME,
            component="subscriptions",
            subscriber=command.external_identifier,
            media_id=str(media.id),
            media_name=media.name,
        )
        if removed != 1:
            log.warning("subscription.remove_failed", rows_removed=removed)
            return Result.fail(Errors.unsubscribe_failed(media.name))

        log.info("subscription.removed")
        return Result.ok()


class MediaSubscriptionsQueryHandler:
    def __init__(
        self,
        media_repository: MediaRepository,
        subscriber_repository: SubscriberRepository,
    ) -> None:
        self._media = media_repository
        self._subscribers = subscriber_repository

    async def handle(self, query: MediaSubscriptionsQuery) -> Result[MediaSubscriptions]:
        subscriber = await self._subscribers.get_by_external_identifier(
            query.external_identifier
        )
        if subscriber is None:
            return Result.ok(MediaSubscriptions(subscribed_to_media=[]))

        subscribed: list[SubscribedMedia] = []
        for media_id in subscriber.subscribed_media_ids:
            media = await self._media.get(media_id)
            if media is not None:
                subscribed.append(SubscribedMedia(media_id=media.id, media_name=media.name))
        return Result.ok(MediaSubscriptions(subscribed_to_media=subscribed))
