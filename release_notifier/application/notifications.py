"""Notification fan-out.

Given a Media whose ReleaseDetails just changed, build one
``NotificationRequest`` per (subscriber, channel) and hand each to the
transport. Delivery is fire-and-forget: a failing transport is logged and
skipped, and never undoes the already-committed release update.
"""

from __future__ import annotations

from typing import Iterable

import structlog

from release_notifier.application.ports import NotificationTransport, SubscriberRepository
from release_notifier.config import constants
from release_notifier.domain.models import Media, NotificationChannel, NotificationRequest


def build_notification_requests(
    media: Media,
    subscriber_external_identifiers: Iterable[str],
    channels: Iterable[NotificationChannel],
) -> list[NotificationRequest]:
    """Pure part of the fan-out. Returns nothing for a Media without a release."""
    if media.release_details is None:
        return []
    channels = tuple(channels)
    return [
        NotificationRequest(
            subscriber_external_identifier=external_identifier,
            channel=channel,
            media_name=media.name,
            release_display=media.release_details.display_string,
            release_url=media.release_details.release_url,
        )
        for external_identifier in subscriber_external_identifiers
        for channel in channels
    ]


class NotificationFanout:
    def __init__(
        self,
        subscriber_repository: SubscriberRepository,
        transport: NotificationTransport,
        channels: Iterable[NotificationChannel] = (NotificationChannel.WEB, NotificationChannel.CHAT),
    ) -> None:
        self._subscribers = subscriber_repository
        self._transport = transport
        self._channels = tuple(channels)

    async def notify(self, media: Media) -> list[NotificationRequest]:
        """Deliver the new release of ``media`` to everyone subscribed to it.

        Returns the requests that were handed to the transport, including
        those whose delivery failed.
        """
        log = structlog.get_logger().bind(
            service=constants.SERVICE_NAME,
            component="notifications",
            media_id=str(media.id),
            media_name=media.name,
        )

        subscribers = await self._subscribers.list_subscribed_to(media.id)
        requests = build_notification_requests(
            media,
            (subscriber.external_identifier for subscriber in subscribers),
            self._channels,
        )

        delivered = 0
        for request in requests:
            try:
                await self._transport.deliver(
                    request.subscriber_external_identifier,
                    request.channel,
                    request.message,
                )
                delivered += 1
            except Exception as exc:  # noqa: BLE001
                # Delivery belongs to the transport; the release update stands.
                log.warning(
                    "notification.delivery_failed",
                    subscriber=request.subscriber_external_identifier,
                    channel=request.channel.value,
                    error=str(exc),
                    error_type=type(exc).__name__,
                )

        log.info(
            "notification.fanout_completed",
            subscribers=len(subscribers),
            requested=len(requests),
            delivered=delivered,
        )
        return requests


class LoggingNotificationTransport:
    """Transport that records deliveries in the structured log.

    Stands in for the web toast and chat transports, which live outside this
    service.
    """

    async def deliver(
        self,
        subscriber_external_identifier: str,
        channel: NotificationChannel,
        message: str,
    ) -> None:
        structlog.get_logger().bind(
            service=constants.SERVICE_NAME,
            component="notification_transport",
        ).info(
            "notification.delivered",
            subscriber=subscriber_external_identifier,
            channel=channel.value,
            message=message,
        )
