"""Tests for release_notifier.application.notifications."""

from __future__ import annotations

from unittest.mock import patch

from release_notifier.application.notifications import (
    LoggingNotificationTransport,
    NotificationFanout,
    build_notification_requests,
)
from release_notifier.domain.models import NotificationChannel
from tests.fakes import InMemorySubscriberRepository, RecordingTransport, World, make_media

BOTH = (NotificationChannel.WEB, NotificationChannel.CHAT)


class TestBuildNotificationRequests:
    def test_one_request_per_subscriber_and_channel(self) -> None:
        media = make_media("Solo Leveling", release=(181, 0))

        requests = build_notification_requests(media, ["a", "b"], BOTH)

        assert [(r.subscriber_external_identifier, r.channel) for r in requests] == [
            ("a", NotificationChannel.WEB),
            ("a", NotificationChannel.CHAT),
            ("b", NotificationChannel.WEB),
            ("b", NotificationChannel.CHAT),
        ]
        assert {r.release_display for r in requests} == {"Chapter 181"}

    def test_media_without_release_yields_nothing(self) -> None:
        assert build_notification_requests(make_media("Bleach"), ["a"], BOTH) == []


class TestNotificationFanout:
    async def test_only_subscribers_of_the_media_are_notified(self) -> None:
        world = World()
        solo = world.add_media(make_media("Solo Leveling", release=(181, 0)))
        other = world.add_media(make_media("Other", release=(1, 0)))
        world.add_subscriber("fan", solo)
        world.add_subscriber("not-a-fan", other)
        transport = RecordingTransport()

        fanout = NotificationFanout(world.subscribers, transport, (NotificationChannel.CHAT,))
        requests = await fanout.notify(solo)

        assert len(requests) == 1
        assert transport.deliveries == [
            ("fan", NotificationChannel.CHAT, requests[0].message),
        ]

    async def test_failed_delivery_is_swallowed(self) -> None:
        world = World()
        solo = world.add_media(make_media("Solo Leveling", release=(181, 0)))
        world.add_subscriber("broken", solo)
        world.add_subscriber("fine", solo)
        transport = RecordingTransport(failing_subscribers=["broken"])

        requests = await NotificationFanout(world.subscribers, transport, BOTH).notify(solo)

        assert len(requests) == 4
        assert {who for who, _, _ in transport.deliveries} == {"fine"}

    async def test_no_subscribers(self) -> None:
        transport = RecordingTransport()
        fanout = NotificationFanout(InMemorySubscriberRepository(), transport)
        assert await fanout.notify(make_media("Lonely", release=(1, 0))) == []


class TestLoggingNotificationTransport:
    async def test_logs_delivery(self) -> None:
        with patch("release_notifier.application.notifications.structlog") as mock_structlog:
            await LoggingNotificationTransport().deliver("user-1", NotificationChannel.WEB, "hello")

        bound = mock_structlog.get_logger.return_value.bind.return_value
        bound.info.assert_called_once_with(
            "notification.delivered",
            subscriber="user-1",
            channel="WEB",
            message="hello",
        )
