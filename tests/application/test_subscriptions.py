"""Tests for subscribe / unsubscribe commands and the subscriptions query."""

from __future__ import annotations

import asyncio

from release_notifier.application.requests import (
    MediaSubscriptionsQuery,
    SubscribeMediaCommand,
    UnsubscribeMediaCommand,
)
from release_notifier.domain.results import ErrorCode
from tests.fakes import make_media


class TestSubscribe:
    async def test_creates_subscriber_on_first_subscribe(self, world) -> None:
        bleach = world.add_media(make_media("Bleach"))

        result = await world.dispatcher().dispatch(
            SubscribeMediaCommand(external_identifier="user-1", media_name="bleach")
        )

        assert result.is_success
        subscriber = world.subscribers.items["user-1"]
        assert subscriber.subscribed_media_ids == (bleach.id,)

    async def test_double_subscribe_keeps_one_subscription(self, world) -> None:
        bleach = world.add_media(make_media("Bleach"))
        dispatcher = world.dispatcher()
        command = SubscribeMediaCommand(external_identifier="user-1", media_name="Bleach")

        await dispatcher.dispatch(command)
        second = await dispatcher.dispatch(command)

        assert second.is_success
        assert world.subscribers.items["user-1"].subscribed_media_ids == (bleach.id,)
        assert world.subscribers.writes == 2

    async def test_existing_subscriber_gains_subscription(self, world) -> None:
        bleach = world.add_media(make_media("Bleach"))
        naruto = world.add_media(make_media("Naruto"))
        world.add_subscriber("user-1", bleach)

        await world.dispatcher().dispatch(
            SubscribeMediaCommand(external_identifier="user-1", media_name="Naruto")
        )

        assert world.subscribers.items["user-1"].subscribed_media_ids == (bleach.id, naruto.id)

    async def test_unknown_media_is_not_found(self, world) -> None:
        result = await world.dispatcher().dispatch(
            SubscribeMediaCommand(external_identifier="user-1", media_name="Nope")
        )
        assert result.error.code is ErrorCode.NOT_FOUND
        assert world.subscribers.items == {}

    async def test_blank_identifier_is_invariant_violation(self, world) -> None:
        world.add_media(make_media("Bleach"))
        result = await world.dispatcher().dispatch(
            SubscribeMediaCommand(external_identifier="  ", media_name="Bleach")
        )
        assert result.error.code is ErrorCode.INVARIANT_VIOLATION

    async def test_interleaved_subscribes_keep_both_subscriptions(self, world) -> None:
        bleach = world.add_media(make_media("Bleach"))
        naruto = world.add_media(make_media("Naruto"))
        world.add_subscriber("user-1")
        world.subscribers.yield_on_load = True
        dispatcher = world.dispatcher()

        results = await asyncio.gather(
            dispatcher.dispatch(SubscribeMediaCommand(external_identifier="user-1", media_name="Bleach")),
            dispatcher.dispatch(SubscribeMediaCommand(external_identifier="user-1", media_name="Naruto")),
        )

        assert all(result.is_success for result in results)
        assert set(world.subscribers.items["user-1"].subscribed_media_ids) == {bleach.id, naruto.id}

    async def test_interleaved_first_subscribes_share_one_subscriber(self, world) -> None:
        bleach = world.add_media(make_media("Bleach"))
        naruto = world.add_media(make_media("Naruto"))
        world.subscribers.yield_on_load = True
        dispatcher = world.dispatcher()

        await asyncio.gather(
            dispatcher.dispatch(SubscribeMediaCommand(external_identifier="user-1", media_name="Bleach")),
            dispatcher.dispatch(SubscribeMediaCommand(external_identifier="user-1", media_name="Naruto")),
        )

        assert list(world.subscribers.items) == ["user-1"]
        assert set(world.subscribers.items["user-1"].subscribed_media_ids) == {bleach.id, naruto.id}


class TestUnsubscribe:
    async def test_removes_subscription(self, world) -> None:
        bleach = world.add_media(make_media("Bleach"))
        world.add_subscriber("user-1", bleach)

        result = await world.dispatcher().dispatch(
            UnsubscribeMediaCommand(external_identifier="user-1", media_name="Bleach")
        )

        assert result.is_success
        assert world.subscribers.items["user-1"].subscriptions == ()

    async def test_not_subscribed_is_noop(self, world) -> None:
        world.add_media(make_media("Bleach"))
        world.add_subscriber("user-1")

        result = await world.dispatcher().dispatch(
            UnsubscribeMediaCommand(external_identifier="user-1", media_name="Bleach")
        )

        assert result.is_success
        assert world.subscribers.writes == 0

    async def test_interleaved_unsubscribe_and_subscribe_both_apply(self, world) -> None:
        bleach = world.add_media(make_media("Bleach"))
        naruto = world.add_media(make_media("Naruto"))
        world.add_subscriber("user-1", bleach)
        world.subscribers.yield_on_load = True
        dispatcher = world.dispatcher()

        results = await asyncio.gather(
            dispatcher.dispatch(UnsubscribeMediaCommand(external_identifier="user-1", media_name="Bleach")),
            dispatcher.dispatch(SubscribeMediaCommand(external_identifier="user-1", media_name="Naruto")),
        )

        assert all(result.is_success for result in results)
        assert world.subscribers.items["user-1"].subscribed_media_ids == (naruto.id,)

    async def test_removal_lost_to_concurrent_unsubscribe_fails(self, world) -> None:
        bleach = world.add_media(make_media("Bleach"))
        world.add_subscriber("user-1", bleach)
        world.subscribers.yield_on_load = True
        dispatcher = world.dispatcher()
        command = UnsubscribeMediaCommand(external_identifier="user-1", media_name="Bleach")

        results = await asyncio.gather(dispatcher.dispatch(command), dispatcher.dispatch(command))

        assert sorted(result.is_success for result in results) == [False, True]
        assert [r.error.code for r in results if r.is_failure] == [ErrorCode.UNSUBSCRIBE_FAILED]
        assert world.subscribers.items["user-1"].subscriptions == ()

    async def test_unknown_subscriber_is_noop(self, world) -> None:
        world.add_media(make_media("Bleach"))

        result = await world.dispatcher().dispatch(
            UnsubscribeMediaCommand(external_identifier="ghost", media_name="Bleach")
        )

        assert result.is_success
        assert world.subscribers.items == {}

    async def test_unknown_media_is_not_found(self, world) -> None:
        result = await world.dispatcher().dispatch(
            UnsubscribeMediaCommand(external_identifier="user-1", media_name="Nope")
        )
        assert result.error.code is ErrorCode.NOT_FOUND


class TestMediaSubscriptionsQuery:
    async def test_lists_subscribed_media(self, world) -> None:
        bleach = world.add_media(make_media("Bleach"))
        world.add_media(make_media("Naruto"))
        world.add_subscriber("user-1", bleach)

        result = await world.dispatcher().dispatch(MediaSubscriptionsQuery(external_identifier="user-1"))

        assert [(m.media_id, m.media_name) for m in result.value.subscribed_to_media] == [
            (bleach.id, "Bleach")
        ]

    async def test_unknown_subscriber_is_empty(self, world) -> None:
        result = await world.dispatcher().dispatch(MediaSubscriptionsQuery(external_identifier="ghost"))
        assert result.value.subscribed_to_media == []
