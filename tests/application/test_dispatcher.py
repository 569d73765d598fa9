"""Unit tests for release_notifier.application.dispatcher — Dispatcher."""

from __future__ import annotations

import pytest

from release_notifier.application.dispatcher import Dispatcher
from release_notifier.application.requests import (
    AvailableWebsitesQuery,
    MediaSubscriptionsQuery,
    Request,
)
from release_notifier.domain.exceptions import (
    DispatcherConfigurationError,
    UnregisteredRequestError,
)
from release_notifier.domain.results import ErrorCode, Errors, Result


class _Unknown(Request):
    pass


class TestDispatcher:
    async def test_routes_to_registered_handler(self) -> None:
        seen = []

        async def handler(query: MediaSubscriptionsQuery) -> Result[str]:
            seen.append(query)
            return Result.ok(query.external_identifier)

        dispatcher = Dispatcher()
        dispatcher.register(MediaSubscriptionsQuery, handler)

        query = MediaSubscriptionsQuery(external_identifier="user-1")
        result = await dispatcher.dispatch(query)

        assert result.value == "user-1"
        assert seen == [query]

    async def test_failure_result_is_returned_unchanged(self) -> None:
        error = Errors.not_found("Media", "Bleach")

        async def handler(query: AvailableWebsitesQuery) -> Result[None]:
            return Result.fail(error)

        dispatcher = Dispatcher()
        dispatcher.register(AvailableWebsitesQuery, handler)

        assert (await dispatcher.dispatch(AvailableWebsitesQuery())).error == error

    async def test_handler_exception_becomes_unexpected(self) -> None:
        async def handler(query: AvailableWebsitesQuery) -> Result[None]:
            raise RuntimeError("database is down")

        dispatcher = Dispatcher()
        dispatcher.register(AvailableWebsitesQuery, handler)

        result = await dispatcher.dispatch(AvailableWebsitesQuery())

        assert result.error.code is ErrorCode.UNEXPECTED
        assert "AvailableWebsitesQuery" in result.error.message
        assert "RuntimeError" in result.error.message

    async def test_unregistered_type_raises(self) -> None:
        with pytest.raises(UnregisteredRequestError):
            await Dispatcher().dispatch(_Unknown())

    async def test_routing_uses_exact_type(self) -> None:
        class _Sub(AvailableWebsitesQuery):
            pass

        async def handler(query: AvailableWebsitesQuery) -> Result[None]:
            return Result.ok()

        dispatcher = Dispatcher()
        dispatcher.register(AvailableWebsitesQuery, handler)

        with pytest.raises(UnregisteredRequestError):
            await dispatcher.dispatch(_Sub())

    def test_duplicate_registration_raises(self) -> None:
        async def handler(query: AvailableWebsitesQuery) -> Result[None]:
            return Result.ok()

        dispatcher = Dispatcher()
        dispatcher.register(AvailableWebsitesQuery, handler)

        with pytest.raises(DispatcherConfigurationError):
            dispatcher.register(AvailableWebsitesQuery, handler)

    def test_registered_types(self) -> None:
        async def handler(query: AvailableWebsitesQuery) -> Result[None]:
            return Result.ok()

        dispatcher = Dispatcher()
        dispatcher.register(AvailableWebsitesQuery, handler)

        assert dispatcher.registered_types == frozenset({AvailableWebsitesQuery})
