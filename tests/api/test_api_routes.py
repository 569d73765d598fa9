"""Tests for the HTTP boundary (release_notifier.api).

Design decisions
----------------
- TestClient is used without entering the lifespan, so no Temporal or
  database connection is made; dependencies are overridden instead.
- Handler behaviour is covered elsewhere; here the dispatcher is a mock and
  the tests check request mapping and error-code → status translation.
"""

from __future__ import annotations

import uuid
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from temporalio.client import ScheduleOverlapPolicy
from temporalio.service import RPCError, RPCStatusCode

from release_notifier.api.dependencies import get_dispatcher, get_temporal_client
from release_notifier.api.main import app
from release_notifier.application.requests import (
    AddMediaCommand,
    AddScrapeTargetCommand,
    AvailableMedia,
    AvailableMediaQuery,
    AvailableWebsites,
    MediaInformation,
    MediaSubscriptions,
    SubscribeMediaCommand,
    UnsubscribeMediaCommand,
    WebsiteInformation,
)
from release_notifier.domain.results import Errors, Result


@pytest.fixture
def dispatcher() -> MagicMock:
    mock = MagicMock()
    mock.dispatch = AsyncMock(return_value=Result.ok())
    return mock


@pytest.fixture
def schedule_handle() -> MagicMock:
    handle = MagicMock()
    handle.describe = AsyncMock(return_value=_schedule_description())
    handle.trigger = AsyncMock()
    return handle


@pytest.fixture
def temporal_client(schedule_handle) -> MagicMock:
    client = MagicMock()
    client.get_schedule_handle.return_value = schedule_handle
    return client


def _schedule_description(*running_workflow_ids: str) -> MagicMock:
    description = MagicMock()
    description.info.running_actions = [MagicMock(workflow_id=wf_id) for wf_id in running_workflow_ids]
    return description


@pytest.fixture
def client(dispatcher, temporal_client):
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    app.dependency_overrides[get_temporal_client] = lambda: temporal_client
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


class TestMediaRoutes:
    def test_list_media(self, client, dispatcher) -> None:
        media_id = uuid.uuid4()
        dispatcher.dispatch.return_value = Result.ok(
            AvailableMedia(media=[MediaInformation(id=media_id, name="Bleach")], total_result_count=1)
        )

        response = client.get("/media", params={"page_index": 2, "page_size": 10})

        assert response.status_code == 200
        assert response.json() == {
            "media": [{"id": str(media_id), "name": "Bleach"}],
            "total_result_count": 1,
        }
        dispatcher.dispatch.assert_awaited_once_with(AvailableMediaQuery(page_index=2, page_size=10))

    def test_list_media_rejects_page_zero(self, client) -> None:
        assert client.get("/media", params={"page_index": 0}).status_code == 422

    def test_get_media_not_found(self, client, dispatcher) -> None:
        dispatcher.dispatch.return_value = Result.fail(Errors.not_found("Media", "x"))

        response = client.get(f"/media/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["detail"] == {"code": "NotFound", "message": "Entity was not found"}

    def test_add_media(self, client, dispatcher) -> None:
        media_id = uuid.uuid4()
        dispatcher.dispatch.return_value = Result.ok(media_id)

        response = client.post("/media", json={"website_name": "AsuraScans", "relative_path": "/solo"})

        assert response.status_code == 201
        assert response.json() == {"id": str(media_id)}
        dispatcher.dispatch.assert_awaited_once_with(
            AddMediaCommand(website_name="AsuraScans", relative_path="/solo")
        )

    def test_add_scrape_target(self, client, dispatcher) -> None:
        response = client.post(
            "/media/Bleach/scrape-targets",
            json={"website_name": "MangaSite", "relative_path": "/bleach"},
        )

        assert response.status_code == 204
        dispatcher.dispatch.assert_awaited_once_with(
            AddScrapeTargetCommand(media_name="Bleach", website_name="MangaSite", relative_path="/bleach")
        )

    @pytest.mark.parametrize(
        "error, status_code, message",
        [
            (Errors.scrape_failed("u", "r"), 502, "Scraping for media failed"),
            (Errors.scrape_target_exists("u"), 409, "ScrapeTarget already exists"),
            (Errors.scrape_target_references_other_media("u"), 409, "ScrapeTarget references different media"),
            (Errors.invariant_violation("x"), 422, "Creating entity failed"),
            (Errors.unexpected("x"), 500, "Something went wrong"),
        ],
    )
    def test_add_scrape_target_errors(self, client, dispatcher, error, status_code, message) -> None:
        dispatcher.dispatch.return_value = Result.fail(error)

        response = client.post(
            "/media/Bleach/scrape-targets",
            json={"website_name": "MangaSite", "relative_path": "/bleach"},
        )

        assert response.status_code == status_code
        assert response.json()["detail"]["message"] == message


def test_list_websites(client, dispatcher) -> None:
    dispatcher.dispatch.return_value = Result.ok(
        AvailableWebsites(websites=[WebsiteInformation(name="AsuraScans", url="https://asura.example")])
    )

    response = client.get("/websites")

    assert response.json() == {"websites": [{"name": "AsuraScans", "url": "https://asura.example"}]}


class TestSubscriptionRoutes:
    def test_list(self, client, dispatcher) -> None:
        dispatcher.dispatch.return_value = Result.ok(MediaSubscriptions(subscribed_to_media=[]))
        response = client.get("/subscribers/user-1/subscriptions")
        assert response.json() == {"subscribed_to_media": []}

    def test_subscribe(self, client, dispatcher) -> None:
        response = client.put("/subscribers/user-1/subscriptions/Bleach")
        assert response.status_code == 204
        dispatcher.dispatch.assert_awaited_once_with(
            SubscribeMediaCommand(external_identifier="user-1", media_name="Bleach")
        )

    def test_unsubscribe(self, client, dispatcher) -> None:
        response = client.delete("/subscribers/user-1/subscriptions/Bleach")
        assert response.status_code == 204
        dispatcher.dispatch.assert_awaited_once_with(
            UnsubscribeMediaCommand(external_identifier="user-1", media_name="Bleach")
        )

    def test_unsubscribe_failed(self, client, dispatcher) -> None:
        dispatcher.dispatch.return_value = Result.fail(Errors.unsubscribe_failed("Bleach"))
        response = client.delete("/subscribers/user-1/subscriptions/Bleach")
        assert response.status_code == 500


class TestScrapeRoute:
    def test_triggers_schedule_with_skip_overlap(self, client, temporal_client, schedule_handle) -> None:
        response = client.post("/scrape")

        assert response.status_code == 202
        assert response.json() == {
            "schedule_id": "scrape-new-releases-schedule",
            "status": "TRIGGERED",
        }
        temporal_client.get_schedule_handle.assert_called_once_with("scrape-new-releases-schedule")
        schedule_handle.trigger.assert_awaited_once_with(overlap=ScheduleOverlapPolicy.SKIP)
        temporal_client.start_workflow.assert_not_called()

    def test_running_scheduled_cycle_is_conflict(self, client, schedule_handle) -> None:
        schedule_handle.describe.return_value = _schedule_description(
            "scrape-new-releases-2026-10-18T00:30:00Z"
        )

        response = client.post("/scrape")

        assert response.status_code == 409
        schedule_handle.trigger.assert_not_awaited()

    def test_temporal_unavailable(self, client, schedule_handle) -> None:
        schedule_handle.describe.side_effect = RPCError("connection refused", RPCStatusCode.UNAVAILABLE, b"")

        response = client.post("/scrape")

        assert response.status_code == 503


def test_missing_container_is_service_unavailable() -> None:
    app.dependency_overrides.clear()
    response = TestClient(app).get("/websites")
    assert response.status_code == 503
