"""Tests for the media and website queries."""

from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from release_notifier.application.requests import (
    AvailableMediaQuery,
    AvailableWebsitesQuery,
    MediaQuery,
)
from release_notifier.domain.models import NO_RELEASE_DISPLAY
from release_notifier.domain.results import ErrorCode
from tests.fakes import make_media


class TestMediaQuery:
    async def test_returns_details_with_targets(self, world, website) -> None:
        media = world.add_media(make_media("Bleach", release=(686, 5), targets=[(website, "/bleach")]))

        result = await world.dispatcher().dispatch(MediaQuery(media_id=media.id))

        details = result.value
        assert details.name == "Bleach"
        assert details.latest_release == "Chapter 686.5"
        assert details.release_details.version == (686, 5)
        assert [(t.website_name, t.website_url, t.scrape_target_url) for t in details.scrape_target_details] == [
            ("AsuraScans", "https://asura.example", "https://asura.example/bleach")
        ]

    async def test_media_without_release(self, world) -> None:
        media = world.add_media(make_media("Bleach"))
        result = await world.dispatcher().dispatch(MediaQuery(media_id=media.id))
        assert result.value.latest_release == NO_RELEASE_DISPLAY

    async def test_unknown_id_is_not_found(self, world) -> None:
        result = await world.dispatcher().dispatch(MediaQuery(media_id=uuid.uuid4()))
        assert result.error.code is ErrorCode.NOT_FOUND


class TestAvailableMediaQuery:
    async def test_pages_by_name(self, world) -> None:
        for name in ("Naruto", "bleach", "One Piece", "Akira", "Monster"):
            world.add_media(make_media(name))

        first = await world.dispatcher().dispatch(AvailableMediaQuery(page_index=1, page_size=2))
        third = await world.dispatcher().dispatch(AvailableMediaQuery(page_index=3, page_size=2))

        assert [m.name for m in first.value.media] == ["Akira", "bleach"]
        assert [m.name for m in third.value.media] == ["One Piece"]
        assert first.value.total_result_count == 5

    async def test_page_past_the_end_is_empty(self, world) -> None:
        world.add_media(make_media("Akira"))
        result = await world.dispatcher().dispatch(AvailableMediaQuery(page_index=4, page_size=10))
        assert result.value.media == []
        assert result.value.total_result_count == 1

    def test_page_index_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            AvailableMediaQuery(page_index=0)


class TestAvailableWebsitesQuery:
    async def test_sorted_by_name(self, world) -> None:
        result = await world.dispatcher().dispatch(AvailableWebsitesQuery())
        assert [(w.name, w.url) for w in result.value.websites] == [
            ("AsuraScans", "https://asura.example"),
            ("MangaSite", "https://mangasite.example"),
        ]
