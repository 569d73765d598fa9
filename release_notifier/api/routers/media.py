"""Media endpoints.

Exposes:
    GET  /media                              — Page through tracked media.
    GET  /media/{media_id}                   — Media details with its scrape targets.
    POST /media                              — Track a new media from a website page.
    POST /media/{media_name}/scrape-targets  — Track an existing media on another website.
"""

from __future__ import annotations

import uuid

import structlog
from fastapi import APIRouter, Path, Query, Response, status

from release_notifier.api.dependencies import DispatcherDep
from release_notifier.api.errors import unwrap
from release_notifier.api.models import AddMediaRequest, AddMediaResponse, AddScrapeTargetRequest
from release_notifier.application.requests import (
    AddMediaCommand,
    AddScrapeTargetCommand,
    AvailableMedia,
    AvailableMediaQuery,
    MediaDetails,
    MediaQuery,
)
from release_notifier.config import constants

router = APIRouter(prefix="/media", tags=["media"])


@router.get(
    "",
    response_model=AvailableMedia,
    status_code=status.HTTP_200_OK,
    summary="List tracked media",
    description="Returns one page of tracked media ordered by name, plus the total count.",
)
async def list_media(
    dispatcher: DispatcherDep,
    page_index: int = Query(default=1, ge=1, description="1-indexed page number."),
    page_size: int = Query(default=25, ge=1, le=100, description="Media per page."),
) -> AvailableMedia:
    result = await dispatcher.dispatch(AvailableMediaQuery(page_index=page_index, page_size=page_size))
    return unwrap(result)


@router.get(
    "/{media_id}",
    response_model=MediaDetails,
    status_code=status.HTTP_200_OK,
    summary="Get media details",
)
async def get_media(
    dispatcher: DispatcherDep,
    media_id: uuid.UUID = Path(description="Media id."),
) -> MediaDetails:
    result = await dispatcher.dispatch(MediaQuery(media_id=media_id))
    return unwrap(result)


@router.post(
    "",
    response_model=AddMediaResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Track a new media",
    description=(
        "Scrapes the page at `relative_path` on the named website. The media "
        "name is read from the page; if a media with that name is already tracked "
        "the page is added to it as a new scrape target."
    ),
)
async def add_media(body: AddMediaRequest, dispatcher: DispatcherDep) -> AddMediaResponse:
    log = structlog.get_logger().bind(
        service=constants.SERVICE_NAME,
        endpoint="/media",
        website_name=body.website_name,
        relative_path=body.relative_path,
    )
    log.info("api.media.add_request")

    result = await dispatcher.dispatch(
        AddMediaCommand(website_name=body.website_name, relative_path=body.relative_path)
    )
    media_id = unwrap(result)

    log.info("api.media.added", media_id=str(media_id))
    return AddMediaResponse(id=media_id)


@router.post(
    "/{media_name}/scrape-targets",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Add a scrape target to a media",
)
async def add_scrape_target(
    body: AddScrapeTargetRequest,
    dispatcher: DispatcherDep,
    media_name: str = Path(description="Name of a tracked media (case-insensitive)."),
) -> Response:
    log = structlog.get_logger().bind(
        service=constants.SERVICE_NAME,
        endpoint="/media/{media_name}/scrape-targets",
        media_name=media_name,
        website_name=body.website_name,
    )
    log.info("api.scrape_target.add_request", relative_path=body.relative_path)

    result = await dispatcher.dispatch(
        AddScrapeTargetCommand(
            media_name=media_name,
            website_name=body.website_name,
            relative_path=body.relative_path,
        )
    )
    unwrap(result)

    log.info("api.scrape_target.added")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
