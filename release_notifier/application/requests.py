"""Command, query and read-model types.

Requests are frozen pydantic models routed by the Dispatcher on their exact
type. Commands change state, queries only read; both return a ``Result``.
Read models are the query payloads handed to the boundary (HTTP, chat).
"""

from __future__ import annotations

import uuid
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from release_notifier.domain.models import ReleaseDetails


class Request(BaseModel):
    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


class AddMediaCommand(Request):
    """Create a Media from a page on a known website, together with its first target."""

    website_name: str
    relative_path: str


class AddScrapeTargetCommand(Request):
    media_name: str
    website_name: str
    relative_path: str


class ScrapeNewReleasesCommand(Request):
    """Run one scrape cycle over every tracked target."""


class SubscribeMediaCommand(Request):
    external_identifier: str
    media_name: str


class UnsubscribeMediaCommand(Request):
    external_identifier: str
    media_name: str


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class MediaQuery(Request):
    media_id: uuid.UUID


class AvailableMediaQuery(Request):
    page_index: int = Field(default=1, ge=1, description="1-indexed page number.")
    page_size: int = Field(default=25, ge=1)


class MediaSubscriptionsQuery(Request):
    external_identifier: str


class AvailableWebsitesQuery(Request):
    pass


# ---------------------------------------------------------------------------
# Read models
# ---------------------------------------------------------------------------


class ScrapeTargetDetails(BaseModel):
    website_name: str
    website_url: str
    scrape_target_url: str


class MediaDetails(BaseModel):
    id: uuid.UUID
    name: str
    release_details: Optional[ReleaseDetails] = None
    latest_release: str = Field(description="Display string, e.g. 'Chapter 12.5'.")
    scrape_target_details: list[ScrapeTargetDetails]


class MediaInformation(BaseModel):
    id: uuid.UUID
    name: str


class AvailableMedia(BaseModel):
    media: list[MediaInformation]
    total_result_count: int


class SubscribedMedia(BaseModel):
    media_id: uuid.UUID
    media_name: str


class MediaSubscriptions(BaseModel):
    subscribed_to_media: list[SubscribedMedia]


class WebsiteInformation(BaseModel):
    name: str
    url: str


class AvailableWebsites(BaseModel):
    websites: list[WebsiteInformation]


class TargetFailure(BaseModel):
    url: str
    reason: str


class ScrapeCycleReport(BaseModel):
    """Outcome of one scrape cycle, for operators and the scheduler."""

    skipped: bool = False
    targets_attempted: int = 0
    targets_failed: list[TargetFailure] = Field(default_factory=list)
    updated_media: list[str] = Field(default_factory=list)
    notifications_sent: int = 0
