"""API request and response models.

Query responses reuse the application read models directly
(``release_notifier.application.requests``); only the HTTP-specific bodies
live here.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# POST /media, POST /media/{name}/scrape-targets
# ---------------------------------------------------------------------------


class AddMediaRequest(BaseModel):
    """Request body for POST /media.

    The media name is read from the page itself during the initial scrape.
    """

    website_name: str = Field(min_length=1, description="Name of a known website, e.g. 'AsuraScans'.")
    relative_path: str = Field(min_length=1, description="Path of the media page relative to the website url.")


class AddMediaResponse(BaseModel):
    id: uuid.UUID = Field(description="Id of the created (or extended) media.")


class AddScrapeTargetRequest(BaseModel):
    website_name: str = Field(min_length=1)
    relative_path: str = Field(min_length=1)


# ---------------------------------------------------------------------------
# POST /scrape
# ---------------------------------------------------------------------------


class ScrapeResponse(BaseModel):
    """Response body for POST /scrape.

    Returned immediately after the scrape schedule was triggered.
    """

    schedule_id: str = Field(description="Temporal schedule that runs the scrape cycles.")
    status: str = Field(description="Always 'TRIGGERED' for successful requests.")
