"""Website query handler."""

from __future__ import annotations

from release_notifier.application.ports import WebsiteRepository
from release_notifier.application.requests import (
    AvailableWebsites,
    AvailableWebsitesQuery,
    WebsiteInformation,
)
from release_notifier.domain.results import Result


class AvailableWebsitesQueryHandler:
    def __init__(self, website_repository: WebsiteRepository) -> None:
        self._websites = website_repository

    async def handle(self, query: AvailableWebsitesQuery) -> Result[AvailableWebsites]:
        websites = sorted(await self._websites.list_all(), key=lambda website: website.name.casefold())
        return Result.ok(
            AvailableWebsites(
                websites=[WebsiteInformation(name=website.name, url=website.url) for website in websites]
            )
        )
