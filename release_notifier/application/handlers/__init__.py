"""Command and query handlers.

Each handler is a class whose dependencies are injected at startup and whose
``handle`` coroutine is registered with the Dispatcher.
"""

from release_notifier.application.handlers.media import (
    AddMediaHandler,
    AddScrapeTargetHandler,
    AvailableMediaQueryHandler,
    MediaQueryHandler,
)
from release_notifier.application.handlers.scrape import ScrapeNewReleasesHandler
from release_notifier.application.handlers.subscriber import (
    MediaSubscriptionsQueryHandler,
    SubscribeMediaHandler,
    UnsubscribeMediaHandler,
)
from release_notifier.application.handlers.website import AvailableWebsitesQueryHandler

__all__ = [
    "AddMediaHandler",
    "AddScrapeTargetHandler",
    "AvailableMediaQueryHandler",
    "AvailableWebsitesQueryHandler",
    "MediaQueryHandler",
    "MediaSubscriptionsQueryHandler",
    "ScrapeNewReleasesHandler",
    "SubscribeMediaHandler",
    "UnsubscribeMediaHandler",
]
