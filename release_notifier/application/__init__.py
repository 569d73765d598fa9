"""Application layer public API.

Import the dispatcher, request types and collaborators from here.
"""

from release_notifier.application.cycle_guard import CycleGuard
from release_notifier.application.dispatcher import Dispatcher
from release_notifier.application.notifications import (
    LoggingNotificationTransport,
    NotificationFanout,
)
from release_notifier.application.requests import (
    AddMediaCommand,
    AddScrapeTargetCommand,
    AvailableMediaQuery,
    AvailableWebsitesQuery,
    MediaQuery,
    MediaSubscriptionsQuery,
    ScrapeCycleReport,
    ScrapeNewReleasesCommand,
    SubscribeMediaCommand,
    UnsubscribeMediaCommand,
)

__all__ = [
    "CycleGuard",
    "Dispatcher",
    "LoggingNotificationTransport",
    "NotificationFanout",
    # Commands
    "AddMediaCommand",
    "AddScrapeTargetCommand",
    "ScrapeNewReleasesCommand",
    "SubscribeMediaCommand",
    "UnsubscribeMediaCommand",
    # Queries
    "AvailableMediaQuery",
    "AvailableWebsitesQuery",
    "MediaQuery",
    "MediaSubscriptionsQuery",
    "ScrapeCycleReport",
]
