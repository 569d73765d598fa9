"""Domain layer public API.

Import domain types from here rather than from the submodules directly.
This keeps the internal module structure free to change without breaking callers.
"""

from release_notifier.domain.exceptions import (
    ConcurrencyConflictError,
    PageLoadError,
    ReleaseNotifierError,
    ReleaseParseError,
    ScraperError,
    UnregisteredRequestError,
)
from release_notifier.domain.invariants import Invariant
from release_notifier.domain.models import (
    CandidateRelease,
    Media,
    NotificationChannel,
    NotificationRequest,
    ReleaseDetails,
    ScrapeTarget,
    Subscriber,
    Subscription,
    Website,
)
from release_notifier.domain.results import Error, ErrorCode, Errors, Result

__all__ = [
    # Results
    "Error",
    "ErrorCode",
    "Errors",
    "Result",
    "Invariant",
    # Models
    "CandidateRelease",
    "Media",
    "NotificationChannel",
    "NotificationRequest",
    "ReleaseDetails",
    "ScrapeTarget",
    "Subscriber",
    "Subscription",
    "Website",
    # Exceptions
    "ReleaseNotifierError",
    "ScraperError",
    "PageLoadError",
    "ReleaseParseError",
    "ConcurrencyConflictError",
    "UnregisteredRequestError",
]
