"""Domain exceptions.

Business-rule failures are never raised: they travel as ``Result`` values
(see ``release_notifier.domain.results``). The exceptions below are for
infrastructure faults and programming errors only.

Hierarchy:
    ReleaseNotifierError                — root for all application errors
    ├── ScraperError                    — fetching or parsing a source page
    │   ├── PageLoadError              — navigation / HTTP / browser failure
    │   └── ReleaseParseError          — page loaded but no release marker found
    ├── PersistenceError                — database persistence errors
    │   └── ConcurrencyConflictError    — optimistic version check lost
    └── DispatcherError                 — request routing misconfiguration
        ├── UnregisteredRequestError   — no handler for a request type
        └── DispatcherConfigurationError — two handlers for one request type

Rules:
- No bare `except` anywhere in the codebase — always catch a specific type.
- Scraper strategies convert ScraperError into a ``ScrapeFailed`` Result; the
  orchestrator never sees these exceptions.
- DispatcherError is fatal: it is raised through the dispatcher untouched,
  every other exception escaping a handler becomes an ``Unexpected`` Result.
"""

from __future__ import annotations


class ReleaseNotifierError(Exception):
    """Root exception for all application-level errors."""


# ---------------------------------------------------------------------------
# Scraper errors
# ---------------------------------------------------------------------------


class ScraperError(ReleaseNotifierError):
    """Base class for failures while fetching or parsing a source page."""


class PageLoadError(ScraperError):
    """Raised when a source page cannot be loaded.

    This covers:
    - Playwright runtime / Chromium failed to start
    - Network timeout or DNS failure during page.goto()
    - HTTP error status (4xx / 5xx) from the source
    """


class ReleaseParseError(ScraperError):
    """Raised when a loaded page does not contain a usable release marker.

    This covers:
    - The site-specific chapter selector matched nothing.
    - The matched text contains no chapter number.
    - The chapter anchor carries no href.
    """


# ---------------------------------------------------------------------------
# Persistence errors
# ---------------------------------------------------------------------------


class PersistenceError(ReleaseNotifierError):
    """Base class for all database persistence errors."""


class ConcurrencyConflictError(PersistenceError):
    """Raised when a versioned update matched no row.

    Another writer saved the same entity after it was loaded. The caller may
    reload and re-apply its change.
    """


# ---------------------------------------------------------------------------
# Dispatcher errors
# ---------------------------------------------------------------------------


class DispatcherError(ReleaseNotifierError):
    """Base class for request routing misconfiguration."""


class UnregisteredRequestError(DispatcherError):
    """Raised when a request type has no registered handler."""


class DispatcherConfigurationError(DispatcherError):
    """Raised when a second handler is registered for the same request type."""
