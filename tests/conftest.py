"""Global pytest configuration.

Sets required environment variables at module level so that
``release_notifier.config.constants`` can be imported without raising
``KeyError``.

``constants`` reads ``os.environ["KEY"]`` (not ``.get``) at import time.
``conftest.py`` files are loaded by pytest *before* test modules are
collected or imported, which makes this the only reliable injection point
for mandatory env vars.

Rules:
- Do NOT import from ``release_notifier.*`` at module level here.
- Use ``setdefault`` so that real env vars set by CI/CD or the developer's
  shell are not clobbered.
"""

from __future__ import annotations

import os

import pytest

# ---------------------------------------------------------------------------
# Mandatory environment variables consumed by release_notifier.config.constants
# ---------------------------------------------------------------------------

_TEST_ENV: dict[str, str] = {
    # Database
    "DB_HOST": "localhost",
    "DB_PORT": "5432",
    "DB_NAME": "release_notifier_test",
    "DB_USER": "test_user",
    "DB_PASSWORD": "test_password",
    # Temporal
    "TEMPORAL_HOST": "localhost",
    "TEMPORAL_PORT": "7233",
    "TEMPORAL_NAMESPACE": "default",
    "TEMPORAL_TASK_QUEUE": "release-notifier-test",
    # Observability
    "SERVICE_NAME": "release-notifier-test",
    "LOG_LEVEL": "ERROR",
    # Scrape cycle
    "SCRAPE_INTERVAL_MINUTES": "30",
    "SCRAPE_TIMEOUT_SECONDS": "5",
    "SCRAPE_CONCURRENCY": "4",
    "NOTIFICATION_CHANNELS": "web,chat",
    # Browser (all optional in production, but explicit here for determinism)
    "BROWSER_HEADLESS": "true",
    "BROWSER_TIMEOUT_MS": "5000",
}

for _key, _value in _TEST_ENV.items():
    os.environ.setdefault(_key, _value)


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def website():
    from tests.fakes import make_website

    return make_website("AsuraScans", "https://asura.example")


@pytest.fixture
def other_website():
    from tests.fakes import make_website

    return make_website("MangaSite", "https://mangasite.example")


@pytest.fixture
def world(website, other_website):
    """In-memory repositories, scraper and transport wired into a dispatcher."""
    from tests.fakes import World

    return World(websites=[website, other_website])
