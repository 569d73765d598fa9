"""Constants module.

All configuration values are sourced exclusively from environment variables.
This module is the single gateway between the environment and the codebase:

    Environment variables
            │
            ▼
    release_notifier.config.constants     ← os.environ["KEY"]
            │
            ▼
    All other modules                     ← import from release_notifier.config.constants

Rules:
- No module outside this file may call os.environ directly (Alembic env.py
  is the one exception, see its docstring).
- os.environ["KEY"] is used (not .get) for infrastructure settings so that a
  missing variable raises KeyError at import time, causing a hard startup
  failure rather than a silent runtime error.
"""

import os

# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------

DB_HOST: str = os.environ["DB_HOST"]
DB_PORT: str = os.environ["DB_PORT"]
DB_NAME: str = os.environ["DB_NAME"]
DB_USER: str = os.environ["DB_USER"]
DB_PASSWORD: str = os.environ["DB_PASSWORD"]

# Async SQLAlchemy URL (asyncpg driver), used by the application at runtime.
DATABASE_URL: str = (
    f"postgresql+asyncpg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
)

# ---------------------------------------------------------------------------
# Temporal
# ---------------------------------------------------------------------------

TEMPORAL_HOST: str = os.environ["TEMPORAL_HOST"]
TEMPORAL_PORT: str = os.environ["TEMPORAL_PORT"]

# Convenience: combined address string expected by the Temporal SDK client.
TEMPORAL_ADDRESS: str = f"{TEMPORAL_HOST}:{TEMPORAL_PORT}"

TEMPORAL_NAMESPACE: str = os.environ["TEMPORAL_NAMESPACE"]
TEMPORAL_TASK_QUEUE: str = os.environ["TEMPORAL_TASK_QUEUE"]

# ---------------------------------------------------------------------------
# Observability
# ---------------------------------------------------------------------------

SERVICE_NAME: str = os.environ["SERVICE_NAME"]
LOG_LEVEL: str = os.environ["LOG_LEVEL"]

# ---------------------------------------------------------------------------
# Scrape cycle
#
# Optional. The defaults suit a handful of tracked sources polled twice an
# hour. Raise SCRAPE_CONCURRENCY only if the sources tolerate parallel hits.
# ---------------------------------------------------------------------------

# Minutes between two scheduled scrape cycles.
SCRAPE_INTERVAL_MINUTES: int = int(os.environ.get("SCRAPE_INTERVAL_MINUTES", "30"))

# Hard upper bound for a single target fetch (navigation + parsing).
SCRAPE_TIMEOUT_SECONDS: float = float(os.environ.get("SCRAPE_TIMEOUT_SECONDS", "60"))

# Maximum number of targets fetched concurrently within one cycle.
SCRAPE_CONCURRENCY: int = int(os.environ.get("SCRAPE_CONCURRENCY", "4"))

# Schedule and workflow identifiers. Every cycle, scheduled or manual, is
# started by the schedule; Temporal suffixes the workflow id with the start time.
SCRAPE_SCHEDULE_ID: str = os.environ.get("SCRAPE_SCHEDULE_ID", "scrape-new-releases-schedule")
SCRAPE_WORKFLOW_ID: str = os.environ.get("SCRAPE_WORKFLOW_ID", "scrape-new-releases")

# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

# Comma separated channel kinds every subscriber is notified on.
NOTIFICATION_CHANNELS: tuple[str, ...] = tuple(
    channel.strip().upper()
    for channel in os.environ.get("NOTIFICATION_CHANNELS", "web,chat").split(",")
    if channel.strip()
)

# ---------------------------------------------------------------------------
# Browser (Playwright)
# ---------------------------------------------------------------------------

# Run browser in headless mode. Set to "false" locally to watch the browser.
BROWSER_HEADLESS: bool = os.environ.get("BROWSER_HEADLESS", "true").lower() == "true"

# Milliseconds to wait for a navigation or element before raising TimeoutError.
BROWSER_TIMEOUT_MS: int = int(os.environ.get("BROWSER_TIMEOUT_MS", "30000"))

BROWSER_USER_AGENT: str = os.environ.get(
    "BROWSER_USER_AGENT",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/124.0 Safari/537.36",
)
