"""Activities layer public API.

Import activity classes and execution option constants from here.
"""

from release_notifier.activities.scrape_cycle import (
    SCRAPE_CYCLE_RETRY_POLICY,
    SCRAPE_CYCLE_TIMEOUT,
    ScrapeCycleActivities,
    ScrapeCycleSummary,
)

__all__ = [
    "ScrapeCycleActivities",
    "ScrapeCycleSummary",
    "SCRAPE_CYCLE_RETRY_POLICY",
    "SCRAPE_CYCLE_TIMEOUT",
]
