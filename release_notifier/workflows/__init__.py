"""Workflows layer public API.

Import workflow classes from here.
"""

from release_notifier.workflows.scrape_cycle import ScrapeNewReleasesWorkflow

__all__ = [
    "ScrapeNewReleasesWorkflow",
]
