"""Scrape cycle activity.

The only side-effecting step of ``ScrapeNewReleasesWorkflow``: it dispatches
``ScrapeNewReleasesCommand`` in the worker process and returns a
serialisable summary of the cycle.

Outcome mapping:
    success                → ScrapeCycleSummary(succeeded=True, report=...)
    business failure       → ScrapeCycleSummary(succeeded=False, error_code=...)
                             (e.g. every target failed: the cycle ran to the
                             end, there is nothing to retry)
    Unexpected failure     → ApplicationError(non_retryable=True), so the
                             workflow run is marked failed in Temporal
"""

from __future__ import annotations

import time
from datetime import timedelta
from typing import Optional

import structlog
from pydantic import BaseModel
from temporalio import activity
from temporalio.common import RetryPolicy
from temporalio.exceptions import ApplicationError

from release_notifier.application.dispatcher import Dispatcher
from release_notifier.application.requests import ScrapeCycleReport, ScrapeNewReleasesCommand
from release_notifier.config import constants
from release_notifier.domain.results import ErrorCode

# ---------------------------------------------------------------------------
# Activity execution options
# Imported by the workflow when calling workflow.execute_activity().
# ---------------------------------------------------------------------------

#: A cycle is never retried: the next scheduled cycle is the retry.
SCRAPE_CYCLE_RETRY_POLICY = RetryPolicy(maximum_attempts=1)

#: Time budget for one whole cycle. Individual fetches are bounded by
#: SCRAPE_TIMEOUT_SECONDS inside the handler; this only catches a wedged worker.
SCRAPE_CYCLE_TIMEOUT = timedelta(minutes=max(5, constants.SCRAPE_INTERVAL_MINUTES))


class ScrapeCycleSummary(BaseModel):
    succeeded: bool
    report: Optional[ScrapeCycleReport] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


class ScrapeCycleActivities:
    """Temporal activity class wrapping the dispatcher.

    One instance is registered with the worker; the dispatcher (and its
    cycle guard) is shared by every activity invocation in the process.
    """

    def __init__(self, dispatcher: Dispatcher) -> None:
        self._dispatcher = dispatcher

    @activity.defn(name="scrape_new_releases_activity")
    async def scrape_new_releases_activity(self) -> ScrapeCycleSummary:
        """Run one scrape cycle.

        Returns:
            ScrapeCycleSummary describing the finished (or skipped) cycle.

        Raises:
            ApplicationError(non_retryable=True): the handler hit an
                unexpected fault (database down, programming error).
        """
        info = activity.info()
        log = structlog.get_logger().bind(
            service=constants.SERVICE_NAME,
            activity_name=info.activity_type,
            workflow_id=info.workflow_id,
            run_id=info.workflow_run_id,
            activity_id=info.activity_id,
        )

        log.info("scrape_cycle_activity.starting", status="starting")
        started_at = time.monotonic()

        result = await self._dispatcher.dispatch(ScrapeNewReleasesCommand())

        duration_ms = int((time.monotonic() - started_at) * 1000)

        if result.is_success:
            report: ScrapeCycleReport = result.value
            log.info(
                "scrape_cycle_activity.completed",
                status="skipped" if report.skipped else "completed",
                targets_attempted=report.targets_attempted,
                targets_failed=len(report.targets_failed),
                updated_media=len(report.updated_media),
                duration_ms=duration_ms,
            )
            return ScrapeCycleSummary(succeeded=True, report=report)

        error = result.error
        if error.code is ErrorCode.UNEXPECTED:
            log.error(
                "scrape_cycle_activity.failed",
                status="failed",
                error_code=error.code.value,
                error=error.message,
                duration_ms=duration_ms,
            )
            raise ApplicationError(error.message, type=error.code.value, non_retryable=True)

        log.warning(
            "scrape_cycle_activity.completed_with_failure",
            status="failed",
            error_code=error.code.value,
            error=error.message,
            duration_ms=duration_ms,
        )
        return ScrapeCycleSummary(
            succeeded=False,
            error_code=error.code.value,
            error_message=error.message,
        )
