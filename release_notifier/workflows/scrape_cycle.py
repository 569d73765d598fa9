"""Scheduled scrape cycle workflow.

Only ever started by the Temporal schedule: every SCRAPE_INTERVAL_MINUTES,
or on demand when ``POST /scrape`` triggers the schedule. The schedule's
overlap policy SKIP plus the in-process cycle guard mean at most one cycle
runs at any time.

The workflow is deterministic; the cycle itself runs inside
``scrape_new_releases_activity``. The workflow only orchestrates.
"""

from __future__ import annotations

from temporalio import workflow

with workflow.unsafe.imports_passed_through():
    from release_notifier.activities.scrape_cycle import (
        SCRAPE_CYCLE_RETRY_POLICY,
        SCRAPE_CYCLE_TIMEOUT,
        ScrapeCycleSummary,
    )


@workflow.defn(name="ScrapeNewReleasesWorkflow")
class ScrapeNewReleasesWorkflow:
    """Run one scrape cycle and return its summary.

    On failure the activity's ApplicationError propagates and Temporal marks
    the run as failed; the next scheduled run starts from scratch.
    """

    @workflow.run
    async def run(self) -> ScrapeCycleSummary:
        wf_id = workflow.info().workflow_id
        logger = workflow.logger

        logger.info(f"Scrape cycle starting: workflow_id={wf_id}")

        summary = await workflow.execute_activity(
            "scrape_new_releases_activity",
            start_to_close_timeout=SCRAPE_CYCLE_TIMEOUT,
            retry_policy=SCRAPE_CYCLE_RETRY_POLICY,
            result_type=ScrapeCycleSummary,
        )

        if summary.succeeded and summary.report is not None:
            logger.info(
                f"Scrape cycle finished: workflow_id={wf_id}, "
                f"skipped={summary.report.skipped}, "
                f"targets={summary.report.targets_attempted}, "
                f"failed={len(summary.report.targets_failed)}, "
                f"updated={len(summary.report.updated_media)}"
            )
        else:
            logger.warning(
                f"Scrape cycle finished with failure: workflow_id={wf_id}, "
                f"error_code={summary.error_code}, error={summary.error_message}"
            )

        return summary
