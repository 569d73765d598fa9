"""Temporal worker entry point.

Invoked as:  python -m release_notifier.worker

Configures structured JSON logging, connects to the Temporal server, builds
the dispatcher, makes sure the scrape schedule exists, registers the scrape
cycle workflow and activity, and begins polling the task queue.
"""

import asyncio
from datetime import timedelta

import structlog
from temporalio.client import (
    Client,
    Schedule,
    ScheduleActionStartWorkflow,
    ScheduleAlreadyRunningError,
    ScheduleIntervalSpec,
    ScheduleOverlapPolicy,
    SchedulePolicy,
    ScheduleSpec,
)
from temporalio.contrib.pydantic import pydantic_data_converter
from temporalio.worker import Worker

from release_notifier.activities.scrape_cycle import ScrapeCycleActivities
from release_notifier.config import constants
from release_notifier.container import build_container
from release_notifier.logging_config import configure_logging
from release_notifier.workflows.scrape_cycle import ScrapeNewReleasesWorkflow


def build_scrape_schedule() -> Schedule:
    """One cycle every SCRAPE_INTERVAL_MINUTES; a due run is skipped while one is in flight."""
    return Schedule(
        action=ScheduleActionStartWorkflow(
            ScrapeNewReleasesWorkflow.run,
            id=constants.SCRAPE_WORKFLOW_ID,
            task_queue=constants.TEMPORAL_TASK_QUEUE,
        ),
        spec=ScheduleSpec(
            intervals=[ScheduleIntervalSpec(every=timedelta(minutes=constants.SCRAPE_INTERVAL_MINUTES))],
        ),
        policy=SchedulePolicy(overlap=ScheduleOverlapPolicy.SKIP),
    )


async def ensure_scrape_schedule(client: Client, log) -> None:
    try:
        await client.create_schedule(constants.SCRAPE_SCHEDULE_ID, build_scrape_schedule())
        log.info(
            "worker.schedule_created",
            schedule_id=constants.SCRAPE_SCHEDULE_ID,
            interval_minutes=constants.SCRAPE_INTERVAL_MINUTES,
        )
    except ScheduleAlreadyRunningError:
        log.info("worker.schedule_exists", schedule_id=constants.SCRAPE_SCHEDULE_ID)


async def main() -> None:
    configure_logging()

    log = structlog.get_logger().bind(
        service=constants.SERVICE_NAME,
        component="worker",
        task_queue=constants.TEMPORAL_TASK_QUEUE,
    )

    log.info(
        "worker.connecting",
        temporal_address=constants.TEMPORAL_ADDRESS,
        namespace=constants.TEMPORAL_NAMESPACE,
    )

    client = await Client.connect(
        constants.TEMPORAL_ADDRESS,
        namespace=constants.TEMPORAL_NAMESPACE,
        data_converter=pydantic_data_converter,
    )

    container = build_container()
    scrape_activities = ScrapeCycleActivities(container.dispatcher)

    await ensure_scrape_schedule(client, log)

    log.info("worker.starting")

    worker = Worker(
        client,
        task_queue=constants.TEMPORAL_TASK_QUEUE,
        workflows=[ScrapeNewReleasesWorkflow],
        activities=[scrape_activities.scrape_new_releases_activity],
    )

    log.info("worker.polling")

    try:
        await worker.run()
    finally:
        log.info("worker.shutting_down", message="Closing browser and database pool")
        await container.close()
        log.info("worker.shutdown_complete")


if __name__ == "__main__":
    asyncio.run(main())
