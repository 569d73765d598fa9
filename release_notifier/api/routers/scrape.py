"""Scrape cycle triggering endpoint.

POST /scrape triggers the scrape schedule instead of starting a workflow of
its own. Manual and scheduled cycles therefore share the schedule's overlap
policy (SKIP): a trigger while a cycle is running never starts a second one,
whichever worker process would pick it up.
"""

import structlog
from fastapi import APIRouter, HTTPException, status
from temporalio.client import ScheduleOverlapPolicy
from temporalio.service import RPCError

from release_notifier.api.dependencies import TemporalClientDep
from release_notifier.api.models import ScrapeResponse
from release_notifier.config import constants

router = APIRouter(prefix="/scrape", tags=["scrape"])


@router.post(
    "",
    response_model=ScrapeResponse,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Trigger a scrape cycle now",
    description=(
        "Triggers the scrape schedule once via Temporal and returns immediately. "
        "Returns 409 if a cycle is already running."
    ),
)
async def trigger_scrape(client: TemporalClientDep) -> ScrapeResponse:
    """Trigger a scrape cycle.

    Raises:
        HTTPException 409: A cycle is already running.
        HTTPException 503: Temporal service unavailable or schedule missing.
    """
    schedule_id = constants.SCRAPE_SCHEDULE_ID
    log = structlog.get_logger().bind(
        service=constants.SERVICE_NAME,
        endpoint="/scrape",
        schedule_id=schedule_id,
    )

    log.info("api.scrape.request")

    handle = client.get_schedule_handle(schedule_id)
    try:
        description = await handle.describe()
        running = [action.workflow_id for action in description.info.running_actions]
        if not running:
            # SKIP still drops this trigger if a cycle started in the meantime.
            await handle.trigger(overlap=ScheduleOverlapPolicy.SKIP)
    except RPCError as exc:
        log.error(
            "api.scrape.temporal_rpc_error",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"Temporal service unavailable: {exc}",
        ) from exc

    if running:
        log.info("api.scrape.already_running", running_workflow_ids=running)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="A scrape cycle is already running.",
        )

    log.info("api.scrape.triggered")
    return ScrapeResponse(schedule_id=schedule_id, status="TRIGGERED")
