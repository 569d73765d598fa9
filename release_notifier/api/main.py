"""FastAPI application entry point.

Application lifecycle:
  1. Startup: configure logging, connect to Temporal, build the container
  2. Runtime: dispatch commands and queries, trigger scrape cycles
  3. Shutdown: close the browser and the database pool
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI
from temporalio.client import Client
from temporalio.contrib.pydantic import pydantic_data_converter

from release_notifier.api.routers import (
    media_router,
    scrape_router,
    subscriptions_router,
    websites_router,
)
from release_notifier.config import constants
from release_notifier.container import build_container
from release_notifier.logging_config import configure_logging


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the process singletons and tear them down on shutdown.

    The Temporal client and the container (dispatcher, browser, engine) are
    shared across all requests through ``app.state``.
    """
    configure_logging()

    log = structlog.get_logger().bind(
        service=constants.SERVICE_NAME,
        component="api",
    )

    log.info(
        "api.startup.connecting_temporal",
        temporal_address=constants.TEMPORAL_ADDRESS,
        namespace=constants.TEMPORAL_NAMESPACE,
    )

    try:
        app.state.temporal_client = await Client.connect(
            constants.TEMPORAL_ADDRESS,
            namespace=constants.TEMPORAL_NAMESPACE,
            data_converter=pydantic_data_converter,
        )
    except Exception as exc:
        log.error(
            "api.startup.failed",
            error=str(exc),
            error_type=type(exc).__name__,
        )
        raise

    container = build_container()
    app.state.container = container
    log.info("api.startup.complete", temporal_connected=True)

    yield

    log.info("api.shutdown.closing_container")
    app.state.container = None
    await container.close()
    log.info("api.shutdown.complete")


app = FastAPI(
    title="Release Notifier",
    description="Tracks serialized media across websites and notifies subscribers of new releases.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(media_router)
app.include_router(websites_router)
app.include_router(subscriptions_router)
app.include_router(scrape_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": constants.SERVICE_NAME}
