"""FastAPI dependency injection providers.

Both singletons are created once in the lifespan context manager and stored
on ``app.state``. Tests substitute them through ``app.dependency_overrides``.

Example usage:
    @router.get("/websites")
    async def list_websites(dispatcher: DispatcherDep):
        return await dispatcher.dispatch(AvailableWebsitesQuery())
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request, status
from temporalio.client import Client

from release_notifier.application.dispatcher import Dispatcher


def get_dispatcher(request: Request) -> Dispatcher:
    """Dependency that provides the process-wide Dispatcher.

    Raises:
        HTTPException: 503 Service Unavailable if the container is not built yet.
    """
    container = getattr(request.app.state, "container", None)

    if container is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting or shutting down.",
        )

    return container.dispatcher


def get_temporal_client(request: Request) -> Client:
    """Dependency that provides the singleton Temporal client.

    Raises:
        HTTPException: 503 Service Unavailable if client not initialized.
    """
    client: Optional[Client] = getattr(request.app.state, "temporal_client", None)

    if client is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Temporal client not initialized. Service is starting or shutting down.",
        )

    return client


# Type aliases for use in route handler signatures
DispatcherDep = Annotated[Dispatcher, Depends(get_dispatcher)]
TemporalClientDep = Annotated[Client, Depends(get_temporal_client)]
