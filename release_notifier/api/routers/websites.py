"""Website listing endpoint."""

from fastapi import APIRouter, status

from release_notifier.api.dependencies import DispatcherDep
from release_notifier.api.errors import unwrap
from release_notifier.application.requests import AvailableWebsites, AvailableWebsitesQuery

router = APIRouter(prefix="/websites", tags=["websites"])


@router.get(
    "",
    response_model=AvailableWebsites,
    status_code=status.HTTP_200_OK,
    summary="List supported websites",
)
async def list_websites(dispatcher: DispatcherDep) -> AvailableWebsites:
    return unwrap(await dispatcher.dispatch(AvailableWebsitesQuery()))
