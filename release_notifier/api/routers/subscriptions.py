"""Subscription endpoints.

Exposes:
    GET    /subscribers/{external_id}/subscriptions               — Media the subscriber follows.
    PUT    /subscribers/{external_id}/subscriptions/{media_name}  — Subscribe (idempotent).
    DELETE /subscribers/{external_id}/subscriptions/{media_name}  — Unsubscribe (idempotent).

``external_id`` is the identifier of the subscriber in the calling frontend
(web user id, chat user id).
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Path, Response, status

from release_notifier.api.dependencies import DispatcherDep
from release_notifier.api.errors import unwrap
from release_notifier.application.requests import (
    MediaSubscriptions,
    MediaSubscriptionsQuery,
    SubscribeMediaCommand,
    UnsubscribeMediaCommand,
)
from release_notifier.config import constants

router = APIRouter(prefix="/subscribers", tags=["subscriptions"])


@router.get(
    "/{external_id}/subscriptions",
    response_model=MediaSubscriptions,
    status_code=status.HTTP_200_OK,
    summary="List subscribed media",
    description="An unknown subscriber has no subscriptions; the response is empty, not 404.",
)
async def list_subscriptions(
    dispatcher: DispatcherDep,
    external_id: str = Path(min_length=1),
) -> MediaSubscriptions:
    return unwrap(await dispatcher.dispatch(MediaSubscriptionsQuery(external_identifier=external_id)))


@router.put(
    "/{external_id}/subscriptions/{media_name}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Subscribe to a media",
)
async def subscribe(
    dispatcher: DispatcherDep,
    external_id: str = Path(min_length=1),
    media_name: str = Path(min_length=1),
) -> Response:
    log = structlog.get_logger().bind(
        service=constants.SERVICE_NAME,
        endpoint="/subscribers/{external_id}/subscriptions/{media_name}",
        external_id=external_id,
        media_name=media_name,
    )

    unwrap(
        await dispatcher.dispatch(
            SubscribeMediaCommand(external_identifier=external_id, media_name=media_name)
        )
    )

    log.info("api.subscription.subscribed")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{external_id}/subscriptions/{media_name}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Unsubscribe from a media",
)
async def unsubscribe(
    dispatcher: DispatcherDep,
    external_id: str = Path(min_length=1),
    media_name: str = Path(min_length=1),
) -> Response:
    log = structlog.get_logger().bind(
        service=constants.SERVICE_NAME,
        endpoint="/subscribers/{external_id}/subscriptions/{media_name}",
        external_id=external_id,
        media_name=media_name,
    )

    unwrap(
        await dispatcher.dispatch(
            UnsubscribeMediaCommand(external_identifier=external_id, media_name=media_name)
        )
    )

    log.info("api.subscription.unsubscribed")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
