"""Contentstack webhook endpoints."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Request

from .....core.domain.exceptions import PayloadShapeError
from .....core.services.webhook_dispatcher import WebhookDispatcher
from ..deps import get_webhook_dispatcher, require_webhook_auth
from ..models import ErrorResponse, WebhookResponse, WebhookTestResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhook", tags=["webhook"])

SUPPORTED_EVENTS = ["entry.publish", "entry.update", "entry.unpublish", "entry.delete"]
ASSET_EVENTS = ["asset.publish", "asset.update", "asset.unpublish", "asset.delete"]


@router.post(
    "/contentstack",
    response_model=WebhookResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Unrecognized payload shape"},
        401: {"model": ErrorResponse, "description": "Authentication failed"},
        500: {"model": ErrorResponse, "description": "Indexing failed"},
    },
)
async def contentstack_webhook(
    request: Request,
    _: str = Depends(require_webhook_auth),
    dispatcher: WebhookDispatcher = Depends(get_webhook_dispatcher),
) -> WebhookResponse:
    """Keep the index in step with CMS publish/update/unpublish/delete events."""
    try:
        payload = await request.json()
    except ValueError as e:
        raise PayloadShapeError("Webhook body is not valid JSON", cause=e) from e

    outcome = await dispatcher.handle(payload)
    return WebhookResponse(
        message=outcome.message,
        event=outcome.event,
        action=outcome.action.value,
        entry_uid=outcome.entry_uid,
        content_type=outcome.content_type,
        mapped_type=outcome.mapped_type,
        asset_uid=outcome.asset_uid,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/test", response_model=WebhookTestResponse)
async def webhook_test() -> WebhookTestResponse:
    return WebhookTestResponse(
        status="Webhook endpoint is active",
        timestamp=datetime.now(UTC).isoformat(),
        authentication="Basic Auth required",
        supported_events=SUPPORTED_EVENTS,
        asset_events_handled=ASSET_EVENTS,
    )
