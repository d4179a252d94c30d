"""Manual reindex endpoints."""

import logging

from fastapi import APIRouter, Body, Depends

from .....composition.container import Container
from .....core.domain import IndexStatus
from .....core.services.sync_service import ContentSyncService
from ..deps import get_container, get_sync_service, require_webhook_auth
from ..models import (
    BulkReindexRequest,
    BulkReindexResponse,
    ErrorResponse,
    ReindexRequest,
    ReindexResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reindex"], dependencies=[Depends(require_webhook_auth)])

MAX_REPORTED_ERRORS = 10


@router.post(
    "/reindex/{content_type}/{entry_uid}",
    response_model=ReindexResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Authentication failed"},
        404: {"model": ErrorResponse, "description": "Entry not found"},
        500: {"model": ErrorResponse, "description": "Reindex failed"},
    },
)
async def reindex_entry(
    content_type: str,
    entry_uid: str,
    request: ReindexRequest | None = Body(None),
    sync: ContentSyncService = Depends(get_sync_service),
    container: Container = Depends(get_container),
) -> ReindexResponse:
    """Fetch one entry fresh from the CMS and reindex it synchronously."""
    locale = (request.locale if request else None) or container.settings.default_locale
    logger.info("Manual reindex requested for %s:%s (%s)", content_type, entry_uid, locale)

    outcome = await sync.reindex_entry(content_type, entry_uid, locale)
    skipped = outcome.status is IndexStatus.SKIPPED
    return ReindexResponse(
        success=True,
        message=f"Entry skipped: {outcome.reason}" if skipped else "Entry reindexed successfully",
        entry_uid=entry_uid,
        content_type=content_type,
        mapped_type=outcome.mapped_type.value if outcome.mapped_type else None,
        locale=locale,
        status=outcome.status.value,
        image_count=outcome.image_count,
        image_analyzed=outcome.image_analyzed,
    )


@router.post(
    "/reindex-content-type/{content_type}",
    response_model=BulkReindexResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Authentication failed"},
        404: {"model": ErrorResponse, "description": "No entries for content type"},
    },
)
async def reindex_content_type(
    content_type: str,
    request: BulkReindexRequest | None = Body(None),
    sync: ContentSyncService = Depends(get_sync_service),
    container: Container = Depends(get_container),
) -> BulkReindexResponse:
    """Reindex up to ``limit`` entries of a content type, one at a time."""
    request = request or BulkReindexRequest()
    locale = request.locale or container.settings.default_locale
    logger.info("Bulk reindex requested for %s (%s, limit=%d)", content_type, locale, request.limit)

    report = await sync.reindex_content_type(content_type, locale, limit=request.limit)
    return BulkReindexResponse(
        message="Bulk reindex completed",
        content_type=content_type,
        locale=locale,
        total_entries=report.total,
        success_count=report.succeeded,
        skipped_count=report.skipped,
        error_count=report.failed,
        images_analyzed=report.images_analyzed,
        errors=report.errors[:MAX_REPORTED_ERRORS],
    )
