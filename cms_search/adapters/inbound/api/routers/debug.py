"""Diagnostics for image extraction and the contents of the vector index."""

from typing import Any

from fastapi import APIRouter, Depends, Query

from .....common.timeouts import bounded
from .....composition.container import Container
from .....core.domain import VectorMatch
from .....core.domain.exceptions import VectorStoreTimeoutError
from .....core.services.image_extractor import public_field_names
from ..deps import get_container
from ..models import (
    EntryInspection,
    EntryInspectionResponse,
    ErrorResponse,
    IndexedRecordSample,
    IndexedRecordSampleResponse,
)

router = APIRouter(prefix="/debug", tags=["debug"])


def _inspect(
    container: Container,
    entry: dict[str, Any],
    content_type: str,
    include_entry: bool = False,
) -> EntryInspection:
    title = entry.get("title")
    return EntryInspection(
        uid=entry.get("uid"),
        title=title if isinstance(title, str) else None,
        mapped_type=container.type_mapper.map(content_type).value,
        extracted_images=container.image_extractor.extract(entry),
        all_fields=public_field_names(entry),
        image_field_analysis=container.image_extractor.analyze_fields(entry),
        entry=entry if include_entry else None,
    )


@router.get(
    "/entries/{content_type}",
    response_model=EntryInspectionResponse,
    responses={404: {"model": ErrorResponse, "description": "Content type not found"}},
)
async def inspect_entries(
    content_type: str,
    locale: str | None = None,
    limit: int = Query(3, ge=1, le=50),
    container: Container = Depends(get_container),
) -> EntryInspectionResponse:
    """Show image extraction for the first few entries of a content type."""
    entries = await container.sync_service.fetch_entries(
        content_type,
        locale or container.settings.default_locale,
        limit=limit,
    )
    return EntryInspectionResponse(
        content_type=content_type,
        total_entries=len(entries),
        analysis=[_inspect(container, entry, content_type) for entry in entries],
    )


@router.get(
    "/entries/{content_type}/{entry_uid}",
    response_model=EntryInspectionResponse,
    responses={404: {"model": ErrorResponse, "description": "Entry not found"}},
)
async def inspect_entry(
    content_type: str,
    entry_uid: str,
    locale: str | None = None,
    container: Container = Depends(get_container),
) -> EntryInspectionResponse:
    """Show image extraction for one entry, including its raw fields."""
    entry = await container.sync_service.fetch_entry(
        content_type,
        entry_uid,
        locale or container.settings.default_locale,
    )
    return EntryInspectionResponse(
        content_type=content_type,
        total_entries=1,
        analysis=[_inspect(container, entry, content_type, include_entry=True)],
    )


def _summarize(match: VectorMatch) -> IndexedRecordSample:
    metadata = match.metadata
    return IndexedRecordSample(
        id=match.id,
        title=metadata.get("title"),
        type=metadata.get("type"),
        score=match.score,
        has_images=bool(metadata.get("primary_image") or metadata.get("all_images")),
        image_analyzed=bool(metadata.get("image_analysis")),
    )


@router.get(
    "/vectors",
    response_model=IndexedRecordSampleResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Search index not found"},
        503: {"model": ErrorResponse, "description": "Vector index unavailable"},
    },
)
async def sample_vectors(
    limit: int = Query(10, ge=1, le=100),
    container: Container = Depends(get_container),
) -> IndexedRecordSampleResponse:
    """List a few stored records with their image flags."""
    matches = await bounded(
        container.vector_store.sample(limit),
        container.settings.provider_timeout_seconds,
        VectorStoreTimeoutError,
        "Listing indexed records",
    )
    samples = [_summarize(match) for match in matches]
    return IndexedRecordSampleResponse(sample_vectors=samples, total_found=len(samples))
