"""Semantic search endpoint."""

import logging

from fastapi import APIRouter, Depends

from .....core.domain import SearchQuery, SearchResponse, SearchResult
from .....core.services.search_service import SearchService
from ..deps import get_search_service
from ..models import (
    ErrorResponse,
    SearchContextModel,
    SearchFilters,
    SearchRequest,
    SearchResponseModel,
    SearchResultModel,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["search"])


def _result_model(result: SearchResult) -> SearchResultModel:
    return SearchResultModel(
        id=result.id,
        title=result.title,
        type=result.type,
        snippet=result.snippet,
        locale=result.locale,
        similarity=result.similarity,
        relevance=result.relevance,
        original_score=result.original_score,
        date=result.date,
        last_modified=result.date,
        url=result.url,
        content_type_uid=result.content_type_uid,
        tags=result.tags,
        category=result.category,
        price=result.price,
        duration=result.duration,
        primary_image=result.primary_image,
        all_images=result.all_images,
        image_count=result.image_count,
        image_analysis=result.image_analysis,
        has_images=result.has_images,
        image_analyzed=result.image_analyzed,
        visual_match=result.visual_match,
        visual_query_match=result.visual_query_match,
    )


def to_response_model(response: SearchResponse) -> SearchResponseModel:
    context = response.search_context
    return SearchResponseModel(
        results=[_result_model(result) for result in response.results],
        query=response.query,
        total_results=response.total_results,
        search_time=response.search_time_ms,
        search_context=SearchContextModel(
            is_visual_query=context.is_visual_query,
            visual_confidence=context.visual_confidence,
            matched_visual_keywords=context.matched_visual_keywords,
            multimodal_results_count=context.multimodal_results_count,
            analyzed_image_count=context.analyzed_image_count,
            total_images_found=context.total_images_found,
            has_multimodal_results=context.has_multimodal_results,
        ),
        filters=SearchFilters(
            content_types=response.content_types or "all",
            locales=response.locales or "all",
        ),
    )


@router.post(
    "/search",
    response_model=SearchResponseModel,
    responses={
        400: {"model": ErrorResponse, "description": "Empty query"},
        404: {"model": ErrorResponse, "description": "Search index not found"},
        503: {"model": ErrorResponse, "description": "Embedding or index provider unavailable"},
        500: {"model": ErrorResponse, "description": "Internal server error"},
    },
)
async def search(
    request: SearchRequest,
    service: SearchService = Depends(get_search_service),
) -> SearchResponseModel:
    """Search CMS content with a natural-language query.

    Errors propagate to the global handlers, which render them with
    ``error`` and ``details``.
    """
    response = await service.search(
        SearchQuery(
            query=request.query or "",
            content_types=request.content_types,
            locales=request.locales,
        )
    )
    return to_response_model(response)
