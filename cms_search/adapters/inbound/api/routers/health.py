"""Health and index status endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from ..... import __version__
from .....composition.container import Container
from ..deps import get_container
from ..models import ErrorResponse, HealthResponse, IndexStatsResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(container: Container = Depends(get_container)) -> HealthResponse:
    """Feature-flag summary; performs no provider calls."""
    image_analysis = container.image_analyzer.enabled
    return HealthResponse(
        status="OK",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
        region=container.settings.contentstack_region,
        features={
            "semantic_search": True,
            "image_analysis": image_analysis,
            "multimodal_search": True,
            "webhook_integration": bool(container.settings.webhook_password),
        },
    )


@router.get(
    "/index/stats",
    response_model=IndexStatsResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Index not found"},
        503: {"model": ErrorResponse, "description": "Vector index unavailable"},
    },
)
async def index_stats(container: Container = Depends(get_container)) -> IndexStatsResponse:
    """Describe the vector index (record count, dimension, status)."""
    stats = await container.vector_store.describe()
    return IndexStatsResponse(index_stats=stats, has_data=bool(stats.get("hasData")))
