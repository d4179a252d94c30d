"""On-demand image analysis endpoint."""

import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from .....core.domain.exceptions import MissingFieldError
from .....core.services.image_analyzer import ImageAnalyzer
from ..deps import get_image_analyzer
from ..models import AnalyzeImageRequest, AnalyzeImageResponse, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])

NO_ANALYSIS = "Unable to analyze image"


@router.post(
    "/analyze-image",
    response_model=AnalyzeImageResponse,
    responses={
        400: {"model": ErrorResponse, "description": "imageUrl missing"},
        503: {"model": ErrorResponse, "description": "Image analysis disabled"},
    },
)
async def analyze_image(
    request: AnalyzeImageRequest,
    analyzer: ImageAnalyzer = Depends(get_image_analyzer),
) -> AnalyzeImageResponse:
    """Describe an image, optionally in the context of a search query."""
    analyzer.require_enabled()
    if not request.image_url or not request.image_url.strip():
        raise MissingFieldError("Image URL is required", context={"field": "imageUrl"})

    result = await analyzer.analyze(request.image_url.strip(), title=request.title, query=request.query)
    return AnalyzeImageResponse(
        analysis=result.caption or NO_ANALYSIS,
        image_url=request.image_url,
        query=request.query,
        timestamp=datetime.now(UTC).isoformat(),
    )
