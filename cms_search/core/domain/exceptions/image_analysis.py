"""Image analysis exceptions.

These never escape the image analyzer during indexing; they surface only
from the explicit ``/analyze-image`` endpoint.
"""

from .base import CMSSearchError


class ImageAnalysisError(CMSSearchError):
    """Image-understanding model call failed."""

    error_code = "CMS_IMG_001"


class ImageAnalysisUnavailableError(ImageAnalysisError):
    """Image analysis is disabled (no provider credentials)."""

    error_code = "CMS_IMG_002"


class ImageAnalysisRateLimitError(ImageAnalysisError):
    """Image-understanding provider rate limit exceeded."""

    error_code = "CMS_IMG_003"


class ImageFetchError(ImageAnalysisError):
    """The image could not be downloaded for analysis."""

    error_code = "CMS_IMG_004"
