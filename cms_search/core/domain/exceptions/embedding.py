"""Embedding exceptions."""

from .base import CMSSearchError


class EmbeddingError(CMSSearchError):
    """Failed to generate embeddings."""

    error_code = "CMS_EMB_001"


class EmbeddingAPIError(EmbeddingError):
    """Embedding API returned an error or an unusable vector."""

    error_code = "CMS_EMB_002"


class EmbeddingRateLimitError(EmbeddingError):
    """Embedding API rate limit exceeded."""

    error_code = "CMS_EMB_003"


class EmbeddingTimeoutError(EmbeddingError):
    """Embedding request did not complete within its timeout."""

    error_code = "CMS_EMB_004"


class EmbeddingNotConfiguredError(EmbeddingError):
    """No credentials are configured for the embedding provider."""

    error_code = "CMS_EMB_005"
