"""Custom exception hierarchy for CMS semantic search.

Each exception includes an error code, the location it was raised from,
cause chaining, and JSON serialization for API responses and logs.
Import from this package directly:

    from cms_search.core.domain.exceptions import CMSSearchError, EmbeddingError
"""

# Base classes
from .base import CMSSearchError, ExceptionContext

# CMS exceptions
from .cms import (
    CMSConnectionError,
    CMSError,
    CMSTimeoutError,
    ContentTypeNotFoundError,
    EntryNotFoundError,
)

# Configuration exceptions
from .configuration import ConfigurationError, MissingAPIKeyError

# Embedding exceptions
from .embedding import (
    EmbeddingAPIError,
    EmbeddingError,
    EmbeddingNotConfiguredError,
    EmbeddingRateLimitError,
    EmbeddingTimeoutError,
)

# Image analysis exceptions
from .image_analysis import (
    ImageAnalysisError,
    ImageAnalysisRateLimitError,
    ImageAnalysisUnavailableError,
    ImageFetchError,
)

# Validation exceptions
from .validation import EmptyQueryError, MissingFieldError, ValidationError

# Vector store exceptions
from .vector_store import (
    CollectionNotFoundError,
    VectorStoreConnectionError,
    VectorStoreError,
    VectorStoreQueryError,
    VectorStoreTimeoutError,
    VectorStoreWriteError,
)

# Webhook exceptions
from .webhook import (
    PayloadShapeError,
    ReindexError,
    WebhookAuthenticationError,
    WebhookError,
    WebhookProcessingError,
)

__all__ = [
    # Base
    "ExceptionContext",
    "CMSSearchError",
    # Configuration
    "ConfigurationError",
    "MissingAPIKeyError",
    # Validation
    "ValidationError",
    "EmptyQueryError",
    "MissingFieldError",
    # Embedding
    "EmbeddingError",
    "EmbeddingAPIError",
    "EmbeddingNotConfiguredError",
    "EmbeddingRateLimitError",
    "EmbeddingTimeoutError",
    # Vector Store
    "VectorStoreError",
    "VectorStoreConnectionError",
    "VectorStoreQueryError",
    "VectorStoreWriteError",
    "VectorStoreTimeoutError",
    "CollectionNotFoundError",
    # Image analysis
    "ImageAnalysisError",
    "ImageAnalysisUnavailableError",
    "ImageAnalysisRateLimitError",
    "ImageFetchError",
    # CMS
    "CMSError",
    "CMSConnectionError",
    "CMSTimeoutError",
    "EntryNotFoundError",
    "ContentTypeNotFoundError",
    # Webhook
    "WebhookError",
    "WebhookAuthenticationError",
    "PayloadShapeError",
    "WebhookProcessingError",
    "ReindexError",
]
