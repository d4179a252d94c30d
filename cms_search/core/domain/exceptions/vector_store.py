"""Vector store exceptions."""

from .base import CMSSearchError


class VectorStoreError(CMSSearchError):
    """Base error for vector store operations."""

    error_code = "CMS_VEC_001"


class VectorStoreConnectionError(VectorStoreError):
    """Failed to connect to the vector index.

    Common causes:
    - Invalid URL or API key
    - Network connectivity issues
    - Qdrant service is down
    """

    error_code = "CMS_VEC_002"


class VectorStoreQueryError(VectorStoreError):
    """Similarity query against the vector index failed."""

    error_code = "CMS_VEC_003"


class CollectionNotFoundError(VectorStoreError):
    """Configured collection does not exist."""

    error_code = "CMS_VEC_004"


class VectorStoreWriteError(VectorStoreError):
    """Upsert or delete against the vector index failed."""

    error_code = "CMS_VEC_005"


class VectorStoreTimeoutError(VectorStoreError):
    """Vector index call did not complete within its timeout."""

    error_code = "CMS_VEC_006"
