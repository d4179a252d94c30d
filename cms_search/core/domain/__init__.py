"""Domain models for CMS semantic search.

Models are organized by domain area:

- entry: display categories and the extracted searchable document
- image_analysis: the enabled/disabled configuration union and captions
- indexing: indexed records, record keys and reindex outcomes
- search: queries, matches, annotated results and search context
- webhook: parsed webhook variants and dispatch outcomes

All models are re-exported here for convenient importing:

    from cms_search.core.domain import ContentCategory, SearchResult
"""

from .entry import ContentCategory, ExtractedDocument
from .image_analysis import (
    ImageAnalysisConfig,
    ImageAnalysisDisabled,
    ImageAnalysisEnabled,
    ImageAnalysisResult,
)
from .indexing import (
    BatchReindexReport,
    IndexedRecord,
    IndexOutcome,
    IndexStatus,
    record_key,
)
from .search import (
    ImageStats,
    SearchContext,
    SearchQuery,
    SearchResponse,
    SearchResult,
    VectorMatch,
    VisualQueryAnalysis,
)
from .webhook import (
    AssetEvent,
    RecognizedEntryEvent,
    UnrecognizedPayload,
    WebhookAction,
    WebhookOutcome,
    WebhookPayload,
)

__all__ = [
    # Entry models
    "ContentCategory",
    "ExtractedDocument",
    # Image analysis
    "ImageAnalysisConfig",
    "ImageAnalysisDisabled",
    "ImageAnalysisEnabled",
    "ImageAnalysisResult",
    # Indexing
    "BatchReindexReport",
    "IndexedRecord",
    "IndexOutcome",
    "IndexStatus",
    "record_key",
    # Search
    "ImageStats",
    "SearchContext",
    "SearchQuery",
    "SearchResponse",
    "SearchResult",
    "VectorMatch",
    "VisualQueryAnalysis",
    # Webhook
    "AssetEvent",
    "RecognizedEntryEvent",
    "UnrecognizedPayload",
    "WebhookAction",
    "WebhookOutcome",
    "WebhookPayload",
]
