"""Pydantic models for API requests and responses.

Field names are snake_case in Python and camelCase on the wire.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serializing with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchRequest(CamelModel):
    """Request model for a semantic search."""

    query: str | None = Field(
        None,
        description="Natural-language query",
        json_schema_extra={"example": "red running shoes"},
    )
    content_types: list[str] = Field(
        default_factory=list,
        description="Restrict results to these display categories",
    )
    locales: list[str] = Field(default_factory=list, description="Restrict results to these locales")


class SearchResultModel(CamelModel):
    """A ranked, annotated search hit."""

    id: str
    title: str
    type: str
    snippet: str
    locale: str
    similarity: float = Field(..., ge=0, le=1)
    relevance: float = Field(..., ge=0, le=1)
    original_score: float | None = None
    date: str
    last_modified: str
    url: str
    content_type_uid: str
    tags: list[str] = Field(default_factory=list)
    category: str | None = None
    price: Any = None
    duration: Any = None
    primary_image: str | None = None
    all_images: list[str] = Field(default_factory=list)
    image_count: int = 0
    image_analysis: str | None = None
    has_images: bool = False
    image_analyzed: bool = False
    visual_match: bool = False
    visual_query_match: bool = False


class SearchContextModel(CamelModel):
    """Aggregate visual-intent and image statistics for one query."""

    is_visual_query: bool
    visual_confidence: float = Field(..., ge=0, le=1)
    matched_visual_keywords: list[str]
    multimodal_results_count: int
    analyzed_image_count: int
    total_images_found: int
    has_multimodal_results: bool


class SearchFilters(CamelModel):
    """Filters echoed back with the results."""

    content_types: list[str] | str = "all"
    locales: list[str] | str = "all"


class SearchResponseModel(CamelModel):
    """Response model for a semantic search."""

    results: list[SearchResultModel]
    query: str
    total_results: int
    search_time: int = Field(..., description="Server-side search time in milliseconds")
    search_context: SearchContextModel
    filters: SearchFilters


class AnalyzeImageRequest(CamelModel):
    """Request model for on-demand image analysis."""

    image_url: str | None = None
    query: str | None = None
    title: str | None = None


class AnalyzeImageResponse(CamelModel):
    analysis: str
    image_url: str
    query: str | None = None
    timestamp: str


class WebhookResponse(CamelModel):
    """Acknowledgement for a CMS webhook delivery."""

    success: bool = True
    message: str
    event: str
    action: str
    entry_uid: str | None = None
    content_type: str | None = None
    mapped_type: str | None = None
    asset_uid: str | None = None
    timestamp: str


class WebhookTestResponse(CamelModel):
    status: str
    timestamp: str
    authentication: str
    supported_events: list[str]
    asset_events_handled: list[str]


class ReindexRequest(CamelModel):
    locale: str | None = None


class ReindexResponse(CamelModel):
    """Result of a manual single-entry reindex."""

    success: bool
    message: str
    entry_uid: str
    content_type: str
    mapped_type: str | None = None
    locale: str
    status: str
    image_count: int = 0
    image_analyzed: bool = False


class BulkReindexRequest(CamelModel):
    locale: str | None = None
    limit: int = Field(100, ge=1, le=10000)


class BulkReindexResponse(CamelModel):
    """Tally of a content-type reindex."""

    success: bool = True
    message: str
    content_type: str
    locale: str
    total_entries: int
    success_count: int
    skipped_count: int
    error_count: int
    images_analyzed: int
    errors: list[dict[str, str]] = Field(default_factory=list, description="First 10 failures")


class HealthResponse(CamelModel):
    """Response model for health check."""

    status: str = Field(..., description="Health status")
    version: str = Field(..., description="API version")
    timestamp: str
    region: str
    features: dict[str, bool]


class IndexStatsResponse(CamelModel):
    status: str = "success"
    index_stats: dict[str, Any]
    has_data: bool


class EntryInspection(CamelModel):
    """Image-extraction diagnostics for one entry."""

    uid: str | None = None
    title: str | None = None
    mapped_type: str
    extracted_images: list[str]
    all_fields: list[str]
    image_field_analysis: dict[str, dict[str, Any]]
    entry: dict[str, Any] | None = None


class EntryInspectionResponse(CamelModel):
    status: str = "success"
    content_type: str
    total_entries: int
    analysis: list[EntryInspection]


class IndexedRecordSample(CamelModel):
    """Summary of one stored record."""

    id: str
    title: str | None = None
    type: str | None = None
    score: float | None = None
    has_images: bool
    image_analyzed: bool


class IndexedRecordSampleResponse(CamelModel):
    status: str = "success"
    sample_vectors: list[IndexedRecordSample]
    total_found: int


class ErrorResponse(BaseModel):
    """Structured error body returned for every failure.

    Example:
        {
            "error": "Search index cms_content not found",
            "details": "Not found: Collection `cms_content` doesn't exist!",
            "code": "CMS_VEC_004",
            "type": "CollectionNotFoundError",
            "location": {"class": "QdrantAdapter", "method": "query", ...}
        }
    """

    error: str = Field(..., description="Human-readable error message")
    details: str = Field(..., description="Underlying failure description")
    code: str = Field(..., description="Error code (e.g., CMS_VEC_004)")
    type: str = Field(..., description="Exception type name")
    location: dict[str, Any] | None = Field(None, description="Source location of the error")
    context: dict[str, Any] | None = Field(None, description="Additional debugging context")
    cause: dict[str, Any] | None = Field(None, description="Underlying exception")
    stack_trace: list[str] | None = Field(None, description="Stack trace (debug mode only)")
