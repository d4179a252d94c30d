"""Search models: queries, raw matches, annotated results and context."""

from dataclasses import dataclass, field
from typing import Any

from .entry import ContentCategory


@dataclass
class SearchQuery:
    """A validated search request."""

    query: str
    content_types: list[str] = field(default_factory=list)
    locales: list[str] = field(default_factory=list)


@dataclass
class VectorMatch:
    """One nearest neighbour returned by the vector index."""

    id: str
    score: float | None
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class VisualQueryAnalysis:
    """Heuristic judgement of whether a query is about appearance."""

    is_visual: bool
    confidence: float
    matched_keywords: list[str] = field(default_factory=list)


@dataclass
class SearchResult:
    """A ranked search hit hydrated from index metadata.

    ``similarity`` and ``relevance`` are the provider score clamped to [0, 1].
    Image flags are filled in by the result annotator.
    """

    id: str
    title: str
    type: str
    snippet: str
    locale: str
    similarity: float
    relevance: float
    date: str
    url: str
    content_type_uid: str
    original_score: float | None = None
    tags: list[str] = field(default_factory=list)
    category: str | None = None
    price: Any = None
    duration: Any = None
    primary_image: str | None = None
    all_images: list[str] = field(default_factory=list)
    image_count: int = 0
    image_analysis: str | None = None
    has_images: bool = False
    image_analyzed: bool = False
    visual_match: bool = False
    visual_query_match: bool = False
    metadata: dict[str, Any] = field(default_factory=dict, repr=False)


@dataclass
class ImageStats:
    """Aggregate image statistics over a result set."""

    multimodal_results_count: int = 0
    analyzed_image_count: int = 0
    total_images_found: int = 0

    @property
    def has_multimodal_results(self) -> bool:
        return self.multimodal_results_count > 0


@dataclass
class SearchContext:
    """Per-query summary of visual intent and image coverage."""

    is_visual_query: bool
    visual_confidence: float
    matched_visual_keywords: list[str]
    multimodal_results_count: int
    analyzed_image_count: int
    total_images_found: int
    has_multimodal_results: bool

    @classmethod
    def build(cls, analysis: VisualQueryAnalysis, stats: ImageStats) -> "SearchContext":
        return cls(
            is_visual_query=analysis.is_visual,
            visual_confidence=analysis.confidence,
            matched_visual_keywords=list(analysis.matched_keywords),
            multimodal_results_count=stats.multimodal_results_count,
            analyzed_image_count=stats.analyzed_image_count,
            total_images_found=stats.total_images_found,
            has_multimodal_results=stats.has_multimodal_results,
        )


@dataclass
class SearchResponse:
    """Everything the search endpoint returns for one query."""

    results: list[SearchResult]
    query: str
    search_time_ms: int
    search_context: SearchContext
    content_types: list[str] = field(default_factory=list)
    locales: list[str] = field(default_factory=list)

    @property
    def total_results(self) -> int:
        return len(self.results)


DEFAULT_CATEGORY = ContentCategory.ARTICLE.value
