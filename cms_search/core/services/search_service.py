"""Query-time search over the vector index."""

import logging
import time
from typing import Any

from ...common.timeouts import bounded
from ...common.utils import clean_text
from ..domain import (
    SearchContext,
    SearchQuery,
    SearchResponse,
    SearchResult,
    VectorMatch,
)
from ..domain.exceptions import EmbeddingTimeoutError, EmptyQueryError, VectorStoreTimeoutError
from ..domain.search import DEFAULT_CATEGORY
from ..ports.embedding_port import EmbeddingPort
from ..ports.vector_store_port import VectorStorePort
from .query_classifier import QueryClassifier
from .result_annotator import ResultAnnotator

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 20
NO_SNIPPET = "No description available"


def clamp_score(score: float | None) -> float:
    """Clamp a provider similarity score into ``[0, 1]``."""
    if score is None:
        return 0.0
    return min(max(float(score), 0.0), 1.0)


class SearchService:
    """Classify, embed, query, hydrate and annotate a search request."""

    def __init__(
        self,
        embedding: EmbeddingPort,
        vector_store: VectorStorePort,
        classifier: QueryClassifier | None = None,
        annotator: ResultAnnotator | None = None,
        top_k: int = DEFAULT_TOP_K,
        timeout: float = 45.0,
    ) -> None:
        """Initialize the search service.

        Args:
            embedding: Provider used for query-mode embeddings.
            vector_store: Vector index to query.
            classifier: Visual-query classifier.
            annotator: Result image annotator.
            top_k: Number of neighbours requested per query.
            timeout: Seconds allowed for each provider call on the query path.
        """
        self.embedding = embedding
        self.vector_store = vector_store
        self.classifier = classifier or QueryClassifier()
        self.annotator = annotator or ResultAnnotator()
        self.top_k = top_k
        self.timeout = timeout

    async def search(self, request: SearchQuery) -> SearchResponse:
        """Run ``request`` and return ranked, annotated results.

        Raises:
            EmptyQueryError: If the query is empty after trimming.
            EmbeddingError: If the query could not be embedded.
            VectorStoreError: If the index query failed.
        """
        query = clean_text(request.query).strip()
        if not query:
            raise EmptyQueryError("Query is required")

        started = time.perf_counter()
        analysis = self.classifier.classify(query)
        if analysis.is_visual:
            logger.debug("Visual query detected: %s", analysis.matched_keywords)

        vector = await bounded(
            self.embedding.embed_query(query),
            self.timeout,
            EmbeddingTimeoutError,
            "Query embedding",
        )

        filters: dict[str, list[str]] = {}
        if request.content_types:
            filters["type"] = list(request.content_types)
        if request.locales:
            filters["locale"] = list(request.locales)

        matches = await bounded(
            self.vector_store.query(vector, self.top_k, filters or None),
            self.timeout,
            VectorStoreTimeoutError,
            "Vector query",
        )

        results = [self.to_result(index, match) for index, match in enumerate(matches)]
        # list.sort is stable, so equal scores keep provider order
        results.sort(key=lambda result: result.relevance, reverse=True)

        stats = self.annotator.annotate(results)
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        logger.info("Search %r returned %d results in %dms", query, len(results), elapsed_ms)

        return SearchResponse(
            results=results,
            query=query,
            search_time_ms=elapsed_ms,
            search_context=SearchContext.build(analysis, stats),
            content_types=list(request.content_types),
            locales=list(request.locales),
        )

    @staticmethod
    def to_result(index: int, match: VectorMatch) -> SearchResult:
        """Hydrate one vector match into a search result."""
        metadata: dict[str, Any] = dict(match.metadata or {})
        score = clamp_score(match.score)
        tags = metadata.get("tags")
        result_type = metadata.get("type") or DEFAULT_CATEGORY

        return SearchResult(
            id=match.id,
            title=metadata.get("title") or f"Result {index + 1}",
            type=result_type,
            snippet=metadata.get("snippet") or NO_SNIPPET,
            locale=metadata.get("locale") or "en-us",
            similarity=score,
            relevance=score,
            original_score=match.score,
            date=metadata.get("date") or "",
            url=metadata.get("url") or "#",
            content_type_uid=metadata.get("content_type_uid") or result_type,
            tags=[tag for tag in tags if isinstance(tag, str)] if isinstance(tags, list) else [],
            category=metadata.get("category"),
            price=metadata.get("price"),
            duration=metadata.get("duration"),
            metadata=metadata,
        )
