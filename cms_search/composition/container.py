"""Composition root wiring adapters into services.

Provider clients are built once per process and passed explicitly to the
services that use them; nothing reads them from module state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import lru_cache

from ..adapters.outbound.cms.contentstack_adapter import ContentstackAdapter
from ..adapters.outbound.embedding.gemini_embedding import GeminiEmbeddingAdapter
from ..adapters.outbound.image_analysis.gemini_vision import GeminiVisionAdapter
from ..adapters.outbound.vector_store.qdrant_adapter import QdrantAdapter
from ..common.rate_limiter import RateLimiter
from ..config import Settings, settings
from ..core.domain import ImageAnalysisConfig, ImageAnalysisDisabled, ImageAnalysisEnabled
from ..core.ports.cms_port import CMSPort
from ..core.ports.embedding_port import EmbeddingPort
from ..core.ports.vector_store_port import VectorStorePort
from ..core.services.content_extractor import ContentExtractor
from ..core.services.content_type_mapper import ContentTypeMapper
from ..core.services.image_analyzer import ImageAnalyzer
from ..core.services.image_extractor import ImageExtractor
from ..core.services.indexer import Indexer
from ..core.services.search_service import SearchService
from ..core.services.sync_service import ContentSyncService
from ..core.services.webhook_dispatcher import WebhookDispatcher

logger = logging.getLogger(__name__)


@dataclass
class Container:
    """Every long-lived object the application needs."""

    settings: Settings
    embedding: EmbeddingPort
    vector_store: VectorStorePort
    cms: CMSPort
    image_analysis: ImageAnalysisConfig
    image_analyzer: ImageAnalyzer
    content_extractor: ContentExtractor
    image_extractor: ImageExtractor
    type_mapper: ContentTypeMapper
    indexer: Indexer
    search_service: SearchService
    webhook_dispatcher: WebhookDispatcher
    sync_service: ContentSyncService

    async def aclose(self) -> None:
        """Close provider clients that hold network resources."""
        clients = [self.embedding, self.vector_store, self.cms]
        if isinstance(self.image_analysis, ImageAnalysisEnabled):
            clients.append(self.image_analysis.client)
        for client in clients:
            close = getattr(client, "close", None)
            if close is not None:
                await close()


def build_image_analysis(config: Settings) -> ImageAnalysisConfig:
    """Enable image analysis only when switched on and a key is present."""
    if not config.image_analysis_enabled:
        return ImageAnalysisDisabled(reason="image analysis switched off")
    if not config.google_api_key:
        return ImageAnalysisDisabled(reason="no image-analysis credentials configured")
    return ImageAnalysisEnabled(
        client=GeminiVisionAdapter(
            api_key=config.google_api_key,
            model_name=config.vision_model,
            rate_limiter=RateLimiter(config.image_analysis_requests_per_minute),
        )
    )


def build_services(
    config: Settings,
    embedding: EmbeddingPort,
    vector_store: VectorStorePort,
    cms: CMSPort,
    image_analysis: ImageAnalysisConfig,
) -> Container:
    """Wire services around already-built providers."""
    image_analyzer = ImageAnalyzer(
        image_analysis,
        max_attempts=config.image_analysis_max_attempts,
        retry_delay=config.image_analysis_retry_delay_seconds,
        rate_limit_backoff=config.image_analysis_rate_limit_backoff_seconds,
        timeout=config.provider_timeout_seconds,
    )
    content_extractor = ContentExtractor()
    image_extractor = ImageExtractor(config.asset_host_markers)
    type_mapper = ContentTypeMapper()

    indexer = Indexer(
        embedding=embedding,
        vector_store=vector_store,
        image_analyzer=image_analyzer,
        content_extractor=content_extractor,
        image_extractor=image_extractor,
        type_mapper=type_mapper,
        timeout=config.provider_timeout_seconds,
    )
    search_service = SearchService(
        embedding=embedding,
        vector_store=vector_store,
        top_k=config.search_top_k,
        timeout=config.query_timeout_seconds,
    )
    webhook_dispatcher = WebhookDispatcher(indexer, default_locale=config.default_locale)
    sync_service = ContentSyncService(
        cms,
        indexer,
        page_size=config.sync_page_size,
        item_delay=config.sync_item_delay_seconds,
        timeout=config.provider_timeout_seconds,
    )

    return Container(
        settings=config,
        embedding=embedding,
        vector_store=vector_store,
        cms=cms,
        image_analysis=image_analysis,
        image_analyzer=image_analyzer,
        content_extractor=content_extractor,
        image_extractor=image_extractor,
        type_mapper=type_mapper,
        indexer=indexer,
        search_service=search_service,
        webhook_dispatcher=webhook_dispatcher,
        sync_service=sync_service,
    )


def build_container(config: Settings | None = None) -> Container:
    """Build concrete providers from ``config`` and wire the services."""
    config = config or settings
    logger.info("Initializing providers (composition root)...")

    embedding = GeminiEmbeddingAdapter(
        api_key=config.google_api_key,
        model_name=config.embedding_model,
        dimension=config.embedding_dimension,
        rate_limiter=RateLimiter(config.embedding_requests_per_minute),
    )
    vector_store = QdrantAdapter(
        url=config.qdrant_url,
        api_key=config.qdrant_api_key,
        collection_name=config.qdrant_collection,
        dimension=config.embedding_dimension,
    )
    cms = ContentstackAdapter(
        api_key=config.contentstack_api_key,
        delivery_token=config.contentstack_delivery_token,
        environment=config.contentstack_environment,
        host=config.contentstack_host,
        timeout=config.provider_timeout_seconds,
    )
    image_analysis = build_image_analysis(config)
    if isinstance(image_analysis, ImageAnalysisDisabled):
        logger.warning("Image analysis disabled: %s", image_analysis.reason)

    return build_services(config, embedding, vector_store, cms, image_analysis)


@lru_cache
def get_container() -> Container:
    """Process-wide container for the CLI."""
    return build_container(settings)
