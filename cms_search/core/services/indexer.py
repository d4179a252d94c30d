"""Indexer: keeps the vector index in step with CMS entries.

``reindex`` turns one entry into an embedding plus metadata and upserts it
under ``{uid}_{locale}``; ``remove`` deletes that key. The indexer is the
only writer of the vector index.
"""

import asyncio
import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Any

from ...common.timeouts import bounded
from ...common.utils import truncate
from ..domain import (
    BatchReindexReport,
    ExtractedDocument,
    IndexedRecord,
    IndexOutcome,
    IndexStatus,
    record_key,
)
from ..domain.exceptions import (
    CMSSearchError,
    EmbeddingTimeoutError,
    MissingFieldError,
    VectorStoreTimeoutError,
)
from ..ports.embedding_port import EmbeddingPort
from ..ports.vector_store_port import VectorStorePort
from .content_extractor import ContentExtractor, normalize_tags
from .content_type_mapper import ContentTypeMapper
from .image_analyzer import ImageAnalyzer
from .image_extractor import ImageExtractor

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 300


class Indexer:
    """Build and persist indexed records for CMS entries."""

    def __init__(
        self,
        embedding: EmbeddingPort,
        vector_store: VectorStorePort,
        image_analyzer: ImageAnalyzer,
        content_extractor: ContentExtractor | None = None,
        image_extractor: ImageExtractor | None = None,
        type_mapper: ContentTypeMapper | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the indexer.

        Args:
            embedding: Provider used for document-mode embeddings.
            vector_store: Vector index receiving upserts and deletes.
            image_analyzer: Captions the primary image (may be disabled).
            content_extractor: Text extraction; default instance if omitted.
            image_extractor: Image URL extraction; default instance if omitted.
            type_mapper: Content-type mapping; default instance if omitted.
            timeout: Seconds allowed for each embedding and index call.
        """
        self.embedding = embedding
        self.vector_store = vector_store
        self.image_analyzer = image_analyzer
        self.content_extractor = content_extractor or ContentExtractor()
        self.image_extractor = image_extractor or ImageExtractor()
        self.type_mapper = type_mapper or ContentTypeMapper()
        self.timeout = timeout

    def extract(self, entry: dict[str, Any], content_type: str, locale: str) -> ExtractedDocument:
        """Build the searchable view of ``entry`` without any provider call."""
        uid = entry.get("uid")
        if not isinstance(uid, str) or not uid:
            raise MissingFieldError(
                "Entry has no uid",
                context={"content_type": content_type, "locale": locale},
            )
        return ExtractedDocument(
            uid=uid,
            content_type_raw=content_type,
            locale=locale,
            text=self.content_extractor.extract(entry),
            mapped_type=self.type_mapper.map(content_type),
            image_urls=self.image_extractor.extract(entry),
        )

    async def reindex(self, entry: dict[str, Any], content_type: str, locale: str) -> IndexOutcome:
        """Embed ``entry`` and upsert it under ``{uid}_{locale}``.

        Entries without enough text are skipped without any provider call.

        Raises:
            EmbeddingError: If the embedding provider fails.
            VectorStoreError: If the upsert fails.
        """
        document = self.extract(entry, content_type, locale)
        key = record_key(document.uid, locale)

        if not self.content_extractor.is_indexable(document.text):
            logger.info("Skipping %s: not enough text to index (%d chars)", key, len(document.text))
            return IndexOutcome(
                status=IndexStatus.SKIPPED,
                record_id=key,
                uid=document.uid,
                mapped_type=document.mapped_type,
                reason="insufficient text content",
            )

        caption = None
        if document.primary_image and self.image_analyzer.enabled:
            analysis = await self.image_analyzer.analyze(
                document.primary_image,
                title=_title(entry),
            )
            caption = analysis.caption

        embedding_input = document.text
        if caption:
            embedding_input = f"{document.text} Image description: {caption}"

        vector = await bounded(
            self.embedding.embed_document(embedding_input),
            self.timeout,
            EmbeddingTimeoutError,
            "Document embedding",
        )

        metadata = self.build_metadata(entry, document, caption)
        await bounded(
            self.vector_store.upsert(IndexedRecord(record_id=key, vector=vector, metadata=metadata)),
            self.timeout,
            VectorStoreTimeoutError,
            "Vector upsert",
        )

        logger.info(
            "Indexed %s as %s (%d images, analyzed=%s)",
            key,
            document.mapped_type.value,
            len(document.image_urls),
            bool(caption),
        )
        return IndexOutcome(
            status=IndexStatus.INDEXED,
            record_id=key,
            uid=document.uid,
            mapped_type=document.mapped_type,
            image_count=len(document.image_urls),
            image_analyzed=bool(caption),
        )

    async def remove(self, uid: str, locale: str) -> IndexOutcome:
        """Delete the record for ``uid`` in ``locale``; missing keys are fine."""
        key = record_key(uid, locale)
        await bounded(
            self.vector_store.delete(key),
            self.timeout,
            VectorStoreTimeoutError,
            "Vector delete",
        )
        logger.info("Removed %s from index", key)
        return IndexOutcome(status=IndexStatus.REMOVED, record_id=key, uid=uid)

    async def reindex_many(
        self,
        entries: Iterable[dict[str, Any]],
        content_type: str,
        locale: str,
        item_delay: float = 0.0,
        report: BatchReindexReport | None = None,
    ) -> BatchReindexReport:
        """Reindex ``entries`` one after another, continuing past failures.

        ``item_delay`` seconds are waited between entries to stay within
        provider rate limits.
        """
        report = report or BatchReindexReport(content_type=content_type, locale=locale)
        for entry in entries:
            if report.total and item_delay > 0:
                await asyncio.sleep(item_delay)
            report.total += 1
            uid = entry.get("uid") if isinstance(entry, dict) else None
            try:
                outcome = await self.reindex(entry, content_type, locale)
            except CMSSearchError as e:
                report.failed += 1
                report.errors.append({"uid": str(uid), "error": e.message, "details": e.details})
                logger.warning("Failed to reindex %s/%s: %s", content_type, uid, e.message)
                continue

            if outcome.status is IndexStatus.SKIPPED:
                report.skipped += 1
            else:
                report.succeeded += 1
                if outcome.image_analyzed:
                    report.images_analyzed += 1
        return report

    def build_metadata(
        self,
        entry: dict[str, Any],
        document: ExtractedDocument,
        caption: str | None,
    ) -> dict[str, Any]:
        """Assemble index metadata; keys with no value are omitted."""
        has_images = bool(document.image_urls)
        metadata: dict[str, Any] = {
            "title": _title(entry) or "Untitled",
            "type": document.mapped_type.value,
            "content_type_uid": document.content_type_raw,
            "snippet": truncate(document.text, SNIPPET_LENGTH),
            "locale": document.locale,
            "date": _date(entry),
            "url": _url(entry, document.uid),
            "tags": normalize_tags(entry.get("tags")),
            "category": _category(entry) or document.content_type_raw,
            "price": entry.get("price"),
            "duration": entry.get("duration"),
            "image_count": len(document.image_urls),
            "has_images": has_images,
            "visual_match": has_images,
            "multimodal_content": has_images,
        }
        if has_images:
            metadata["primary_image"] = document.primary_image
            metadata["all_images"] = list(document.image_urls)
        if caption:
            metadata["image_analysis"] = caption
        return {key: value for key, value in metadata.items() if value is not None}


def _title(entry: dict[str, Any]) -> str | None:
    for key in ("title", "name"):
        value = entry.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def _date(entry: dict[str, Any]) -> str:
    for key in ("updated_at", "created_at"):
        value = entry.get(key)
        if isinstance(value, str) and value:
            return value
    return datetime.now(UTC).isoformat()


def _url(entry: dict[str, Any], uid: str) -> str:
    value = entry.get("url")
    if isinstance(value, dict):
        value = value.get("href")
    if isinstance(value, str) and value:
        return value
    return f"#{uid}"


def _category(entry: dict[str, Any]) -> str | None:
    value = entry.get("category")
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        for key in ("title", "name", "uid"):
            candidate = value.get(key)
            if isinstance(candidate, str) and candidate:
                return candidate
    if isinstance(value, list) and value:
        return _category({"category": value[0]})
    return None
