"""Qdrant vector index adapter.

Records are keyed by ``{uid}_{locale}``. Qdrant point ids must be unsigned
integers or UUIDs, so the key is mapped to a UUIDv5 and kept in the payload
under ``record_id``.
"""

import logging
import uuid
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from qdrant_client import AsyncQdrantClient

from ....core.domain import IndexedRecord, VectorMatch
from ....core.domain.exceptions import (
    CollectionNotFoundError,
    VectorStoreConnectionError,
    VectorStoreQueryError,
    VectorStoreWriteError,
)
from ....core.ports.vector_store_port import VectorStorePort

logger = logging.getLogger(__name__)

RECORD_ID_FIELD = "record_id"
POINT_NAMESPACE = uuid.UUID("5b0e3c8a-6f1d-4e7b-9a52-1c0f8d3e2a47")

# Payload fields used in query filters
INDEXED_FIELDS = ("type", "locale", "content_type_uid")


def point_id(record_id: str) -> str:
    """Deterministic Qdrant point id for a record key."""
    return str(uuid.uuid5(POINT_NAMESPACE, record_id))


def _status_code(error: Exception) -> int | None:
    return getattr(error, "status_code", None)


class QdrantAdapter(VectorStorePort):
    """Vector index backed by a single Qdrant collection."""

    def __init__(
        self,
        url: str,
        api_key: str,
        collection_name: str = "cms_content",
        dimension: int = 768,
        client: "AsyncQdrantClient | None" = None,
    ) -> None:
        """Initialize the Qdrant vector index.

        Args:
            url: Qdrant cluster URL.
            api_key: Qdrant API key (empty for unauthenticated local servers).
            collection_name: Collection holding every indexed record.
            dimension: Vector size used when the collection is created.
            client: Pre-built async client, mainly for tests.
        """
        self.url = url
        self.api_key = api_key
        self.collection_name = collection_name
        self.dimension = dimension
        self._client = client
        self._collection_ready = False

    def _get_client(self) -> "AsyncQdrantClient":
        """Get or create the async Qdrant client."""
        if self._client is None:
            if not self.url:
                raise VectorStoreConnectionError(
                    "Qdrant URL not configured. Set QDRANT_URL.",
                    context={"setting": "qdrant_url"},
                )
            try:
                from qdrant_client import AsyncQdrantClient

                self._client = AsyncQdrantClient(url=self.url, api_key=self.api_key or None)
                logger.info("Connected to Qdrant at: %s", self.url)
            except Exception as e:
                raise VectorStoreConnectionError(
                    f"Failed to connect to Qdrant at {self.url}",
                    cause=e,
                    context={"url": self.url},
                ) from e
        return self._client

    async def _ensure_collection(self) -> None:
        """Create the collection and its payload indexes on first write."""
        if self._collection_ready:
            return

        from qdrant_client import models

        client = self._get_client()
        try:
            if not await client.collection_exists(collection_name=self.collection_name):
                logger.info("Creating collection %s (dim=%d)", self.collection_name, self.dimension)
                await client.create_collection(
                    collection_name=self.collection_name,
                    vectors_config=models.VectorParams(
                        size=self.dimension,
                        distance=models.Distance.COSINE,
                    ),
                )
                for field_name in INDEXED_FIELDS:
                    await client.create_payload_index(
                        collection_name=self.collection_name,
                        field_name=field_name,
                        field_schema=models.PayloadSchemaType.KEYWORD,
                    )
        except Exception as e:
            raise VectorStoreConnectionError(
                f"Failed to prepare collection {self.collection_name}",
                cause=e,
                context={"collection": self.collection_name},
            ) from e
        self._collection_ready = True

    async def upsert(self, record: IndexedRecord) -> None:
        from qdrant_client import models

        await self._ensure_collection()
        payload: dict[str, Any] = {**record.metadata, RECORD_ID_FIELD: record.record_id}
        try:
            await self._get_client().upsert(
                collection_name=self.collection_name,
                points=[
                    models.PointStruct(
                        id=point_id(record.record_id),
                        vector=record.vector,
                        payload=payload,
                    )
                ],
                wait=True,
            )
        except Exception as e:
            raise VectorStoreWriteError(
                f"Failed to upsert record {record.record_id}",
                cause=e,
                context={"record_id": record.record_id, "collection": self.collection_name},
            ) from e
        logger.debug("Upserted %s into %s", record.record_id, self.collection_name)

    async def delete(self, record_id: str) -> None:
        from qdrant_client import models

        try:
            await self._get_client().delete(
                collection_name=self.collection_name,
                points_selector=models.PointIdsList(points=[point_id(record_id)]),
                wait=True,
            )
        except Exception as e:
            if _status_code(e) == 404:
                logger.debug("Collection %s missing; nothing to delete", self.collection_name)
                return
            raise VectorStoreWriteError(
                f"Failed to delete record {record_id}",
                cause=e,
                context={"record_id": record_id, "collection": self.collection_name},
            ) from e

    async def query(
        self,
        vector: list[float],
        top_k: int,
        filters: dict[str, list[str]] | None = None,
    ) -> list[VectorMatch]:
        from qdrant_client import models

        query_filter = None
        if filters:
            query_filter = models.Filter(
                must=[
                    models.FieldCondition(key=key, match=models.MatchAny(any=list(values)))
                    for key, values in filters.items()
                    if values
                ]
            )

        try:
            response = await self._get_client().query_points(
                collection_name=self.collection_name,
                query=vector,
                limit=top_k,
                query_filter=query_filter,
                with_payload=True,
            )
        except Exception as e:
            if _status_code(e) == 404:
                raise CollectionNotFoundError(
                    f"Search index {self.collection_name} not found",
                    cause=e,
                    context={"collection": self.collection_name},
                ) from e
            raise VectorStoreQueryError(
                "Vector index query failed",
                cause=e,
                context={"collection": self.collection_name, "top_k": top_k},
            ) from e

        return [self._to_match(point, point.score) for point in response.points]

    @staticmethod
    def _to_match(point: Any, score: float | None) -> VectorMatch:
        payload = dict(point.payload or {})
        record_id = payload.pop(RECORD_ID_FIELD, None) or str(point.id)
        return VectorMatch(id=record_id, score=score, metadata=payload)

    async def sample(self, limit: int) -> list[VectorMatch]:
        try:
            points, _ = await self._get_client().scroll(
                collection_name=self.collection_name,
                limit=limit,
                with_payload=True,
                with_vectors=False,
            )
        except Exception as e:
            if _status_code(e) == 404:
                raise CollectionNotFoundError(
                    f"Search index {self.collection_name} not found",
                    cause=e,
                    context={"collection": self.collection_name},
                ) from e
            raise VectorStoreQueryError(
                "Failed to list indexed records",
                cause=e,
                context={"collection": self.collection_name, "limit": limit},
            ) from e
        return [self._to_match(point, None) for point in points]

    async def describe(self) -> dict[str, Any]:
        try:
            info = await self._get_client().get_collection(collection_name=self.collection_name)
        except Exception as e:
            if _status_code(e) == 404:
                raise CollectionNotFoundError(
                    f"Search index {self.collection_name} not found",
                    cause=e,
                    context={"collection": self.collection_name},
                ) from e
            raise VectorStoreConnectionError(
                "Failed to describe vector index",
                cause=e,
                context={"collection": self.collection_name},
            ) from e

        count = info.points_count or 0
        return {
            "collection": self.collection_name,
            "totalVectorCount": count,
            "dimension": self.dimension,
            "status": str(info.status.value if hasattr(info.status, "value") else info.status),
            "hasData": count > 0,
        }

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
