"""
Pytest configuration and shared fixtures.

Every external collaborator is replaced by an in-process fake; no test
touches the network.
"""

from typing import Any

import pytest

from cms_search.config import Settings
from cms_search.core.domain import IndexedRecord, VectorMatch
from cms_search.core.domain.exceptions import ContentTypeNotFoundError, EntryNotFoundError
from cms_search.core.ports.cms_port import CMSPort
from cms_search.core.ports.embedding_port import EmbeddingPort
from cms_search.core.ports.image_analysis_port import ImageAnalysisPort
from cms_search.core.ports.vector_store_port import VectorStorePort


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (API with fake providers)")


class FakeEmbedding(EmbeddingPort):
    """Deterministic embedding provider recording every call."""

    def __init__(self, dimension: int = 8, error: Exception | None = None):
        self.dimension = dimension
        self.error = error
        self.document_calls: list[str] = []
        self.query_calls: list[str] = []

    def _vector(self, text: str) -> list[float]:
        return [float((len(text) + i) % 7) / 7 for i in range(self.dimension)]

    async def embed_document(self, text: str) -> list[float]:
        self.document_calls.append(text)
        if self.error:
            raise self.error
        return self._vector(text)

    async def embed_query(self, text: str) -> list[float]:
        self.query_calls.append(text)
        if self.error:
            raise self.error
        return self._vector(text)


class InMemoryVectorStore(VectorStorePort):
    """Dict-backed vector index.

    ``query`` returns records in insertion order with the score set in
    ``scores`` (default 0.5), honouring ``filters`` like the real index.
    """

    def __init__(self):
        self.records: dict[str, IndexedRecord] = {}
        self.scores: dict[str, float] = {}
        self.queries: list[dict[str, Any]] = []
        self.query_error: Exception | None = None
        self.write_error: Exception | None = None

    async def upsert(self, record: IndexedRecord) -> None:
        if self.write_error:
            raise self.write_error
        self.records[record.record_id] = record

    async def delete(self, record_id: str) -> None:
        if self.write_error:
            raise self.write_error
        self.records.pop(record_id, None)

    async def query(self, vector, top_k, filters=None) -> list[VectorMatch]:
        self.queries.append({"vector": vector, "top_k": top_k, "filters": filters})
        if self.query_error:
            raise self.query_error
        matches = []
        for record_id, record in self.records.items():
            if filters and any(record.metadata.get(key) not in values for key, values in filters.items()):
                continue
            matches.append(
                VectorMatch(
                    id=record_id,
                    score=self.scores.get(record_id, 0.5),
                    metadata=dict(record.metadata),
                )
            )
        return matches[:top_k]

    async def sample(self, limit) -> list[VectorMatch]:
        if self.query_error:
            raise self.query_error
        return [
            VectorMatch(id=record_id, score=None, metadata=dict(record.metadata))
            for record_id, record in list(self.records.items())[:limit]
        ]

    async def describe(self) -> dict[str, Any]:
        count = len(self.records)
        return {
            "collection": "test",
            "totalVectorCount": count,
            "dimension": 8,
            "status": "green",
            "hasData": count > 0,
        }


class FakeImageAnalysis(ImageAnalysisPort):
    """Vision provider returning ``caption`` after raising queued ``errors``."""

    def __init__(self, caption: str | None = "A red running shoe on white background", errors=None):
        self.caption = caption
        self.errors = list(errors or [])
        self.calls: list[tuple[str, str]] = []

    async def describe_image(self, image_url: str, prompt: str) -> str | None:
        self.calls.append((image_url, prompt))
        if self.errors:
            raise self.errors.pop(0)
        return self.caption


class FakeCMS(CMSPort):
    """CMS holding entries per content type."""

    def __init__(self, entries: dict[str, list[dict[str, Any]]] | None = None):
        self.entries = entries or {}
        self.page_requests: list[tuple[str, int, int]] = []

    async def get_entry(self, content_type, entry_uid, locale):
        for entry in self.entries.get(content_type, []):
            if entry.get("uid") == entry_uid:
                return dict(entry)
        raise EntryNotFoundError(
            f"Entry {entry_uid} not found",
            context={"content_type": content_type, "entry_uid": entry_uid},
        )

    async def query_entries(self, content_type, locale, skip=0, limit=100):
        if content_type not in self.entries:
            raise ContentTypeNotFoundError(f"Content type {content_type} not found")
        self.page_requests.append((content_type, skip, limit))
        entries = self.entries[content_type]
        return [dict(entry) for entry in entries[skip : skip + limit]], len(entries)

    async def list_content_types(self):
        return [{"uid": name, "title": name.title()} for name in self.entries]


@pytest.fixture
def test_settings():
    """Settings isolated from the environment and .env file."""
    return Settings(
        _env_file=None,
        google_api_key="",
        qdrant_url="",
        webhook_username="contentstack_webhook",
        webhook_password="s3cret",
        image_analysis_retry_delay_seconds=0,
        image_analysis_rate_limit_backoff_seconds=0,
        sync_item_delay_seconds=0,
        cors_origins=["http://localhost:5173"],
    )


@pytest.fixture
def fake_embedding():
    return FakeEmbedding()


@pytest.fixture
def vector_store():
    return InMemoryVectorStore()


@pytest.fixture
def fake_vision():
    return FakeImageAnalysis()


@pytest.fixture
def shoe_entry():
    """A product entry with one image and a price."""
    return {
        "uid": "p1",
        "title": "Red Running Shoes",
        "description": "Lightweight trainers built for daily road running.",
        "image": "https://cdn.example.com/assets/shoe.jpg",
        "content_type_uid": "product",
        "price": 89.99,
        "tags": ["running", "footwear"],
        "updated_at": "2024-05-01T10:00:00.000Z",
        "locale": "en-us",
    }


@pytest.fixture
def article_entry():
    """A text-only article with a rich-text body."""
    return {
        "uid": "a1",
        "title": "Spring Trail Guide",
        "summary": "Five routes worth running this season.",
        "body": {
            "type": "doc",
            "children": [
                {"type": "p", "children": [{"text": "Start early"}, {"text": "and pack water."}]},
                {"type": "p", "children": [{"text": "Mind the mud."}]},
            ],
        },
        "created_at": "2024-03-01T08:00:00.000Z",
    }
