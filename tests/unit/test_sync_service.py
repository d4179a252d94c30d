"""Unit tests for CMS-driven reindexing."""

import pytest

from cms_search.core.domain import ImageAnalysisDisabled, IndexStatus
from cms_search.core.domain.exceptions import (
    CMSConnectionError,
    ContentTypeNotFoundError,
    EntryNotFoundError,
    ReindexError,
    VectorStoreWriteError,
)
from cms_search.core.services.image_analyzer import ImageAnalyzer
from cms_search.core.services.indexer import Indexer
from cms_search.core.services.sync_service import ContentSyncService
from tests.conftest import FakeCMS

pytestmark = pytest.mark.unit


def make_articles(count):
    return [{"uid": f"a{i}", "title": f"Article number {i}", "body": "Body text for search."} for i in range(count)]


@pytest.fixture
def indexer(fake_embedding, vector_store):
    return Indexer(fake_embedding, vector_store, ImageAnalyzer(ImageAnalysisDisabled()))


@pytest.fixture
def cms(shoe_entry):
    return FakeCMS({"product": [shoe_entry], "article": make_articles(5)})


@pytest.fixture
def sync(cms, indexer):
    return ContentSyncService(cms, indexer, page_size=2, item_delay=0)


class TestReindexEntry:
    @pytest.mark.asyncio
    async def test_fetches_and_indexes(self, sync, vector_store):
        outcome = await sync.reindex_entry("product", "p1", "en-us")

        assert outcome.status is IndexStatus.INDEXED
        assert "p1_en-us" in vector_store.records

    @pytest.mark.asyncio
    async def test_missing_entry(self, sync):
        with pytest.raises(EntryNotFoundError):
            await sync.reindex_entry("product", "nope", "en-us")

    @pytest.mark.asyncio
    async def test_index_failure_wrapped(self, sync, vector_store):
        vector_store.write_error = VectorStoreWriteError("disk full")

        with pytest.raises(ReindexError) as exc_info:
            await sync.reindex_entry("product", "p1", "en-us")

        assert exc_info.value.extra_context["entry_uid"] == "p1"


class TestFetchEntries:
    @pytest.mark.asyncio
    async def test_paginates(self, sync, cms):
        entries = await sync.fetch_entries("article", "en-us")

        assert [e["uid"] for e in entries] == ["a0", "a1", "a2", "a3", "a4"]
        assert cms.page_requests == [("article", 0, 2), ("article", 2, 2), ("article", 4, 2)]

    @pytest.mark.asyncio
    async def test_respects_limit(self, sync, cms):
        entries = await sync.fetch_entries("article", "en-us", limit=3)

        assert len(entries) == 3
        assert cms.page_requests == [("article", 0, 2), ("article", 2, 1)]


class TestReindexContentType:
    @pytest.mark.asyncio
    async def test_report(self, sync, vector_store):
        report = await sync.reindex_content_type("article", "en-us")

        assert report.total == 5
        assert report.succeeded == 5
        assert report.failed == 0
        assert len(vector_store.records) == 5

    @pytest.mark.asyncio
    async def test_empty_content_type(self, indexer):
        service = ContentSyncService(FakeCMS({"empty": []}), indexer, item_delay=0)

        with pytest.raises(ContentTypeNotFoundError):
            await service.reindex_content_type("empty", "en-us")


class TestSyncAll:
    @pytest.mark.asyncio
    async def test_skips_unknown_types_and_reports_progress(self, sync):
        started, reported = [], []

        reports = await sync.sync_all(
            ["product", "missing", "article"],
            "en-us",
            on_start=started.append,
            on_report=reported.append,
        )

        assert started == ["product", "article"]
        assert [r.content_type for r in reports] == ["product", "article"]
        assert reported == reports
        assert reports[0].succeeded == 1
        assert reports[1].succeeded == 5

    @pytest.mark.asyncio
    async def test_cms_failure_recorded(self, indexer):
        class BrokenCMS(FakeCMS):
            async def query_entries(self, content_type, locale, skip=0, limit=100):
                raise CMSConnectionError("CMS unreachable")

        service = ContentSyncService(BrokenCMS({"article": []}), indexer, item_delay=0)

        reports = await service.sync_all(["article"], "en-us")

        assert reports[0].total == 0
        assert reports[0].errors == [{"uid": "*", "error": "CMS unreachable", "details": "CMS unreachable"}]

    @pytest.mark.asyncio
    async def test_available_content_types(self, sync):
        assert await sync.available_content_types() == ["product", "article"]
