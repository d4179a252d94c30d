"""Unit tests for the indexer."""

import asyncio

import pytest

from cms_search.core.domain import (
    ContentCategory,
    ImageAnalysisDisabled,
    ImageAnalysisEnabled,
    IndexStatus,
)
from cms_search.core.domain.exceptions import (
    EmbeddingAPIError,
    EmbeddingTimeoutError,
    MissingFieldError,
)
from cms_search.core.services.image_analyzer import ImageAnalyzer
from cms_search.core.services.indexer import Indexer
from tests.conftest import FakeEmbedding

pytestmark = pytest.mark.unit


@pytest.fixture
def indexer(fake_embedding, vector_store, fake_vision):
    analyzer = ImageAnalyzer(ImageAnalysisEnabled(client=fake_vision), retry_delay=0, rate_limit_backoff=0)
    return Indexer(fake_embedding, vector_store, analyzer)


@pytest.fixture
def text_only_indexer(fake_embedding, vector_store):
    return Indexer(fake_embedding, vector_store, ImageAnalyzer(ImageAnalysisDisabled()))


class SlowEmbedding(FakeEmbedding):
    async def embed_document(self, text):
        await asyncio.sleep(1)
        return await super().embed_document(text)


class TestReindex:
    """Entries become one record keyed by uid and locale."""

    @pytest.mark.asyncio
    async def test_product_with_image(self, indexer, fake_embedding, vector_store, fake_vision, shoe_entry):
        outcome = await indexer.reindex(shoe_entry, "product", "en-us")

        assert outcome.status is IndexStatus.INDEXED
        assert outcome.record_id == "p1_en-us"
        assert outcome.mapped_type is ContentCategory.PRODUCT
        assert outcome.image_count == 1
        assert outcome.image_analyzed is True

        assert fake_vision.calls[0][0] == "https://cdn.example.com/assets/shoe.jpg"
        assert fake_embedding.document_calls[0].endswith(
            " Image description: A red running shoe on white background"
        )

        metadata = vector_store.records["p1_en-us"].metadata
        assert metadata["title"] == "Red Running Shoes"
        assert metadata["type"] == "product"
        assert metadata["content_type_uid"] == "product"
        assert metadata["price"] == 89.99
        assert metadata["primary_image"] == "https://cdn.example.com/assets/shoe.jpg"
        assert metadata["all_images"] == ["https://cdn.example.com/assets/shoe.jpg"]
        assert metadata["image_count"] == 1
        assert metadata["has_images"] is True
        assert metadata["visual_match"] is True
        assert metadata["multimodal_content"] is True
        assert metadata["image_analysis"] == "A red running shoe on white background"
        assert metadata["tags"] == ["running", "footwear"]
        assert metadata["date"] == "2024-05-01T10:00:00.000Z"

    @pytest.mark.asyncio
    async def test_text_only_article(self, text_only_indexer, vector_store, article_entry):
        outcome = await text_only_indexer.reindex(article_entry, "blog_post", "en-us")

        assert outcome.status is IndexStatus.INDEXED
        assert outcome.image_analyzed is False

        metadata = vector_store.records["a1_en-us"].metadata
        assert metadata["type"] == "article"
        assert metadata["url"] == "#a1"
        assert metadata["category"] == "blog_post"
        assert metadata["date"] == "2024-03-01T08:00:00.000Z"
        assert metadata["has_images"] is False
        for absent in ("price", "duration", "primary_image", "all_images", "image_analysis"):
            assert absent not in metadata
        assert None not in metadata.values()

    @pytest.mark.asyncio
    async def test_disabled_analysis_embeds_text_only(
        self, text_only_indexer, fake_embedding, vector_store, shoe_entry
    ):
        outcome = await text_only_indexer.reindex(shoe_entry, "product", "en-us")

        assert outcome.image_analyzed is False
        assert "Image description" not in fake_embedding.document_calls[0]
        assert "image_analysis" not in vector_store.records["p1_en-us"].metadata
        assert vector_store.records["p1_en-us"].metadata["has_images"] is True

    @pytest.mark.asyncio
    async def test_short_text_skipped_without_provider_calls(
        self, indexer, fake_embedding, fake_vision, vector_store
    ):
        entry = {"uid": "tiny", "title": "Hi", "image": "https://cdn.example.com/a.jpg"}

        outcome = await indexer.reindex(entry, "article", "en-us")

        assert outcome.status is IndexStatus.SKIPPED
        assert outcome.reason == "insufficient text content"
        assert fake_embedding.document_calls == []
        assert fake_vision.calls == []
        assert vector_store.records == {}

    @pytest.mark.asyncio
    async def test_reindex_overwrites_same_key(self, text_only_indexer, vector_store, article_entry):
        await text_only_indexer.reindex(article_entry, "blog_post", "en-us")
        article_entry["title"] = "Autumn Trail Guide"
        await text_only_indexer.reindex(article_entry, "blog_post", "en-us")

        assert list(vector_store.records) == ["a1_en-us"]
        assert vector_store.records["a1_en-us"].metadata["title"] == "Autumn Trail Guide"

    @pytest.mark.asyncio
    async def test_locales_are_separate_records(self, text_only_indexer, vector_store, article_entry):
        await text_only_indexer.reindex(article_entry, "blog_post", "en-us")
        await text_only_indexer.reindex(article_entry, "blog_post", "fr-fr")

        assert set(vector_store.records) == {"a1_en-us", "a1_fr-fr"}

    @pytest.mark.asyncio
    async def test_missing_uid(self, text_only_indexer):
        with pytest.raises(MissingFieldError):
            await text_only_indexer.reindex({"title": "No identifier here"}, "article", "en-us")

    @pytest.mark.asyncio
    async def test_embedding_failure_propagates(self, vector_store, article_entry):
        indexer = Indexer(
            FakeEmbedding(error=EmbeddingAPIError("quota exceeded")),
            vector_store,
            ImageAnalyzer(ImageAnalysisDisabled()),
        )

        with pytest.raises(EmbeddingAPIError):
            await indexer.reindex(article_entry, "blog_post", "en-us")
        assert vector_store.records == {}

    @pytest.mark.asyncio
    async def test_embedding_timeout(self, vector_store, article_entry):
        indexer = Indexer(
            SlowEmbedding(),
            vector_store,
            ImageAnalyzer(ImageAnalysisDisabled()),
            timeout=0.01,
        )

        with pytest.raises(EmbeddingTimeoutError):
            await indexer.reindex(article_entry, "blog_post", "en-us")


class TestMetadata:
    def test_long_snippet_truncated(self, text_only_indexer):
        entry = {"uid": "long", "title": "word " * 200}
        document = text_only_indexer.extract(entry, "article", "en-us")

        metadata = text_only_indexer.build_metadata(entry, document, None)

        assert len(metadata["snippet"]) == 303
        assert metadata["snippet"].endswith("...")

    def test_url_from_link_object(self, text_only_indexer):
        entry = {"uid": "l1", "title": "Linked entry", "url": {"href": "/guides/linked"}}
        document = text_only_indexer.extract(entry, "page", "en-us")

        assert text_only_indexer.build_metadata(entry, document, None)["url"] == "/guides/linked"

    def test_untitled_entry(self, text_only_indexer):
        entry = {"uid": "u1", "description": "Description without a title"}
        document = text_only_indexer.extract(entry, "article", "en-us")

        assert text_only_indexer.build_metadata(entry, document, None)["title"] == "Untitled"


class TestRemove:
    @pytest.mark.asyncio
    async def test_remove_deletes_record(self, text_only_indexer, vector_store, article_entry):
        await text_only_indexer.reindex(article_entry, "blog_post", "en-us")

        outcome = await text_only_indexer.remove("a1", "en-us")

        assert outcome.status is IndexStatus.REMOVED
        assert outcome.record_id == "a1_en-us"
        assert vector_store.records == {}

    @pytest.mark.asyncio
    async def test_remove_missing_record_is_noop(self, text_only_indexer):
        outcome = await text_only_indexer.remove("ghost", "en-us")
        assert outcome.status is IndexStatus.REMOVED


class TestReindexMany:
    @pytest.mark.asyncio
    async def test_continues_past_failures(self, text_only_indexer, shoe_entry, article_entry):
        entries = [shoe_entry, {"title": "Entry without identifier"}, {"uid": "s1", "title": "Tiny"}, article_entry]

        report = await text_only_indexer.reindex_many(entries, "product", "en-us")

        assert report.total == 4
        assert report.succeeded == 2
        assert report.skipped == 1
        assert report.failed == 1
        assert report.errors[0]["error"] == "Entry has no uid"
        assert report.success_rate == pytest.approx(200 / 3)

    @pytest.mark.asyncio
    async def test_counts_analyzed_images(self, indexer, shoe_entry, article_entry):
        report = await indexer.reindex_many([shoe_entry, article_entry], "product", "en-us")
        assert report.images_analyzed == 1
