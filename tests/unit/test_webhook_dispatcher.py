"""Unit tests for webhook payload classification and routing."""

import pytest

from cms_search.core.domain import (
    AssetEvent,
    ImageAnalysisDisabled,
    RecognizedEntryEvent,
    UnrecognizedPayload,
    WebhookAction,
)
from cms_search.core.domain.exceptions import (
    PayloadShapeError,
    VectorStoreWriteError,
    WebhookProcessingError,
)
from cms_search.core.services.image_analyzer import ImageAnalyzer
from cms_search.core.services.indexer import Indexer
from cms_search.core.services.webhook_dispatcher import (
    WebhookDispatcher,
    normalize_event,
    parse_payload,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def dispatcher(fake_embedding, vector_store):
    indexer = Indexer(fake_embedding, vector_store, ImageAnalyzer(ImageAnalysisDisabled()))
    return WebhookDispatcher(indexer, default_locale="en-us")


def nested_payload(event, entry, content_type="blog_post"):
    return {
        "module": "entry",
        "event": event,
        "data": {"entry": entry, "content_type": {"uid": content_type}},
    }


class TestParsePayload:
    def test_nested_shape(self, article_entry):
        parsed = parse_payload(nested_payload("publish", article_entry))

        assert isinstance(parsed, RecognizedEntryEvent)
        assert parsed.entry_uid == "a1"
        assert parsed.content_type == "blog_post"
        assert parsed.locale == "en-us"

    def test_entry_content_type_wins(self, shoe_entry):
        parsed = parse_payload(nested_payload("publish", shoe_entry, content_type="other"))
        assert parsed.content_type == "product"

    def test_locale_precedence(self, article_entry):
        payload = nested_payload("publish", article_entry)
        payload["data"]["locale"] = "de-de"
        assert parse_payload(payload).locale == "de-de"

        article_entry["locale"] = "fr-fr"
        assert parse_payload(payload).locale == "fr-fr"

    def test_default_locale(self, article_entry):
        parsed = parse_payload(nested_payload("publish", article_entry), default_locale="ja-jp")
        assert parsed.locale == "ja-jp"

    def test_flat_shape(self):
        payload = {
            "event": "update",
            "data": {"uid": "n1", "content_type_uid": "news", "title": "Flat entry", "locale": "en-gb"},
        }

        parsed = parse_payload(payload)

        assert isinstance(parsed, RecognizedEntryEvent)
        assert parsed.entry_uid == "n1"
        assert parsed.content_type == "news"
        assert parsed.locale == "en-gb"
        assert parsed.entry_data["title"] == "Flat entry"

    def test_asset_by_module(self):
        parsed = parse_payload({"module": "asset", "event": "publish", "data": {"uid": "as1"}})
        assert parsed == AssetEvent(event="publish", asset_uid="as1")

    def test_asset_by_data(self):
        parsed = parse_payload({"event": "publish", "data": {"asset": {"uid": "as2"}}})
        assert isinstance(parsed, AssetEvent)
        assert parsed.asset_uid == "as2"

    @pytest.mark.parametrize(
        "payload,reason",
        [
            ([], "payload is not a JSON object"),
            ({"data": {"uid": "x"}}, "missing event"),
            ({"event": "publish"}, "missing data"),
            ({"event": "publish", "data": {"title": "No uid"}}, "no entry found in payload"),
            ({"event": "publish", "data": {"uid": "x"}}, "entry has no content type"),
            ({"event": "publish", "data": {"entry": {"uid": "x"}}}, "entry has no content type"),
        ],
    )
    def test_unrecognized(self, payload, reason):
        parsed = parse_payload(payload)
        assert isinstance(parsed, UnrecognizedPayload)
        assert parsed.reason == reason

    @pytest.mark.parametrize(
        "event,expected",
        [("publish", "publish"), ("entry.Publish", "publish"), (" UNPUBLISH ", "unpublish")],
    )
    def test_normalize_event(self, event, expected):
        assert normalize_event(event) == expected


class TestDispatch:
    @pytest.mark.asyncio
    async def test_publish_reindexes(self, dispatcher, vector_store, article_entry):
        outcome = await dispatcher.handle(nested_payload("publish", article_entry))

        assert outcome.action is WebhookAction.REINDEX
        assert outcome.message == "Entry a1 reindexed"
        assert outcome.mapped_type == "article"
        assert "a1_en-us" in vector_store.records

    @pytest.mark.asyncio
    async def test_short_entry_reported_as_skipped(self, dispatcher, vector_store):
        outcome = await dispatcher.handle(nested_payload("update", {"uid": "s1", "title": "Tiny"}))

        assert outcome.action is WebhookAction.REINDEX
        assert outcome.message == "Entry s1 skipped: insufficient text content"
        assert vector_store.records == {}

    @pytest.mark.asyncio
    async def test_unpublish_removes(self, dispatcher, vector_store, article_entry):
        await dispatcher.handle(nested_payload("publish", article_entry))

        outcome = await dispatcher.handle(nested_payload("unpublish", article_entry))

        assert outcome.action is WebhookAction.REMOVE
        assert outcome.message == "Entry a1 removed from index"
        assert vector_store.records == {}

    @pytest.mark.asyncio
    async def test_delete_of_unknown_entry_succeeds(self, dispatcher):
        outcome = await dispatcher.handle(nested_payload("delete", {"uid": "ghost"}))
        assert outcome.action is WebhookAction.REMOVE

    @pytest.mark.asyncio
    async def test_unknown_event_ignored(self, dispatcher, fake_embedding, article_entry):
        outcome = await dispatcher.handle(nested_payload("create", article_entry))

        assert outcome.action is WebhookAction.IGNORED
        assert outcome.message == "Event create acknowledged; no action taken"
        assert fake_embedding.document_calls == []

    @pytest.mark.asyncio
    async def test_asset_event_acknowledged(self, dispatcher, fake_embedding):
        outcome = await dispatcher.handle({"module": "asset", "event": "publish", "data": {"uid": "as1"}})

        assert outcome.action is WebhookAction.IGNORED
        assert outcome.asset_uid == "as1"
        assert fake_embedding.document_calls == []

    @pytest.mark.asyncio
    async def test_unrecognized_rejected(self, dispatcher):
        with pytest.raises(PayloadShapeError) as exc_info:
            await dispatcher.handle({"event": "publish", "data": {"title": "?"}})

        assert exc_info.value.extra_context["data_keys"] == ["title"]

    @pytest.mark.asyncio
    async def test_indexing_failure_wrapped(self, dispatcher, vector_store, article_entry):
        vector_store.write_error = VectorStoreWriteError("write failed")

        with pytest.raises(WebhookProcessingError) as exc_info:
            await dispatcher.handle(nested_payload("publish", article_entry))

        assert isinstance(exc_info.value.cause, VectorStoreWriteError)
        assert exc_info.value.details == "write failed"
