"""Unit tests for exception handling system.

Tests both the exception hierarchy and the exception handler utilities.
"""

import json
import logging

import pytest

from cms_search.common.exception_handler import (
    format_exception_json,
    get_error_code,
    get_http_status_code,
    log_exception,
)
from cms_search.core.domain import exceptions as exc_module
from cms_search.core.domain.exceptions import (
    CMSConnectionError,
    CMSError,
    CMSSearchError,
    CMSTimeoutError,
    CollectionNotFoundError,
    ConfigurationError,
    ContentTypeNotFoundError,
    EmbeddingAPIError,
    EmbeddingError,
    EmbeddingNotConfiguredError,
    EmbeddingRateLimitError,
    EmptyQueryError,
    EntryNotFoundError,
    ImageAnalysisError,
    ImageAnalysisRateLimitError,
    ImageAnalysisUnavailableError,
    MissingAPIKeyError,
    MissingFieldError,
    PayloadShapeError,
    ReindexError,
    ValidationError,
    VectorStoreConnectionError,
    VectorStoreError,
    VectorStoreQueryError,
    WebhookAuthenticationError,
    WebhookError,
    WebhookProcessingError,
)

# Apply @pytest.mark.unit to all tests in this module
pytestmark = pytest.mark.unit


class TestExceptionHierarchy:
    """Tests for the exception class hierarchy."""

    def test_base_class(self):
        """CMSSearchError should be the base for all custom exceptions."""
        for cls in (ConfigurationError, VectorStoreError, EmbeddingError, ImageAnalysisError, CMSError, WebhookError):
            assert issubclass(cls, CMSSearchError)

    def test_family_relationships(self):
        assert issubclass(CollectionNotFoundError, VectorStoreError)
        assert issubclass(EntryNotFoundError, CMSError)
        assert issubclass(EmptyQueryError, ValidationError)
        assert issubclass(PayloadShapeError, WebhookError)
        assert issubclass(MissingAPIKeyError, ConfigurationError)
        assert issubclass(EmbeddingNotConfiguredError, EmbeddingError)
        assert issubclass(ImageAnalysisRateLimitError, ImageAnalysisError)

    def test_each_exception_has_unique_error_code(self):
        """Each exported exception type should have its own error code."""
        classes = [
            getattr(exc_module, name)
            for name in exc_module.__all__
            if isinstance(getattr(exc_module, name), type) and issubclass(getattr(exc_module, name), CMSSearchError)
        ]
        codes = {cls.error_code for cls in classes}
        assert len(codes) == len(classes)


class TestExceptionCreation:
    """Tests for creating and using exceptions."""

    def test_basic_exception_creation(self):
        exc = CMSSearchError("Test error message")
        assert str(exc) == "Test error message"
        assert exc.message == "Test error message"
        assert exc.error_code == "CMS_ERR_001"
        assert exc.details == "Test error message"

    def test_details_come_from_cause(self):
        """``details`` should describe the underlying failure."""
        exc = VectorStoreQueryError("Vector index query failed", cause=ConnectionError("refused"))
        assert exc.details == "refused"

    def test_exception_captures_location(self):
        exc = CMSSearchError("Test")
        assert exc.location.file_name.endswith(".py")
        assert exc.location.line_number > 0


class TestExceptionToDict:
    """Tests for exception JSON serialization."""

    def test_to_dict_structure(self):
        exc = VectorStoreConnectionError("Connection failed", context={"url": "https://qdrant.example"})
        result = exc.to_dict()

        assert result["error"] == "Connection failed"
        assert result["details"] == "Connection failed"
        assert result["type"] == "VectorStoreConnectionError"
        assert result["code"] == "CMS_VEC_002"
        assert result["context"] == {"url": "https://qdrant.example"}
        assert {"class", "method", "file", "line"} <= set(result["location"])
        json.dumps(result)

    def test_to_dict_includes_cause(self):
        exc = ValidationError("Invalid input", cause=ValueError("Bad value"))
        result = exc.to_dict()

        assert result["cause"] == {"type": "ValueError", "message": "Bad value"}
        assert "stack_trace" not in result


class TestExceptionHandler:
    """Tests for exception handler utilities."""

    def test_format_custom_exception(self):
        result = format_exception_json(EmbeddingRateLimitError("Slow down"), extra_context={"request_id": "abc"})

        assert result["code"] == "CMS_EMB_003"
        assert result["context"]["request_id"] == "abc"

    def test_format_standard_exception(self):
        try:
            raise KeyError("boom")
        except KeyError as e:
            result = format_exception_json(e)

        assert result["error"] == "An unexpected error occurred"
        assert result["details"] == "'boom'"
        assert result["code"] == "PYTHON_ERR"
        assert result["location"]["method"] == "test_format_standard_exception"

    def test_log_exception_writes_envelope(self, caplog):
        log = logging.getLogger("cms_search_test.errors")
        with caplog.at_level(logging.WARNING, logger="cms_search_test.errors"):
            log_exception(EmptyQueryError("Query is required"), log=log, level=logging.WARNING)

        assert len(caplog.records) == 1
        logged = json.loads(caplog.records[0].getMessage())
        assert logged["code"] == EmptyQueryError.error_code
        assert logged["error"] == "Query is required"

    def test_get_error_code(self):
        assert get_error_code(EntryNotFoundError("x")) == "CMS_CMS_004"
        assert get_error_code(RuntimeError("x")) == "PYTHON_ERR"


class TestHTTPStatusCodes:
    """Tests for HTTP status code mapping."""

    @pytest.mark.parametrize(
        "exc,status",
        [
            (EmptyQueryError("q"), 400),
            (MissingFieldError("f"), 400),
            (PayloadShapeError("p"), 400),
            (WebhookAuthenticationError("a"), 401),
            (CollectionNotFoundError("c"), 404),
            (EntryNotFoundError("e"), 404),
            (ContentTypeNotFoundError("t"), 404),
            (EmbeddingRateLimitError("r"), 503),
            (EmbeddingNotConfiguredError("k"), 503),
            (ImageAnalysisRateLimitError("r"), 429),
            (EmbeddingAPIError("e"), 503),
            (VectorStoreQueryError("v"), 503),
            (ImageAnalysisUnavailableError("i"), 503),
            (CMSConnectionError("c"), 503),
            (CMSTimeoutError("t"), 503),
            (MissingAPIKeyError("k"), 500),
            (WebhookProcessingError("w"), 500),
            (ReindexError("r"), 500),
            (ValueError("v"), 400),
            (ConnectionError("c"), 503),
            (RuntimeError("r"), 500),
        ],
    )
    def test_status_mapping(self, exc, status):
        assert get_http_status_code(exc) == status
