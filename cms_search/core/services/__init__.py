"""Indexing and search services."""

from .content_extractor import ContentExtractor
from .content_type_mapper import ContentTypeMapper
from .image_analyzer import ImageAnalyzer
from .image_extractor import ImageExtractor
from .indexer import Indexer
from .query_classifier import QueryClassifier
from .result_annotator import ResultAnnotator
from .search_service import SearchService
from .sync_service import ContentSyncService
from .webhook_dispatcher import WebhookDispatcher

__all__ = [
    "ContentExtractor",
    "ContentSyncService",
    "ContentTypeMapper",
    "ImageAnalyzer",
    "ImageExtractor",
    "Indexer",
    "QueryClassifier",
    "ResultAnnotator",
    "SearchService",
    "WebhookDispatcher",
]
