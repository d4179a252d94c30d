"""Ports for the external collaborators of the search core."""

from .cms_port import CMSPort
from .embedding_port import EmbeddingPort
from .image_analysis_port import ImageAnalysisPort
from .vector_store_port import VectorStorePort

__all__ = ["CMSPort", "EmbeddingPort", "ImageAnalysisPort", "VectorStorePort"]
