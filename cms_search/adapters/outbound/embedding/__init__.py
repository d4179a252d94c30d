"""Embedding provider adapters."""

from .gemini_embedding import GeminiEmbeddingAdapter

__all__ = ["GeminiEmbeddingAdapter"]
