"""Embedding Port Interface."""

from abc import ABC, abstractmethod


class EmbeddingPort(ABC):
    """Abstract interface for embedding providers.

    Document mode is used for indexed content, query mode for search input.
    Both return vectors of the same fixed dimension.
    """

    @abstractmethod
    async def embed_document(self, text: str) -> list[float]: ...

    @abstractmethod
    async def embed_query(self, text: str) -> list[float]: ...
