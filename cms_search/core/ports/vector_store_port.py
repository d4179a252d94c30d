"""Vector Store Port Interface."""

from abc import ABC, abstractmethod
from typing import Any

from ..domain import IndexedRecord, VectorMatch


class VectorStorePort(ABC):
    """Abstract interface for the vector index.

    Upsert and delete are atomic per key; there are no multi-key transactions.
    """

    @abstractmethod
    async def upsert(self, record: IndexedRecord) -> None:
        """Insert or overwrite the record stored under ``record.record_id``."""
        ...

    @abstractmethod
    async def delete(self, record_id: str) -> None:
        """Delete a record. Deleting a missing key is not an error."""
        ...

    @abstractmethod
    async def query(
        self,
        vector: list[float],
        top_k: int,
        filters: dict[str, list[str]] | None = None,
    ) -> list[VectorMatch]:
        """Return the ``top_k`` nearest records, optionally filtered.

        ``filters`` maps a metadata field to the allowed values for it.
        """
        ...

    @abstractmethod
    async def sample(self, limit: int) -> list[VectorMatch]:
        """Return up to ``limit`` stored records in index order, without scores."""
        ...

    @abstractmethod
    async def describe(self) -> dict[str, Any]:
        """Describe the index (vector count, dimension, status)."""
        ...
