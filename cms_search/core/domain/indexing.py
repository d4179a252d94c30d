"""Indexing models: persisted records and per-entry outcomes."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .entry import ContentCategory


def record_key(uid: str, locale: str) -> str:
    """Stable vector-index key for one entry in one locale."""
    return f"{uid}_{locale}"


@dataclass
class IndexedRecord:
    """Vector plus metadata stored under ``record_id`` in the vector index.

    Metadata never holds ``None`` values; absent optional fields are omitted.
    """

    record_id: str
    vector: list[float]
    metadata: dict[str, Any]


class IndexStatus(str, Enum):
    """What happened to an entry during an indexing operation."""

    INDEXED = "indexed"
    SKIPPED = "skipped"
    REMOVED = "removed"


@dataclass
class IndexOutcome:
    """Result of a single reindex or remove call."""

    status: IndexStatus
    record_id: str
    uid: str
    mapped_type: ContentCategory | None = None
    image_count: int = 0
    image_analyzed: bool = False
    reason: str | None = None


@dataclass
class BatchReindexReport:
    """Tally of a sequential bulk reindex."""

    content_type: str
    locale: str
    total: int = 0
    succeeded: int = 0
    skipped: int = 0
    failed: int = 0
    images_analyzed: int = 0
    errors: list[dict[str, str]] = field(default_factory=list)

    @property
    def success_rate(self) -> float:
        attempted = self.succeeded + self.failed
        return (self.succeeded / attempted) * 100 if attempted else 0.0
