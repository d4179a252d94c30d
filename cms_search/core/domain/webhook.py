"""Webhook payload variants and dispatch outcomes.

A raw payload is parsed exactly once into one of ``RecognizedEntryEvent``,
``AssetEvent`` or ``UnrecognizedPayload``; nothing downstream inspects the
raw shape again.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class WebhookAction(str, Enum):
    """What the dispatcher did with an event."""

    REINDEX = "reindex"
    REMOVE = "remove"
    IGNORED = "ignored"


@dataclass
class RecognizedEntryEvent:
    """An entry event carrying everything the indexer needs."""

    event: str
    entry_data: dict[str, Any]
    content_type: str
    entry_uid: str
    locale: str


@dataclass
class AssetEvent:
    """An asset-only event; acknowledged but never indexed."""

    event: str
    asset_uid: str | None = None


@dataclass
class UnrecognizedPayload:
    """A payload matching none of the documented shapes."""

    event: str | None
    reason: str
    module: str | None = None
    data_keys: list[str] = field(default_factory=list)


WebhookPayload = RecognizedEntryEvent | AssetEvent | UnrecognizedPayload


@dataclass
class WebhookOutcome:
    """Acknowledgement returned to the webhook caller."""

    event: str
    action: WebhookAction
    message: str
    entry_uid: str | None = None
    content_type: str | None = None
    asset_uid: str | None = None
    mapped_type: str | None = None
