"""CMS webhook classification and routing.

A payload is parsed once into a :data:`WebhookPayload` variant:

* ``AssetEvent`` when ``module == "asset"`` or ``data.asset.uid`` is present;
* ``RecognizedEntryEvent`` for the nested shape (``data.entry``) or the flat
  shape (``data.uid`` with ``data.content_type_uid``);
* ``UnrecognizedPayload`` otherwise, which is rejected as a client error.

Recognized events are routed by name: publish/update reindex the entry,
unpublish/delete remove it, anything else is acknowledged as a no-op.
"""

import logging
from typing import Any

from ..domain import (
    AssetEvent,
    IndexStatus,
    RecognizedEntryEvent,
    UnrecognizedPayload,
    WebhookAction,
    WebhookOutcome,
    WebhookPayload,
)
from ..domain.exceptions import CMSSearchError, PayloadShapeError, WebhookProcessingError
from .indexer import Indexer

logger = logging.getLogger(__name__)

REINDEX_EVENTS = frozenset({"publish", "update"})
REMOVE_EVENTS = frozenset({"unpublish", "delete"})


def normalize_event(event: str) -> str:
    """Lowercase ``event`` and drop the ``entry.`` prefix."""
    normalized = event.strip().lower()
    if normalized.startswith("entry."):
        normalized = normalized[len("entry.") :]
    return normalized


def parse_payload(payload: Any, default_locale: str = "en-us") -> WebhookPayload:
    """Classify a raw webhook body into exactly one payload variant."""
    if not isinstance(payload, dict):
        return UnrecognizedPayload(event=None, reason="payload is not a JSON object")

    event = payload.get("event")
    data = payload.get("data")
    module = payload.get("module")
    if not isinstance(event, str) or not event.strip():
        return UnrecognizedPayload(event=None, reason="missing event", module=module)
    if not isinstance(data, dict):
        return UnrecognizedPayload(event=event, reason="missing data", module=module)

    asset = data.get("asset")
    if module == "asset" or (isinstance(asset, dict) and asset.get("uid")):
        asset_uid = asset.get("uid") if isinstance(asset, dict) else data.get("uid")
        return AssetEvent(event=event, asset_uid=asset_uid)

    data_locale = data.get("locale") if isinstance(data.get("locale"), str) else None

    entry = data.get("entry")
    if isinstance(entry, dict) and entry.get("uid"):
        content_type = entry.get("content_type_uid")
        if not content_type:
            nested_type = data.get("content_type")
            if isinstance(nested_type, dict):
                content_type = nested_type.get("uid")
        if not isinstance(content_type, str) or not content_type:
            return UnrecognizedPayload(
                event=event,
                reason="entry has no content type",
                module=module,
                data_keys=sorted(data),
            )
        return RecognizedEntryEvent(
            event=event,
            entry_data=entry,
            content_type=content_type,
            entry_uid=str(entry["uid"]),
            locale=entry.get("locale") or data_locale or default_locale,
        )

    content_type = data.get("content_type_uid")
    if data.get("uid") and isinstance(content_type, str) and content_type:
        return RecognizedEntryEvent(
            event=event,
            entry_data=data,
            content_type=content_type,
            entry_uid=str(data["uid"]),
            locale=data_locale or default_locale,
        )

    reason = "entry has no content type" if data.get("uid") else "no entry found in payload"
    return UnrecognizedPayload(event=event, reason=reason, module=module, data_keys=sorted(data))


class WebhookDispatcher:
    """Route CMS change events to the :class:`Indexer`."""

    def __init__(self, indexer: Indexer, default_locale: str = "en-us") -> None:
        self.indexer = indexer
        self.default_locale = default_locale

    async def handle(self, payload: Any) -> WebhookOutcome:
        """Parse and dispatch ``payload``.

        Raises:
            PayloadShapeError: If the payload matches no known shape.
            WebhookProcessingError: If indexing fails downstream.
        """
        parsed = parse_payload(payload, self.default_locale)
        return await self.dispatch(parsed)

    async def dispatch(self, parsed: WebhookPayload) -> WebhookOutcome:
        if isinstance(parsed, UnrecognizedPayload):
            logger.warning(
                "Rejecting webhook payload (event=%s): %s; data keys=%s",
                parsed.event,
                parsed.reason,
                parsed.data_keys,
            )
            raise PayloadShapeError(
                f"Invalid webhook payload: {parsed.reason}",
                context={"event": parsed.event, "data_keys": parsed.data_keys},
            )

        if isinstance(parsed, AssetEvent):
            logger.info("Asset event %s acknowledged (asset %s)", parsed.event, parsed.asset_uid)
            return WebhookOutcome(
                event=parsed.event,
                action=WebhookAction.IGNORED,
                message="Asset event acknowledged; assets are not indexed",
                asset_uid=parsed.asset_uid,
            )

        return await self._dispatch_entry(parsed)

    async def _dispatch_entry(self, parsed: RecognizedEntryEvent) -> WebhookOutcome:
        name = normalize_event(parsed.event)
        logger.info(
            "Webhook %s for %s/%s (%s)",
            parsed.event,
            parsed.content_type,
            parsed.entry_uid,
            parsed.locale,
        )

        try:
            if name in REINDEX_EVENTS:
                outcome = await self.indexer.reindex(parsed.entry_data, parsed.content_type, parsed.locale)
                if outcome.status is IndexStatus.SKIPPED:
                    message = f"Entry {parsed.entry_uid} skipped: {outcome.reason}"
                else:
                    message = f"Entry {parsed.entry_uid} reindexed"
                return WebhookOutcome(
                    event=parsed.event,
                    action=WebhookAction.REINDEX,
                    message=message,
                    entry_uid=parsed.entry_uid,
                    content_type=parsed.content_type,
                    mapped_type=outcome.mapped_type.value if outcome.mapped_type else None,
                )

            if name in REMOVE_EVENTS:
                await self.indexer.remove(parsed.entry_uid, parsed.locale)
                return WebhookOutcome(
                    event=parsed.event,
                    action=WebhookAction.REMOVE,
                    message=f"Entry {parsed.entry_uid} removed from index",
                    entry_uid=parsed.entry_uid,
                    content_type=parsed.content_type,
                )
        except CMSSearchError as e:
            raise WebhookProcessingError(
                f"Failed to process {parsed.event} for entry {parsed.entry_uid}",
                cause=e,
                context={"content_type": parsed.content_type, "entry_uid": parsed.entry_uid},
            ) from e

        logger.info("Unhandled webhook event %s; acknowledging without action", parsed.event)
        return WebhookOutcome(
            event=parsed.event,
            action=WebhookAction.IGNORED,
            message=f"Event {parsed.event} acknowledged; no action taken",
            entry_uid=parsed.entry_uid,
            content_type=parsed.content_type,
        )
