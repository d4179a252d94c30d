"""Reindexing driven by fresh reads from the CMS."""

import logging
from collections.abc import Callable
from typing import Any

from ...common.timeouts import bounded
from ..domain import BatchReindexReport, IndexOutcome
from ..domain.exceptions import (
    CMSError,
    CMSTimeoutError,
    ContentTypeNotFoundError,
    EmbeddingError,
    ReindexError,
    VectorStoreError,
)
from ..ports.cms_port import CMSPort
from .indexer import Indexer

logger = logging.getLogger(__name__)


class ContentSyncService:
    """Fetch entries from the CMS and push them through the :class:`Indexer`."""

    def __init__(
        self,
        cms: CMSPort,
        indexer: Indexer,
        page_size: int = 100,
        item_delay: float = 0.5,
        timeout: float = 30.0,
    ) -> None:
        self.cms = cms
        self.indexer = indexer
        self.page_size = max(1, page_size)
        self.item_delay = item_delay
        self.timeout = timeout

    async def fetch_entry(self, content_type: str, entry_uid: str, locale: str) -> dict[str, Any]:
        return await bounded(
            self.cms.get_entry(content_type, entry_uid, locale),
            self.timeout,
            CMSTimeoutError,
            "CMS entry fetch",
        )

    async def fetch_entries(
        self,
        content_type: str,
        locale: str,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Page through all entries of ``content_type``, up to ``limit``."""
        entries: list[dict[str, Any]] = []
        skip = 0
        while True:
            page_size = self.page_size
            if limit is not None:
                page_size = min(page_size, limit - len(entries))
                if page_size <= 0:
                    break
            page, total = await bounded(
                self.cms.query_entries(content_type, locale, skip=skip, limit=page_size),
                self.timeout,
                CMSTimeoutError,
                "CMS entry query",
            )
            entries.extend(page)
            skip += len(page)
            logger.debug("Fetched %d/%d %s entries", skip, total, content_type)
            if not page or skip >= total:
                break
        return entries

    async def reindex_entry(self, content_type: str, entry_uid: str, locale: str) -> IndexOutcome:
        """Fetch one entry fresh from the CMS and reindex it.

        Raises:
            EntryNotFoundError: If the CMS has no such entry.
            ReindexError: If embedding or the vector index fails.
        """
        entry = await self.fetch_entry(content_type, entry_uid, locale)
        try:
            return await self.indexer.reindex(entry, content_type, locale)
        except (EmbeddingError, VectorStoreError) as e:
            raise ReindexError(
                f"Failed to reindex entry {entry_uid}",
                cause=e,
                context={"content_type": content_type, "entry_uid": entry_uid, "locale": locale},
            ) from e

    async def reindex_content_type(
        self,
        content_type: str,
        locale: str,
        limit: int | None = None,
    ) -> BatchReindexReport:
        """Reindex every entry of ``content_type`` sequentially.

        Raises:
            ContentTypeNotFoundError: If the content type has no entries.
        """
        entries = await self.fetch_entries(content_type, locale, limit=limit)
        if not entries:
            raise ContentTypeNotFoundError(
                f"No entries found for content type '{content_type}'",
                context={"content_type": content_type, "locale": locale},
            )
        logger.info("Reindexing %d %s entries (%s)", len(entries), content_type, locale)
        report = await self.indexer.reindex_many(
            entries,
            content_type,
            locale,
            item_delay=self.item_delay,
        )
        logger.info(
            "Reindexed %s: %d ok, %d skipped, %d failed",
            content_type,
            report.succeeded,
            report.skipped,
            report.failed,
        )
        return report

    async def available_content_types(self) -> list[str]:
        content_types = await bounded(
            self.cms.list_content_types(),
            self.timeout,
            CMSTimeoutError,
            "CMS content type listing",
        )
        return [ct["uid"] for ct in content_types if isinstance(ct, dict) and ct.get("uid")]

    async def sync_all(
        self,
        content_types: list[str],
        locale: str,
        on_start: Callable[[str], None] | None = None,
        on_report: Callable[[BatchReindexReport], None] | None = None,
    ) -> list[BatchReindexReport]:
        """Reindex every configured content type that exists in the CMS.

        ``on_start`` and ``on_report`` are called around each content type so
        callers can render progress.
        """
        available = set(await self.available_content_types())
        targets = [ct for ct in content_types if ct in available]
        missing = [ct for ct in content_types if ct not in available]
        if missing:
            logger.warning("Content types not found in CMS: %s", ", ".join(missing))

        reports: list[BatchReindexReport] = []
        for content_type in targets:
            if on_start:
                on_start(content_type)
            try:
                report = await self.reindex_content_type(content_type, locale)
            except ContentTypeNotFoundError:
                logger.info("No entries for %s", content_type)
                report = BatchReindexReport(content_type=content_type, locale=locale)
            except CMSError as e:
                logger.error("Failed to fetch %s entries: %s", content_type, e.message)
                report = BatchReindexReport(content_type=content_type, locale=locale)
                report.errors.append({"uid": "*", "error": e.message, "details": e.details})
            reports.append(report)
            if on_report:
                on_report(report)
        return reports
