"""CMS Port Interface."""

from abc import ABC, abstractmethod
from typing import Any


class CMSPort(ABC):
    """Abstract interface for the headless CMS delivery API."""

    @abstractmethod
    async def get_entry(self, content_type: str, entry_uid: str, locale: str) -> dict[str, Any]:
        """Fetch one entry. Raises ``EntryNotFoundError`` if it does not exist."""
        ...

    @abstractmethod
    async def query_entries(
        self,
        content_type: str,
        locale: str,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[dict[str, Any]], int]:
        """Fetch one page of entries and the total entry count."""
        ...

    @abstractmethod
    async def list_content_types(self) -> list[dict[str, Any]]:
        """List the content types defined in the stack."""
        ...
