"""Contentstack Content Delivery API adapter."""

import logging
from typing import Any

import httpx

from ....core.domain.exceptions import (
    CMSConnectionError,
    CMSError,
    CMSTimeoutError,
    ContentTypeNotFoundError,
    EntryNotFoundError,
    MissingAPIKeyError,
)
from ....core.ports.cms_port import CMSPort

logger = logging.getLogger(__name__)

# Contentstack answers 422 with these codes for missing resources
ENTRY_NOT_FOUND_CODE = 141
CONTENT_TYPE_NOT_FOUND_CODE = 118


class ContentstackAdapter(CMSPort):
    """Read entries and content types from the Contentstack Delivery API."""

    def __init__(
        self,
        api_key: str,
        delivery_token: str,
        environment: str,
        host: str = "cdn.contentstack.io",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.api_key = api_key
        self.delivery_token = delivery_token
        self.environment = environment
        self.base_url = f"https://{host}/v3"
        self._client = http_client or httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.delivery_token and self.environment)

    def _headers(self) -> dict[str, str]:
        if not self.configured:
            raise MissingAPIKeyError(
                "Contentstack credentials not set. Set CONTENTSTACK_API_KEY, "
                "CONTENTSTACK_DELIVERY_TOKEN and CONTENTSTACK_ENVIRONMENT.",
                context={"setting": "contentstack"},
            )
        return {"api_key": self.api_key, "access_token": self.delivery_token}

    async def _get(self, path: str, params: dict[str, Any]) -> httpx.Response:
        headers = self._headers()
        try:
            return await self._client.get(path, params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise CMSTimeoutError(
                "Contentstack request timed out",
                cause=e,
                context={"path": path},
            ) from e
        except httpx.HTTPError as e:
            raise CMSConnectionError(
                "Failed to reach Contentstack",
                cause=e,
                context={"path": path},
            ) from e

    @staticmethod
    def _error_code(response: httpx.Response) -> int | None:
        try:
            body = response.json()
        except ValueError:
            return None
        return body.get("error_code") if isinstance(body, dict) else None

    @staticmethod
    def _raise_for_status(response: httpx.Response, path: str) -> None:
        if response.status_code < 400:
            return
        error_cls = CMSConnectionError if response.status_code >= 500 else CMSError
        raise error_cls(
            f"Contentstack returned HTTP {response.status_code}",
            context={"path": path, "status": response.status_code, "body": response.text[:500]},
        )

    def _is_missing(self, response: httpx.Response, code: int) -> bool:
        if response.status_code == 404:
            return True
        return response.status_code == 422 and self._error_code(response) == code

    async def get_entry(self, content_type: str, entry_uid: str, locale: str) -> dict[str, Any]:
        path = f"/content_types/{content_type}/entries/{entry_uid}"
        response = await self._get(path, {"environment": self.environment, "locale": locale})

        if self._is_missing(response, ENTRY_NOT_FOUND_CODE) or self._is_missing(
            response, CONTENT_TYPE_NOT_FOUND_CODE
        ):
            raise EntryNotFoundError(
                f"Entry {entry_uid} not found in content type {content_type}",
                context={"content_type": content_type, "entry_uid": entry_uid, "locale": locale},
            )
        self._raise_for_status(response, path)

        entry = response.json().get("entry")
        if not isinstance(entry, dict):
            raise EntryNotFoundError(
                f"Entry {entry_uid} not found in content type {content_type}",
                context={"content_type": content_type, "entry_uid": entry_uid, "locale": locale},
            )
        entry.setdefault("locale", locale)
        return entry

    async def query_entries(
        self,
        content_type: str,
        locale: str,
        skip: int = 0,
        limit: int = 100,
    ) -> tuple[list[dict[str, Any]], int]:
        path = f"/content_types/{content_type}/entries"
        params = {
            "environment": self.environment,
            "locale": locale,
            "skip": skip,
            "limit": limit,
            "include_count": "true",
        }
        response = await self._get(path, params)

        if self._is_missing(response, CONTENT_TYPE_NOT_FOUND_CODE):
            raise ContentTypeNotFoundError(
                f"Content type {content_type} not found",
                context={"content_type": content_type},
            )
        self._raise_for_status(response, path)

        body = response.json()
        entries = [entry for entry in body.get("entries", []) if isinstance(entry, dict)]
        total = body.get("count", skip + len(entries))
        logger.debug("Fetched %d %s entries (skip=%d, total=%s)", len(entries), content_type, skip, total)
        return entries, int(total)

    async def list_content_types(self) -> list[dict[str, Any]]:
        path = "/content_types"
        response = await self._get(path, {"include_count": "true"})
        self._raise_for_status(response, path)
        content_types = response.json().get("content_types", [])
        return [ct for ct in content_types if isinstance(ct, dict)]

    async def close(self) -> None:
        await self._client.aclose()
