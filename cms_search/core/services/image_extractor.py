"""Image URL discovery in CMS entries."""

import logging
from typing import Any

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".svg")

DEFAULT_ASSET_HOST_MARKERS = ("contentstack.io", "contentstack.com")

# Entry keys managed by the CMS rather than by content editors.
SYSTEM_FIELDS = frozenset(
    {
        "uid",
        "locale",
        "created_at",
        "updated_at",
        "created_by",
        "updated_by",
        "publish_details",
        "ACL",
        "_version",
        "_in_progress",
        "_metadata",
    }
)


def is_image_url(url: str) -> bool:
    """Heuristic: does ``url`` look like it points at an image?"""
    lowered = url.lower()
    if any(ext in lowered for ext in IMAGE_EXTENSIONS):
        return True
    return "/images/" in lowered or "image" in lowered


def ensure_https(url: str) -> str:
    """Upgrade ``http://`` and protocol-relative URLs to ``https://``."""
    url = url.strip()
    if url.startswith("//"):
        return "https:" + url
    if url.lower().startswith("http://"):
        return "https://" + url[len("http://") :]
    return url


class ImageExtractor:
    """Collect deduplicated HTTPS image URLs from an entry.

    Singular image fields are scanned first in a fixed order, then the
    ``images`` and ``gallery`` arrays item by item. Element 0 of the result
    is the entry's primary image.
    """

    IMAGE_FIELDS = (
        "image",
        "featured_image",
        "banner_image",
        "thumbnail",
        "photo",
        "picture",
        "media",
        "product_image",
        "media_file",
        "asset",
        "file",
    )
    GALLERY_FIELDS = ("images", "gallery")

    def __init__(self, asset_host_markers: tuple[str, ...] | list[str] = DEFAULT_ASSET_HOST_MARKERS) -> None:
        self.asset_host_markers = tuple(marker.lower() for marker in asset_host_markers)

    def extract(self, entry: dict[str, Any]) -> list[str]:
        """Return image URLs for ``entry`` in first-seen order, without duplicates."""
        candidates: list[str] = []

        for name in self.IMAGE_FIELDS:
            url = self._accept(entry.get(name))
            if url:
                candidates.append(url)

        for name in self.GALLERY_FIELDS:
            items = entry.get(name)
            if not isinstance(items, list):
                continue
            for item in items:
                url = self._accept(item)
                if url:
                    candidates.append(url)

        urls: list[str] = []
        seen: set[str] = set()
        for candidate in candidates:
            normalized = ensure_https(candidate)
            key = normalized.lower()
            if key in seen:
                continue
            seen.add(key)
            urls.append(normalized)
        return urls

    def _accept(self, value: Any) -> str | None:
        """Return the image URL carried by one field value, if any."""
        if isinstance(value, str):
            return value if self._accept_string(value) else None
        if isinstance(value, dict):
            for key in ("url", "href"):
                url = value.get(key)
                if isinstance(url, str) and url and is_image_url(url):
                    return url
        return None

    def _accept_string(self, value: str) -> bool:
        lowered = value.strip().lower()
        if not lowered:
            return False
        if self.is_asset_url(lowered):
            return True
        is_absolute = lowered.startswith(("http://", "https://", "//"))
        return is_absolute and is_image_url(lowered)

    def is_asset_url(self, url: str) -> bool:
        lowered = url.lower()
        return any(marker in lowered for marker in self.asset_host_markers)

    def analyze_fields(self, entry: dict[str, Any]) -> dict[str, dict[str, Any]]:
        """Describe every field that looks like an asset reference.

        Used by the entry-inspection endpoint to debug why an entry does or
        does not yield images.
        """
        analysis: dict[str, dict[str, Any]] = {}
        for name, value in entry.items():
            if isinstance(value, dict) and any(k in value for k in ("url", "filename", "content_type")):
                url = value.get("url")
                analysis[name] = {
                    "type": "potential_asset",
                    "url": url,
                    "filename": value.get("filename"),
                    "content_type": value.get("content_type"),
                    "is_image": isinstance(url, str) and is_image_url(url),
                }
            elif isinstance(value, list) and value and isinstance(value[0], dict) and "url" in value[0]:
                analysis[name] = {
                    "type": "asset_array",
                    "count": len(value),
                    "urls": [item.get("url") for item in value if isinstance(item, dict)],
                }
            elif isinstance(value, str) and self.is_asset_url(value):
                analysis[name] = {
                    "type": "direct_url",
                    "url": value,
                    "is_image": is_image_url(value),
                }
        return analysis


def public_field_names(entry: dict[str, Any]) -> list[str]:
    """Editor-defined field names of ``entry``."""
    return [name for name in entry if name not in SYSTEM_FIELDS and not name.startswith("_")]
