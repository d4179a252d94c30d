"""Entry-derived models: display categories and extracted documents."""

from dataclasses import dataclass, field
from enum import Enum


class ContentCategory(str, Enum):
    """Closed set of display categories used for search and filtering."""

    ARTICLE = "article"
    PRODUCT = "product"
    MEDIA = "media"
    VIDEO = "video"


@dataclass
class ExtractedDocument:
    """Searchable view of a CMS entry, rebuilt on every (re)index.

    Attributes:
        uid: Entry UID in the CMS.
        content_type_raw: CMS content-type identifier as received.
        locale: Entry locale.
        text: Cleaned searchable text.
        image_urls: Deduplicated HTTPS image URLs; element 0 is the primary image.
        mapped_type: Display category derived from ``content_type_raw``.
    """

    uid: str
    content_type_raw: str
    locale: str
    text: str
    mapped_type: ContentCategory
    image_urls: list[str] = field(default_factory=list)

    @property
    def primary_image(self) -> str | None:
        return self.image_urls[0] if self.image_urls else None
