"""Mapping of CMS content-type identifiers onto display categories."""

from ..domain import ContentCategory


class ContentTypeMapper:
    """Map raw CMS content-type identifiers to a :class:`ContentCategory`.

    Lookup order: exact match, substring match against the known names,
    coarse keyword heuristics, then ``article``. Pure and total.
    """

    TYPE_MAPPING: dict[str, ContentCategory] = {
        # Articles
        "article": ContentCategory.ARTICLE,
        "blog_post": ContentCategory.ARTICLE,
        "news": ContentCategory.ARTICLE,
        "post": ContentCategory.ARTICLE,
        "content": ContentCategory.ARTICLE,
        "page": ContentCategory.ARTICLE,
        # Products
        "product": ContentCategory.PRODUCT,
        "item": ContentCategory.PRODUCT,
        "goods": ContentCategory.PRODUCT,
        "smartphone": ContentCategory.PRODUCT,
        "electronics": ContentCategory.PRODUCT,
        "watch": ContentCategory.PRODUCT,
        # Media
        "media": ContentCategory.MEDIA,
        "image": ContentCategory.MEDIA,
        "asset": ContentCategory.MEDIA,
        # Video
        "video": ContentCategory.VIDEO,
        "movie": ContentCategory.VIDEO,
        "film": ContentCategory.VIDEO,
    }

    HEURISTICS: tuple[tuple[tuple[str, ...], ContentCategory], ...] = (
        (("vid",), ContentCategory.VIDEO),
        (("img", "pic"), ContentCategory.MEDIA),
        (("prod", "shop", "buy"), ContentCategory.PRODUCT),
    )

    DEFAULT = ContentCategory.ARTICLE

    def map(self, content_type: str | None) -> ContentCategory:
        if not content_type:
            return self.DEFAULT

        lowered = content_type.strip().lower()
        if not lowered:
            return self.DEFAULT

        exact = self.TYPE_MAPPING.get(lowered)
        if exact is not None:
            return exact

        for name, category in self.TYPE_MAPPING.items():
            if name in lowered:
                return category

        for keywords, category in self.HEURISTICS:
            if any(keyword in lowered for keyword in keywords):
                return category

        return self.DEFAULT
