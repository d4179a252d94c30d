"""Pure visual-intent classification of search queries."""

from __future__ import annotations

from ..domain import VisualQueryAnalysis


class QueryClassifier:
    """Flag queries that ask about how something looks.

    A keyword counts when it appears anywhere in the lowercased query.
    Keywords contained in another matched keyword are folded into it, so
    "sneakers" counts once rather than as both "sneaker" and "sneakers".
    """

    VISUAL_KEYWORDS: tuple[str, ...] = (
        # Colors
        "red", "blue", "green", "yellow", "black", "white", "brown", "pink",
        "purple", "orange", "gray", "grey", "silver", "gold", "navy", "maroon",
        "crimson", "scarlet", "burgundy",
        # Visual descriptors
        "color", "colored", "bright", "dark", "light",
        "stripe", "striped", "pattern", "design", "logo", "symbol",
        # Shapes
        "round", "square", "circular", "rectangular",
        # Texture and material
        "texture", "material", "fabric", "leather", "metal",
        # Objects
        "shoe", "shoes", "sneaker", "sneakers", "boot", "boots",
        "container", "bottle", "packaging", "box",
        "clothing", "shirt", "dress", "pants", "jacket",
        # Generic
        "appearance", "look", "style", "visual",
    )  # fmt: skip

    SATURATION = 3

    def classify(self, query: str) -> VisualQueryAnalysis:
        query_lower = query.lower()

        matched = [keyword for keyword in self.VISUAL_KEYWORDS if keyword in query_lower]
        distinct = [
            keyword
            for keyword in matched
            if not any(keyword != other and keyword in other for other in matched)
        ]

        return VisualQueryAnalysis(
            is_visual=bool(distinct),
            confidence=min(len(distinct) / self.SATURATION, 1.0),
            matched_keywords=distinct,
        )
