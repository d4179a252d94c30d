"""Searchable-text extraction from arbitrarily shaped CMS entries."""

import logging
from typing import Any

from ...common.utils import clean_text, strip_markup

logger = logging.getLogger(__name__)

# Upper bound on raw text handed to cleaning and embedding.
MAX_TEXT_LENGTH = 8000

# Cleaned text shorter than this is not worth an embedding call.
MIN_TEXT_LENGTH = 10


class ContentExtractor:
    """Pull plain searchable text out of a CMS entry.

    Entries have no fixed schema, so every field is looked up by name and
    checked for shape before use. Rich-text trees (nodes with optional
    ``text`` and ``children``) are flattened depth-first in document order.
    """

    LEADING_FIELDS = ("title", "description", "summary")
    BODY_FIELDS = ("content", "body", "rich_text_editor")
    OPTIONAL_FIELDS = ("excerpt", "overview", "introduction", "subtitle", "text")

    def __init__(
        self,
        max_length: int = MAX_TEXT_LENGTH,
        min_length: int = MIN_TEXT_LENGTH,
    ) -> None:
        self.max_length = max_length
        self.min_length = min_length

    def extract(self, entry: dict[str, Any]) -> str:
        """Return cleaned searchable text for ``entry``.

        Raw parts are joined in field order and capped at ``max_length``
        before markup is stripped.
        """
        parts: list[str] = []

        for name in self.LEADING_FIELDS:
            parts.extend(self._string_value(entry.get(name)))

        for name in self.BODY_FIELDS:
            parts.extend(self._body_value(entry.get(name)))

        for name in self.OPTIONAL_FIELDS:
            parts.extend(self._string_value(entry.get(name)))

        tags = normalize_tags(entry.get("tags"))
        if tags:
            parts.append(" ".join(tags))

        category = _label(entry.get("category"))
        if category:
            parts.append(category)

        raw = " ".join(part for part in parts if part)[: self.max_length]
        return strip_markup(clean_text(raw))

    def is_indexable(self, text: str) -> bool:
        """Whether cleaned ``text`` is long enough to embed."""
        return len(text) >= self.min_length

    @staticmethod
    def _string_value(value: Any) -> list[str]:
        if isinstance(value, str) and value.strip():
            return [value]
        return []

    def _body_value(self, value: Any) -> list[str]:
        if isinstance(value, str):
            return self._string_value(value)
        if isinstance(value, (dict, list)):
            text = collect_rich_text(value)
            return [text] if text else []
        return []


def collect_rich_text(node: dict[str, Any] | list[Any]) -> str:
    """Flatten a rich-text tree into space-joined text in document order.

    The structure is assumed to be a tree; shared subtrees would be visited
    once per reference.
    """
    texts: list[str] = []
    stack: list[Any] = [node]
    while stack:
        current = stack.pop()
        if isinstance(current, list):
            stack.extend(reversed(current))
            continue
        if not isinstance(current, dict):
            continue
        text = current.get("text")
        if isinstance(text, str) and text.strip():
            texts.append(text.strip())
        children = current.get("children")
        if isinstance(children, list):
            stack.extend(reversed(children))
    return " ".join(texts)


def normalize_tags(value: Any) -> list[str]:
    """Normalize a CMS ``tags`` field into a list of tag strings.

    Accepts a list of strings or tag objects (``name``/``title``/``uid``)
    or a single comma-separated string.
    """
    if not value:
        return []
    if isinstance(value, str):
        candidates: list[Any] = value.split(",")
    elif isinstance(value, list):
        candidates = value
    else:
        return []

    tags: list[str] = []
    for item in candidates:
        tag = _label(item)
        if tag:
            tags.append(tag)
    return tags


def _label(value: Any) -> str | None:
    """Human label for a string or a reference object."""
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, dict):
        for key in ("name", "title", "uid"):
            candidate = value.get(key)
            if isinstance(candidate, str) and candidate.strip():
                return candidate.strip()
    return None
