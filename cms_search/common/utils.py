"""Common text utilities.

Text handling contract
----------------------
* Incoming CMS fields and user queries have BOM markers stripped at the
  boundary so downstream processing never sees spurious characters.
* Markup cleaning (HTML tags, markdown links, emphasis characters) is done
  once, when an entry is turned into searchable text.
* Internal layers assume text is already clean.
"""

import re
import unicodedata

_HTML_TAG = re.compile(r"<[^>]*>")
_MARKDOWN_LINK = re.compile(r"\[([^\]]*)\]\([^)]*\)")
_MARKDOWN_HEADING = re.compile(r"(?:^|(?<=\s))#{1,6}\s+")
# Paired markers only, so identifiers like blog_post keep their underscores
_MARKDOWN_STRONG = re.compile(r"(\*\*|__)(?=\S)(.+?)(?<=\S)\1")
_MARKDOWN_EMPHASIS = re.compile(r"(?<![\w*])([*_])(?=\S)(.+?)(?<=\S)\1(?![\w*])")
_MARKDOWN_CODE = re.compile(r"`([^`]*)`")
_WHITESPACE = re.compile(r"\s+")


def clean_text(text: str | None, *, normalize: bool = True) -> str:
    """Remove BOM markers and optionally apply NFKC normalization.

    Args:
        text: Input text that may contain BOM or replacement characters.
        normalize: Whether to apply NFKC normalization.

    Returns:
        Cleaned text, empty string for empty input.
    """
    if not text:
        return ""

    cleaned = text.replace("\ufeff", "").replace("\ufffd", "")
    if normalize:
        cleaned = unicodedata.normalize("NFKC", cleaned)
    return cleaned


def strip_markup(text: str) -> str:
    """Reduce HTML/markdown-bearing text to plain, single-spaced prose.

    Tags become a space, ``[label](target)`` keeps only ``label``, the
    paired emphasis and code markers are unwrapped, heading hashes dropped
    and whitespace runs collapse.
    """
    if not text:
        return ""
    text = _HTML_TAG.sub(" ", text)
    text = _MARKDOWN_LINK.sub(r"\1", text)
    text = _MARKDOWN_CODE.sub(r"\1", text)
    text = _MARKDOWN_STRONG.sub(r"\2", text)
    text = _MARKDOWN_EMPHASIS.sub(r"\2", text)
    text = _MARKDOWN_HEADING.sub("", text)
    text = _WHITESPACE.sub(" ", text)
    return text.strip()


def truncate(text: str, limit: int, suffix: str = "...") -> str:
    """Cut ``text`` to ``limit`` characters, appending ``suffix`` when cut."""
    if len(text) <= limit:
        return text
    return text[:limit] + suffix
