"""Semantic and visual search over headless CMS content."""

__version__ = "1.0.0"
