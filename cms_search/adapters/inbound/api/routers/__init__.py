"""API routers."""

from . import debug, health, images, reindex, search, webhook

__all__ = ["debug", "health", "images", "reindex", "search", "webhook"]
