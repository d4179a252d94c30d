"""CMS adapters."""

from .contentstack_adapter import ContentstackAdapter

__all__ = ["ContentstackAdapter"]
