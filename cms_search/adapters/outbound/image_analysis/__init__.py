"""Image-understanding adapters."""

from .gemini_vision import GeminiVisionAdapter

__all__ = ["GeminiVisionAdapter"]
