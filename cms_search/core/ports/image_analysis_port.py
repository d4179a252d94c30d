"""Image Analysis Port Interface."""

from abc import ABC, abstractmethod


class ImageAnalysisPort(ABC):
    """Abstract interface for image-understanding models."""

    @abstractmethod
    async def describe_image(self, image_url: str, prompt: str) -> str | None:
        """Describe the image at ``image_url`` following ``prompt``.

        Returns ``None`` when the model produced no text. Raises an
        ``ImageAnalysisError`` subclass on provider failure.
        """
        ...
