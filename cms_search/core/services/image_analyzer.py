"""Caption generation for entry and result images."""

import asyncio
import logging

from ...common.timeouts import bounded
from ..domain import ImageAnalysisConfig, ImageAnalysisDisabled, ImageAnalysisResult
from ..domain.exceptions import (
    ImageAnalysisError,
    ImageAnalysisRateLimitError,
    ImageAnalysisUnavailableError,
)

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 3
RETRY_DELAY_SECONDS = 1.5
RATE_LIMIT_BACKOFF_SECONDS = 2.0
ANALYSIS_TIMEOUT_SECONDS = 30.0


class ImageAnalyzer:
    """Describe images with the configured image-understanding model.

    When analysis is disabled every call returns an empty result without
    touching the network. Provider failures are retried a bounded number of
    times and then degrade to an empty result; they never raise.
    """

    def __init__(
        self,
        config: ImageAnalysisConfig,
        max_attempts: int = MAX_ATTEMPTS,
        retry_delay: float = RETRY_DELAY_SECONDS,
        rate_limit_backoff: float = RATE_LIMIT_BACKOFF_SECONDS,
        timeout: float = ANALYSIS_TIMEOUT_SECONDS,
    ) -> None:
        self.config = config
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.rate_limit_backoff = rate_limit_backoff
        self.timeout = timeout

    @property
    def enabled(self) -> bool:
        return not isinstance(self.config, ImageAnalysisDisabled)

    def require_enabled(self) -> None:
        """Raise if image analysis is switched off."""
        if isinstance(self.config, ImageAnalysisDisabled):
            raise ImageAnalysisUnavailableError(
                "Image analysis is not available",
                context={"reason": self.config.reason},
            )

    @staticmethod
    def build_prompt(title: str | None = None, query: str | None = None) -> str:
        """Build the captioning prompt, tailored to the optional context."""
        subject = "this image"
        if title:
            subject += f' for a content item titled "{title}"'
        if query:
            subject += f' in the context of the search query "{query}"'
        return (
            f"Analyze {subject}. "
            "Describe what you see in 2-3 concise sentences, focusing on colors, "
            "objects, visible text, patterns, materials and overall composition. "
            "Mention the details most useful for finding this image with a "
            "text search."
        )

    async def analyze(
        self,
        image_url: str,
        title: str | None = None,
        query: str | None = None,
    ) -> ImageAnalysisResult:
        """Caption ``image_url``; the caption is ``None`` on any failure."""
        result = ImageAnalysisResult(source_image_url=image_url)
        if isinstance(self.config, ImageAnalysisDisabled):
            return result

        client = self.config.client
        prompt = self.build_prompt(title, query)

        for attempt in range(1, self.max_attempts + 1):
            is_last = attempt == self.max_attempts
            try:
                caption = await bounded(
                    client.describe_image(image_url, prompt),
                    self.timeout,
                    ImageAnalysisError,
                    "Image analysis",
                )
                result.caption = caption.strip() if caption and caption.strip() else None
                if result.caption:
                    logger.debug("Analyzed image %s on attempt %d", image_url, attempt)
                return result
            except ImageAnalysisRateLimitError as e:
                logger.warning(
                    "Image analysis rate limited (attempt %d/%d): %s",
                    attempt,
                    self.max_attempts,
                    e.message,
                )
                if is_last:
                    await asyncio.sleep(self.rate_limit_backoff)
                    break
                await asyncio.sleep(self.retry_delay)
            except ImageAnalysisError as e:
                logger.warning(
                    "Image analysis failed (attempt %d/%d): %s",
                    attempt,
                    self.max_attempts,
                    e.message,
                )
                if is_last:
                    break
                await asyncio.sleep(self.retry_delay)

        logger.info("Giving up on image analysis for %s", image_url)
        return result
