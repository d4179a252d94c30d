"""Image captioning with Gemini multimodal models."""

import logging
import mimetypes
from typing import TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from google import genai

from ....common.rate_limiter import RateLimiter
from ....common.utils import clean_text
from ....core.domain.exceptions import (
    ImageAnalysisError,
    ImageAnalysisRateLimitError,
    ImageFetchError,
    MissingAPIKeyError,
)
from ....core.ports.image_analysis_port import ImageAnalysisPort
from ..embedding.gemini_embedding import is_rate_limit_error

logger = logging.getLogger(__name__)

MAX_IMAGE_BYTES = 10 * 1024 * 1024
FETCH_TIMEOUT_SECONDS = 20.0


class GeminiVisionAdapter(ImageAnalysisPort):
    """Describe images by sending their bytes to a Gemini model.

    Images are downloaded with ``httpx`` first so that CDN URLs the model
    cannot reach directly still work.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-2.0-flash",
        rate_limiter: RateLimiter | None = None,
        http_client: httpx.AsyncClient | None = None,
        max_image_bytes: int = MAX_IMAGE_BYTES,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.rate_limiter = rate_limiter
        self.max_image_bytes = max_image_bytes
        self._http = http_client or httpx.AsyncClient(timeout=FETCH_TIMEOUT_SECONDS, follow_redirects=True)
        self._client: genai.Client | None = None

    def _get_client(self) -> "genai.Client":
        """Lazy load the Gemini client."""
        if self._client is None:
            if not self.api_key:
                raise MissingAPIKeyError(
                    "Google API key not set. Set GOOGLE_API_KEY to enable image analysis.",
                    context={"setting": "google_api_key"},
                )
            from google import genai

            self._client = genai.Client(api_key=self.api_key)
            logger.info("Gemini vision client initialized for model: %s", self.model_name)
        return self._client

    async def fetch_image(self, image_url: str) -> tuple[bytes, str]:
        """Download ``image_url`` and return its bytes and MIME type."""
        try:
            response = await self._http.get(image_url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ImageFetchError(
                f"Failed to fetch image {image_url}",
                cause=e,
                context={"image_url": image_url},
            ) from e

        data = response.content
        if not data:
            raise ImageFetchError("Image response was empty", context={"image_url": image_url})
        if len(data) > self.max_image_bytes:
            raise ImageFetchError(
                "Image is too large to analyze",
                context={"image_url": image_url, "bytes": len(data)},
            )

        mime_type = response.headers.get("content-type", "").split(";")[0].strip()
        if not mime_type.startswith("image/"):
            guessed, _ = mimetypes.guess_type(image_url.split("?")[0])
            mime_type = guessed if guessed and guessed.startswith("image/") else "image/jpeg"
        return data, mime_type

    async def describe_image(self, image_url: str, prompt: str) -> str | None:
        from google.genai import types

        data, mime_type = await self.fetch_image(image_url)
        client = self._get_client()

        if self.rate_limiter:
            await self.rate_limiter.acquire()

        try:
            response = await client.aio.models.generate_content(
                model=self.model_name,
                contents=[
                    types.Part.from_bytes(data=data, mime_type=mime_type),
                    prompt,
                ],
                config=types.GenerateContentConfig(
                    temperature=0.4,
                    max_output_tokens=300,
                ),
            )
        except Exception as e:
            if is_rate_limit_error(e):
                raise ImageAnalysisRateLimitError(
                    "Image analysis rate limit reached",
                    cause=e,
                    context={"model": self.model_name},
                ) from e
            raise ImageAnalysisError(
                "Image analysis request failed",
                cause=e,
                context={"model": self.model_name, "image_url": image_url},
            ) from e

        # Safety filters can leave no candidates
        if not response.candidates:
            return None
        text = clean_text(response.text or "").strip()
        return text or None

    async def close(self) -> None:
        await self._http.aclose()
