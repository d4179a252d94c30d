"""Gemini embeddings through the google-genai SDK."""

import asyncio
import logging
import re
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from google import genai

from ....common.rate_limiter import RateLimiter
from ....core.domain.exceptions import (
    EmbeddingAPIError,
    EmbeddingNotConfiguredError,
    EmbeddingRateLimitError,
)
from ....core.ports.embedding_port import EmbeddingPort

logger = logging.getLogger(__name__)

MAX_EMBEDDING_RETRIES = 3
EMBEDDING_DIMENSION = 768

DOCUMENT_TASK = "RETRIEVAL_DOCUMENT"
QUERY_TASK = "RETRIEVAL_QUERY"

RATE_LIMIT_STATUS = "RESOURCE_EXHAUSTED"
_RATE_LIMIT_MESSAGE = re.compile(r"\b429\b|\bRESOURCE_EXHAUSTED\b", re.IGNORECASE)


def is_rate_limit_error(error: Exception) -> bool:
    """True for Gemini quota errors (HTTP 429 / ``RESOURCE_EXHAUSTED``).

    ``google.genai.errors.APIError`` carries ``code`` and ``status``; other
    transports only leave the message to go on.
    """
    if getattr(error, "code", None) == 429:
        return True
    status = getattr(error, "status", None)
    if isinstance(status, str) and status.upper() == RATE_LIMIT_STATUS:
        return True
    return _RATE_LIMIT_MESSAGE.search(str(error)) is not None


class GeminiEmbeddingAdapter(EmbeddingPort):
    """Embedding provider backed by Google Gemini.

    Document mode uses the ``RETRIEVAL_DOCUMENT`` task type and query mode
    ``RETRIEVAL_QUERY``; both request ``dimension`` output values. Failed
    calls are retried up to ``max_retries`` times with 1s, 2s, ... backoff;
    the caller's ``bounded()`` timeout still caps the whole call.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = "gemini-embedding-001",
        dimension: int = EMBEDDING_DIMENSION,
        rate_limiter: RateLimiter | None = None,
        max_retries: int = MAX_EMBEDDING_RETRIES,
    ) -> None:
        self.api_key = api_key
        self.model_name = model_name
        self.dimension = dimension
        self.rate_limiter = rate_limiter
        self.max_retries = max(1, max_retries)
        self._client: genai.Client | None = None

    def _get_client(self) -> "genai.Client":
        """Get or create the genai client."""
        if self._client is None:
            if not self.api_key:
                raise EmbeddingNotConfiguredError(
                    "Google API key not set. Set GOOGLE_API_KEY to enable embeddings.",
                    context={"setting": "google_api_key"},
                )
            from google import genai

            self._client = genai.Client(api_key=self.api_key)
            logger.info("Gemini embedding client initialized for model: %s", self.model_name)
        return self._client

    async def embed_document(self, text: str) -> list[float]:
        return await self._embed(text, DOCUMENT_TASK)

    async def embed_query(self, text: str) -> list[float]:
        return await self._embed(text, QUERY_TASK)

    async def _embed(self, text: str, task_type: str) -> list[float]:
        from google.genai import types

        client = self._get_client()
        config = types.EmbedContentConfig(
            task_type=task_type,
            output_dimensionality=self.dimension,
        )

        for attempt in range(self.max_retries):
            if self.rate_limiter:
                await self.rate_limiter.acquire()
            try:
                result = await client.aio.models.embed_content(
                    model=self.model_name,
                    contents=text,
                    config=config,
                )
            except Exception as e:
                rate_limited = is_rate_limit_error(e)
                if attempt < self.max_retries - 1:
                    wait_time = 2**attempt
                    logger.warning(
                        "Embedding %s failed (attempt %d/%d), retrying in %ds: %s",
                        task_type,
                        attempt + 1,
                        self.max_retries,
                        wait_time,
                        e,
                    )
                    await asyncio.sleep(wait_time)
                    continue
                error_cls = EmbeddingRateLimitError if rate_limited else EmbeddingAPIError
                raise error_cls(
                    f"Failed to generate {task_type.lower()} embedding",
                    cause=e,
                    context={"model": self.model_name, "attempts": self.max_retries},
                ) from e

            embeddings = getattr(result, "embeddings", None)
            if not embeddings or not embeddings[0].values:
                raise EmbeddingAPIError(
                    "Embedding provider returned no vector",
                    context={"model": self.model_name, "task_type": task_type},
                )
            return list(embeddings[0].values)

        raise EmbeddingAPIError("Embedding retries exhausted", context={"model": self.model_name})
