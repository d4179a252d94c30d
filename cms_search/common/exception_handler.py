"""Turn exceptions into the JSON error envelope, log lines and HTTP statuses.

Domain errors render themselves via ``CMSSearchError.to_dict``; anything else
is reported as an unexpected error with its type and last traceback frame.
"""

import json
import logging
import traceback
from typing import Any

from ..core.domain.exceptions import (
    CMSConnectionError,
    CMSSearchError,
    CMSTimeoutError,
    CollectionNotFoundError,
    ContentTypeNotFoundError,
    EmbeddingError,
    EntryNotFoundError,
    ImageAnalysisRateLimitError,
    ImageAnalysisUnavailableError,
    PayloadShapeError,
    ValidationError,
    VectorStoreError,
    WebhookAuthenticationError,
)

logger = logging.getLogger(__name__)

FOREIGN_ERROR_CODE = "PYTHON_ERR"

# First match wins, so subclasses must precede their bases
STATUS_BY_TYPE: tuple[tuple[tuple[type[Exception], ...], int], ...] = (
    ((ValidationError, PayloadShapeError), 400),
    ((WebhookAuthenticationError,), 401),
    ((CollectionNotFoundError, EntryNotFoundError, ContentTypeNotFoundError), 404),
    ((ImageAnalysisRateLimitError,), 429),
    (
        (
            EmbeddingError,
            VectorStoreError,
            ImageAnalysisUnavailableError,
            CMSConnectionError,
            CMSTimeoutError,
        ),
        503,
    ),
    ((CMSSearchError,), 500),
    ((ValueError,), 400),
    ((ConnectionError, TimeoutError), 503),
)


def _last_frame_location(exc: BaseException) -> dict[str, Any]:
    frames = traceback.extract_tb(exc.__traceback__)
    if not frames:
        return {"class": "<unknown>", "method": "<unknown>", "file": "<unknown>", "line": 0}
    frame = frames[-1]
    return {
        "class": "<unknown>",
        "method": frame.name,
        "file": frame.filename.replace("\\", "/").rsplit("/", 1)[-1],
        "line": frame.lineno,
    }


def format_exception_json(
    exc: Exception,
    include_trace: bool = False,
    extra_context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the error envelope for ``exc``.

    Args:
        exc: Any exception, domain or not.
        include_trace: Add ``stack_trace`` lines (debug output and logs only).
        extra_context: Merged into the ``context`` block.

    Returns:
        A JSON-ready dict with at least ``error``, ``details`` and ``code``.
    """
    if isinstance(exc, CMSSearchError):
        envelope = exc.to_dict(include_trace=include_trace)
    else:
        envelope = {
            "error": "An unexpected error occurred",
            "details": str(exc) or type(exc).__name__,
            "code": FOREIGN_ERROR_CODE,
            "type": type(exc).__name__,
            "location": _last_frame_location(exc),
        }
        if include_trace:
            rendered = traceback.format_exception(type(exc), exc, exc.__traceback__)
            envelope["stack_trace"] = [line.strip() for line in rendered if line.strip()]

    if extra_context:
        envelope["context"] = {**envelope.get("context", {}), **extra_context}
    return envelope


def log_exception(
    exc: Exception,
    log: logging.Logger | None = None,
    level: int = logging.ERROR,
    extra_context: dict[str, Any] | None = None,
) -> None:
    """Write the full envelope, trace included, to ``log``."""
    envelope = format_exception_json(exc, include_trace=True, extra_context=extra_context)
    (log or logger).log(level, json.dumps(envelope, indent=2, default=str))


def get_error_code(exc: Exception) -> str:
    return exc.error_code if isinstance(exc, CMSSearchError) else FOREIGN_ERROR_CODE


def get_http_status_code(exc: Exception) -> int:
    """HTTP status for ``exc``; 500 when nothing more specific applies."""
    for types, status in STATUS_BY_TYPE:
        if isinstance(exc, types):
            return status
    return 500
