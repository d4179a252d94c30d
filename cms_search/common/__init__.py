"""Common utilities and shared functionality.

Helpers used across services and adapters: text cleaning, the async
rate limiter, bounded awaiting and exception formatting.
"""

from .exception_handler import (
    format_exception_json,
    get_error_code,
    get_http_status_code,
    log_exception,
)
from .rate_limiter import RateLimiter
from .timeouts import bounded
from .utils import clean_text, strip_markup, truncate

__all__ = [
    # Utilities
    "clean_text",
    "strip_markup",
    "truncate",
    "bounded",
    "RateLimiter",
    # Exception handlers
    "format_exception_json",
    "get_error_code",
    "get_http_status_code",
    "log_exception",
]
