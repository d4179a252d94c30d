"""Bounded awaiting of outbound calls."""

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from ..core.domain.exceptions import CMSSearchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def bounded(
    awaitable: Awaitable[T],
    seconds: float,
    error_cls: type[CMSSearchError],
    operation: str,
) -> T:
    """Await ``awaitable`` for at most ``seconds``.

    Args:
        awaitable: The outbound call to wait on.
        seconds: Timeout budget. ``<= 0`` waits without a bound.
        error_cls: Domain error raised when the budget is exhausted.
        operation: Short description used in the error message.

    Raises:
        error_cls: If the call does not finish in time.
    """
    if seconds <= 0:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=seconds)
    except asyncio.TimeoutError as e:
        logger.warning("%s timed out after %.1fs", operation, seconds)
        raise error_cls(
            f"{operation} timed out after {seconds:.0f}s",
            context={"timeout_seconds": seconds},
        ) from e
