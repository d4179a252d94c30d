"""Async token bucket for the embedding and vision providers."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """Keep outbound calls under a requests-per-minute quota.

    The bucket starts full and refills continuously at ``rpm / 60`` tokens
    per second. Callers that find it empty sleep until the next token is due;
    the lock is held while sleeping so waiters are served in arrival order.
    ``None`` or a non-positive quota turns the limiter into a no-op.
    """

    def __init__(
        self,
        requests_per_minute: int | None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        quota = requests_per_minute if requests_per_minute and requests_per_minute > 0 else None
        self.capacity: float | None = float(quota) if quota else None
        self.tokens: float | None = self.capacity
        self._per_second = quota / 60.0 if quota else 0.0
        self._clock = clock
        self._updated_at = clock()
        self._lock = asyncio.Lock()

    @property
    def enabled(self) -> bool:
        return self.capacity is not None

    def _top_up(self) -> None:
        now = self._clock()
        gained = (now - self._updated_at) * self._per_second
        self._updated_at = now
        self.tokens = min(self.capacity, self.tokens + gained)

    async def acquire(self) -> None:
        """Take one token, sleeping first if the bucket is empty."""
        if not self.enabled:
            return

        async with self._lock:
            self._top_up()
            if self.tokens < 1:
                delay = (1 - self.tokens) / self._per_second
                logger.debug("Rate limit reached, waiting %.2fs", delay)
                await asyncio.sleep(delay)
                self._top_up()
            self.tokens = max(self.tokens - 1, 0.0)
