"""Per-source minimum-interval rate limiting."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """Spaces out calls to the same upstream by a minimum interval.

    One lock per source key serialises acquisitions, so concurrent callers
    hitting the same source queue up in FIFO order instead of bursting.
    Different keys never block each other.

    Parameters
    ----------
    intervals:
        Source key -> minimum seconds between granted acquisitions.
    default_interval:
        Interval for keys missing from *intervals*.
    clock, sleep:
        Injectable for tests; default to the monotonic clock and
        ``asyncio.sleep``.
    """

    def __init__(
        self,
        intervals: dict[str, float] | None = None,
        default_interval: float = 0.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._intervals = dict(intervals or {})
        self._default = default_interval
        self._clock = clock
        self._sleep = sleep
        self._locks: dict[str, asyncio.Lock] = {}
        # source key -> clock value of the last granted acquisition
        self._last: dict[str, float] = {}

    def interval_for(self, source_key: str) -> float:
        return self._intervals.get(str(source_key), self._default)

    async def acquire(self, source_key: str) -> None:
        """Block until *source_key* may be called again."""
        key = str(source_key)
        interval = self.interval_for(key)
        lock = self._locks.setdefault(key, asyncio.Lock())

        async with lock:
            last = self._last.get(key)
            if last is not None and interval > 0:
                wait = interval - (self._clock() - last)
                if wait > 0:
                    logger.debug("Rate limit %s: waiting %.3fs", key, wait)
                    await self._sleep(wait)
            self._last[key] = self._clock()
