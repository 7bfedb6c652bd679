"""Abstract base class for upstream data sources."""

from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any

import aiohttp

from aura_dashboard.config import SourceConfig
from aura_dashboard.metrics import SOURCE_FAILURES_TOTAL
from aura_dashboard.sources.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class SourceError(Exception):
    """An upstream call failed: network error, non-2xx, or malformed body."""

    def __init__(self, source: str, message: str, status: int | None = None) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source
        self.status = status


class BaseSource(ABC):
    """Shared HTTP plumbing for every upstream adapter.

    Request helpers raise :class:`SourceError`. Public adapter methods catch
    it, log, and return ``None`` so one failing upstream never propagates
    past the adapter boundary.

    To add a new upstream:
        1. Subclass ``BaseSource`` in this package.
        2. Implement ``source_key``.
        3. Add its interval to ``RateLimitConfig``.
    """

    def __init__(
        self,
        config: SourceConfig,
        limiter: RateLimiter,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._limiter = limiter
        self._session = session
        self._owns_session = session is None

    @property
    @abstractmethod
    def source_key(self) -> str:
        """Rate-limiter key for this upstream."""
        ...

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(
                    total=self._config.request_timeout_seconds
                ),
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    # ------------------------------------------------------------------
    # Request helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        url: str,
        *,
        limiter_key: str | None = None,
        **kwargs: Any,
    ) -> bytes:
        await self._limiter.acquire(limiter_key or self.source_key)
        session = await self._get_session()
        try:
            async with session.request(method, url, **kwargs) as resp:
                if resp.status != 200:
                    raise SourceError(
                        self.source_key,
                        f"{method} {url} returned {resp.status}",
                        status=resp.status,
                    )
                return await resp.read()
        except aiohttp.ClientError as exc:
            raise SourceError(self.source_key, f"{method} {url} failed: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise SourceError(self.source_key, f"{method} {url} timed out") from exc

    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        body = await self._request(method, url, **kwargs)
        try:
            return json.loads(body)
        except ValueError as exc:
            raise SourceError(self.source_key, f"malformed JSON from {url}") from exc

    async def _exists(self, url: str, *, limiter_key: str | None = None) -> bool:
        """HEAD probe; any failure counts as absent."""
        await self._limiter.acquire(limiter_key or self.source_key)
        session = await self._get_session()
        try:
            async with session.head(url) as resp:
                return resp.status == 200
        except (aiohttp.ClientError, asyncio.TimeoutError):
            return False

    def _record_failure(self, what: str, exc: Exception) -> None:
        SOURCE_FAILURES_TOTAL.labels(source=self.source_key).inc()
        logger.warning("%s unavailable (%s): %s", self.source_key, what, exc)
