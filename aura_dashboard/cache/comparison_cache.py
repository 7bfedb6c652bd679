"""Time-bounded in-process cache for the comparison snapshot."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta

from aura_dashboard.comparison import ComparisonPipeline, build_fallback_snapshot
from aura_dashboard.core.models import ComparisonSnapshot, Project
from aura_dashboard.core.utils import utcnow
from aura_dashboard.metrics import (
    CACHE_REQUESTS_TOTAL,
    PIPELINE_RUNS_TOTAL,
    SNAPSHOT_PROJECTS,
)

logger = logging.getLogger(__name__)


class ComparisonCache:
    """Serves the latest snapshot while it is fresh, recomputing on expiry.

    * A fresh snapshot is returned as the same object on every call.
    * Concurrent misses share one in-flight pipeline run.
    * A run that times out or fails yields a fallback snapshot that is
      returned to the waiting callers but never stored.
    * Only one run exists at a time, so a finished run is always the
      newest and its result replaces the stored snapshot outright.
    """

    def __init__(
        self,
        pipeline: ComparisonPipeline,
        ttl: timedelta = timedelta(minutes=15),
        timeout_seconds: float = 30.0,
        clock: Callable[[], datetime] = utcnow,
        fallback_projects: Sequence[Project] | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._ttl = ttl
        self._timeout = timeout_seconds
        self._clock = clock
        self._fallback_projects = (
            list(fallback_projects)
            if fallback_projects is not None
            else pipeline.base_projects
        )

        self._snapshot: ComparisonSnapshot | None = None
        self._inflight: asyncio.Task[ComparisonSnapshot] | None = None

        self.pipeline_runs = 0
        self.fallbacks_served = 0

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def get(self) -> ComparisonSnapshot:
        snapshot = self._snapshot
        if snapshot is not None and self._is_fresh(snapshot):
            CACHE_REQUESTS_TOTAL.labels(result="hit").inc()
            return snapshot

        CACHE_REQUESTS_TOTAL.labels(result="miss").inc()
        if self._inflight is None:
            task = asyncio.get_running_loop().create_task(self._refresh())
            task.add_done_callback(self._clear_inflight)
            self._inflight = task
        else:
            logger.debug("Joining in-flight pipeline run")
        # A cancelled caller must not cancel the run other callers share
        return await asyncio.shield(self._inflight)

    def peek(self) -> ComparisonSnapshot | None:
        """Stored snapshot, fresh or not, without triggering a run."""
        return self._snapshot

    def invalidate(self) -> None:
        """Drop the stored snapshot so the next ``get`` recomputes."""
        if self._snapshot is not None:
            logger.info("Comparison snapshot invalidated")
        self._snapshot = None

    def age_seconds(self) -> float | None:
        if self._snapshot is None:
            return None
        return (self._clock() - self._snapshot.generated_at).total_seconds()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _is_fresh(self, snapshot: ComparisonSnapshot) -> bool:
        return self._clock() - snapshot.generated_at < self._ttl

    def _clear_inflight(self, task: asyncio.Task[ComparisonSnapshot]) -> None:
        if self._inflight is task:
            self._inflight = None

    async def _refresh(self) -> ComparisonSnapshot:
        self.pipeline_runs += 1
        run = self.pipeline_runs

        try:
            snapshot = await asyncio.wait_for(self._pipeline.run(), timeout=self._timeout)
        except asyncio.TimeoutError:
            PIPELINE_RUNS_TOTAL.labels(outcome="timeout").inc()
            logger.warning(
                "Pipeline run %d exceeded %.0fs, serving fallback",
                run,
                self._timeout,
            )
            return self._fallback()
        except Exception:
            PIPELINE_RUNS_TOTAL.labels(outcome="error").inc()
            logger.exception("Pipeline run %d failed, serving fallback", run)
            return self._fallback()

        PIPELINE_RUNS_TOTAL.labels(outcome="success").inc()
        self._snapshot = snapshot
        SNAPSHOT_PROJECTS.set(len(snapshot.projects))
        return snapshot

    def _fallback(self) -> ComparisonSnapshot:
        self.fallbacks_served += 1
        return build_fallback_snapshot(self._clock(), self._fallback_projects)
