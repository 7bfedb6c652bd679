"""Comparison pipeline: enrich → score/rank → summarise → snapshot."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from aura_dashboard.core.models import (
    ComparisonSnapshot,
    ComparisonSummary,
    GroupSummary,
    Project,
    ScoredProject,
)
from aura_dashboard.core.registry import BASE_PROJECTS
from aura_dashboard.core.utils import utcnow
from aura_dashboard.revenue.annualization import METHOD_NONE
from aura_dashboard.revenue.enricher import ProjectEnricher
from aura_dashboard.scoring import aura_engine

logger = logging.getLogger(__name__)


def _group_summary(projects: Sequence[Project]) -> GroupSummary:
    if not projects:
        return GroupSummary()
    return GroupSummary(
        count=len(projects),
        total_raised=sum(p.amount_raised for p in projects),
        total_revenue=sum(p.annualized_revenue or 0.0 for p in projects),
        avg_valuation=sum(p.fdv or 0.0 for p in projects) / len(projects),
    )


def summarize(scored: Sequence[ScoredProject]) -> ComparisonSummary:
    projects = [s.project for s in scored]
    return ComparisonSummary(
        infrastructure=_group_summary([p for p in projects if p.category.is_infrastructure]),
        applications=_group_summary([p for p in projects if not p.category.is_infrastructure]),
    )


def build_snapshot(
    projects: Sequence[Project],
    generated_at: datetime,
    is_fallback: bool = False,
) -> ComparisonSnapshot:
    scored = aura_engine.rank(projects)
    return ComparisonSnapshot(
        projects=scored,
        generated_at=generated_at,
        summary=summarize(scored),
        is_fallback=is_fallback,
    )


def build_fallback_snapshot(
    generated_at: datetime,
    base_projects: Sequence[Project] = BASE_PROJECTS,
) -> ComparisonSnapshot:
    """Base projects with every revenue figure zeroed, scored and ranked."""
    zeroed = [
        dataclasses.replace(
            p,
            annualized_revenue=0.0,
            annualized_app_fees=0.0,
            revenue_methodology=METHOD_NONE,
        )
        for p in base_projects
    ]
    return build_snapshot(zeroed, generated_at, is_fallback=True)


class ComparisonPipeline:
    """Produces one complete ``ComparisonSnapshot`` per run."""

    def __init__(
        self,
        enricher: ProjectEnricher,
        base_projects: Sequence[Project] = BASE_PROJECTS,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._enricher = enricher
        self._base_projects = list(base_projects)
        self._clock = clock

    @property
    def base_projects(self) -> list[Project]:
        return list(self._base_projects)

    async def run(self) -> ComparisonSnapshot:
        started = self._clock()
        enriched = await self._enricher.enrich(self._base_projects)
        snapshot = build_snapshot(enriched, self._clock())
        logger.info(
            "Pipeline finished in %.1fs: %d projects, leader %s",
            (snapshot.generated_at - started).total_seconds(),
            len(snapshot.projects),
            snapshot.projects[0].project.name if snapshot.projects else "-",
        )
        return snapshot
