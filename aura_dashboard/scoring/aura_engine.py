"""Aura score: a log-scaled revenue-to-capital-raised ratio.

Scores are designed for ranking, not arithmetic. Bootstrapped projects
(nothing raised) with any revenue score ``inf`` and always rank first.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from aura_dashboard.core.models import Project, ScoredProject
from aura_dashboard.core.types import Tier
from aura_dashboard.core.utils import round_half_up

logger = logging.getLogger(__name__)

APP_FEE_WEIGHT = 0.7
NO_REVENUE_SCORE = -1000.0

PODIUM_SIZE = 3
TIER_FRACTION = 0.2


def weighted_revenue(project: Project) -> float:
    """Own revenue at full weight; for infrastructure, ecosystem app fees
    are added at 70%."""
    revenue = project.annualized_revenue or 0.0
    if project.category.is_infrastructure:
        return revenue + (project.annualized_app_fees or 0.0) * APP_FEE_WEIGHT
    return revenue


def _ratio_score(ratio: float) -> float:
    # Bands meet exactly at ratio == 1 only; the other boundaries jump.
    if ratio <= 0:
        return NO_REVENUE_SCORE
    if ratio < 0.001:
        raw = math.log10(ratio * 1000) * 200 - 800
    elif ratio < 0.01:
        raw = math.log10(ratio * 100) * 150 - 200
    elif ratio < 0.1:
        raw = math.log10(ratio * 10) * 200 + 200
    elif ratio < 1:
        raw = math.log10(ratio) * 300 + 700
    elif ratio < 10:
        raw = math.log2(ratio) * 400 + 700
    elif ratio < 100:
        raw = math.log2(ratio / 10) * 600 + 2000
    else:
        raw = math.log2(ratio / 100) * 1000 + 5000
    return round_half_up(raw)


def score(project: Project) -> float:
    """Aura score for one enriched project."""
    weighted = weighted_revenue(project)
    if project.amount_raised == 0:
        return math.inf if weighted > 0 else 0.0
    return _ratio_score(weighted / project.amount_raised)


def rank(projects: Sequence[Project]) -> list[ScoredProject]:
    """Score and order *projects*, best first, with tiers assigned.

    The sort is stable: ``inf`` scores lead in their input order and equal
    finite scores keep their input order.
    """
    scored = [(p, weighted_revenue(p), score(p)) for p in projects]
    ordered = sorted(scored, key=lambda item: -item[2])
    tiers = partition_tiers(len(ordered))
    result = [
        ScoredProject(
            project=p,
            weighted_revenue=weighted,
            aura_score=aura,
            rank=i + 1,
            tier=tiers[i],
        )
        for i, (p, weighted, aura) in enumerate(ordered)
    ]
    if result:
        logger.debug(
            "Ranked %d projects, leader %s (%s)",
            len(result),
            result[0].project.name,
            result[0].aura_score,
        )
    return result


def partition_tiers(count: int) -> list[Tier]:
    """Tier for each rank position.

    The first three positions are the podium. Of the rest, the top fifth
    (at least one) is top tier and the bottom fifth (at least one, never
    overlapping the top tier) is cursed; the middle is mid tier.
    """
    podium = min(count, PODIUM_SIZE)
    remainder = count - podium
    top = cursed = 0
    if remainder > 0:
        top = max(1, math.floor(remainder * TIER_FRACTION))
        cursed = min(max(1, math.floor(remainder * TIER_FRACTION)), remainder - top)
    mid = remainder - top - cursed
    return (
        [Tier.PODIUM] * podium
        + [Tier.TOP] * top
        + [Tier.MID] * mid
        + [Tier.CURSED] * cursed
    )
