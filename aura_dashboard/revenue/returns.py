"""Return-on-valuation metrics."""

from __future__ import annotations

import dataclasses
import logging

from aura_dashboard.core.models import Project
from aura_dashboard.core.utils import round2

logger = logging.getLogger(__name__)


def _pct_change(current: float, base: float) -> float:
    return round2((current - base) / base * 100)


def compute_returns(
    project: Project,
    current_fdv: float | None = None,
    current_price: float | None = None,
) -> Project:
    """Return a copy of *project* with return metrics filled in.

    ``return_vs_funding`` needs both the current FDV and the last funding
    valuation; ``return_since_tge`` needs both the current price and the TGE
    price. A metric whose inputs are missing (or zero) stays ``None``.
    """
    changes: dict[str, float] = {}

    if current_fdv:
        changes["fdv"] = current_fdv
        if project.last_funding_round_valuation:
            changes["return_vs_funding"] = _pct_change(
                current_fdv, project.last_funding_round_valuation
            )

    if current_price:
        changes["current_price"] = current_price
        if project.tge_price:
            changes["return_since_tge"] = _pct_change(current_price, project.tge_price)

    if "return_vs_funding" in changes or "return_since_tge" in changes:
        logger.debug(
            "%s: vs funding %s%%, since TGE %s%%",
            project.name,
            changes.get("return_vs_funding"),
            changes.get("return_since_tge"),
        )
    return dataclasses.replace(project, **changes) if changes else project
