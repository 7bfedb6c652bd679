"""Aura scoring and ranking."""

from aura_dashboard.scoring.aura_engine import (
    partition_tiers,
    rank,
    score,
    weighted_revenue,
)

__all__ = ["partition_tiers", "rank", "score", "weighted_revenue"]
