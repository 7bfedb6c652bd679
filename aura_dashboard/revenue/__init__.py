"""Revenue annualization, per-project strategies and enrichment."""

from aura_dashboard.revenue.annualization import (
    BuilderRevenueEstimator,
    WindowTotals,
    annualize,
)
from aura_dashboard.revenue.enricher import ProjectEnricher
from aura_dashboard.revenue.returns import compute_returns

__all__ = [
    "BuilderRevenueEstimator",
    "WindowTotals",
    "annualize",
    "ProjectEnricher",
    "compute_returns",
]
