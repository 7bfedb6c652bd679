"""Domain models used across the application."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from aura_dashboard.core.types import Category, Tier
from aura_dashboard.core.utils import round2


@dataclass(frozen=True, slots=True)
class Project:
    """A tracked chain, application or stablecoin issuer.

    ``name`` is the join key across every subsystem. The fields after
    ``tge_price`` are derived and only ever set by the enricher.
    """

    name: str
    category: Category
    amount_raised: float
    use_defillama: bool
    secondary_category: str | None = None
    hyperliquid_builder: str | None = None
    last_funding_round_valuation: float | None = None
    tge_price: float | None = None

    annualized_revenue: float | None = None
    annualized_app_fees: float | None = None
    revenue_methodology: str | None = None
    fdv: float | None = None
    current_price: float | None = None
    return_vs_funding: float | None = None
    return_since_tge: float | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.category, Category):
            object.__setattr__(self, "category", Category(self.category))
        if self.amount_raised < 0:
            raise ValueError(f"{self.name}: amount_raised must be >= 0")
        if self.hyperliquid_builder:
            object.__setattr__(
                self, "hyperliquid_builder", self.hyperliquid_builder.lower()
            )

    @property
    def is_enriched(self) -> bool:
        return self.annualized_revenue is not None


@dataclass(frozen=True, slots=True)
class Builder:
    """An exchange address credited with builder and referral fees."""

    address: str
    builder_rewards: float = 0.0
    unclaimed_referral_rewards: float = 0.0
    claimed_referral_rewards: float = 0.0
    cumulative_volume: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "address", self.address.lower())
        for name in (
            "builder_rewards",
            "unclaimed_referral_rewards",
            "claimed_referral_rewards",
        ):
            if getattr(self, name) < 0:
                object.__setattr__(self, name, 0.0)

    @property
    def referral_total(self) -> float:
        return self.unclaimed_referral_rewards + self.claimed_referral_rewards

    @property
    def total(self) -> float:
        return self.builder_rewards + self.referral_total


@dataclass(frozen=True, slots=True)
class AnnualizedFigure:
    """An annualized value plus the rule that produced it."""

    value: float
    methodology: str


@dataclass(frozen=True, slots=True)
class BuilderRevenueEstimate:
    """Result of the builder-specific annualization."""

    annualized_revenue: float
    data_source: str
    total_cumulative: float = 0.0
    direct_fees_30d: float = 0.0
    estimated_referral_30d: float = 0.0

    @property
    def total_fees_30d(self) -> float:
        return self.direct_fees_30d + self.estimated_referral_30d


@dataclass(frozen=True, slots=True)
class MarketData:
    """Price-source figures for one project."""

    fdv: float | None = None
    current_price: float | None = None


@dataclass(frozen=True, slots=True)
class ScoredProject:
    """A project with its aura score and 1-based rank."""

    project: Project
    weighted_revenue: float
    aura_score: float
    rank: int
    tier: Tier = Tier.MID

    @property
    def is_infinite(self) -> bool:
        return math.isinf(self.aura_score)

    def to_dict(self) -> dict[str, Any]:
        p = self.project
        return {
            "name": p.name,
            "category": str(p.category),
            "secondaryCategory": p.secondary_category,
            "amountRaised": p.amount_raised,
            "useDefillama": p.use_defillama,
            "hyperliquidBuilder": p.hyperliquid_builder,
            "lastFundingRoundValuation": p.last_funding_round_valuation,
            "tgePrice": p.tge_price,
            "annualizedRevenue": p.annualized_revenue or 0.0,
            "annualizedAppFees": p.annualized_app_fees or 0.0,
            "revenueMethodology": p.revenue_methodology,
            "fdv": p.fdv,
            "currentPrice": p.current_price,
            "returnVsFunding": p.return_vs_funding,
            "returnSinceTGE": p.return_since_tge,
            "weightedRevenue": self.weighted_revenue,
            # JSON has no infinity literal the browser accepts
            "auraScore": "Infinity" if self.is_infinite else self.aura_score,
            "rank": self.rank,
            "tier": str(self.tier),
        }


@dataclass(frozen=True, slots=True)
class GroupSummary:
    """Aggregates for one category group."""

    count: int = 0
    total_raised: float = 0.0
    total_revenue: float = 0.0
    avg_valuation: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "totalRaised": self.total_raised,
            "totalRevenue": self.total_revenue,
            "avgValuation": self.avg_valuation,
        }


@dataclass(frozen=True, slots=True)
class ComparisonSummary:
    infrastructure: GroupSummary = field(default_factory=GroupSummary)
    applications: GroupSummary = field(default_factory=GroupSummary)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalInfrastructure": self.infrastructure.to_dict(),
            "totalApplications": self.applications.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class ComparisonSnapshot:
    """One complete, timestamped output of the enrichment+scoring pipeline."""

    projects: list[ScoredProject]
    generated_at: datetime
    summary: ComparisonSummary
    is_fallback: bool = False

    def __post_init__(self) -> None:
        # Ensure timezone-aware timestamp
        if self.generated_at.tzinfo is None:
            object.__setattr__(
                self,
                "generated_at",
                self.generated_at.replace(tzinfo=timezone.utc),
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "projects": [p.to_dict() for p in self.projects],
            "lastUpdated": self.generated_at.isoformat(),
            "isFallback": self.is_fallback,
            "summary": self.summary.to_dict(),
        }


# ---------------------------------------------------------------------------
# Builder discovery / leaderboard
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DiscoveryResult:
    """One probed candidate address."""

    address: str
    has_revenue: bool
    total_rewards: float = 0.0
    builder_rewards: float = 0.0
    referral_rewards: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "hasRevenue": self.has_revenue,
            "totalRewards": self.total_rewards,
            "builderRewards": self.builder_rewards,
            "referralRewards": self.referral_rewards,
        }


@dataclass(frozen=True, slots=True)
class ArchiveProbe:
    """Which per-day fill archive files exist for an address."""

    address: str
    has_data: bool
    active_dates: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "hasCSVData": self.has_data,
            "activeDates": list(self.active_dates),
        }


@dataclass(frozen=True, slots=True)
class BuilderAnalysis:
    total_revenue: float
    average_revenue: float
    top_builder: str
    distribution: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalRevenue": self.total_revenue,
            "averageRevenue": self.average_revenue,
            "topBuilder": self.top_builder,
            "revenueDistribution": list(self.distribution),
        }


@dataclass(frozen=True, slots=True)
class DiscoveryReport:
    active_builders: int
    inactive_addresses: int
    total_market_size: float
    top_address: str
    recommendations: list[str]
    results: list[DiscoveryResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "knownBuilders": self.active_builders,
            "potentialBuilders": self.inactive_addresses,
            "totalMarketSize": self.total_market_size,
            "topAddress": self.top_address,
            "recommendations": list(self.recommendations),
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True, slots=True)
class LeaderboardEntry:
    """A known builder's rewards scaled to a time range."""

    code: str
    name: str
    address: str
    total_revenue: float
    builder_rewards: float
    unclaimed_referral_rewards: float
    claimed_referral_rewards: float
    cumulative_volume: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "builderCode": self.code,
            "builderName": self.name,
            "address": self.address,
            "totalRevenue": self.total_revenue,
            "builderRewards": self.builder_rewards,
            "unclaimedReferralRewards": self.unclaimed_referral_rewards,
            "claimedReferralRewards": self.claimed_referral_rewards,
            "cumulativeVolume": self.cumulative_volume,
        }


@dataclass(frozen=True, slots=True)
class LeaderboardReport:
    """All known builders for one time range, best first."""

    entries: list[LeaderboardEntry]
    time_range: str
    generated_at: datetime

    @property
    def total_revenue(self) -> float:
        return sum(e.total_revenue for e in self.entries)

    @property
    def total_volume(self) -> float:
        return sum(e.cumulative_volume for e in self.entries)

    @property
    def active_builders(self) -> int:
        return sum(1 for e in self.entries if e.total_revenue > 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "builders": [e.to_dict() for e in self.entries],
            "timeRange": self.time_range,
            "lastUpdated": self.generated_at.isoformat(),
            "totalRevenue": round2(self.total_revenue),
            "activeBuilders": self.active_builders,
            "totalVolume": round2(self.total_volume),
        }


@dataclass(slots=True)
class HealthStatus:
    """Application health snapshot."""

    uptime_seconds: float = 0.0
    snapshot_age_seconds: float | None = None
    snapshot_projects: int = 0
    pipeline_runs: int = 0
    fallbacks_served: int = 0
