"""Turn windowed revenue totals into annualized figures.

Two algorithms live here:

* ``annualize``: the strict 30d → 7d → 24h priority rule used for every
  aggregator (DeFiLlama) figure. The multipliers are a compatibility
  contract with historically displayed values; do not blend windows.
* ``BuilderRevenueEstimator``: builder-specific revenue where per-day fill
  data exists, combining archived direct fees with an activity-tiered
  estimate of referral income.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from aura_dashboard.core.models import AnnualizedFigure, BuilderRevenueEstimate
from aura_dashboard.core.utils import format_usd, to_float, utcnow
from aura_dashboard.sources.hyperliquid_source import HyperliquidSource

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12
WEEKS_PER_YEAR = 52
DAYS_PER_YEAR = 365

METHOD_30D = "30d×12"
METHOD_7D = "7d×52"
METHOD_24H = "24h×365"
METHOD_NONE = "no-data"

# Trailing window for chart-based sums (daily points)
TRAILING_POINTS = 30

# Referral run-rate heuristics: annual share of cumulative referral income.
# Tunable heuristics; change them here only.
REFERRAL_RATE_RECENT = 0.25  # fills within the last 7 days
REFERRAL_RATE_MID = 0.10  # fills 8-30 days ago only
REFERRAL_RATE_DORMANT = 0.02  # no fills in 30 days
REFERRAL_RATE_UNKNOWN = 0.05  # activity probe failed
# Cumulative rewards are treated as roughly six months of income
CUMULATIVE_FALLBACK_MULTIPLIER = 2

DIRECT_FEE_DAYS = 30
RECENT_ACTIVITY_DAYS = 7


@dataclass(frozen=True, slots=True)
class WindowTotals:
    """Raw 30d/7d/24h totals as reported by an aggregator."""

    d30: float | None = None
    d7: float | None = None
    h24: float | None = None

    @classmethod
    def from_summary(cls, data: dict[str, Any] | None) -> WindowTotals:
        if not data:
            return cls()

        def pick(key: str) -> float | None:
            value = data.get(key)
            return to_float(value) if value is not None else None

        return cls(d30=pick("total30d"), d7=pick("total7d"), h24=pick("total24h"))


def annualize(totals: WindowTotals) -> AnnualizedFigure:
    """First available window wins: 30d×12, then 7d×52, then 24h×365.

    A window counts as available only when present and non-zero.
    """
    if totals.d30:
        return AnnualizedFigure(totals.d30 * MONTHS_PER_YEAR, METHOD_30D)
    if totals.d7:
        return AnnualizedFigure(totals.d7 * WEEKS_PER_YEAR, METHOD_7D)
    if totals.h24:
        return AnnualizedFigure(totals.h24 * DAYS_PER_YEAR, METHOD_24H)
    return AnnualizedFigure(0.0, METHOD_NONE)


def annualize_together(all_totals: Sequence[WindowTotals]) -> AnnualizedFigure:
    """Annualize several sources on one shared window and sum them.

    The window is the first one that *every* source reports, so the parts
    of a combined figure are never annualized on different bases.
    """
    if not all_totals:
        return AnnualizedFigure(0.0, METHOD_NONE)
    for attr, multiplier, method in (
        ("d30", MONTHS_PER_YEAR, METHOD_30D),
        ("d7", WEEKS_PER_YEAR, METHOD_7D),
        ("h24", DAYS_PER_YEAR, METHOD_24H),
    ):
        values = [getattr(t, attr) for t in all_totals]
        if all(values):
            return AnnualizedFigure(sum(values) * multiplier, method)
    return AnnualizedFigure(0.0, METHOD_NONE)


def sum_breakdown(
    breakdown: Iterable[Any] | None,
    group: str | None = None,
    points: int = TRAILING_POINTS,
) -> tuple[float, int]:
    """Sum the trailing *points* of a ``totalDataChartBreakdown``.

    Each entry is ``[timestamp, {group: {sub: value}}]``. With *group* only
    that group's sub-values count; otherwise every group is summed.
    Returns ``(total, entries_used)``.
    """
    entries = list(breakdown or [])[-points:]
    total = 0.0
    used = 0
    for entry in entries:
        if not isinstance(entry, (list, tuple)) or len(entry) < 2:
            continue
        groups = entry[1]
        if not isinstance(groups, dict):
            continue
        used += 1
        selected = [groups.get(group)] if group is not None else groups.values()
        for subs in selected:
            if isinstance(subs, dict):
                total += sum(to_float(v) for v in subs.values())
            elif subs is not None:
                total += to_float(subs)
    return total, used


def sum_chart(chart: Iterable[Any] | None, points: int = TRAILING_POINTS) -> tuple[float, int]:
    """Sum the trailing *points* of a ``[[timestamp, value], ...]`` chart."""
    entries = list(chart or [])[-points:]
    total = 0.0
    used = 0
    for entry in entries:
        if isinstance(entry, (list, tuple)) and len(entry) >= 2:
            total += to_float(entry[1])
            used += 1
    return total, used


# ---------------------------------------------------------------------------
# Builder revenue
# ---------------------------------------------------------------------------


class BuilderRevenueEstimator:
    """Annualized revenue for a builder address from raw exchange data.

    ``total_30d = direct archive fees + estimated referral income`` and the
    result is ``total_30d * 12``. When the fill archive is unreachable the
    estimate degrades to ``cumulative * 2``; when even the cumulative
    rewards are unavailable it is zero.
    """

    def __init__(
        self,
        source: HyperliquidSource,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._source = source
        self._clock = clock

    async def estimate(self, address: str) -> BuilderRevenueEstimate:
        builder = await self._source.fetch_builder(address)
        if builder is None:
            logger.warning("%s: rewards unavailable, no revenue estimate", address[:10])
            return BuilderRevenueEstimate(annualized_revenue=0.0, data_source=METHOD_NONE)

        direct_fees, days_with_data = await self._direct_fees_30d(address)
        if direct_fees is None:
            estimated = builder.total * CUMULATIVE_FALLBACK_MULTIPLIER
            logger.info(
                "%s: archive unreachable, cumulative fallback %s",
                address[:10],
                format_usd(estimated),
            )
            return BuilderRevenueEstimate(
                annualized_revenue=estimated,
                data_source="estimated from 6mo cumulative",
                total_cumulative=builder.total,
                estimated_referral_30d=builder.total / 6,
            )

        referral_30d = await self._referral_30d(address, builder.referral_total)
        total_30d = direct_fees + referral_30d
        annualized = total_30d * MONTHS_PER_YEAR

        logger.info(
            "%s: direct %s + referral %s (30d) -> %s annualized",
            address[:10],
            format_usd(direct_fees),
            format_usd(referral_30d),
            format_usd(annualized),
        )
        return BuilderRevenueEstimate(
            annualized_revenue=annualized,
            data_source=(
                f"{days_with_data}d direct + referral estimate"
                if days_with_data
                else "referral estimate only"
            ),
            total_cumulative=builder.total,
            direct_fees_30d=direct_fees,
            estimated_referral_30d=referral_30d,
        )

    async def _direct_fees_30d(self, address: str) -> tuple[float | None, int]:
        """Sum archived builder fees over the trailing 30 UTC days.

        Days without a file are zero. Returns ``(None, 0)`` only when no
        day could be reached at all.
        """
        today = self._clock().date()
        total = 0.0
        days_with_data = 0
        reached = 0
        # Sequential: the archive is one rate-limited source
        for offset in range(DIRECT_FEE_DAYS):
            fees = await self._source.fetch_daily_builder_fees(
                address, today - timedelta(days=offset)
            )
            if fees is None:
                continue
            reached += 1
            if fees > 0:
                days_with_data += 1
                total += fees
        if reached == 0:
            return None, 0
        return total, days_with_data

    async def _referral_30d(self, address: str, cumulative_referral: float) -> float:
        """30-day referral income from an activity-tiered annual run rate."""
        if cumulative_referral <= 0:
            return 0.0
        rate = await self._referral_rate(address)
        return cumulative_referral * rate / MONTHS_PER_YEAR

    async def _referral_rate(self, address: str) -> float:
        now = self._clock()
        now_ms = int(now.timestamp() * 1000)
        week_ago_ms = int((now - timedelta(days=RECENT_ACTIVITY_DAYS)).timestamp() * 1000)
        month_ago_ms = int((now - timedelta(days=DIRECT_FEE_DAYS)).timestamp() * 1000)

        recent = await self._source.fetch_fills(address, week_ago_ms, now_ms)
        if recent is None:
            return REFERRAL_RATE_UNKNOWN
        if recent:
            logger.debug("%s: recent activity, %.0f%% referral rate", address[:10], REFERRAL_RATE_RECENT * 100)
            return REFERRAL_RATE_RECENT

        older = await self._source.fetch_fills(address, month_ago_ms, week_ago_ms)
        if older is None:
            return REFERRAL_RATE_UNKNOWN
        if older:
            return REFERRAL_RATE_MID
        return REFERRAL_RATE_DORMANT
