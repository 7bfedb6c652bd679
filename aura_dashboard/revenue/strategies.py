"""Per-project revenue strategies.

Each strategy turns one ``Project`` into a ``RevenueBreakdown``. The
generic strategies are chosen by category and data family; projects whose
upstream data needs bespoke handling are registered by name in
``SPECIAL_STRATEGIES``.

To add a special case:
    1. Subclass ``RevenueStrategy`` and implement ``compute()``.
    2. Register the class under the project name in ``SPECIAL_STRATEGIES``.
"""

from __future__ import annotations

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

from aura_dashboard.core.models import Project
from aura_dashboard.core.registry import APP_FEE_CHAINS, APP_SLUGS, CHAIN_SLUGS
from aura_dashboard.core.utils import format_usd
from aura_dashboard.revenue.annualization import (
    DAYS_PER_YEAR,
    METHOD_24H,
    METHOD_30D,
    METHOD_7D,
    METHOD_NONE,
    MONTHS_PER_YEAR,
    TRAILING_POINTS,
    WEEKS_PER_YEAR,
    BuilderRevenueEstimator,
    WindowTotals,
    annualize,
    annualize_together,
    sum_breakdown,
    sum_chart,
)
from aura_dashboard.sources.defillama_source import DefiLlamaSource

logger = logging.getLogger(__name__)

HYPERLIQUID_L1_GROUP = "Hyperliquid L1"


@dataclass(frozen=True, slots=True)
class RevenueBreakdown:
    """Annualized revenue figures produced for one project."""

    annualized_revenue: float = 0.0
    annualized_app_fees: float = 0.0
    methodology: str = METHOD_NONE


ZERO_REVENUE = RevenueBreakdown()


class RevenueStrategy(ABC):
    """Computes annualized revenue for one family of projects."""

    def __init__(
        self,
        defillama: DefiLlamaSource,
        builders: BuilderRevenueEstimator,
    ) -> None:
        self._defillama = defillama
        self._builders = builders

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    async def compute(self, project: Project) -> RevenueBreakdown:
        """Return the project's annualized revenue.

        Missing mappings and unavailable sources yield ``ZERO_REVENUE``;
        implementations do not raise for either.
        """
        ...


class ChainRevenueStrategy(RevenueStrategy):
    """Infrastructure chains: chain fees plus, for a short allow-list of
    chains, the fees of applications deployed on them."""

    async def compute(self, project: Project) -> RevenueBreakdown:
        slug = CHAIN_SLUGS.get(project.name)
        if slug is None:
            logger.info("%s: no chain mapping", project.name)
            return ZERO_REVENUE

        summary, app_fees = await asyncio.gather(
            self._defillama.fetch_fee_summary(slug),
            self._app_fees(project),
        )
        figure = annualize(WindowTotals.from_summary(summary))
        logger.info(
            "%s: %s chain revenue (%s), %s app fees",
            project.name,
            format_usd(figure.value),
            figure.methodology,
            format_usd(app_fees),
        )
        return RevenueBreakdown(figure.value, app_fees, figure.methodology)

    async def _app_fees(self, project: Project) -> float:
        """Average daily app fees over the last 30 chart points, × 365."""
        key = re.sub(r"\s+", "-", project.name.lower())
        # The overview payload is large; only a few chains are worth it
        if key not in APP_FEE_CHAINS:
            return 0.0
        overview = await self._defillama.fetch_fee_overview(key)
        if not overview:
            return 0.0
        total, used = sum_chart(overview.get("totalDataChart"))
        if not used:
            return 0.0
        return total / TRAILING_POINTS * DAYS_PER_YEAR


class HyperliquidChainStrategy(RevenueStrategy):
    """Splits Hyperliquid's combined total into ecosystem and protocol parts.

    Ecosystem revenue is the ``Hyperliquid L1`` sub-breakdown over the last
    30 points; protocol revenue is what remains of the 30d total. The
    protocol part is reported as the chain's app fees.
    """

    async def compute(self, project: Project) -> RevenueBreakdown:
        slug = CHAIN_SLUGS.get(project.name, "hyperliquid")
        summary = await self._defillama.fetch_fee_summary(slug)
        if not summary:
            return ZERO_REVENUE

        ecosystem_30d, used = sum_breakdown(
            summary.get("totalDataChartBreakdown"), group=HYPERLIQUID_L1_GROUP
        )
        ecosystem = ecosystem_30d * MONTHS_PER_YEAR if used else 0.0

        totals = WindowTotals.from_summary(summary)
        if totals.d30:
            protocol = (totals.d30 - ecosystem / MONTHS_PER_YEAR) * MONTHS_PER_YEAR
            method = METHOD_30D
        elif totals.d7:
            protocol = totals.d7 * WEEKS_PER_YEAR
            method = METHOD_7D
        elif totals.h24:
            protocol = totals.h24 * DAYS_PER_YEAR
            method = METHOD_24H
        else:
            protocol = 0.0
            method = METHOD_NONE

        logger.info(
            "%s: ecosystem %s + protocol %s (%s)",
            project.name,
            format_usd(ecosystem),
            format_usd(protocol),
            method,
        )
        return RevenueBreakdown(
            annualized_revenue=ecosystem + protocol,
            annualized_app_fees=protocol,
            methodology=f"ecosystem {METHOD_30D} + protocol {method}",
        )


class ProtocolRevenueStrategy(RevenueStrategy):
    """Applications and stablecoin issuers tracked as a single protocol."""

    async def compute(self, project: Project) -> RevenueBreakdown:
        slug = APP_SLUGS.get(project.name)
        if slug is None:
            logger.info("%s: no protocol mapping", project.name)
            return ZERO_REVENUE

        summary = await self._defillama.fetch_fee_summary(slug, protocol=True)
        figure = annualize(WindowTotals.from_summary(summary))
        logger.info(
            "%s: %s protocol revenue (%s)",
            project.name,
            format_usd(figure.value),
            figure.methodology,
        )
        return RevenueBreakdown(figure.value, 0.0, figure.methodology)


class DualProtocolStrategy(RevenueStrategy):
    """A product whose revenue is split across two protocol listings.

    Both listings are annualized on the same window before summing.
    """

    slugs: tuple[str, ...] = ("pump.fun", "pumpswap")

    async def compute(self, project: Project) -> RevenueBreakdown:
        summaries = await asyncio.gather(
            *(self._defillama.fetch_fee_summary(slug, protocol=True) for slug in self.slugs)
        )
        figure = annualize_together(
            [WindowTotals.from_summary(s) for s in summaries]
        )
        logger.info(
            "%s: %s combined revenue from %s (%s)",
            project.name,
            format_usd(figure.value),
            " + ".join(self.slugs),
            figure.methodology,
        )
        return RevenueBreakdown(figure.value, 0.0, figure.methodology)


class MultiChainBreakdownStrategy(RevenueStrategy):
    """A protocol deployed on several chains: every chain's daily values
    over the last 30 breakdown points are summed."""

    async def compute(self, project: Project) -> RevenueBreakdown:
        slug = APP_SLUGS.get(project.name, project.name.lower())
        summary = await self._defillama.fetch_fee_summary(slug, protocol=True)
        if not summary:
            return ZERO_REVENUE

        total_30d, used = sum_breakdown(summary.get("totalDataChartBreakdown"))
        if used:
            value = total_30d * MONTHS_PER_YEAR
            logger.info(
                "%s: %s multi-chain revenue over %d days",
                project.name,
                format_usd(value),
                used,
            )
            return RevenueBreakdown(value, 0.0, f"{METHOD_30D} (multi-chain)")

        figure = annualize(WindowTotals.from_summary(summary))
        return RevenueBreakdown(figure.value, 0.0, figure.methodology)


class BuilderRevenueStrategy(RevenueStrategy):
    """Exchange front-ends paid through builder and referral fees."""

    async def compute(self, project: Project) -> RevenueBreakdown:
        if not project.hyperliquid_builder:
            logger.info("%s: no builder address", project.name)
            return ZERO_REVENUE

        estimate = await self._builders.estimate(project.hyperliquid_builder)
        return RevenueBreakdown(estimate.annualized_revenue, 0.0, estimate.data_source)


SPECIAL_STRATEGIES: dict[str, type[RevenueStrategy]] = {
    "Hyperliquid": HyperliquidChainStrategy,
    "Pump.fun": DualProtocolStrategy,
    "Phantom": MultiChainBreakdownStrategy,
}


def select_strategy(project: Project) -> type[RevenueStrategy]:
    """Strategy class for *project*; named special cases win."""
    if not project.use_defillama:
        return BuilderRevenueStrategy
    special = SPECIAL_STRATEGIES.get(project.name)
    if special is not None:
        return special
    if project.category.is_infrastructure:
        return ChainRevenueStrategy
    return ProtocolRevenueStrategy
