"""Fill every project's derived fields from the upstream sources."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from collections.abc import Sequence

from aura_dashboard.core.models import MarketData, Project
from aura_dashboard.core.registry import COINGECKO_IDS
from aura_dashboard.revenue.annualization import BuilderRevenueEstimator
from aura_dashboard.revenue.returns import compute_returns
from aura_dashboard.revenue.strategies import (
    ZERO_REVENUE,
    RevenueBreakdown,
    RevenueStrategy,
    select_strategy,
)
from aura_dashboard.sources.coingecko_source import CoinGeckoSource
from aura_dashboard.sources.defillama_source import DefiLlamaSource

logger = logging.getLogger(__name__)


class ProjectEnricher:
    """Runs every project's revenue strategy and the market data fetch
    concurrently, then merges the results in input order.

    A failing strategy only zeroes that project's revenue; the batch
    always completes.
    """

    def __init__(
        self,
        defillama: DefiLlamaSource,
        coingecko: CoinGeckoSource,
        builders: BuilderRevenueEstimator,
    ) -> None:
        self._defillama = defillama
        self._coingecko = coingecko
        self._builders = builders
        self._strategies: dict[type[RevenueStrategy], RevenueStrategy] = {}

    def _strategy_for(self, project: Project) -> RevenueStrategy:
        cls = select_strategy(project)
        strategy = self._strategies.get(cls)
        if strategy is None:
            strategy = cls(self._defillama, self._builders)
            self._strategies[cls] = strategy
        return strategy

    async def enrich(self, projects: Sequence[Project]) -> list[Project]:
        logger.info("Enriching %d projects", len(projects))
        revenues, market = await asyncio.gather(
            asyncio.gather(*(self._revenue(p) for p in projects)),
            self._market_data(projects),
        )

        enriched: list[Project] = []
        for project, revenue in zip(projects, revenues):
            project = dataclasses.replace(
                project,
                annualized_revenue=max(revenue.annualized_revenue, 0.0),
                annualized_app_fees=max(revenue.annualized_app_fees, 0.0),
                revenue_methodology=revenue.methodology,
            )
            data = market.get(project.name)
            if data is not None:
                project = compute_returns(project, data.fdv, data.current_price)
            enriched.append(project)
        return enriched

    async def _revenue(self, project: Project) -> RevenueBreakdown:
        strategy = self._strategy_for(project)
        try:
            return await strategy.compute(project)
        except Exception:
            logger.exception("%s: %s failed, revenue zeroed", project.name, strategy.name)
            return ZERO_REVENUE

    async def _market_data(self, projects: Sequence[Project]) -> dict[str, MarketData]:
        """Price and FDV for every project with a known coin id."""
        wanted = [(p.name, COINGECKO_IDS[p.name]) for p in projects if p.name in COINGECKO_IDS]
        if not wanted:
            return {}

        results = await asyncio.gather(*(self._coin(name, coin_id) for name, coin_id in wanted))
        market = {name: data for (name, _), data in zip(wanted, results) if data is not None}
        logger.info("Market data for %d/%d tokens", len(market), len(wanted))
        return market

    async def _coin(self, name: str, coin_id: str) -> MarketData | None:
        try:
            return await self._coingecko.fetch_market_data(coin_id)
        except Exception:
            logger.exception("%s: market data for %s failed", name, coin_id)
            return None
