"""Upstream data sources and their shared rate limiter."""

from aura_dashboard.sources.base_source import BaseSource, SourceError
from aura_dashboard.sources.coingecko_source import CoinGeckoSource
from aura_dashboard.sources.defillama_source import DefiLlamaSource
from aura_dashboard.sources.hyperliquid_source import HyperliquidSource
from aura_dashboard.sources.rate_limiter import RateLimiter

__all__ = [
    "BaseSource",
    "SourceError",
    "CoinGeckoSource",
    "DefiLlamaSource",
    "HyperliquidSource",
    "RateLimiter",
]
