"""Shared type aliases and enumerations."""

from __future__ import annotations

from enum import Enum


class Category(str, Enum):
    """Project categories; infrastructure vs application drives scoring weight."""

    L1 = "L1"
    L2 = "L2"
    L3 = "L3"
    APPLICATION = "Application"
    DAPP = "dApp"
    STABLECOINS = "Stablecoins"

    def __str__(self) -> str:
        return self.value

    @property
    def is_infrastructure(self) -> bool:
        return self in (Category.L1, Category.L2, Category.L3)


class Tier(str, Enum):
    """Display grouping derived from rank position."""

    PODIUM = "podium"
    TOP = "top-tier"
    MID = "mid-tier"
    CURSED = "cursed-tier"

    def __str__(self) -> str:
        return self.value


class SourceKey(str, Enum):
    """Rate-limiter keys, one per upstream host."""

    DEFILLAMA = "defillama"
    DEFILLAMA_BULK = "defillama-bulk"
    COINGECKO = "coingecko"
    HYPERLIQUID = "hyperliquid"
    ARCHIVE = "hyperliquid-archive"

    def __str__(self) -> str:
        return self.value


class TimeRange(str, Enum):
    """Leaderboard windows."""

    H24 = "24h"
    D7 = "7d"
    D30 = "30d"
    D90 = "90d"
    ALL = "all"

    def __str__(self) -> str:
        return self.value
