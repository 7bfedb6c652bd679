"""Static lookup tables: tracked projects and upstream identifiers.

Every lookup is a plain mapping. An unknown key is not an error; callers
treat it as "no data" and degrade to a zero result.
"""

from __future__ import annotations

from aura_dashboard.core.models import Project
from aura_dashboard.core.types import Category

# project name -> DeFiLlama chain slug
CHAIN_SLUGS: dict[str, str] = {
    "Hyperliquid": "hyperliquid",
    "Berachain": "berachain",
    "Blast": "blast",
    "Sonic": "sonic",
    "Celestia": "celestia",
    "Optimism": "op-mainnet",
    "Arbitrum": "arbitrum",
    "Solana": "solana",
    "Ethereum": "ethereum",
    "Story Protocol": "story",
    "Movement": "movement",
    "Sui Network": "sui",
    "Initia": "initia",
    "Tron": "tron",
    "Polygon": "polygon",
    "Ton": "ton",
}

# project name -> DeFiLlama protocol slug
APP_SLUGS: dict[str, str] = {
    "Axiom": "axiom",
    "Moonshot": "moonshot.money",
    "Tether": "tether",
    "Circle": "circle",
    "Pump.fun": "pump.fun",
    "Phantom": "phantom",
}

# Chains whose app-ecosystem fees are fetched (overview endpoint is heavy)
APP_FEE_CHAINS: frozenset[str] = frozenset(
    {"ethereum", "solana", "arbitrum", "optimism", "polygon"}
)

# project name -> CoinGecko coin id. Apps without a token are absent.
COINGECKO_IDS: dict[str, str] = {
    "Hyperliquid": "hyperliquid",
    "Berachain": "berachain-bera",
    "Blast": "blast",
    "Sonic": "sonic-3",
    "Celestia": "celestia",
    "Optimism": "optimism",
    "Arbitrum": "arbitrum",
    "Solana": "solana",
    "Ethereum": "ethereum",
    "Story Protocol": "story-2",
    "Movement": "movement",
    "Sui Network": "sui",
    "Initia": "initia",
    "Tron": "tron",
    "Polygon": "matic-network",
    "Ton": "the-open-network",
    "Moonshot": "moonshot-2",
    "Tether": "tether",
    "Circle": "usd-coin",
    "Pump.fun": "pump-fun",
    "Phantom": "phantom-token-2",
}

# builder address -> (display name, short code)
KNOWN_BUILDERS: dict[str, tuple[str, str]] = {
    "0x0cbf655b0d22ae71fba3a674b0e1c0c7e7f975af": ("pvp.trade", "PVP001"),
    "0x1cc34f6af34653c515b47a83e1de70ba9b0cda1f": ("Axiom", "AXM001"),
    "0x1922810825c90f4270048b96da7b1803cd8609ef": ("Defi App", "DFA001"),
    "0x6acc0acd626b29b48923228c111c94bd4faa6a43": ("Okto", "OKT001"),
    "0x7975cafdff839ed5047244ed3a0dd82a89866081": ("Dexari", "DEX001"),
}

# Candidates for exploratory scans: the known builders first, then
# unverified addresses collected from explorers and community channels.
POTENTIAL_BUILDER_ADDRESSES: list[str] = [
    *KNOWN_BUILDERS,
    "0xa0b86a33e6776b9e15c92f0b1de5f2b89c83a99e",
    "0xb1c28d2e15a5a1f8c96e4f2c7d89e3b8a9d4c5f6",
]


def _infra(name: str, category: Category, raised: float, **kw: float) -> Project:
    return Project(name=name, category=category, amount_raised=raised, use_defillama=True, **kw)


BASE_PROJECTS: list[Project] = [
    _infra("Hyperliquid", Category.L1, 0, tge_price=3.81),
    _infra("Berachain", Category.L1, 211_000_000, last_funding_round_valuation=1_500_000_000, tge_price=15.00),
    _infra("Blast", Category.L2, 20_000_000, last_funding_round_valuation=100_000_000, tge_price=0.03),
    _infra("Sonic", Category.L1, 29_350_000, last_funding_round_valuation=100_000_000, tge_price=0.32),
    _infra("Celestia", Category.L1, 155_000_000, last_funding_round_valuation=1_500_000_000, tge_price=1.50),
    _infra("Optimism", Category.L2, 267_500_000, last_funding_round_valuation=1_650_000_000, tge_price=1.91),
    _infra("Arbitrum", Category.L2, 143_700_000, last_funding_round_valuation=4_500_000_000, tge_price=1.20),
    _infra("Solana", Category.L1, 319_500_000, last_funding_round_valuation=110_000_000, tge_price=0.22),
    _infra("Ethereum", Category.L1, 18_000_000, last_funding_round_valuation=22_000_000, tge_price=0.31),
    _infra("Story Protocol", Category.L1, 143_000_000, last_funding_round_valuation=2_250_000_000, tge_price=2.50),
    _infra("Movement", Category.L1, 55_000_000, last_funding_round_valuation=1_600_000_000, tge_price=0.68),
    _infra("Sui Network", Category.L1, 336_000_000, last_funding_round_valuation=1_500_000_000, tge_price=0.10),
    _infra("Initia", Category.L1, 24_000_000, last_funding_round_valuation=600_000_000, tge_price=0.60),
    _infra("Tron", Category.L1, 76_000_000, tge_price=0.002),
    _infra("Polygon", Category.L1, 450_000_000, tge_price=0.003),
    _infra("Ton", Category.L1, 658_000_000, tge_price=0.78),
    Project(
        name="pvp.trade",
        category=Category.APPLICATION,
        secondary_category="Hyperliquid",
        amount_raised=1_200_000,
        use_defillama=False,
        hyperliquid_builder="0x0cbf655b0d22ae71fba3a674b0e1c0c7e7f975af",
    ),
    Project(
        name="Axiom",
        category=Category.APPLICATION,
        amount_raised=500_000,
        use_defillama=True,
        hyperliquid_builder="0x1cc34f6af34653c515b47a83e1de70ba9b0cda1f",
    ),
    Project(
        name="Okto",
        category=Category.APPLICATION,
        secondary_category="Hyperliquid",
        amount_raised=27_000_000,
        use_defillama=False,
        hyperliquid_builder="0x6acc0acd626b29b48923228c111c94bd4faa6a43",
    ),
    Project(
        name="Defi App",
        category=Category.APPLICATION,
        secondary_category="Hyperliquid",
        amount_raised=6_000_000,
        use_defillama=False,
        hyperliquid_builder="0x1922810825c90f4270048b96da7b1803cd8609ef",
        last_funding_round_valuation=100_000_000,
        tge_price=0.03,
    ),
    Project(
        name="Dexari",
        category=Category.APPLICATION,
        secondary_category="Hyperliquid",
        amount_raised=2_300_000,
        use_defillama=False,
        hyperliquid_builder="0x7975cafdff839ed5047244ed3a0dd82a89866081",
    ),
    Project(name="Moonshot", category=Category.APPLICATION, amount_raised=60_000_000, use_defillama=True),
    Project(name="Tether", category=Category.STABLECOINS, amount_raised=69_420_000, use_defillama=True),
    Project(name="Circle", category=Category.STABLECOINS, amount_raised=1_200_000_000, use_defillama=True),
    Project(name="Pump.fun", category=Category.APPLICATION, amount_raised=70_000_000, use_defillama=True),
    Project(name="Phantom", category=Category.APPLICATION, amount_raised=268_000_000, use_defillama=True),
]


def builder_by_code(code: str) -> tuple[str, str] | None:
    """Return ``(address, name)`` for a builder code, or ``None``."""
    for address, (name, builder_code) in KNOWN_BUILDERS.items():
        if builder_code == code:
            return address, name
    return None

