"""Known-builder leaderboard scaled to a time range."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime

from aura_dashboard.core.models import LeaderboardEntry, LeaderboardReport
from aura_dashboard.core.registry import KNOWN_BUILDERS, builder_by_code
from aura_dashboard.core.types import TimeRange
from aura_dashboard.core.utils import utcnow
from aura_dashboard.sources.hyperliquid_source import HyperliquidSource

logger = logging.getLogger(__name__)

# Share of cumulative rewards attributed to each window. The reward
# endpoint only reports lifetime totals.
TIME_RANGE_MULTIPLIERS: dict[TimeRange, float] = {
    TimeRange.H24: 0.008,
    TimeRange.D7: 0.05,
    TimeRange.D30: 0.15,
    TimeRange.D90: 0.4,
    TimeRange.ALL: 1.0,
}

DEFAULT_TIME_RANGE = TimeRange.D7


def parse_time_range(value: str | None) -> TimeRange:
    """Parse a query value; anything unknown means the default window."""
    try:
        return TimeRange(value) if value else DEFAULT_TIME_RANGE
    except ValueError:
        return DEFAULT_TIME_RANGE


class BuilderLeaderboard:
    def __init__(
        self,
        source: HyperliquidSource,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._source = source
        self._clock = clock

    async def leaderboard(self, time_range: TimeRange = DEFAULT_TIME_RANGE) -> LeaderboardReport:
        entries = await asyncio.gather(
            *(
                self._entry(address, name, code, time_range)
                for address, (name, code) in KNOWN_BUILDERS.items()
            )
        )
        ordered = sorted(entries, key=lambda e: e.total_revenue, reverse=True)
        report = LeaderboardReport(
            entries=ordered,
            time_range=str(time_range),
            generated_at=self._clock(),
        )
        logger.info(
            "Leaderboard %s: %d builders, %d active",
            time_range,
            len(ordered),
            report.active_builders,
        )
        return report

    async def by_code(
        self, code: str, time_range: TimeRange = DEFAULT_TIME_RANGE
    ) -> LeaderboardEntry | None:
        found = builder_by_code(code)
        if found is None:
            return None
        address, name = found
        return await self._entry(address, name, code, time_range)

    async def _entry(
        self, address: str, name: str, code: str, time_range: TimeRange
    ) -> LeaderboardEntry:
        builder = await self._source.fetch_builder(address)
        if builder is None:
            return LeaderboardEntry(
                code=code,
                name=name,
                address=address,
                total_revenue=0.0,
                builder_rewards=0.0,
                unclaimed_referral_rewards=0.0,
                claimed_referral_rewards=0.0,
                cumulative_volume=0.0,
            )

        volume = 0.0
        if builder.total > 0:
            volume = await self._source.estimate_notional_volume(address, builder.total)

        factor = TIME_RANGE_MULTIPLIERS[time_range]
        return LeaderboardEntry(
            code=code,
            name=name,
            address=address,
            total_revenue=builder.total * factor,
            builder_rewards=builder.builder_rewards * factor,
            unclaimed_referral_rewards=builder.unclaimed_referral_rewards * factor,
            claimed_referral_rewards=builder.claimed_referral_rewards * factor,
            cumulative_volume=volume * factor,
        )
