"""Exploratory scans for builder addresses with reward activity."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date, datetime, timedelta

from aura_dashboard.core.models import (
    ArchiveProbe,
    BuilderAnalysis,
    DiscoveryReport,
    DiscoveryResult,
)
from aura_dashboard.core.registry import KNOWN_BUILDERS, POTENTIAL_BUILDER_ADDRESSES
from aura_dashboard.core.utils import format_usd, utcnow
from aura_dashboard.sources.hyperliquid_source import HyperliquidSource, archive_day

logger = logging.getLogger(__name__)

RECOMMENDATIONS: tuple[str, ...] = (
    "Monitor community channels for new project announcements",
    "Check ecosystem directories and GitHub repositories",
    "Analyze high-volume trading addresses from block explorers",
    "Track referral program participants",
    "Look for addresses with consistent archive data uploads",
)


class BuilderDiscovery:
    """Probes candidate addresses against the exchange's reward and
    fill-archive endpoints.

    Scans run sequentially; the source's rate limiter spaces the calls.
    A failed probe is reported as an inactive zero row, never raised.
    """

    def __init__(
        self,
        source: HyperliquidSource,
        archive_probe_days: int = 3,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._source = source
        self._archive_probe_days = archive_probe_days
        self._clock = clock

    async def discover(
        self, addresses: Sequence[str] = POTENTIAL_BUILDER_ADDRESSES
    ) -> list[DiscoveryResult]:
        logger.info("Scanning %d candidate builder addresses", len(addresses))
        results: list[DiscoveryResult] = []
        for address in addresses:
            builder = await self._source.fetch_builder(address)
            if builder is None:
                results.append(DiscoveryResult(address=address, has_revenue=False))
                continue

            result = DiscoveryResult(
                address=address,
                has_revenue=builder.total > 0,
                total_rewards=builder.total,
                builder_rewards=builder.builder_rewards,
                referral_rewards=builder.referral_total,
            )
            if result.has_revenue:
                logger.info(
                    "Active builder %s: %s total (%s builder, %s referral)",
                    address,
                    format_usd(result.total_rewards),
                    format_usd(result.builder_rewards),
                    format_usd(result.referral_rewards),
                )
            results.append(result)
        return results

    def default_probe_dates(self) -> list[date]:
        """The last N UTC days, oldest first."""
        today = self._clock().date()
        return [
            today - timedelta(days=offset)
            for offset in reversed(range(self._archive_probe_days))
        ]

    async def check_archive(
        self,
        addresses: Sequence[str] = tuple(KNOWN_BUILDERS),
        dates: Sequence[date] | None = None,
    ) -> list[ArchiveProbe]:
        """Which of *dates* have an archive file per address (HEAD only)."""
        days = list(dates) if dates is not None else self.default_probe_dates()
        probes: list[ArchiveProbe] = []
        for address in addresses:
            active = [
                archive_day(day)
                for day in days
                if await self._source.archive_exists(address, day)
            ]
            if active:
                logger.info("Archive data for %s on %s", address, ", ".join(active))
            probes.append(ArchiveProbe(address=address, has_data=bool(active), active_dates=active))
        return probes

    async def analyze(
        self, addresses: Sequence[str] = tuple(KNOWN_BUILDERS)
    ) -> BuilderAnalysis:
        """Revenue distribution across *addresses*; failed probes are left out."""
        revenues: list[tuple[str, float]] = []
        for address in addresses:
            builder = await self._source.fetch_builder(address)
            if builder is None:
                continue
            revenues.append((address, builder.total))

        revenues.sort(key=lambda item: item[1], reverse=True)
        total = sum(revenue for _, revenue in revenues)
        distribution = [
            {
                "address": address,
                "revenue": revenue,
                "percentage": revenue / total * 100 if total else 0.0,
            }
            for address, revenue in revenues
        ]
        return BuilderAnalysis(
            total_revenue=total,
            average_revenue=total / len(revenues) if revenues else 0.0,
            top_builder=revenues[0][0] if revenues else "",
            distribution=distribution,
        )

    async def report(
        self, addresses: Sequence[str] = POTENTIAL_BUILDER_ADDRESSES
    ) -> DiscoveryReport:
        results = await self.discover(addresses)
        active = [r for r in results if r.has_revenue]
        top = max(active, key=lambda r: r.total_rewards, default=None)
        report = DiscoveryReport(
            active_builders=len(active),
            inactive_addresses=len(results) - len(active),
            total_market_size=sum(r.total_rewards for r in active),
            top_address=top.address if top else "",
            recommendations=list(RECOMMENDATIONS),
            results=results,
        )
        logger.info(
            "Discovery: %d active of %d scanned, market size %s",
            report.active_builders,
            len(results),
            format_usd(report.total_market_size),
        )
        return report
