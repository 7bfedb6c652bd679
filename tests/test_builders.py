"""Tests for builder discovery scans and the leaderboard."""

from __future__ import annotations

from datetime import timedelta

import pytest

from aura_dashboard.builders.discovery import BuilderDiscovery
from aura_dashboard.builders.leaderboard import BuilderLeaderboard, parse_time_range
from aura_dashboard.core.models import Builder
from aura_dashboard.core.types import TimeRange
from fakes import NOW, FakeClock, FakeHyperliquid

ACTIVE = "0x0cbf655b0d22ae71fba3a674b0e1c0c7e7f975af"
QUIET = "0x1cc34f6af34653c515b47a83e1de70ba9b0cda1f"
BROKEN = "0x1922810825c90f4270048b96da7b1803cd8609ef"


@pytest.fixture
def populated(hyperliquid: FakeHyperliquid) -> FakeHyperliquid:
    hyperliquid.builders[ACTIVE] = Builder(
        address=ACTIVE,
        builder_rewards=300.0,
        unclaimed_referral_rewards=50.0,
        claimed_referral_rewards=150.0,
    )
    hyperliquid.builders[QUIET] = Builder(address=QUIET)
    hyperliquid.volumes[ACTIVE] = 1_000_000.0
    return hyperliquid


@pytest.fixture
def discovery(populated: FakeHyperliquid, clock: FakeClock) -> BuilderDiscovery:
    return BuilderDiscovery(populated, archive_probe_days=3, clock=clock)


class TestBuilderDiscovery:
    @pytest.mark.asyncio
    async def test_discover_reports_every_address(self, discovery: BuilderDiscovery) -> None:
        results = await discovery.discover([ACTIVE, QUIET, BROKEN])

        assert [r.address for r in results] == [ACTIVE, QUIET, BROKEN]
        active, quiet, broken = results
        assert active.has_revenue
        assert active.total_rewards == 500
        assert active.builder_rewards == 300
        assert active.referral_rewards == 200
        assert not quiet.has_revenue
        # A failed probe is an inactive zero row
        assert not broken.has_revenue
        assert broken.total_rewards == 0

    @pytest.mark.asyncio
    async def test_check_archive(
        self, discovery: BuilderDiscovery, populated: FakeHyperliquid
    ) -> None:
        today = NOW.date()
        populated.archive_days[ACTIVE] = {today, today - timedelta(days=2)}

        probes = await discovery.check_archive([ACTIVE, QUIET])

        assert probes[0].has_data
        assert probes[0].active_dates == [
            (today - timedelta(days=2)).strftime("%Y%m%d"),
            today.strftime("%Y%m%d"),
        ]
        assert not probes[1].has_data
        assert probes[1].active_dates == []

    def test_default_probe_dates(self, discovery: BuilderDiscovery) -> None:
        today = NOW.date()
        assert discovery.default_probe_dates() == [
            today - timedelta(days=2),
            today - timedelta(days=1),
            today,
        ]

    @pytest.mark.asyncio
    async def test_analyze(self, discovery: BuilderDiscovery) -> None:
        analysis = await discovery.analyze([QUIET, ACTIVE, BROKEN])

        assert analysis.total_revenue == 500
        assert analysis.average_revenue == 250
        assert analysis.top_builder == ACTIVE
        assert [d["address"] for d in analysis.distribution] == [ACTIVE, QUIET]
        assert analysis.distribution[0]["percentage"] == 100

    @pytest.mark.asyncio
    async def test_analyze_without_data(self, hyperliquid: FakeHyperliquid) -> None:
        analysis = await BuilderDiscovery(hyperliquid).analyze([BROKEN])
        assert analysis.total_revenue == 0
        assert analysis.average_revenue == 0
        assert analysis.top_builder == ""

    @pytest.mark.asyncio
    async def test_report(self, discovery: BuilderDiscovery) -> None:
        report = await discovery.report([ACTIVE, QUIET, BROKEN])

        assert report.active_builders == 1
        assert report.inactive_addresses == 2
        assert report.total_market_size == 500
        assert report.top_address == ACTIVE
        assert report.recommendations
        body = report.to_dict()
        assert body["knownBuilders"] == 1
        assert len(body["results"]) == 3


class TestBuilderLeaderboard:
    @pytest.mark.asyncio
    async def test_scales_by_time_range(
        self, populated: FakeHyperliquid, clock: FakeClock
    ) -> None:
        board = BuilderLeaderboard(populated, clock=clock)
        report = await board.leaderboard(TimeRange.D30)

        top = report.entries[0]
        assert top.code == "PVP001"
        assert top.total_revenue == pytest.approx(500 * 0.15)
        assert top.builder_rewards == pytest.approx(300 * 0.15)
        assert top.cumulative_volume == pytest.approx(1_000_000 * 0.15)
        assert report.active_builders == 1
        assert report.time_range == "30d"
        assert len(report.entries) == 5

    @pytest.mark.asyncio
    async def test_all_time_is_unscaled(self, populated: FakeHyperliquid) -> None:
        report = await BuilderLeaderboard(populated).leaderboard(TimeRange.ALL)
        assert report.total_revenue == 500
        assert report.to_dict()["totalVolume"] == 1_000_000

    @pytest.mark.asyncio
    async def test_by_code(self, populated: FakeHyperliquid) -> None:
        board = BuilderLeaderboard(populated)
        entry = await board.by_code("PVP001", TimeRange.ALL)
        assert entry is not None
        assert entry.name == "pvp.trade"
        assert entry.total_revenue == 500
        assert await board.by_code("NOPE01") is None

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("24h", TimeRange.H24), ("all", TimeRange.ALL), (None, TimeRange.D7), ("1y", TimeRange.D7)],
    )
    def test_parse_time_range(self, value: str | None, expected: TimeRange) -> None:
        assert parse_time_range(value) == expected
