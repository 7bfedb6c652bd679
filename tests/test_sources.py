"""Tests for the upstream adapters with the HTTP layer stubbed out."""

from __future__ import annotations

from datetime import date
from typing import Any

import lz4.frame
import pytest

from aura_dashboard.config import SourceConfig
from aura_dashboard.sources.base_source import SourceError
from aura_dashboard.sources.coingecko_source import CoinGeckoSource
from aura_dashboard.sources.defillama_source import DefiLlamaSource
from aura_dashboard.sources.hyperliquid_source import DEFAULT_FEE_RATE, HyperliquidSource
from aura_dashboard.sources.rate_limiter import RateLimiter

ADDRESS = "0x0CBF655B0D22AE71FBA3A674B0E1C0C7E7F975AF"


class Recorder:
    """Async stand-in for ``_request``/``_request_json``."""

    def __init__(self, result: Any = None, error: SourceError | None = None) -> None:
        self.result = result
        self.error = error
        self.calls: list[tuple[tuple[Any, ...], dict[str, Any]]] = []

    async def __call__(self, *args: Any, **kwargs: Any) -> Any:
        self.calls.append((args, kwargs))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def config() -> SourceConfig:
    return SourceConfig(
        defillama_url="https://llama.test",
        coingecko_url="https://gecko.test",
        coingecko_api_key="",
        hyperliquid_info_url="https://hl.test/info",
        hyperliquid_archive_url="https://archive.test/fills",
        request_timeout_seconds=5,
    )


@pytest.fixture
def limiter() -> RateLimiter:
    return RateLimiter()


class TestDefiLlamaSource:
    @pytest.mark.asyncio
    async def test_fee_summary(self, config: SourceConfig, limiter: RateLimiter) -> None:
        source = DefiLlamaSource(config, limiter)
        source._request_json = Recorder({"total30d": 10})

        assert await source.fetch_fee_summary("ethereum") == {"total30d": 10}
        args, kwargs = source._request_json.calls[0]
        assert args == ("GET", "https://llama.test/summary/fees/ethereum")
        assert kwargs["limiter_key"] == "defillama"

    @pytest.mark.asyncio
    async def test_protocol_and_overview_use_bulk_key(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = DefiLlamaSource(config, limiter)
        source._request_json = Recorder({"total30d": 10})

        await source.fetch_fee_summary("tether", protocol=True)
        await source.fetch_fee_overview("ethereum")

        assert [kw["limiter_key"] for _, kw in source._request_json.calls] == [
            "defillama-bulk",
            "defillama-bulk",
        ]

    @pytest.mark.asyncio
    async def test_failure_is_none(self, config: SourceConfig, limiter: RateLimiter) -> None:
        source = DefiLlamaSource(config, limiter)
        source._request_json = Recorder(error=SourceError("defillama", "503", status=503))
        assert await source.fetch_fee_summary("tether") is None

    @pytest.mark.asyncio
    async def test_unexpected_body_is_none(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = DefiLlamaSource(config, limiter)
        source._request_json = Recorder(["not", "a", "dict"])
        assert await source.fetch_fee_overview("ethereum") is None


class TestCoinGeckoSource:
    @pytest.mark.asyncio
    async def test_market_data(self, config: SourceConfig, limiter: RateLimiter) -> None:
        source = CoinGeckoSource(config, limiter)
        source._request_json = Recorder(
            {
                "market_data": {
                    "current_price": {"usd": 2.5},
                    "fully_diluted_valuation": {"usd": 1_000_000},
                    "market_cap": {"usd": 400_000},
                }
            }
        )
        data = await source.fetch_market_data("sui")
        assert data is not None
        assert data.current_price == 2.5
        assert data.fdv == 1_000_000

        _, kwargs = source._request_json.calls[0]
        assert kwargs["params"]["market_data"] == "true"
        assert kwargs["headers"] == {}

    @pytest.mark.asyncio
    async def test_fdv_falls_back_to_market_cap(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = CoinGeckoSource(config, limiter)
        source._request_json = Recorder(
            {"market_data": {"current_price": {}, "market_cap": {"usd": 400_000}}}
        )
        data = await source.fetch_market_data("sui")
        assert data is not None
        assert data.fdv == 400_000
        assert data.current_price is None

    @pytest.mark.asyncio
    async def test_api_key_header(self, limiter: RateLimiter) -> None:
        source = CoinGeckoSource(SourceConfig(coingecko_api_key="secret"), limiter)
        source._request_json = Recorder({"market_data": {}})
        await source.fetch_market_data("sui")
        _, kwargs = source._request_json.calls[0]
        assert kwargs["headers"] == {"x-cg-pro-api-key": "secret"}

    @pytest.mark.asyncio
    async def test_missing_market_data_is_none(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = CoinGeckoSource(config, limiter)
        source._request_json = Recorder({"id": "sui"})
        assert await source.fetch_market_data("sui") is None

    @pytest.mark.asyncio
    async def test_malformed_fields_are_missing(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = CoinGeckoSource(config, limiter)
        source._request_json = Recorder(
            {
                "market_data": {
                    "current_price": 5,
                    "fully_diluted_valuation": {"usd": "n/a"},
                    "market_cap": {"usd": "400000"},
                }
            }
        )
        data = await source.fetch_market_data("sui")
        assert data is not None
        assert data.current_price is None
        assert data.fdv == 400_000


class TestHyperliquidSource:
    @pytest.mark.asyncio
    async def test_fetch_builder_parses_strings(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = HyperliquidSource(config, limiter)
        source._request_json = Recorder(
            {"builderRewards": "12.5", "unclaimedRewards": "3", "claimedRewards": "bogus"}
        )
        builder = await source.fetch_builder(ADDRESS)

        assert builder is not None
        assert builder.address == ADDRESS.lower()
        assert builder.builder_rewards == 12.5
        assert builder.referral_total == 3
        _, kwargs = source._request_json.calls[0]
        assert kwargs["json"] == {"type": "referral", "user": ADDRESS}

    @pytest.mark.asyncio
    async def test_fetch_fills_by_time(self, config: SourceConfig, limiter: RateLimiter) -> None:
        source = HyperliquidSource(config, limiter)
        source._request_json = Recorder([{"px": "1"}])

        assert await source.fetch_fills(ADDRESS, 1000, 2000) == [{"px": "1"}]
        _, kwargs = source._request_json.calls[0]
        assert kwargs["json"] == {
            "type": "userFillsByTime",
            "user": ADDRESS,
            "startTime": 1000,
            "endTime": 2000,
        }

    @pytest.mark.asyncio
    async def test_fetch_fills_failure(self, config: SourceConfig, limiter: RateLimiter) -> None:
        source = HyperliquidSource(config, limiter)
        source._request_json = Recorder(error=SourceError("hyperliquid", "timed out"))
        assert await source.fetch_fills(ADDRESS) is None

    @pytest.mark.asyncio
    async def test_notional_volume_from_observed_rate(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = HyperliquidSource(config, limiter)
        # 1000 notional paying 0.5 in fees: 0.05% rate
        source._request_json = Recorder(
            [{"px": "100", "sz": "10", "fee": "0.4", "builderFee": "0.1"}]
        )
        assert await source.estimate_notional_volume(ADDRESS, 5.0) == pytest.approx(10_000)

    @pytest.mark.asyncio
    async def test_notional_volume_skips_malformed_fills(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = HyperliquidSource(config, limiter)
        source._request_json = Recorder(
            ["junk", 7, {"px": "100", "sz": "10", "fee": "0.4", "builderFee": "0.1"}]
        )
        assert await source.estimate_notional_volume(ADDRESS, 5.0) == pytest.approx(10_000)

    @pytest.mark.asyncio
    async def test_notional_volume_default_rate(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = HyperliquidSource(config, limiter)
        source._request_json = Recorder([])
        volume = await source.estimate_notional_volume(ADDRESS, 3.0)
        assert volume == pytest.approx(3.0 / DEFAULT_FEE_RATE)

    @pytest.mark.asyncio
    async def test_daily_builder_fees(self, config: SourceConfig, limiter: RateLimiter) -> None:
        csv_text = "time,user,builder_fee\n1,0xa,1.25\n2,0xb,0.75\n3,0xc,\n"
        source = HyperliquidSource(config, limiter)
        source._request = Recorder(lz4.frame.compress(csv_text.encode()))

        fees = await source.fetch_daily_builder_fees(ADDRESS, date(2025, 1, 5))

        assert fees == pytest.approx(2.0)
        args, kwargs = source._request.calls[0]
        assert args == ("GET", f"https://archive.test/fills/{ADDRESS.lower()}/20250105.csv.lz4")
        assert kwargs["limiter_key"] == "hyperliquid-archive"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [403, 404])
    async def test_missing_day_is_zero(
        self, config: SourceConfig, limiter: RateLimiter, status: int
    ) -> None:
        source = HyperliquidSource(config, limiter)
        source._request = Recorder(error=SourceError("hyperliquid", "nope", status=status))
        assert await source.fetch_daily_builder_fees(ADDRESS, date(2025, 1, 5)) == 0.0

    @pytest.mark.asyncio
    async def test_unreachable_archive_is_none(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = HyperliquidSource(config, limiter)
        source._request = Recorder(error=SourceError("hyperliquid", "down", status=502))
        assert await source.fetch_daily_builder_fees(ADDRESS, date(2025, 1, 5)) is None

    @pytest.mark.asyncio
    async def test_corrupt_archive_is_zero(
        self, config: SourceConfig, limiter: RateLimiter
    ) -> None:
        source = HyperliquidSource(config, limiter)
        source._request = Recorder(b"definitely not lz4")
        assert await source.fetch_daily_builder_fees(ADDRESS, date(2025, 1, 5)) == 0.0

    @pytest.mark.asyncio
    async def test_archive_exists(self, config: SourceConfig, limiter: RateLimiter) -> None:
        source = HyperliquidSource(config, limiter)
        source._exists = Recorder(True)
        assert await source.archive_exists(ADDRESS, date(2025, 1, 5))
        args, kwargs = source._exists.calls[0]
        assert args[0].endswith("/20250105.csv.lz4")
        assert kwargs["limiter_key"] == "hyperliquid-archive"
