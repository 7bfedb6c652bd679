"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from aura_dashboard.config import AppConfig, CacheConfig, RateLimitConfig


class TestConfig:
    def test_rate_limit_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key in (
            "DEFILLAMA_MIN_INTERVAL_MS",
            "DEFILLAMA_BULK_MIN_INTERVAL_MS",
            "COINGECKO_MIN_INTERVAL_MS",
            "HYPERLIQUID_MIN_INTERVAL_MS",
            "ARCHIVE_MIN_INTERVAL_MS",
        ):
            monkeypatch.delenv(key, raising=False)
        assert RateLimitConfig().intervals() == {
            "defillama": 1.0,
            "defillama-bulk": 0.1,
            "coingecko": 1.0,
            "hyperliquid": 0.2,
            "hyperliquid-archive": 0.1,
        }

    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("CACHE_TTL_MINUTES", "5")
        monkeypatch.setenv("DEFILLAMA_MIN_INTERVAL_MS", "250")
        assert CacheConfig().ttl_minutes == 5
        assert RateLimitConfig().intervals()["defillama"] == 0.25

    def test_validate_rejects_bad_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PIPELINE_TIMEOUT_SECONDS", "0")
        with pytest.raises(SystemExit):
            AppConfig().validate()

    def test_validate_accepts_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("PIPELINE_TIMEOUT_SECONDS", raising=False)
        monkeypatch.delenv("CACHE_TTL_MINUTES", raising=False)
        AppConfig().validate()
