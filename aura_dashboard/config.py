"""Environment-based configuration with validation."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from aura_dashboard.core.types import SourceKey

# Load .env from project root or cwd
_env_path = Path(__file__).resolve().parent / ".env"
if _env_path.exists():
    load_dotenv(_env_path)
else:
    load_dotenv()


def _env(key: str, default: str = "") -> str:
    return os.getenv(key, default)


def _env_int(key: str, default: int = 0) -> int:
    return int(os.getenv(key, str(default)))


def _env_float(key: str, default: float = 0.0) -> float:
    return float(os.getenv(key, str(default)))


def _env_bool(key: str, default: bool = False) -> bool:
    return os.getenv(key, str(default)).lower() in ("1", "true", "yes")


# ---------------------------------------------------------------------------
# Sub-configs
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SourceConfig:
    """Upstream API endpoints."""

    defillama_url: str = field(
        default_factory=lambda: _env("DEFILLAMA_API_URL", "https://api.llama.fi")
    )
    coingecko_url: str = field(
        default_factory=lambda: _env(
            "COINGECKO_API_URL", "https://api.coingecko.com/api/v3"
        )
    )
    coingecko_api_key: str = field(
        default_factory=lambda: _env("COINGECKO_API_KEY", "")
    )
    hyperliquid_info_url: str = field(
        default_factory=lambda: _env(
            "HYPERLIQUID_INFO_URL", "https://api.hyperliquid.xyz/info"
        )
    )
    hyperliquid_archive_url: str = field(
        default_factory=lambda: _env(
            "HYPERLIQUID_ARCHIVE_URL",
            "https://stats-data.hyperliquid.xyz/Mainnet/builder_fills",
        )
    )
    request_timeout_seconds: float = field(
        default_factory=lambda: _env_float("SOURCE_REQUEST_TIMEOUT", 10.0)
    )


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    """Minimum spacing between calls to the same upstream, in milliseconds."""

    defillama_ms: int = field(
        default_factory=lambda: _env_int("DEFILLAMA_MIN_INTERVAL_MS", 1000)
    )
    defillama_bulk_ms: int = field(
        default_factory=lambda: _env_int("DEFILLAMA_BULK_MIN_INTERVAL_MS", 100)
    )
    coingecko_ms: int = field(
        default_factory=lambda: _env_int("COINGECKO_MIN_INTERVAL_MS", 1000)
    )
    hyperliquid_ms: int = field(
        default_factory=lambda: _env_int("HYPERLIQUID_MIN_INTERVAL_MS", 200)
    )
    archive_ms: int = field(
        default_factory=lambda: _env_int("ARCHIVE_MIN_INTERVAL_MS", 100)
    )
    default_ms: int = field(
        default_factory=lambda: _env_int("DEFAULT_MIN_INTERVAL_MS", 0)
    )

    def intervals(self) -> dict[str, float]:
        """Return per-source intervals in seconds, keyed by source name."""
        return {
            str(SourceKey.DEFILLAMA): self.defillama_ms / 1000,
            str(SourceKey.DEFILLAMA_BULK): self.defillama_bulk_ms / 1000,
            str(SourceKey.COINGECKO): self.coingecko_ms / 1000,
            str(SourceKey.HYPERLIQUID): self.hyperliquid_ms / 1000,
            str(SourceKey.ARCHIVE): self.archive_ms / 1000,
        }


@dataclass(frozen=True, slots=True)
class CacheConfig:
    """Comparison snapshot validity and pipeline timeout."""

    ttl_minutes: float = field(
        default_factory=lambda: _env_float("CACHE_TTL_MINUTES", 15)
    )
    pipeline_timeout_seconds: float = field(
        default_factory=lambda: _env_float("PIPELINE_TIMEOUT_SECONDS", 30)
    )


@dataclass(frozen=True, slots=True)
class DiscoveryConfig:
    """Builder discovery probe settings."""

    archive_probe_days: int = field(
        default_factory=lambda: _env_int("DISCOVERY_ARCHIVE_DAYS", 3)
    )


@dataclass(frozen=True, slots=True)
class ServerConfig:
    """JSON API listener."""

    enabled: bool = field(
        default_factory=lambda: _env_bool("SERVER_ENABLED", True)
    )
    host: str = field(default_factory=lambda: _env("SERVER_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("SERVER_PORT", 8080))


@dataclass(frozen=True, slots=True)
class MetricsConfig:
    """Prometheus metrics settings."""

    enabled: bool = field(
        default_factory=lambda: _env_bool("METRICS_ENABLED", False)
    )
    port: int = field(
        default_factory=lambda: _env_int("METRICS_PORT", 9090)
    )


# ---------------------------------------------------------------------------
# Root config
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Root application configuration aggregating all sub-configs."""

    sources: SourceConfig = field(default_factory=SourceConfig)
    rate_limits: RateLimitConfig = field(default_factory=RateLimitConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    metrics: MetricsConfig = field(default_factory=MetricsConfig)
    log_level: str = field(
        default_factory=lambda: _env("LOG_LEVEL", "INFO")
    )
    log_json: bool = field(
        default_factory=lambda: _env_bool("LOG_JSON", False)
    )

    def validate(self) -> None:
        """Validate numeric ranges; exits on failure."""
        errors: list[str] = []
        for name, value in (
            ("DEFILLAMA_MIN_INTERVAL_MS", self.rate_limits.defillama_ms),
            ("DEFILLAMA_BULK_MIN_INTERVAL_MS", self.rate_limits.defillama_bulk_ms),
            ("COINGECKO_MIN_INTERVAL_MS", self.rate_limits.coingecko_ms),
            ("HYPERLIQUID_MIN_INTERVAL_MS", self.rate_limits.hyperliquid_ms),
            ("ARCHIVE_MIN_INTERVAL_MS", self.rate_limits.archive_ms),
            ("DEFAULT_MIN_INTERVAL_MS", self.rate_limits.default_ms),
        ):
            if value < 0:
                errors.append(f"{name} must be >= 0")
        if self.cache.ttl_minutes <= 0:
            errors.append("CACHE_TTL_MINUTES must be > 0")
        if self.cache.pipeline_timeout_seconds <= 0:
            errors.append("PIPELINE_TIMEOUT_SECONDS must be > 0")
        if self.sources.request_timeout_seconds <= 0:
            errors.append("SOURCE_REQUEST_TIMEOUT must be > 0")
        if self.discovery.archive_probe_days < 1:
            errors.append("DISCOVERY_ARCHIVE_DAYS must be >= 1")
        if errors:
            for e in errors:
                print(f"[CONFIG ERROR] {e}", file=sys.stderr)
            raise SystemExit(1)
