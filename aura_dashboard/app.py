"""Main application entry point: wires sources, pipeline, cache and HTTP surface.

Usage:
    python -m aura_dashboard.app
    python -m aura_dashboard.app --debug
    python -m aura_dashboard.app --once
    python -m aura_dashboard.app --discover
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import signal
import time
from datetime import timedelta

from aiohttp import web

from aura_dashboard.builders import BuilderDiscovery, BuilderLeaderboard
from aura_dashboard.cache import ComparisonCache
from aura_dashboard.comparison import ComparisonPipeline
from aura_dashboard.config import AppConfig
from aura_dashboard.core.models import HealthStatus
from aura_dashboard.core.utils import setup_logging
from aura_dashboard.metrics import start_metrics_server
from aura_dashboard.revenue import BuilderRevenueEstimator, ProjectEnricher
from aura_dashboard.sources import (
    CoinGeckoSource,
    DefiLlamaSource,
    HyperliquidSource,
    RateLimiter,
)
from aura_dashboard.web import DashboardApi

logger = logging.getLogger(__name__)


class AuraDashboardApp:
    """Composition root: owns the sources, the limiter and the snapshot cache."""

    def __init__(self, config: AppConfig) -> None:
        self._config = config
        self._start_time = time.monotonic()
        self._stopped = asyncio.Event()
        self._closed = False
        self._runner: web.AppRunner | None = None

        limiter = RateLimiter(
            intervals=config.rate_limits.intervals(),
            default_interval=config.rate_limits.default_ms / 1000,
        )
        self._defillama = DefiLlamaSource(config.sources, limiter)
        self._coingecko = CoinGeckoSource(config.sources, limiter)
        self._hyperliquid = HyperliquidSource(config.sources, limiter)

        enricher = ProjectEnricher(
            defillama=self._defillama,
            coingecko=self._coingecko,
            builders=BuilderRevenueEstimator(self._hyperliquid),
        )
        self.cache = ComparisonCache(
            pipeline=ComparisonPipeline(enricher),
            ttl=timedelta(minutes=config.cache.ttl_minutes),
            timeout_seconds=config.cache.pipeline_timeout_seconds,
        )
        self.leaderboard = BuilderLeaderboard(self._hyperliquid)
        self.discovery = BuilderDiscovery(
            self._hyperliquid,
            archive_probe_days=config.discovery.archive_probe_days,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Serve the HTTP surface until ``stop`` or ``shutdown`` is called."""
        logger.info("Starting Aura Dashboard")
        start_metrics_server(self._config.metrics)

        if self._config.server.enabled:
            api = DashboardApi(
                cache=self.cache,
                leaderboard=self.leaderboard,
                discovery=self.discovery,
                health=self.health,
            )
            self._runner = web.AppRunner(api.build_app())
            await self._runner.setup()
            site = web.TCPSite(
                self._runner, self._config.server.host, self._config.server.port
            )
            await site.start()
            logger.info(
                "HTTP API on %s:%d",
                self._config.server.host,
                self._config.server.port,
            )

        await self._stopped.wait()

    def stop(self) -> None:
        """Wake ``start`` so the caller can run ``shutdown``."""
        self._stopped.set()

    async def shutdown(self) -> None:
        """Graceful shutdown: stop the listener, close upstream sessions."""
        if self._closed:
            return
        self._closed = True
        self._stopped.set()
        logger.info("Shutting down Aura Dashboard...")

        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None

        await asyncio.gather(
            self._defillama.close(),
            self._coingecko.close(),
            self._hyperliquid.close(),
        )
        logger.info("Shutdown complete")

    def health(self) -> HealthStatus:
        snapshot = self.cache.peek()
        return HealthStatus(
            uptime_seconds=time.monotonic() - self._start_time,
            snapshot_age_seconds=self.cache.age_seconds(),
            snapshot_projects=len(snapshot.projects) if snapshot else 0,
            pipeline_runs=self.cache.pipeline_runs,
            fallbacks_served=self.cache.fallbacks_served,
        )


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Aura Dashboard: revenue vs capital raised for crypto projects"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--once",
        action="store_true",
        help="Compute one comparison snapshot, print it as JSON and exit",
    )
    mode.add_argument(
        "--discover",
        action="store_true",
        help="Run a builder discovery report, print it as JSON and exit",
    )
    return parser.parse_args()


async def _main() -> None:
    args = parse_args()

    config = AppConfig()

    # Override log level if --debug
    log_level = "DEBUG" if args.debug else config.log_level
    setup_logging(level=log_level, json_format=config.log_json)

    config.validate()

    app = AuraDashboardApp(config=config)

    if args.once or args.discover:
        try:
            if args.once:
                result = (await app.cache.get()).to_dict()
            else:
                result = (await app.discovery.report()).to_dict()
            print(json.dumps(result, indent=2))
        finally:
            await app.shutdown()
        return

    # Graceful shutdown on SIGINT / SIGTERM
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, app.stop)

    try:
        await app.start()
    except (KeyboardInterrupt, SystemExit):
        pass
    finally:
        await app.shutdown()


def main() -> None:
    asyncio.run(_main())


if __name__ == "__main__":
    main()
