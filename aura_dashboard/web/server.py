"""Thin JSON HTTP surface over the cache and builder services."""

from __future__ import annotations

import logging
from collections.abc import Callable

from aiohttp import web

from aura_dashboard.builders.discovery import BuilderDiscovery
from aura_dashboard.builders.leaderboard import BuilderLeaderboard, parse_time_range
from aura_dashboard.cache.comparison_cache import ComparisonCache
from aura_dashboard.core.models import HealthStatus

logger = logging.getLogger(__name__)

DISCOVERY_ACTIONS = ("scan", "analyze", "csv", "report")


def _error(message: str, status: int) -> web.Response:
    return web.json_response({"error": message}, status=status)


class DashboardApi:
    """Route handlers. Every handler answers JSON, including on failure."""

    def __init__(
        self,
        cache: ComparisonCache,
        leaderboard: BuilderLeaderboard,
        discovery: BuilderDiscovery,
        health: Callable[[], HealthStatus],
    ) -> None:
        self._cache = cache
        self._leaderboard = leaderboard
        self._discovery = discovery
        self._health = health

    def build_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/comparison", self.handle_comparison)
        app.router.add_get("/api/builders/revenue", self.handle_builders_revenue)
        # Registered before the {code} route so "discover" is not a code
        app.router.add_get("/api/builders/discover", self.handle_discover)
        app.router.add_get("/api/builders/{code}", self.handle_builder)
        app.router.add_get("/health", self.handle_health)
        app.router.add_get("/", self.handle_health)
        return app

    async def handle_comparison(self, _request: web.Request) -> web.Response:
        # The cache never raises; a failed run comes back as a fallback snapshot
        snapshot = await self._cache.get()
        return web.json_response(snapshot.to_dict())

    async def handle_builders_revenue(self, request: web.Request) -> web.Response:
        time_range = parse_time_range(request.query.get("timeRange"))
        try:
            report = await self._leaderboard.leaderboard(time_range)
        except Exception:
            logger.exception("Leaderboard failed for %s", time_range)
            return _error("Failed to fetch revenue data", 500)
        return web.json_response(report.to_dict())

    async def handle_builder(self, request: web.Request) -> web.Response:
        code = request.match_info["code"]
        time_range = parse_time_range(request.query.get("timeRange"))
        try:
            entry = await self._leaderboard.by_code(code, time_range)
        except Exception:
            logger.exception("Builder lookup failed for %s", code)
            return _error("Failed to fetch builder data", 500)
        if entry is None:
            return _error("Builder not found", 404)
        return web.json_response(entry.to_dict())

    async def handle_discover(self, request: web.Request) -> web.Response:
        action = request.query.get("action", "scan")
        if action not in DISCOVERY_ACTIONS:
            return _error(
                f"Invalid action. Use: {', '.join(DISCOVERY_ACTIONS)}", 400
            )

        try:
            if action == "scan":
                results = await self._discovery.discover()
                active = sum(1 for r in results if r.has_revenue)
                return web.json_response(
                    {
                        "action": action,
                        "results": [r.to_dict() for r in results],
                        "summary": {
                            "total": len(results),
                            "active": active,
                            "inactive": len(results) - active,
                        },
                    }
                )
            if action == "analyze":
                analysis = await self._discovery.analyze()
                body = analysis.to_dict()
            elif action == "csv":
                probes = await self._discovery.check_archive()
                body = [p.to_dict() for p in probes]
            else:
                report = await self._discovery.report()
                body = report.to_dict()
        except Exception:
            logger.exception("Builder discovery %s failed", action)
            return _error("Failed to discover builders", 500)
        return web.json_response({"action": action, "results": body})

    async def handle_health(self, _request: web.Request) -> web.Response:
        status = self._health()
        age = status.snapshot_age_seconds
        return web.json_response(
            {
                "status": "ok",
                "uptime_seconds": round(status.uptime_seconds, 1),
                "snapshot_age_seconds": round(age, 1) if age is not None else None,
                "snapshot_projects": status.snapshot_projects,
                "pipeline_runs": status.pipeline_runs,
                "fallbacks_served": status.fallbacks_served,
            }
        )
