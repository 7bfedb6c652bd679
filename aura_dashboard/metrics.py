"""Prometheus metrics shared by the pipeline, cache and sources."""

from __future__ import annotations

import logging

from prometheus_client import Counter, Gauge, start_http_server

from aura_dashboard.config import MetricsConfig

logger = logging.getLogger(__name__)

PIPELINE_RUNS_TOTAL = Counter(
    "aura_pipeline_runs_total",
    "Comparison pipeline runs by outcome",
    ["outcome"],
)
CACHE_REQUESTS_TOTAL = Counter(
    "aura_cache_requests_total",
    "Comparison cache lookups",
    ["result"],
)
SOURCE_FAILURES_TOTAL = Counter(
    "aura_source_failures_total",
    "Upstream calls that degraded to no data",
    ["source"],
)
SNAPSHOT_PROJECTS = Gauge(
    "aura_snapshot_projects",
    "Projects in the most recently stored snapshot",
)


def start_metrics_server(config: MetricsConfig) -> bool:
    """Expose /metrics if enabled. Returns True when the endpoint started."""
    if not config.enabled:
        return False
    start_http_server(config.port)
    logger.info("Prometheus metrics on :%d/metrics", config.port)
    return True
