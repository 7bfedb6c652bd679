"""Hyperliquid info API and builder-fill archive adapter."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date
from typing import Any

import lz4.frame

from aura_dashboard.core.models import Builder
from aura_dashboard.core.types import SourceKey
from aura_dashboard.core.utils import format_usd, to_float
from aura_dashboard.sources.base_source import BaseSource, SourceError

logger = logging.getLogger(__name__)

# Typical derivatives taker fee, used when no fills reveal the real rate
DEFAULT_FEE_RATE = 0.0003


def archive_day(day: date) -> str:
    """Archive file stem for a UTC day (``YYYYMMDD``)."""
    return day.strftime("%Y%m%d")


class HyperliquidSource(BaseSource):
    """Referral/builder rewards, fills, and the per-day builder fill archive.

    Info API calls share the ``hyperliquid`` limiter key; archive downloads
    and existence probes use ``hyperliquid-archive``.
    """

    @property
    def source_key(self) -> str:
        return str(SourceKey.HYPERLIQUID)

    async def _info(self, payload: dict[str, Any]) -> Any:
        return await self._request_json(
            "POST", self._config.hyperliquid_info_url, json=payload
        )

    def _archive_url(self, address: str, day: date) -> str:
        base = self._config.hyperliquid_archive_url
        return f"{base}/{address.lower()}/{archive_day(day)}.csv.lz4"

    # ------------------------------------------------------------------
    # Info API
    # ------------------------------------------------------------------

    async def fetch_builder(self, address: str) -> Builder | None:
        """Cumulative reward breakdown for *address*; ``None`` on failure."""
        try:
            data = await self._info({"type": "referral", "user": address})
            if not isinstance(data, dict):
                raise SourceError(self.source_key, f"unexpected referral body for {address}")
        except SourceError as exc:
            self._record_failure(f"referral {address[:10]}", exc)
            return None

        return Builder(
            address=address,
            builder_rewards=to_float(data.get("builderRewards")),
            unclaimed_referral_rewards=to_float(data.get("unclaimedRewards")),
            claimed_referral_rewards=to_float(data.get("claimedRewards")),
        )

    async def fetch_fills(
        self,
        address: str,
        start_ms: int | None = None,
        end_ms: int | None = None,
    ) -> list[dict[str, Any]] | None:
        """Fills for *address*, optionally restricted to a time window."""
        if start_ms is not None:
            payload: dict[str, Any] = {
                "type": "userFillsByTime",
                "user": address,
                "startTime": start_ms,
            }
            if end_ms is not None:
                payload["endTime"] = end_ms
        else:
            payload = {"type": "userFills", "user": address}

        try:
            data = await self._info(payload)
            if not isinstance(data, list):
                raise SourceError(self.source_key, f"unexpected fills body for {address}")
            return data
        except SourceError as exc:
            self._record_failure(f"fills {address[:10]}", exc)
            return None

    async def estimate_notional_volume(self, address: str, total_fees: float) -> float:
        """Estimate lifetime volume from fees using the observed fee rate.

        The fee rate is sampled from the most recent fills; without a usable
        sample the default derivatives rate is assumed.
        """
        fills = [f for f in await self.fetch_fills(address) or [] if isinstance(f, dict)]
        sample_volume = 0.0
        sample_fees = 0.0
        for fill in fills:
            sample_volume += to_float(fill.get("px")) * to_float(fill.get("sz"))
            sample_fees += to_float(fill.get("fee")) + to_float(fill.get("builderFee"))

        if sample_fees > 0 and sample_volume > 0:
            rate = sample_fees / sample_volume
            logger.debug(
                "%s: fee rate %.4f%% from %d fills",
                address[:10],
                rate * 100,
                len(fills),
            )
        else:
            rate = DEFAULT_FEE_RATE
        return total_fees / rate

    # ------------------------------------------------------------------
    # Fill archive
    # ------------------------------------------------------------------

    async def fetch_daily_builder_fees(self, address: str, day: date) -> float | None:
        """Sum of ``builder_fee`` in one day's archive file.

        A missing or unreadable file is a zero day. ``None`` means the
        archive itself could not be reached.
        """
        url = self._archive_url(address, day)
        try:
            compressed = await self._request(
                "GET", url, limiter_key=str(SourceKey.ARCHIVE)
            )
        except SourceError as exc:
            # The archive answers 403/404 for days without fills
            if exc.status in (403, 404):
                return 0.0
            self._record_failure(f"archive {address[:10]}/{archive_day(day)}", exc)
            return None

        try:
            text = lz4.frame.decompress(compressed).decode("utf-8")
        except (RuntimeError, ValueError) as exc:
            logger.warning(
                "Unreadable archive for %s on %s: %s",
                address[:10],
                archive_day(day),
                exc,
            )
            return 0.0

        total = 0.0
        rows = 0
        for row in csv.DictReader(io.StringIO(text)):
            total += to_float((row.get("builder_fee") or "").strip())
            rows += 1
        if rows:
            logger.debug(
                "%s %s: %d fills, %s builder fees",
                address[:10],
                archive_day(day),
                rows,
                format_usd(total),
            )
        return total

    async def archive_exists(self, address: str, day: date) -> bool:
        """HEAD probe for one day's archive file; nothing is downloaded."""
        return await self._exists(
            self._archive_url(address, day), limiter_key=str(SourceKey.ARCHIVE)
        )
