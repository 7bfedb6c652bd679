"""DeFiLlama fee/revenue adapter."""

from __future__ import annotations

import logging
from typing import Any

from aura_dashboard.core.types import SourceKey
from aura_dashboard.sources.base_source import BaseSource, SourceError

logger = logging.getLogger(__name__)


class DefiLlamaSource(BaseSource):
    """Chain and protocol fee summaries from api.llama.fi.

    Chain summaries share the main ``defillama`` spacing. Protocol summaries
    and the app-fee overviews go through the lighter ``defillama-bulk`` key.
    """

    @property
    def source_key(self) -> str:
        return str(SourceKey.DEFILLAMA)

    async def fetch_fee_summary(
        self, slug: str, *, protocol: bool = False
    ) -> dict[str, Any] | None:
        """``/summary/fees/{slug}``: window totals plus an optional
        ``totalDataChartBreakdown``. ``None`` when unavailable."""
        url = f"{self._config.defillama_url}/summary/fees/{slug}"
        return await self._get_dict(
            url, f"fees {slug}", SourceKey.DEFILLAMA_BULK if protocol else SourceKey.DEFILLAMA
        )

    async def fetch_fee_overview(self, chain: str) -> dict[str, Any] | None:
        """``/overview/fees/{chain}``: aggregate app fees with a daily
        ``totalDataChart``. ``None`` when unavailable."""
        url = f"{self._config.defillama_url}/overview/fees/{chain}"
        return await self._get_dict(url, f"overview {chain}", SourceKey.DEFILLAMA_BULK)

    async def _get_dict(self, url: str, what: str, key: SourceKey) -> dict[str, Any] | None:
        try:
            data = await self._request_json("GET", url, limiter_key=str(key))
            if not isinstance(data, dict):
                raise SourceError(self.source_key, f"unexpected body for {what}")
            return data
        except SourceError as exc:
            self._record_failure(what, exc)
            return None
