"""CoinGecko price/valuation adapter."""

from __future__ import annotations

import logging
from typing import Any

from aura_dashboard.core.models import MarketData
from aura_dashboard.core.types import SourceKey
from aura_dashboard.core.utils import format_usd, to_float
from aura_dashboard.sources.base_source import BaseSource, SourceError

logger = logging.getLogger(__name__)

_COIN_PARAMS = {
    "localization": "false",
    "tickers": "false",
    "market_data": "true",
    "community_data": "false",
    "developer_data": "false",
    "sparkline": "false",
}


class CoinGeckoSource(BaseSource):
    """Current price and FDV per coin id."""

    @property
    def source_key(self) -> str:
        return str(SourceKey.COINGECKO)

    def _headers(self) -> dict[str, str]:
        if self._config.coingecko_api_key:
            return {"x-cg-pro-api-key": self._config.coingecko_api_key}
        return {}

    async def fetch_market_data(self, coin_id: str) -> MarketData | None:
        """Return price and FDV (market cap when FDV is missing)."""
        url = f"{self._config.coingecko_url}/coins/{coin_id}"
        try:
            data = await self._request_json(
                "GET", url, params=_COIN_PARAMS, headers=self._headers()
            )
            market = data.get("market_data") if isinstance(data, dict) else None
            if not isinstance(market, dict):
                raise SourceError(self.source_key, f"no market_data for {coin_id}")
        except SourceError as exc:
            self._record_failure(f"coin {coin_id}", exc)
            return None

        price = _usd(market, "current_price")
        fdv = _usd(market, "fully_diluted_valuation")
        if fdv is None:
            fdv = _usd(market, "market_cap")
            if fdv is not None:
                logger.debug("%s: FDV unavailable, using market cap", coin_id)

        logger.debug(
            "%s: price=%s fdv=%s",
            coin_id,
            price,
            format_usd(fdv) if fdv is not None else None,
        )
        return MarketData(fdv=fdv, current_price=price)


def _usd(market: dict[str, Any], key: str) -> float | None:
    """USD quote of a ``{currency: value}`` field; junk and zero are missing."""
    quotes = market.get(key)
    if not isinstance(quotes, dict):
        return None
    return to_float(quotes.get("usd")) or None
