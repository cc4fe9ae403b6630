"""CoinGecko simple/price — crypto quotes."""

from __future__ import annotations

from datetime import datetime, timezone

import httpx

from market_signals.models import AssetClass, Quote
from market_signals.providers.base import HttpQuoteSource, ProviderError, checked_price

COIN_IDS = {
    "BTCUSD": "bitcoin",
    "ETHUSD": "ethereum",
    "ADAUSD": "cardano",
    "DOTUSD": "polkadot",
}


class CoinGeckoSource(HttpQuoteSource):
    name = "coingecko"

    def __init__(
        self,
        base_url: str = "https://api.coingecko.com/api/v3",
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, timeout_s=timeout_s, transport=transport)

    @staticmethod
    def coin_id(symbol: str) -> str:
        return COIN_IDS.get(symbol) or symbol.replace("USD", "").lower()

    async def fetch(self, symbol: str, asset_class: AssetClass) -> Quote:
        coin = self.coin_id(symbol)
        data = await self._get_json(
            "/simple/price",
            params={
                "ids": coin,
                "vs_currencies": "usd",
                "include_24hr_change": "true",
                "include_24hr_vol": "true",
            },
        )
        coin_data = data.get(coin) if isinstance(data, dict) else None
        if not coin_data or coin_data.get("usd") is None:
            raise ProviderError(f"coingecko: no data found for {symbol}")

        price = checked_price("coingecko", symbol, coin_data["usd"])
        change_pct = float(coin_data.get("usd_24h_change") or 0.0)
        prior = price / (1 + change_pct / 100) if change_pct > -100 else price
        return Quote(
            symbol=symbol,
            price=price,
            change_abs=price - prior,
            change_pct=change_pct,
            volume=int(coin_data.get("usd_24h_vol") or 0),
            as_at=datetime.now(timezone.utc),
            source="coingecko",
        )
