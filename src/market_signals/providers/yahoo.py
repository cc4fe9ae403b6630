"""Yahoo Finance chart endpoint — stock quotes."""

from __future__ import annotations

import math
from datetime import datetime, timezone

import httpx

from market_signals.models import AssetClass, Quote
from market_signals.providers.base import (
    HttpQuoteSource,
    ProviderError,
    ProviderUnavailable,
    checked_price,
)


class YahooFinanceSource(HttpQuoteSource):
    name = "yahoo"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = "https://query1.finance.yahoo.com",
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, timeout_s=timeout_s, transport=transport)
        self.api_key = api_key

    async def fetch(self, symbol: str, asset_class: AssetClass) -> Quote:
        if not self.api_key:
            raise ProviderUnavailable("yahoo: no API key configured")
        data = await self._get_json(
            f"/v8/finance/chart/{symbol}",
            headers={"X-API-Key": self.api_key},
        )
        return self.parse_chart(symbol, data)

    @staticmethod
    def parse_chart(symbol: str, data: dict) -> Quote:
        """Build a Quote from a chart response.

        Uses ``meta.regularMarketPrice`` against ``meta.previousClose`` and
        the last non-null volume in the quote series.
        """
        try:
            result = data["chart"]["result"][0]
            meta = result["meta"]
            raw_price = meta["regularMarketPrice"]
            prev_close = float(meta.get("previousClose") or meta.get("chartPreviousClose") or 0)
            volumes = result.get("indicators", {}).get("quote", [{}])[0].get("volume") or []
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise ProviderError(f"yahoo: malformed chart payload for {symbol}") from exc

        price = checked_price("yahoo", symbol, raw_price)
        if not math.isfinite(prev_close) or prev_close <= 0:
            prev_close = price

        volume = next((v for v in reversed(volumes) if v is not None), 0)
        change = price - prev_close
        return Quote(
            symbol=symbol,
            price=price,
            change_abs=change,
            change_pct=(change / prev_close * 100) if prev_close else 0.0,
            volume=int(volume),
            as_at=datetime.now(timezone.utc),
            source="yahoo",
        )
