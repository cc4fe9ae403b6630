"""Alpha Vantage CURRENCY_EXCHANGE_RATE — forex quotes."""

from __future__ import annotations

from datetime import datetime, timezone

import httpx

from market_signals.models import AssetClass, Quote
from market_signals.providers.base import (
    HttpQuoteSource,
    ProviderError,
    ProviderUnavailable,
    checked_price,
)


class AlphaVantageSource(HttpQuoteSource):
    name = "alpha_vantage"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = "https://www.alphavantage.co",
        timeout_s: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, timeout_s=timeout_s, transport=transport)
        self.api_key = api_key

    async def fetch(self, symbol: str, asset_class: AssetClass) -> Quote:
        if not self.api_key:
            raise ProviderUnavailable("alpha_vantage: no API key configured")
        if len(symbol) < 6:
            raise ProviderError(f"alpha_vantage: {symbol!r} is not a currency pair")
        data = await self._get_json(
            "/query",
            params={
                "function": "CURRENCY_EXCHANGE_RATE",
                "from_currency": symbol[:3],
                "to_currency": symbol[3:6],
                "apikey": self.api_key,
            },
        )
        try:
            raw_rate = data["Realtime Currency Exchange Rate"]["5. Exchange Rate"]
        except (KeyError, TypeError) as exc:
            # Rate limiting comes back as a 200 with a "Note" field.
            raise ProviderError(f"alpha_vantage: no exchange rate for {symbol}") from exc
        rate = checked_price("alpha_vantage", symbol, raw_rate)

        # The endpoint carries no previous close; change stays at zero.
        return Quote(
            symbol=symbol,
            price=rate,
            as_at=datetime.now(timezone.utc),
            source="alpha_vantage",
        )
