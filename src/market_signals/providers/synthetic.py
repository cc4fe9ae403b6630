"""Synthetic quotes — bounded random walk around a per-symbol base price.

Used whenever an upstream provider fails so the ingest cadence never stalls.
"""

from __future__ import annotations

import random
from datetime import datetime, timezone

from market_signals.models import AssetClass, Quote
from market_signals.providers.base import QuoteSource

BASE_PRICES = {
    "AAPL": 175.25,
    "TSLA": 248.50,
    "GOOGL": 140.75,
    "MSFT": 378.85,
    "EURUSD": 1.0875,
    "BTCUSD": 43250.00,
}
DEFAULT_BASE_PRICE = 100.0


def base_price_for(symbol: str) -> float:
    return BASE_PRICES.get(symbol, DEFAULT_BASE_PRICE)


class SyntheticQuoteSource(QuoteSource):
    """Random walk per symbol, clamped to ``base * (1 ± band)``.

    Each call moves the last price by at most ``step`` of base. Pass a seeded
    ``random.Random`` for reproducible series.
    """

    name = "synthetic"

    def __init__(
        self,
        rng: random.Random | None = None,
        band: float = 0.02,
        step: float = 0.005,
    ) -> None:
        self._rng = rng or random.Random()
        self.band = band
        self.step = step
        self._last: dict[str, float] = {}

    def quote(self, symbol: str) -> Quote:
        base = base_price_for(symbol)
        last = self._last.get(symbol, base)
        moved = last + self._rng.uniform(-1.0, 1.0) * self.step * base
        price = min(max(moved, base * (1 - self.band)), base * (1 + self.band))
        self._last[symbol] = price

        return Quote(
            symbol=symbol,
            price=price,
            change_abs=price - base,
            change_pct=(price - base) / base * 100,
            volume=self._rng.randrange(100_000, 1_100_000),
            as_at=datetime.now(timezone.utc),
            source=self.name,
        )

    async def fetch(self, symbol: str, asset_class: AssetClass) -> Quote:
        return self.quote(symbol)
