"""Market data models — quotes, bars, indicator snapshots."""

from __future__ import annotations

import math
from datetime import datetime

from pydantic import BaseModel, model_validator


class Quote(BaseModel):
    """A point-in-time price observation returned by a QuoteSource."""

    symbol: str
    price: float
    change_abs: float = 0.0
    change_pct: float = 0.0
    volume: int = 0
    as_at: datetime
    source: str


class Bar(BaseModel):
    """One OHLCV bar. ``id`` is assigned by the store on append."""

    id: int | None = None
    asset_id: int
    timestamp: datetime
    open: float
    high: float
    low: float
    close: float
    volume: int = 0

    @model_validator(mode="after")
    def _check_envelope(self) -> Bar:
        if not all(math.isfinite(v) for v in (self.open, self.high, self.low, self.close)):
            raise ValueError(
                f"bar prices must be finite: open={self.open} high={self.high} "
                f"low={self.low} close={self.close}"
            )
        if self.low > min(self.open, self.close) or self.high < max(self.open, self.close):
            raise ValueError(
                f"bar envelope violated: low={self.low} high={self.high} "
                f"open={self.open} close={self.close}"
            )
        return self


class IndicatorSnapshot(BaseModel):
    """Indicators computed for one asset at one refresh cycle."""

    id: int | None = None
    asset_id: int
    timestamp: datetime
    sma20: float | None = None
    ema12: float | None = None
    rsi14: float | None = None
    macd: float | None = None
    bollinger_upper: float | None = None
    bollinger_lower: float | None = None
