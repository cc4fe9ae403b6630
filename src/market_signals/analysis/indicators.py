"""Technical indicators — pure functions on price series.

Every function takes prices in chronological order (oldest first). The store
hands out history newest first; reverse it before calling in here.
"""

from __future__ import annotations

from datetime import datetime
from typing import Sequence

import numpy as np

from market_signals.models import Bar, IndicatorSnapshot


def sma(prices: Sequence[float], period: int) -> float | None:
    """Mean of the last *period* prices, or None if there aren't that many."""
    if period <= 0 or len(prices) < period:
        return None
    return float(np.mean(prices[-period:]))


def ema_series(prices: Sequence[float], period: int) -> list[float]:
    """Exponential moving average at every point of *prices*.

    Seeded with the first price and smoothed with ``k = 2 / (period + 1)``,
    so it is defined from the first point on rather than after *period*.
    """
    if not prices:
        return []
    k = 2 / (period + 1)
    out = [float(prices[0])]
    for price in prices[1:]:
        out.append(float(price) * k + out[-1] * (1 - k))
    return out


def ema(prices: Sequence[float], period: int) -> float | None:
    series = ema_series(prices, period)
    return series[-1] if series else None


def rsi(prices: Sequence[float], period: int = 14) -> float:
    """Relative Strength Index over the last *period* price changes.

    Simple averages of gains and losses (no Wilder smoothing). Returns 50
    when fewer than ``period + 1`` prices are available and 100 when the
    window holds no losses.
    """
    if len(prices) < period + 1:
        return 50.0

    deltas = np.diff(np.asarray(prices[-(period + 1):], dtype=np.float64))
    avg_gain = float(np.clip(deltas, 0, None).sum()) / period
    avg_loss = float(-np.clip(deltas, None, 0).sum()) / period

    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - 100 / (1 + rs)


def macd(prices: Sequence[float], fast: int = 12, slow: int = 26) -> float | None:
    """MACD line: EMA(fast) - EMA(slow)."""
    fast_ema = ema(prices, fast)
    slow_ema = ema(prices, slow)
    if fast_ema is None or slow_ema is None:
        return None
    return fast_ema - slow_ema


def bollinger_bands(
    prices: Sequence[float],
    period: int = 20,
    num_std: float = 2,
) -> tuple[float, float, float] | None:
    """Bollinger Bands (SMA +/- num_std * population stdev).

    Returns ``(lower, middle, upper)`` or None if fewer than *period* data
    points are available.
    """
    if period <= 0 or len(prices) < period:
        return None

    window = np.asarray(prices[-period:], dtype=np.float64)
    middle = float(window.mean())
    offset = float(window.std(ddof=0)) * num_std
    return (middle - offset, middle, middle + offset)


def compute_snapshot(
    asset_id: int,
    bars: Sequence[Bar],
    timestamp: datetime,
) -> IndicatorSnapshot:
    """Compute the standard indicator set from oldest-first *bars*."""
    closes = [b.close for b in bars]
    bands = bollinger_bands(closes, 20)
    return IndicatorSnapshot(
        asset_id=asset_id,
        timestamp=timestamp,
        sma20=sma(closes, 20),
        ema12=ema(closes, 12),
        rsi14=rsi(closes, 14),
        macd=macd(closes),
        bollinger_upper=bands[2] if bands else None,
        bollinger_lower=bands[0] if bands else None,
    )
