"""Technical analysis — indicators and candlestick patterns."""

from market_signals.analysis.indicators import (
    bollinger_bands,
    compute_snapshot,
    ema,
    ema_series,
    macd,
    rsi,
    sma,
)
from market_signals.analysis.patterns import (
    detect_patterns,
    is_bearish_engulfing,
    is_bullish_engulfing,
    is_hammer,
    is_shooting_star,
)

__all__ = [
    "bollinger_bands",
    "compute_snapshot",
    "detect_patterns",
    "ema",
    "ema_series",
    "is_bearish_engulfing",
    "is_bullish_engulfing",
    "is_hammer",
    "is_shooting_star",
    "macd",
    "rsi",
    "sma",
]
