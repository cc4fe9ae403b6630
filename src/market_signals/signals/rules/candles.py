"""Candlestick pattern rule — one vote per detected pattern."""

from __future__ import annotations

from market_signals.models import Direction
from market_signals.signals.base import Rule, SignalContext
from market_signals.signals.registry import register


def pattern_bias(pattern: str) -> Direction | None:
    if "Bullish" in pattern or "Hammer" in pattern:
        return "BUY"
    if "Bearish" in pattern or "Shooting Star" in pattern:
        return "SELL"
    return None


@register
class CandlePatterns(Rule):
    name = "candle_patterns"

    def votes(self, ctx: SignalContext) -> list[Direction]:
        out: list[Direction] = []
        for pattern in ctx.patterns:
            bias = pattern_bias(pattern)
            if bias is not None:
                out.append(bias)
        return out
