"""Oscillator rules — RSI extremes and MACD sign."""

from __future__ import annotations

from market_signals.models import Direction
from market_signals.signals.base import Rule, SignalContext
from market_signals.signals.registry import register


@register
class RSIExtremes(Rule):
    """RSI < 30 -> BUY (oversold), RSI > 70 -> SELL (overbought), else abstain."""

    name = "rsi_extremes"
    oversold = 30.0
    overbought = 70.0

    def votes(self, ctx: SignalContext) -> list[Direction]:
        if ctx.rsi < self.oversold:
            return ["BUY"]
        if ctx.rsi > self.overbought:
            return ["SELL"]
        return []


@register
class MACDSign(Rule):
    name = "macd_sign"

    def votes(self, ctx: SignalContext) -> list[Direction]:
        return ["BUY"] if ctx.macd > 0 else ["SELL"]
