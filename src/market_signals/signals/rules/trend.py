"""Trend rules — price against moving averages, bar-to-bar momentum."""

from __future__ import annotations

from market_signals.models import Direction
from market_signals.signals.base import Rule, SignalContext
from market_signals.signals.registry import register


@register
class PriceVsSMA20(Rule):
    name = "price_vs_sma20"

    def votes(self, ctx: SignalContext) -> list[Direction]:
        return ["BUY"] if ctx.close > ctx.sma20 else ["SELL"]


@register
class PriceVsEMA12(Rule):
    name = "price_vs_ema12"

    def votes(self, ctx: SignalContext) -> list[Direction]:
        return ["BUY"] if ctx.close > ctx.ema12 else ["SELL"]


@register
class Momentum(Rule):
    """Close above the previous close -> BUY, otherwise SELL.

    Abstains when only one bar is available.
    """

    name = "momentum"

    def votes(self, ctx: SignalContext) -> list[Direction]:
        prev = ctx.previous_close
        if prev is None:
            return []
        return ["BUY"] if ctx.close > prev else ["SELL"]
