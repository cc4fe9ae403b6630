"""Candlestick pattern classifiers."""

from __future__ import annotations

from typing import Sequence

from market_signals.models import Bar, PatternName


def _shape(bar: Bar) -> tuple[float, float, float]:
    """Return ``(body, lower_shadow, upper_shadow)``."""
    body = abs(bar.close - bar.open)
    lower = min(bar.open, bar.close) - bar.low
    upper = bar.high - max(bar.open, bar.close)
    return body, lower, upper


def is_hammer(bar: Bar) -> bool:
    body, lower, upper = _shape(bar)
    return lower > 2 * body and upper < body


def is_shooting_star(bar: Bar) -> bool:
    body, lower, upper = _shape(bar)
    return upper > 2 * body and lower < body


def is_bullish_engulfing(previous: Bar, current: Bar) -> bool:
    return (
        previous.close < previous.open
        and current.close > current.open
        and current.open < previous.close
        and current.close > previous.open
    )


def is_bearish_engulfing(previous: Bar, current: Bar) -> bool:
    return (
        previous.close > previous.open
        and current.close < current.open
        and current.open > previous.close
        and current.close < previous.open
    )


def detect_patterns(bars: Sequence[Bar]) -> list[PatternName]:
    """Classify the most recent candle of oldest-first *bars*.

    Needs at least three bars; with fewer, nothing is detected.
    """
    if len(bars) < 3:
        return []

    current, previous = bars[-1], bars[-2]
    patterns: list[PatternName] = []
    if is_hammer(current):
        patterns.append("Bullish Hammer")
    if is_shooting_star(current):
        patterns.append("Shooting Star")
    if is_bullish_engulfing(previous, current):
        patterns.append("Bullish Engulfing")
    if is_bearish_engulfing(previous, current):
        patterns.append("Bearish Engulfing")
    return patterns
