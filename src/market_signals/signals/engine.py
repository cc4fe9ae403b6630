"""Signal engine — tallies rule votes into a direction, confidence and entry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from market_signals.analysis.patterns import detect_patterns
from market_signals.models import (
    Bar,
    Direction,
    IndicatorSnapshot,
    PatternName,
    Prediction,
    TechnicalData,
)
from market_signals.signals.base import Rule, SignalContext
from market_signals.signals.registry import registered_rules

# Ensure all rule modules are imported so @register fires
import market_signals.signals.rules  # noqa: F401

ENTRY_OFFSET = 0.001


def round_half_up(value: float, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class SignalDecision:
    direction: Direction
    confidence: float
    entry_point: float
    buy_votes: int
    sell_votes: int
    patterns: tuple[PatternName, ...] = ()
    rule_votes: dict[str, list[Direction]] = field(default_factory=dict)

    @property
    def total_votes(self) -> int:
        return self.buy_votes + self.sell_votes

    def to_prediction(
        self,
        asset_id: int,
        timestamp: datetime,
        indicators: IndicatorSnapshot,
    ) -> Prediction:
        return Prediction(
            asset_id=asset_id,
            timestamp=timestamp,
            direction=self.direction,
            confidence=self.confidence,
            entry_point=self.entry_point,
            technical_data=TechnicalData(
                patterns=list(self.patterns),
                rsi=indicators.rsi14,
                macd=indicators.macd,
                sma20=indicators.sma20,
                ema12=indicators.ema12,
                buy_votes=self.buy_votes,
                sell_votes=self.sell_votes,
            ),
        )


class SignalEngine:
    """Majority vote over a rule set.

    BUY wins ties. Confidence is the winning share of cast votes as a
    percentage, clamped to ``[min_confidence, max_confidence]`` and rounded to
    one decimal. The entry point sits ``ENTRY_OFFSET`` beyond the close in the
    direction of the call.
    """

    def __init__(
        self,
        rules: Sequence[Rule] | None = None,
        min_confidence: float = 55.0,
        max_confidence: float = 95.0,
    ) -> None:
        if rules is None:
            rules = registered_rules()
        self.rules = list(rules)
        self.min_confidence = min_confidence
        self.max_confidence = max_confidence

    def evaluate(
        self,
        bars: Sequence[Bar],
        indicators: IndicatorSnapshot,
        patterns: Sequence[PatternName] | None = None,
        price_precision: int = 2,
    ) -> SignalDecision:
        """Vote on oldest-first *bars*. Patterns are detected if not given."""
        if not bars:
            raise ValueError("at least one bar is required")
        if patterns is None:
            patterns = detect_patterns(bars)

        ctx = SignalContext(bars=tuple(bars), indicators=indicators, patterns=tuple(patterns))
        rule_votes = {rule.name: rule.votes(ctx) for rule in self.rules}

        buy = sum(v.count("BUY") for v in rule_votes.values())
        sell = sum(v.count("SELL") for v in rule_votes.values())
        total = buy + sell

        direction: Direction = "SELL" if sell > buy else "BUY"
        if total:
            share = max(buy, sell) / total * 100
        else:
            share = self.min_confidence
        confidence = min(self.max_confidence, max(self.min_confidence, share))

        close = ctx.close
        if direction == "BUY":
            entry = close * (1 + ENTRY_OFFSET)
        else:
            entry = close * (1 - ENTRY_OFFSET)

        return SignalDecision(
            direction=direction,
            confidence=round_half_up(confidence, 1),
            entry_point=round_half_up(entry, price_precision),
            buy_votes=buy,
            sell_votes=sell,
            patterns=tuple(patterns),
            rule_votes=rule_votes,
        )
