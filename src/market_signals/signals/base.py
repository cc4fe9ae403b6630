"""Voting rule abstract base class and the context rules read from."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from market_signals.models import Bar, Direction, IndicatorSnapshot, PatternName


@dataclass(frozen=True)
class SignalContext:
    """Everything a rule may look at. ``bars`` are oldest first."""

    bars: tuple[Bar, ...]
    indicators: IndicatorSnapshot
    patterns: tuple[PatternName, ...] = field(default_factory=tuple)

    @property
    def close(self) -> float:
        return self.bars[-1].close

    @property
    def previous_close(self) -> float | None:
        return self.bars[-2].close if len(self.bars) >= 2 else None

    # Missing indicator fields fall back to values that make the rule neutral
    # or compare against the current close.

    @property
    def rsi(self) -> float:
        return 50.0 if self.indicators.rsi14 is None else self.indicators.rsi14

    @property
    def macd(self) -> float:
        return 0.0 if self.indicators.macd is None else self.indicators.macd

    @property
    def sma20(self) -> float:
        return self.close if self.indicators.sma20 is None else self.indicators.sma20

    @property
    def ema12(self) -> float:
        return self.close if self.indicators.ema12 is None else self.indicators.ema12


class Rule(ABC):
    """Base class for signal rules.

    Subclasses set ``name`` and implement votes(). Returning an empty list
    means the rule abstains.
    """

    name: str

    @abstractmethod
    def votes(self, ctx: SignalContext) -> list[Direction]:
        ...
