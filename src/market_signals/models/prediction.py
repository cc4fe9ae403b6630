"""Prediction model — emitted by the signal engine, resolved by validation."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from market_signals.models.asset import Asset
from market_signals.models.market import Bar, IndicatorSnapshot

Direction = Literal["BUY", "SELL"]
Outcome = Literal["PENDING", "SUCCESS", "FAILURE"]
PatternName = Literal[
    "Bullish Hammer",
    "Shooting Star",
    "Bullish Engulfing",
    "Bearish Engulfing",
]


class TechnicalData(BaseModel):
    """Inputs the signal engine saw when it produced a prediction."""

    patterns: list[PatternName] = Field(default_factory=list)
    rsi: float | None = None
    macd: float | None = None
    sma20: float | None = None
    ema12: float | None = None
    buy_votes: int = 0
    sell_votes: int = 0


class Prediction(BaseModel):
    """A directional call on an asset.

    ``outcome`` is the only field that changes after creation, and only
    once: PENDING -> SUCCESS | FAILURE.
    """

    id: int | None = None
    asset_id: int
    timestamp: datetime
    direction: Direction
    confidence: float = Field(ge=0.0, le=100.0)
    entry_point: float
    outcome: Outcome = "PENDING"
    resolved_at: datetime | None = None
    technical_data: TechnicalData = Field(default_factory=TechnicalData)


class AccuracyMetrics(BaseModel):
    """Derived hit-rate over completed predictions."""

    accuracy: float = 0.0
    success_count: int = 0
    failure_count: int = 0
    total_completed: int = 0


class AssetOverview(BaseModel):
    """Latest bar, indicators and prediction for one asset."""

    asset: Asset
    bar: Bar | None = None
    indicators: IndicatorSnapshot | None = None
    prediction: Prediction | None = None
