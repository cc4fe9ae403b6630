"""Pydantic domain models."""

from market_signals.models.asset import Asset, AssetClass
from market_signals.models.market import Bar, IndicatorSnapshot, Quote
from market_signals.models.prediction import (
    AccuracyMetrics,
    AssetOverview,
    Direction,
    Outcome,
    PatternName,
    Prediction,
    TechnicalData,
)

__all__ = [
    "AccuracyMetrics",
    "Asset",
    "AssetClass",
    "AssetOverview",
    "Bar",
    "Direction",
    "IndicatorSnapshot",
    "Outcome",
    "PatternName",
    "Prediction",
    "Quote",
    "TechnicalData",
]
