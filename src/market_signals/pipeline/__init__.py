"""Pipeline stages — ingest, indicator refresh, prediction generation."""

from market_signals.pipeline.analysis import IndicatorService
from market_signals.pipeline.ingest import MarketDataService
from market_signals.pipeline.prediction import PredictionService
from market_signals.pipeline.report import CycleReport

__all__ = ["CycleReport", "IndicatorService", "MarketDataService", "PredictionService"]
