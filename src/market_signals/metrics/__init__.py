"""Prediction accuracy metrics."""

from market_signals.metrics.formulas import accuracy_metrics, win_rate

__all__ = ["accuracy_metrics", "win_rate"]
