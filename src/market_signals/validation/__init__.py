"""Prediction validation — resolves matured predictions against later prices."""

from market_signals.validation.engine import ValidationEngine, judge

__all__ = ["ValidationEngine", "judge"]
