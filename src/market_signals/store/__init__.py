"""Time-series store — the single owner of assets, bars, snapshots and predictions."""

from market_signals.store.memory import (
    InMemoryStore,
    InvariantViolation,
    UnknownAsset,
    UnknownPrediction,
)

__all__ = ["InMemoryStore", "InvariantViolation", "UnknownAsset", "UnknownPrediction"]
