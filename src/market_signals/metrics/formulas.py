"""Pure metric computation functions — no store access."""

from __future__ import annotations

from typing import Iterable

from market_signals.models import AccuracyMetrics, Prediction


def win_rate(wins: int, total: int) -> float:
    """Win rate as a percentage 0-100."""
    if total <= 0:
        return 0.0
    return wins / total * 100


def accuracy_metrics(predictions: Iterable[Prediction]) -> AccuracyMetrics:
    """Hit-rate over the resolved predictions in *predictions*.

    PENDING entries are ignored; accuracy is rounded to one decimal.
    """
    successes = failures = 0
    for p in predictions:
        if p.outcome == "SUCCESS":
            successes += 1
        elif p.outcome == "FAILURE":
            failures += 1
    completed = successes + failures
    return AccuracyMetrics(
        accuracy=round(win_rate(successes, completed), 1),
        success_count=successes,
        failure_count=failures,
        total_completed=completed,
    )
