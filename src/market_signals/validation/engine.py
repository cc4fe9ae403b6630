"""Validation engine — PENDING -> SUCCESS | FAILURE once a prediction matures."""

from __future__ import annotations

import threading
from collections import defaultdict, deque
from datetime import datetime, timedelta, timezone
from typing import Callable

import structlog

from market_signals.metrics.formulas import accuracy_metrics, win_rate
from market_signals.models import AccuracyMetrics, Outcome, Prediction
from market_signals.pipeline.report import CycleReport
from market_signals.store import InMemoryStore

log = structlog.get_logger("validation")


def judge(prediction: Prediction, price: float) -> Outcome:
    """SUCCESS if *price* moved past the entry point in the called direction."""
    if prediction.direction == "BUY" and price > prediction.entry_point:
        return "SUCCESS"
    if prediction.direction == "SELL" and price < prediction.entry_point:
        return "SUCCESS"
    return "FAILURE"


class ValidationEngine:
    """Resolves pending predictions and keeps a rolling hit record per asset.

    A prediction is judged once it is at least ``maturity`` old and its asset
    has a bar newer than the prediction to compare against (with
    ``require_fresh_bar=False`` the latest bar is used whatever its age).
    Already-resolved predictions are never
    looked at again, so repeated passes are idempotent.
    """

    def __init__(
        self,
        store: InMemoryStore,
        maturity: timedelta = timedelta(seconds=60),
        rolling_window: int = 100,
        require_fresh_bar: bool = True,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.maturity = maturity
        self.require_fresh_bar = require_fresh_bar
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._recent: dict[int, deque[bool]] = defaultdict(
            lambda: deque(maxlen=rolling_window)
        )

    def validate(self, now: datetime | None = None) -> CycleReport:
        """Judge every matured pending prediction. Keys are prediction ids."""
        now = now or self._clock()
        report = CycleReport(stage="validation")

        for prediction in self.store.pending_predictions():
            pid = prediction.id
            try:
                if now - prediction.timestamp < self.maturity:
                    report.skipped[pid] = "immature"
                    continue

                bar = self.store.latest_bar(prediction.asset_id)
                if bar is None:
                    report.skipped[pid] = "no_bar"
                    continue
                if self.require_fresh_bar and bar.timestamp <= prediction.timestamp:
                    report.skipped[pid] = "no_fresh_bar"
                    continue

                outcome = judge(prediction, bar.close)
                if self.store.set_prediction_outcome(pid, outcome, resolved_at=now):
                    self._remember(prediction.asset_id, outcome == "SUCCESS")
                    report.results[pid] = outcome
                    log.debug(
                        "prediction_resolved",
                        prediction_id=pid,
                        asset_id=prediction.asset_id,
                        direction=prediction.direction,
                        entry_point=prediction.entry_point,
                        close=bar.close,
                        outcome=outcome,
                    )
            except Exception as exc:
                report.record_error(pid, exc)

        return report

    def recent_outcomes(self, asset_id: int) -> list[bool]:
        """Last outcomes for an asset (True = SUCCESS), oldest first."""
        with self._lock:
            return list(self._recent.get(asset_id, ()))

    def recent_accuracy(self, asset_id: int) -> float:
        outcomes = self.recent_outcomes(asset_id)
        return win_rate(sum(outcomes), len(outcomes))

    def accuracy_metrics(self, limit: int = 1000) -> AccuracyMetrics:
        """Accuracy over the *limit* most recent resolved predictions."""
        return accuracy_metrics(self.store.recent_predictions(limit, resolved_only=True))

    def _remember(self, asset_id: int, success: bool) -> None:
        with self._lock:
            self._recent[asset_id].append(success)
