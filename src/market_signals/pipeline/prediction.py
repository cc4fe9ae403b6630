"""Prediction generation — run the signal engine against stored state."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Sequence

import structlog

from market_signals.models import Asset, Prediction
from market_signals.pipeline.report import CycleReport
from market_signals.signals import SignalEngine
from market_signals.store import InMemoryStore

log = structlog.get_logger("predictions")


class PredictionService:
    """Writes one prediction per asset per call.

    Uses whatever snapshot the store holds right now, which may predate the
    latest bars if the indicator refresh hasn't run since. Predictions are
    never re-evaluated after they are written.
    """

    def __init__(
        self,
        store: InMemoryStore,
        engine: SignalEngine | None = None,
        window: int = 10,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.engine = engine or SignalEngine()
        self.window = window
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def generate(self, asset: Asset) -> Prediction | None:
        """Append a prediction for *asset*; None without a bar and a snapshot."""
        history = self.store.bar_history(asset.id, self.window)
        indicators = self.store.latest_indicator_snapshot(asset.id)
        if not history or indicators is None:
            return None

        decision = self.engine.evaluate(
            list(reversed(history)),
            indicators,
            price_precision=asset.price_precision,
        )
        prediction = decision.to_prediction(asset.id, self._clock(), indicators)
        prediction_id = self.store.append_prediction(prediction)
        log.debug(
            "prediction_created",
            prediction_id=prediction_id,
            asset_id=asset.id,
            direction=decision.direction,
            confidence=decision.confidence,
            votes=(decision.buy_votes, decision.sell_votes),
        )
        return prediction.model_copy(update={"id": prediction_id})

    def generate_cycle(self, assets: Sequence[Asset]) -> CycleReport:
        report = CycleReport(stage="predictions")
        for asset in assets:
            try:
                prediction = self.generate(asset)
            except Exception as exc:
                report.record_error(asset.id, exc)
                continue
            if prediction is None:
                report.skipped[asset.id] = "insufficient_history"
            else:
                report.results[asset.id] = prediction
        return report
