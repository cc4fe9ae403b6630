"""Indicator refresh — recompute indicators from the latest bar window."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable, Sequence

import structlog

from market_signals.analysis.indicators import compute_snapshot
from market_signals.models import Asset, IndicatorSnapshot
from market_signals.pipeline.report import CycleReport
from market_signals.store import InMemoryStore

log = structlog.get_logger("indicators")


class IndicatorService:
    def __init__(
        self,
        store: InMemoryStore,
        history_window: int = 50,
        min_bars: int = 20,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.history_window = history_window
        self.min_bars = min_bars
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def refresh(self, asset: Asset) -> IndicatorSnapshot | None:
        """Append a new snapshot for *asset*, or None if history is too short."""
        history = self.store.bar_history(asset.id, self.history_window)
        if len(history) < self.min_bars:
            return None

        snapshot = compute_snapshot(asset.id, list(reversed(history)), self._clock())
        snapshot_id = self.store.append_indicator_snapshot(snapshot)
        log.debug("indicators_refreshed", asset_id=asset.id, bars=len(history), rsi14=snapshot.rsi14)
        return snapshot.model_copy(update={"id": snapshot_id})

    def refresh_cycle(self, assets: Sequence[Asset]) -> CycleReport:
        report = CycleReport(stage="indicators")
        for asset in assets:
            try:
                snapshot = self.refresh(asset)
            except Exception as exc:
                report.record_error(asset.id, exc)
                continue
            if snapshot is None:
                report.skipped[asset.id] = "insufficient_history"
            else:
                report.results[asset.id] = snapshot
        return report
