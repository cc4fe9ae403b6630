"""In-memory time-series store guarded by a single lock."""

from __future__ import annotations

import itertools
import threading
from bisect import insort
from collections import defaultdict
from datetime import datetime, timezone

import structlog

from market_signals.models import Asset, Bar, IndicatorSnapshot, Outcome, Prediction

log = structlog.get_logger("store")


class UnknownAsset(LookupError):
    """Raised when an operation references an asset id the store doesn't know."""

    def __init__(self, asset_id: int) -> None:
        super().__init__(f"unknown asset id {asset_id}")
        self.asset_id = asset_id


class UnknownPrediction(LookupError):
    def __init__(self, prediction_id: int) -> None:
        super().__init__(f"unknown prediction id {prediction_id}")
        self.prediction_id = prediction_id


class InvariantViolation(RuntimeError):
    """A write would break a store invariant (e.g. re-resolving a prediction)."""


def _recency(item: Bar | IndicatorSnapshot | Prediction) -> tuple[datetime, int]:
    # Equal timestamps fall back to insertion order.
    return (item.timestamp, item.id or 0)


class InMemoryStore:
    """Holds every entity collection for the pipeline.

    Collections are kept sorted oldest-first by ``(timestamp, id)``; "latest"
    reads take from the tail. All reads return copies so callers never hold
    references into the store. Nothing is ever deleted.

    With ``strict=True`` an invariant violation raises ``InvariantViolation``;
    otherwise the offending write is logged and skipped.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict
        self._lock = threading.Lock()

        self._assets: dict[int, Asset] = {}
        self._bars: dict[int, list[Bar]] = defaultdict(list)
        self._snapshots: dict[int, list[IndicatorSnapshot]] = defaultdict(list)
        self._predictions: dict[int, Prediction] = {}
        self._predictions_by_asset: dict[int, list[Prediction]] = defaultdict(list)
        self._prediction_order: list[Prediction] = []
        self._pending: set[int] = set()

        self._bar_ids = itertools.count(1)
        self._snapshot_ids = itertools.count(1)
        self._prediction_ids = itertools.count(1)

    # ── Assets ────────────────────────────────────────────────

    def add_asset(self, asset: Asset) -> Asset:
        with self._lock:
            if asset.id in self._assets:
                raise ValueError(f"duplicate asset id {asset.id}")
            self._assets[asset.id] = asset
        return asset

    def get_asset(self, asset_id: int) -> Asset:
        with self._lock:
            return self._require_asset(asset_id)

    def all_assets(self, active_only: bool = True) -> list[Asset]:
        with self._lock:
            assets = list(self._assets.values())
        if active_only:
            assets = [a for a in assets if a.active]
        return sorted(assets, key=lambda a: a.id)

    # ── Bars ──────────────────────────────────────────────────

    def append_bar(self, bar: Bar) -> int:
        """Append a bar and return its id."""
        with self._lock:
            self._require_asset(bar.asset_id)
            stored = bar.model_copy(update={"id": next(self._bar_ids)})
            insort(self._bars[bar.asset_id], stored, key=_recency)
            return stored.id

    def latest_bar(self, asset_id: int) -> Bar | None:
        with self._lock:
            self._require_asset(asset_id)
            bars = self._bars.get(asset_id)
            return bars[-1].model_copy() if bars else None

    def bar_history(self, asset_id: int, limit: int) -> list[Bar]:
        """Return up to *limit* bars, newest first."""
        if limit <= 0:
            return []
        with self._lock:
            self._require_asset(asset_id)
            bars = self._bars.get(asset_id, [])
            return [b.model_copy() for b in reversed(bars[-limit:])]

    # ── Indicator snapshots ───────────────────────────────────

    def append_indicator_snapshot(self, snapshot: IndicatorSnapshot) -> int:
        with self._lock:
            self._require_asset(snapshot.asset_id)
            stored = snapshot.model_copy(update={"id": next(self._snapshot_ids)})
            insort(self._snapshots[snapshot.asset_id], stored, key=_recency)
            return stored.id

    def latest_indicator_snapshot(self, asset_id: int) -> IndicatorSnapshot | None:
        with self._lock:
            self._require_asset(asset_id)
            snapshots = self._snapshots.get(asset_id)
            return snapshots[-1].model_copy() if snapshots else None

    # ── Predictions ───────────────────────────────────────────

    def append_prediction(self, prediction: Prediction) -> int:
        with self._lock:
            self._require_asset(prediction.asset_id)
            stored = prediction.model_copy(
                update={"id": next(self._prediction_ids)}, deep=True,
            )
            self._predictions[stored.id] = stored
            insort(self._predictions_by_asset[stored.asset_id], stored, key=_recency)
            insort(self._prediction_order, stored, key=_recency)
            if stored.outcome == "PENDING":
                self._pending.add(stored.id)
            return stored.id

    def get_prediction(self, prediction_id: int) -> Prediction | None:
        with self._lock:
            p = self._predictions.get(prediction_id)
            return p.model_copy(deep=True) if p else None

    def latest_prediction(self, asset_id: int) -> Prediction | None:
        with self._lock:
            self._require_asset(asset_id)
            preds = self._predictions_by_asset.get(asset_id)
            return preds[-1].model_copy(deep=True) if preds else None

    def recent_predictions(self, limit: int, *, resolved_only: bool = False) -> list[Prediction]:
        """Return up to *limit* predictions across all assets, newest first.

        With ``resolved_only`` PENDING predictions are passed over, so the
        result holds the *limit* most recent resolved ones.
        """
        if limit <= 0:
            return []
        with self._lock:
            if not resolved_only:
                return [
                    p.model_copy(deep=True)
                    for p in reversed(self._prediction_order[-limit:])
                ]
            out: list[Prediction] = []
            for p in reversed(self._prediction_order):
                if p.outcome == "PENDING":
                    continue
                out.append(p.model_copy(deep=True))
                if len(out) >= limit:
                    break
            return out

    def pending_predictions(self) -> list[Prediction]:
        """Return every unresolved prediction, oldest first."""
        with self._lock:
            pending = [self._predictions[pid] for pid in self._pending]
            return [p.model_copy(deep=True) for p in sorted(pending, key=_recency)]

    def set_prediction_outcome(
        self,
        prediction_id: int,
        outcome: Outcome,
        resolved_at: datetime | None = None,
    ) -> bool:
        """Resolve a pending prediction. Returns True if the outcome was written.

        A prediction is resolved at most once; later attempts are invariant
        violations.
        """
        with self._lock:
            current = self._predictions.get(prediction_id)
            if current is None:
                raise UnknownPrediction(prediction_id)
            if outcome == "PENDING":
                return self._violation(
                    "outcome_pending_write", prediction_id=prediction_id,
                )
            if current.outcome != "PENDING":
                return self._violation(
                    "outcome_already_resolved",
                    prediction_id=prediction_id,
                    current=current.outcome,
                    attempted=outcome,
                )
            current.outcome = outcome
            current.resolved_at = resolved_at or datetime.now(timezone.utc)
            self._pending.discard(prediction_id)
            return True

    # ── Internals ─────────────────────────────────────────────

    def _require_asset(self, asset_id: int) -> Asset:
        asset = self._assets.get(asset_id)
        if asset is None:
            raise UnknownAsset(asset_id)
        return asset

    def _violation(self, event: str, **context) -> bool:
        if self.strict:
            raise InvariantViolation(f"{event}: {context}")
        log.warning(event, **context)
        return False
