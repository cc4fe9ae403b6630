"""Core facade — wires the store, pipeline stages and scheduler together.

This is the surface a transport layer (HTTP routes, WebSocket broadcast)
would call. It exposes read operations only; all writes happen through the
scheduled stages.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Callable

import structlog

from market_signals.config.schema import AppConfig, AssetSeed
from market_signals.models import (
    AccuracyMetrics,
    Asset,
    AssetOverview,
    Bar,
    IndicatorSnapshot,
    Prediction,
)
from market_signals.pipeline import (
    CycleReport,
    IndicatorService,
    MarketDataService,
    PredictionService,
)
from market_signals.providers import QuoteSource, SyntheticQuoteSource, build_quote_source
from market_signals.scheduler import ScheduledTask, Scheduler
from market_signals.store import InMemoryStore
from market_signals.validation import ValidationEngine

log = structlog.get_logger("core")


def seed_assets(store: InMemoryStore, seeds: list[AssetSeed]) -> list[Asset]:
    """Register *seeds* with sequential ids starting at 1."""
    assets = []
    for asset_id, seed in enumerate(seeds, start=1):
        asset = Asset(id=asset_id, **seed.model_dump())
        store.add_asset(asset)
        assets.append(asset)
    return assets


class MarketSignalsCore:
    def __init__(
        self,
        store: InMemoryStore,
        source: QuoteSource,
        config: AppConfig | None = None,
        fallback: SyntheticQuoteSource | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config or AppConfig()
        self.store = store
        self.source = source
        cfg = self.config

        self.ingest = MarketDataService(store, source, fallback=fallback, clock=clock)
        self.indicators = IndicatorService(
            store,
            history_window=cfg.analysis.history_window,
            min_bars=cfg.analysis.min_bars,
            clock=clock,
        )
        self.predictions = PredictionService(
            store, window=cfg.analysis.prediction_window, clock=clock,
        )
        self.validation = ValidationEngine(
            store,
            maturity=timedelta(seconds=cfg.validation.maturity_s),
            rolling_window=cfg.validation.rolling_window,
            require_fresh_bar=cfg.validation.require_fresh_bar,
            clock=clock,
        )
        self.scheduler = Scheduler(self._build_tasks())

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        source: QuoteSource | None = None,
    ) -> MarketSignalsCore:
        """Build a core with a fresh store seeded from ``config.assets``."""
        store = InMemoryStore(strict=config.store.strict)
        seed_assets(store, config.assets)
        if source is None:
            source = build_quote_source(config.providers)
        log.info(
            "core_built",
            assets=[a.symbol for a in store.all_assets()],
            source=getattr(source, "name", type(source).__name__),
            strict=store.strict,
        )
        return cls(store, source, config=config)

    def _build_tasks(self) -> list[ScheduledTask]:
        sched = self.config.scheduler
        return [
            ScheduledTask("ingest", sched.ingest_interval_s, self._ingest),
            ScheduledTask(
                "indicators", sched.indicator_interval_s, self._refresh_indicators, blocking=True,
            ),
            ScheduledTask(
                "predictions", sched.prediction_interval_s, self._generate_predictions, blocking=True,
            ),
            ScheduledTask("validation", sched.validation_interval_s, self._validate, blocking=True),
        ]

    # Stage runners. Ingest runs on the event loop; the other three are
    # blocking and run in scheduler worker threads.

    async def _ingest(self) -> CycleReport:
        return await self.ingest.ingest_cycle(self.store.all_assets())

    def _refresh_indicators(self) -> CycleReport:
        return self.indicators.refresh_cycle(self.store.all_assets())

    def _generate_predictions(self) -> CycleReport:
        return self.predictions.generate_cycle(self.store.all_assets())

    def _validate(self) -> CycleReport:
        return self.validation.validate()

    # ── Lifecycle ─────────────────────────────────────────────

    async def start(self) -> None:
        await self.scheduler.start()

    async def stop(self, timeout: float = 10.0) -> None:
        await self.scheduler.stop(timeout=timeout)
        await self.source.close()

    # ── Read API ──────────────────────────────────────────────

    def get_all_assets(self) -> list[Asset]:
        return self.store.all_assets()

    def get_latest_bar(self, asset_id: int) -> Bar | None:
        return self.store.latest_bar(asset_id)

    def get_bar_history(self, asset_id: int, limit: int = 50) -> list[Bar]:
        return self.store.bar_history(asset_id, limit)

    def get_latest_indicators(self, asset_id: int) -> IndicatorSnapshot | None:
        return self.store.latest_indicator_snapshot(asset_id)

    def get_latest_prediction(self, asset_id: int) -> Prediction | None:
        return self.store.latest_prediction(asset_id)

    def get_recent_predictions(self, limit: int = 10) -> list[Prediction]:
        return self.store.recent_predictions(limit)

    def get_accuracy_metrics(self) -> AccuracyMetrics:
        return self.validation.accuracy_metrics(self.config.validation.metrics_limit)

    def get_asset_overview(self, asset_id: int) -> AssetOverview:
        return AssetOverview(
            asset=self.store.get_asset(asset_id),
            bar=self.store.latest_bar(asset_id),
            indicators=self.store.latest_indicator_snapshot(asset_id),
            prediction=self.store.latest_prediction(asset_id),
        )

    def get_market_overview(self) -> list[AssetOverview]:
        return [self.get_asset_overview(a.id) for a in self.store.all_assets()]
