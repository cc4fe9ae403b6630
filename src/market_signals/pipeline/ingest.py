"""Quote ingest — fetch a quote per asset, append it to the store as a bar."""

from __future__ import annotations

import asyncio
import math
from datetime import datetime, timezone
from typing import Callable, Sequence

import structlog

from market_signals.models import Asset, Bar, Quote
from market_signals.pipeline.report import CycleReport
from market_signals.providers.base import ProviderError, QuoteSource
from market_signals.providers.synthetic import SyntheticQuoteSource
from market_signals.store import InMemoryStore

log = structlog.get_logger("ingest")


class MarketDataService:
    """Pulls quotes from *source*, falling back to synthetic data on failure.

    A failing upstream never interrupts ingest: the asset still gets a bar,
    built from a synthetic quote.
    """

    def __init__(
        self,
        store: InMemoryStore,
        source: QuoteSource,
        fallback: SyntheticQuoteSource | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.source = source
        self.fallback = fallback or SyntheticQuoteSource()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def fetch_quote(self, asset: Asset) -> Quote:
        try:
            quote = await self.source.fetch(asset.symbol, asset.asset_class)
            if not math.isfinite(quote.price) or quote.price <= 0:
                raise ProviderError(f"unusable price {quote.price!r}")
            return quote
        except ProviderError as exc:
            log.warning(
                "quote_fallback",
                symbol=asset.symbol,
                provider=getattr(self.source, "name", type(self.source).__name__),
                reason=str(exc),
            )
        except Exception:
            log.exception("quote_source_failed", symbol=asset.symbol)
        return self.fallback.quote(asset.symbol)

    async def update_market_data(self, asset: Asset) -> Bar:
        """Fetch a quote for *asset* and append it as a bar.

        The bar opens at the previous close (or the quote price for the first
        bar) and closes at the quote price.
        """
        with structlog.contextvars.bound_contextvars(asset_id=asset.id):
            quote = await self.fetch_quote(asset)
        previous = self.store.latest_bar(asset.id)
        open_ = previous.close if previous is not None else quote.price

        bar = Bar(
            asset_id=asset.id,
            timestamp=self._clock(),
            open=open_,
            high=max(open_, quote.price),
            low=min(open_, quote.price),
            close=quote.price,
            volume=quote.volume,
        )
        bar_id = self.store.append_bar(bar)
        return bar.model_copy(update={"id": bar_id})

    async def ingest_cycle(self, assets: Sequence[Asset]) -> CycleReport:
        """Update every asset concurrently; one failure doesn't stop the rest."""
        report = CycleReport(stage="ingest")
        outcomes = await asyncio.gather(
            *(self.update_market_data(a) for a in assets),
            return_exceptions=True,
        )
        for asset, outcome in zip(assets, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                report.record_error(asset.id, outcome)
            else:
                report.results[asset.id] = outcome
        return report
