"""Shared test fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from market_signals.config import AppConfig
from market_signals.core import seed_assets
from market_signals.models import Bar
from market_signals.store import InMemoryStore

T0 = datetime(2026, 1, 5, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def store():
    """Strict store seeded with the default six assets (ids 1-6, AAPL is 1)."""
    s = InMemoryStore(strict=True)
    seed_assets(s, AppConfig().assets)
    return s


@pytest.fixture
def add_bars(store):
    """Append flat bars with the given closes, 5s apart starting at T0."""

    def _add(asset_id, closes, start=T0, step=timedelta(seconds=5)):
        ids = []
        for i, close in enumerate(closes):
            ids.append(store.append_bar(Bar(
                asset_id=asset_id,
                timestamp=start + i * step,
                open=close,
                high=close,
                low=close,
                close=close,
                volume=1000,
            )))
        return ids

    return _add
