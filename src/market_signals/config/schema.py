"""Configuration schema — Pydantic models for config.yaml."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class AssetSeed(BaseModel):
    symbol: str
    name: str
    asset_class: Literal["stock", "forex", "crypto"]
    exchange: str | None = None
    active: bool = True
    price_precision: int = Field(default=2, ge=0)


def _default_assets() -> list[AssetSeed]:
    return [
        AssetSeed(symbol="AAPL", name="Apple Inc", asset_class="stock", exchange="NASDAQ"),
        AssetSeed(symbol="TSLA", name="Tesla Inc", asset_class="stock", exchange="NASDAQ"),
        AssetSeed(symbol="GOOGL", name="Alphabet Inc", asset_class="stock", exchange="NASDAQ"),
        AssetSeed(symbol="MSFT", name="Microsoft Corp", asset_class="stock", exchange="NASDAQ"),
        AssetSeed(symbol="EURUSD", name="EUR/USD", asset_class="forex", exchange="FOREX"),
        AssetSeed(symbol="BTCUSD", name="Bitcoin/USD", asset_class="crypto", exchange="CRYPTO"),
    ]


class SchedulerConfig(BaseModel):
    ingest_interval_s: float = Field(default=5, gt=0)
    indicator_interval_s: float = Field(default=30, gt=0)
    prediction_interval_s: float = Field(default=60, gt=0)
    validation_interval_s: float = Field(default=30, gt=0)


class AnalysisConfig(BaseModel):
    history_window: int = 50
    min_bars: int = 20
    prediction_window: int = 10


class ValidationConfig(BaseModel):
    maturity_s: float = 60
    rolling_window: int = 100
    metrics_limit: int = 1000
    require_fresh_bar: bool = True


class ProvidersConfig(BaseModel):
    # Offline mode skips every upstream and serves synthetic quotes only.
    offline: bool = False
    timeout_s: float = 10.0
    yahoo_api_key: str | None = None
    alpha_vantage_api_key: str | None = None
    yahoo_base_url: str = "https://query1.finance.yahoo.com"
    alpha_vantage_base_url: str = "https://www.alphavantage.co"
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"


class StoreConfig(BaseModel):
    strict: bool = False


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "json"


class AppConfig(BaseModel):
    assets: list[AssetSeed] = Field(default_factory=_default_assets)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)
    analysis: AnalysisConfig = Field(default_factory=AnalysisConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
