"""Dispatch quote requests to a provider per asset class."""

from __future__ import annotations

import httpx

from market_signals.config.schema import ProvidersConfig
from market_signals.models import AssetClass, Quote
from market_signals.providers.alpha_vantage import AlphaVantageSource
from market_signals.providers.base import ProviderError, QuoteSource
from market_signals.providers.coingecko import CoinGeckoSource
from market_signals.providers.synthetic import SyntheticQuoteSource
from market_signals.providers.yahoo import YahooFinanceSource


class RoutingQuoteSource(QuoteSource):
    name = "routing"

    def __init__(self, sources: dict[str, QuoteSource]) -> None:
        self.sources = dict(sources)

    async def fetch(self, symbol: str, asset_class: AssetClass) -> Quote:
        source = self.sources.get(asset_class)
        if source is None:
            raise ProviderError(f"unsupported asset class: {asset_class}")
        return await source.fetch(symbol, asset_class)

    async def close(self) -> None:
        for source in self.sources.values():
            await source.close()


def build_quote_source(
    config: ProvidersConfig,
    transport: httpx.AsyncBaseTransport | None = None,
) -> QuoteSource:
    """Build the primary quote source from config.

    Offline mode returns a bare synthetic source; otherwise stocks go to
    Yahoo, forex to Alpha Vantage and crypto to CoinGecko.
    """
    if config.offline:
        return SyntheticQuoteSource()
    return RoutingQuoteSource({
        "stock": YahooFinanceSource(
            api_key=config.yahoo_api_key,
            base_url=config.yahoo_base_url,
            timeout_s=config.timeout_s,
            transport=transport,
        ),
        "forex": AlphaVantageSource(
            api_key=config.alpha_vantage_api_key,
            base_url=config.alpha_vantage_base_url,
            timeout_s=config.timeout_s,
            transport=transport,
        ),
        "crypto": CoinGeckoSource(
            base_url=config.coingecko_base_url,
            timeout_s=config.timeout_s,
            transport=transport,
        ),
    })
