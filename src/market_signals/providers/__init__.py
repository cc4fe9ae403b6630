"""Quote sources — upstream price providers and the synthetic fallback."""

from market_signals.providers.alpha_vantage import AlphaVantageSource
from market_signals.providers.base import (
    ProviderError,
    ProviderUnavailable,
    QuoteSource,
)
from market_signals.providers.coingecko import CoinGeckoSource
from market_signals.providers.routing import RoutingQuoteSource, build_quote_source
from market_signals.providers.synthetic import SyntheticQuoteSource, base_price_for
from market_signals.providers.yahoo import YahooFinanceSource

__all__ = [
    "AlphaVantageSource",
    "CoinGeckoSource",
    "ProviderError",
    "ProviderUnavailable",
    "QuoteSource",
    "RoutingQuoteSource",
    "SyntheticQuoteSource",
    "YahooFinanceSource",
    "base_price_for",
    "build_quote_source",
]
