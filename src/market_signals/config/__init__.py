"""Configuration system."""

from market_signals.config.loader import load_config
from market_signals.config.schema import AppConfig

__all__ = ["AppConfig", "load_config"]
