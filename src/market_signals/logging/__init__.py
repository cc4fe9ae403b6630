"""Structured logging."""

from market_signals.logging.setup import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
