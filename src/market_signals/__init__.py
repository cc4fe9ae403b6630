"""market-signals — quote ingest, technical indicators, directional signals."""

__version__ = "0.1.0"
