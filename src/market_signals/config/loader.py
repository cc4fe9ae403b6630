"""Config loader — reads YAML, applies SIGNALS_* env var overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml

from market_signals.config.schema import AppConfig

_TRUTHY = {"1", "true", "yes", "on"}


def _first_env(*names: str) -> str | None:
    for name in names:
        value = os.environ.get(name)
        if value:
            return value
    return None


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load config from a YAML file, then apply env var overrides.

    If *path* is None or the file doesn't exist, returns defaults.

    Environment variable overrides:
        SIGNALS_LOG_LEVEL              -> logging.level
        SIGNALS_LOG_FORMAT             -> logging.format
        SIGNALS_OFFLINE                -> providers.offline
        SIGNALS_YAHOO_API_KEY          -> providers.yahoo_api_key
            (falls back to YAHOO_FINANCE_API_KEY, then FINANCIAL_API_KEY)
        SIGNALS_ALPHA_VANTAGE_API_KEY  -> providers.alpha_vantage_api_key
            (falls back to ALPHA_VANTAGE_API_KEY, then FINANCIAL_API_KEY)
    """
    data: dict = {}
    if path is not None:
        p = Path(path)
        if p.exists():
            with open(p) as f:
                data = yaml.safe_load(f) or {}

    log_level = os.environ.get("SIGNALS_LOG_LEVEL")
    if log_level:
        data.setdefault("logging", {})["level"] = log_level

    log_format = os.environ.get("SIGNALS_LOG_FORMAT")
    if log_format:
        data.setdefault("logging", {})["format"] = log_format

    offline = os.environ.get("SIGNALS_OFFLINE")
    if offline:
        data.setdefault("providers", {})["offline"] = offline.strip().lower() in _TRUTHY

    yahoo_key = _first_env("SIGNALS_YAHOO_API_KEY", "YAHOO_FINANCE_API_KEY", "FINANCIAL_API_KEY")
    if yahoo_key:
        data.setdefault("providers", {})["yahoo_api_key"] = yahoo_key

    av_key = _first_env("SIGNALS_ALPHA_VANTAGE_API_KEY", "ALPHA_VANTAGE_API_KEY", "FINANCIAL_API_KEY")
    if av_key:
        data.setdefault("providers", {})["alpha_vantage_api_key"] = av_key

    return AppConfig.model_validate(data)
