"""Signal engine — rule voting over bars, indicators and patterns."""

from market_signals.signals.base import Rule, SignalContext
from market_signals.signals.engine import SignalDecision, SignalEngine
from market_signals.signals.registry import RULE_REGISTRY, register, registered_rules

__all__ = [
    "RULE_REGISTRY",
    "Rule",
    "SignalContext",
    "SignalDecision",
    "SignalEngine",
    "register",
    "registered_rules",
]
