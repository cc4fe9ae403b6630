"""Rule registry — ``@register`` adds a voting rule under its ``name``.

Vote totals don't depend on rule order, but ``SignalDecision.rule_votes``
lists rules in the order the engine ran them. Engines built from the registry
run rules sorted by name so that order doesn't depend on import order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from market_signals.signals.base import Rule

RULE_REGISTRY: dict[str, type[Rule]] = {}


def register(cls: type[Rule]) -> type[Rule]:
    name = getattr(cls, "name", None)
    if not name:
        raise ValueError(f"{cls.__name__} needs a non-empty 'name' to be registered as a rule")
    existing = RULE_REGISTRY.get(name)
    if existing is not None and existing is not cls:
        raise ValueError(f"rule name {name!r} already taken by {existing.__name__}")
    RULE_REGISTRY[name] = cls
    return cls


def registered_rules() -> list[Rule]:
    """Fresh instances of every registered rule, sorted by name."""
    return [RULE_REGISTRY[name]() for name in sorted(RULE_REGISTRY)]
