"""Import all rule modules to trigger @register decorators."""

from market_signals.signals.rules import oscillators  # noqa: F401
from market_signals.signals.rules import trend  # noqa: F401
from market_signals.signals.rules import candles  # noqa: F401
