"""Run the pipeline: python -m market_signals [--config path]."""

from __future__ import annotations

import argparse
import asyncio
import signal

import structlog

from market_signals.config import load_config
from market_signals.core import MarketSignalsCore
from market_signals.logging import setup_logging

log = structlog.get_logger("market_signals")


async def run(config_path: str | None = None) -> None:
    """Start the four pipeline loops and block until SIGINT/SIGTERM."""
    config = load_config(config_path)
    setup_logging(level=config.logging.level, log_format=config.logging.format)

    core = MarketSignalsCore.from_config(config)
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, stop.set)
        except NotImplementedError:
            # Windows event loops don't support signal handlers.
            pass

    await core.start()
    try:
        await stop.wait()
    finally:
        log.info("shutdown_requested")
        await core.stop()


def main() -> None:
    parser = argparse.ArgumentParser(description="Market signal pipeline")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    args = parser.parse_args()
    try:
        asyncio.run(run(args.config))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
