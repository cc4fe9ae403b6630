"""Periodic task scheduler."""

from market_signals.scheduler.runner import ScheduledTask, Scheduler

__all__ = ["ScheduledTask", "Scheduler"]
