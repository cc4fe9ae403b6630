"""Scheduler — independent asyncio loops, one per pipeline stage.

Loops never wait on one another. Each reads whatever the store holds when it
fires, so a prediction can be built from an indicator snapshot that is older
than the newest bars. That lag is expected.
"""

from __future__ import annotations

import asyncio
import contextvars
from collections import Counter
from dataclasses import dataclass
from typing import Awaitable, Callable

import structlog

from market_signals.pipeline.report import CycleReport

log = structlog.get_logger("scheduler")


@dataclass(frozen=True)
class ScheduledTask:
    """One pipeline stage on a timer.

    A ``blocking`` task's ``run`` is a plain callable executed in a worker
    thread; otherwise ``run`` is a coroutine function awaited on the loop.
    """

    name: str
    interval_s: float
    run: Callable[[], Awaitable[CycleReport]] | Callable[[], CycleReport]
    blocking: bool = False


class Scheduler:
    """Runs each task on its own timer until stop() is called."""

    def __init__(self, tasks: list[ScheduledTask], run_immediately: bool = True) -> None:
        names = [t.name for t in tasks]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate task names: {names}")
        self.tasks = list(tasks)
        self.run_immediately = run_immediately
        self.cycles: Counter[str] = Counter()
        self.last_reports: dict[str, CycleReport] = {}
        self._stopping: asyncio.Event | None = None
        self._running: list[asyncio.Task] = []
        self._workers: set[asyncio.Future] = set()

    @property
    def running(self) -> bool:
        return bool(self._running)

    # ── Lifecycle ─────────────────────────────────────────────

    async def start(self) -> None:
        if self._running:
            return
        self._stopping = asyncio.Event()
        self._running = [
            asyncio.create_task(self._loop(task), name=f"scheduler:{task.name}")
            for task in self.tasks
        ]
        log.info(
            "scheduler_started",
            tasks={t.name: t.interval_s for t in self.tasks},
        )

    async def stop(self, timeout: float = 10.0) -> None:
        """Stop all loops, letting an in-flight cycle finish within *timeout*.

        Loops still busy after *timeout* are cancelled. A cancelled blocking
        cycle keeps running in its worker thread, so stop() then waits for
        those threads; their store writes have landed by the time it returns.
        """
        if not self._running:
            return
        assert self._stopping is not None
        self._stopping.set()

        done, pending = await asyncio.wait(self._running, timeout=timeout)
        for task in pending:
            task.cancel()
        if pending:
            log.warning("scheduler_forced_cancel", tasks=[t.get_name() for t in pending])
        await asyncio.gather(*self._running, return_exceptions=True)
        self._running.clear()
        if self._workers:
            log.info("scheduler_awaiting_workers", count=len(self._workers))
            await asyncio.gather(*list(self._workers), return_exceptions=True)
        log.info("scheduler_stopped", cycles=dict(self.cycles))

    async def run_once(self) -> dict[str, CycleReport]:
        """Run every task once, in declaration order."""
        reports = {}
        for task in self.tasks:
            reports[task.name] = await self._run_cycle(task)
        return reports

    # ── Internals ─────────────────────────────────────────────

    async def _loop(self, task: ScheduledTask) -> None:
        assert self._stopping is not None
        if not self.run_immediately and await self._wait(task.interval_s):
            return
        while not self._stopping.is_set():
            await self._run_cycle(task)
            if await self._wait(task.interval_s):
                return

    async def _wait(self, seconds: float) -> bool:
        """Sleep up to *seconds*; True if stop was requested meanwhile."""
        assert self._stopping is not None
        try:
            await asyncio.wait_for(self._stopping.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    async def _run_cycle(self, task: ScheduledTask) -> CycleReport | None:
        with structlog.contextvars.bound_contextvars(stage=task.name):
            try:
                report = await self._invoke(task)
            except asyncio.CancelledError:
                raise
            except Exception:
                log.exception("cycle_failed", task=task.name)
                return None
            finally:
                self.cycles[task.name] += 1

        self.last_reports[task.name] = report
        self._log_report(report)
        return report

    async def _invoke(self, task: ScheduledTask) -> CycleReport:
        if not task.blocking:
            return await task.run()
        ctx = contextvars.copy_context()
        worker = asyncio.get_running_loop().run_in_executor(None, ctx.run, task.run)
        self._workers.add(worker)
        worker.add_done_callback(self._workers.discard)
        # Cancelling the loop must not orphan the thread's future; stop() awaits it.
        return await asyncio.shield(worker)

    @staticmethod
    def _log_report(report: CycleReport) -> None:
        if report.errors:
            log.error("cycle_errors", stage=report.stage, errors=report.errors)
        if report.skipped:
            log.debug("cycle_skipped", stage=report.stage, skipped=report.skipped)
        log.debug(
            "cycle_complete",
            stage=report.stage,
            results=len(report.results),
            skipped=len(report.skipped),
            errors=len(report.errors),
        )
