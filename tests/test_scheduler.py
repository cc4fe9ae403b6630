"""Tests for the periodic scheduler — cadence, isolation, shutdown."""

from __future__ import annotations

import asyncio
import threading
import time

import pytest

from market_signals.pipeline import CycleReport
from market_signals.scheduler import ScheduledTask, Scheduler


def _counting(name, counts, delay=0.0):
    async def run():
        if delay:
            await asyncio.sleep(delay)
        counts[name] = counts.get(name, 0) + 1
        return CycleReport(stage=name)

    return run


class TestScheduler:
    def test_duplicate_names_rejected(self):
        run = _counting("x", {})
        with pytest.raises(ValueError):
            Scheduler([ScheduledTask("x", 1, run), ScheduledTask("x", 1, run)])

    def test_tasks_run_on_their_own_cadence(self):
        counts: dict[str, int] = {}
        sched = Scheduler([
            ScheduledTask("fast", 0.01, _counting("fast", counts)),
            ScheduledTask("slow", 10, _counting("slow", counts)),
        ])

        async def scenario():
            await sched.start()
            await asyncio.sleep(0.2)
            await sched.stop()

        asyncio.run(scenario())
        assert counts["fast"] >= 5
        assert counts["slow"] == 1  # runs once at start, then waits 10s
        assert not sched.running

    def test_slow_task_does_not_block_others(self):
        counts: dict[str, int] = {}
        sched = Scheduler([
            ScheduledTask("fast", 0.01, _counting("fast", counts)),
            ScheduledTask("stuck", 0.01, _counting("stuck", counts, delay=0.5)),
        ])

        async def scenario():
            await sched.start()
            await asyncio.sleep(0.15)
            fast_while_stuck = counts.get("fast", 0)
            stuck_done = counts.get("stuck", 0)
            await sched.stop(timeout=0.01)
            return fast_while_stuck, stuck_done

        fast_while_stuck, stuck_done = asyncio.run(scenario())
        assert stuck_done == 0
        assert fast_while_stuck >= 3

    def test_failing_task_keeps_looping(self):
        counts: dict[str, int] = {}

        async def boom():
            raise RuntimeError("provider exploded")

        sched = Scheduler([
            ScheduledTask("boom", 0.01, boom),
            ScheduledTask("ok", 0.01, _counting("ok", counts)),
        ])

        async def scenario():
            await sched.start()
            await asyncio.sleep(0.1)
            await sched.stop()

        asyncio.run(scenario())
        assert sched.cycles["boom"] >= 3
        assert counts["ok"] >= 3

    def test_stop_lets_in_flight_cycle_finish(self):
        finished = []

        async def write():
            await asyncio.sleep(0.05)
            finished.append(True)
            return CycleReport(stage="write")

        sched = Scheduler([ScheduledTask("write", 60, write)])

        async def scenario():
            await sched.start()
            await asyncio.sleep(0.01)
            await sched.stop(timeout=1.0)

        asyncio.run(scenario())
        assert finished == [True]
        assert sched.last_reports["write"].stage == "write"

    def test_stop_cancels_after_timeout(self):
        async def hang():
            await asyncio.sleep(30)
            return CycleReport(stage="hang")

        sched = Scheduler([ScheduledTask("hang", 60, hang)])

        async def scenario():
            await sched.start()
            await asyncio.sleep(0.01)
            loop = asyncio.get_running_loop()
            started = loop.time()
            await sched.stop(timeout=0.05)
            return loop.time() - started

        elapsed = asyncio.run(scenario())
        assert elapsed < 5
        assert not sched.running

    def test_delayed_first_run(self):
        counts: dict[str, int] = {}
        sched = Scheduler([ScheduledTask("t", 10, _counting("t", counts))], run_immediately=False)

        async def scenario():
            await sched.start()
            await asyncio.sleep(0.05)
            await sched.stop()

        asyncio.run(scenario())
        assert counts == {}

    def test_run_once(self):
        counts: dict[str, int] = {}
        sched = Scheduler([
            ScheduledTask("a", 5, _counting("a", counts)),
            ScheduledTask("b", 30, _counting("b", counts)),
        ])
        reports = asyncio.run(sched.run_once())
        assert list(reports) == ["a", "b"]
        assert counts == {"a": 1, "b": 1}


class TestBlockingTasks:
    def test_runs_in_worker_thread(self):
        seen = []

        def work():
            seen.append(threading.current_thread() is threading.main_thread())
            return CycleReport(stage="work")

        sched = Scheduler([ScheduledTask("work", 60, work, blocking=True)])
        reports = asyncio.run(sched.run_once())
        assert reports["work"].stage == "work"
        assert seen == [False]

    def test_stop_waits_for_cancelled_worker_writes(self):
        writes = []

        def slow_write():
            time.sleep(0.3)
            writes.append("bar")
            return CycleReport(stage="slow")

        sched = Scheduler([ScheduledTask("slow", 60, slow_write, blocking=True)])

        async def scenario():
            await sched.start()
            await asyncio.sleep(0.02)
            await sched.stop(timeout=0.01)
            return list(writes)

        assert asyncio.run(scenario()) == ["bar"]
        assert not sched.running

    def test_blocking_failure_is_contained(self):
        def boom():
            raise RuntimeError("store unavailable")

        sched = Scheduler([ScheduledTask("boom", 60, boom, blocking=True)])
        reports = asyncio.run(sched.run_once())
        assert reports == {"boom": None}
        assert sched.cycles["boom"] == 1
