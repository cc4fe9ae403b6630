"""Tests for structured logging setup."""

from __future__ import annotations

import asyncio
import json
import logging

import structlog

from market_signals.logging import get_logger, setup_logging
from market_signals.pipeline import CycleReport
from market_signals.scheduler import ScheduledTask, Scheduler


class TestSetupLogging:
    def test_json_format(self, capsys):
        setup_logging(level="INFO", log_format="json")
        get_logger("test_json").info("bar_appended", symbol="AAPL")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["event"] == "bar_appended"
        assert line["symbol"] == "AAPL"
        assert line["level"] == "info"
        assert "timestamp" in line

    def test_console_format(self, capsys):
        setup_logging(level="INFO", log_format="console")
        get_logger("test_console").info("hello console", stage="ingest")

        err = capsys.readouterr().err
        assert "hello console" in err
        assert "ingest" in err

    def test_log_level_filtering(self, capsys):
        setup_logging(level="WARNING", log_format="json")
        logger = get_logger("test_level")
        logger.info("should be hidden")
        logger.warning("should appear")

        err = capsys.readouterr().err
        assert "should be hidden" not in err
        assert "should appear" in err

    def test_http_client_loggers_quieted(self):
        setup_logging(level="DEBUG", log_format="json")
        assert logging.getLogger("httpx").level == logging.WARNING
        setup_logging(level="ERROR", log_format="json")
        assert logging.getLogger("httpcore").level == logging.ERROR

    def test_get_logger_with_context(self, capsys):
        setup_logging(level="INFO", log_format="json")
        get_logger("test_ctx", asset_id=3, stage="validation").info("context test")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["asset_id"] == 3
        assert line["stage"] == "validation"

    def test_contextvars_binding(self, capsys):
        setup_logging(level="INFO", log_format="json")
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(cycle="c-1")

        get_logger("test_ctxvars").info("with context var")

        line = json.loads(capsys.readouterr().err.strip())
        assert line["cycle"] == "c-1"
        structlog.contextvars.clear_contextvars()

    def test_service_name_on_every_line(self, capsys):
        setup_logging(level="INFO", log_format="json", service="signals-test")
        get_logger("test_service").info("first")
        logging.getLogger("plain.stdlib").warning("second")

        lines = [json.loads(l) for l in capsys.readouterr().err.strip().splitlines()]
        assert [l["service"] for l in lines] == ["signals-test", "signals-test"]
        assert lines[1]["event"] == "second"


class TestCycleContext:
    def _run_stage(self, blocking):
        def log_inside():
            get_logger("stage_body").info("inside_stage")
            return CycleReport(stage="indicators")

        async def log_inside_async():
            return log_inside()

        run = log_inside if blocking else log_inside_async
        sched = Scheduler([ScheduledTask("indicators", 60, run, blocking=blocking)])
        asyncio.run(sched.run_once())

    def test_stage_bound_during_cycle(self, capsys):
        setup_logging(level="INFO", log_format="json")
        self._run_stage(blocking=False)
        line = json.loads(capsys.readouterr().err.strip())
        assert line["event"] == "inside_stage"
        assert line["stage"] == "indicators"

    def test_stage_bound_in_worker_thread(self, capsys):
        setup_logging(level="INFO", log_format="json")
        self._run_stage(blocking=True)
        line = json.loads(capsys.readouterr().err.strip())
        assert line["stage"] == "indicators"

    def test_stage_unbound_after_cycle(self, capsys):
        setup_logging(level="INFO", log_format="json")
        structlog.contextvars.clear_contextvars()
        self._run_stage(blocking=False)
        capsys.readouterr()

        get_logger("after").info("after_cycle")
        line = json.loads(capsys.readouterr().err.strip())
        assert "stage" not in line
