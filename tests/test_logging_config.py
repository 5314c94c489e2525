from __future__ import annotations

import json
import logging

import pytest
import structlog

from telemetry_gateway.logging_config import configure_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers = handlers
    root.setLevel(level)
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


def test_json_lines_carry_bound_context(restore_logging, capsys):
    configure_logging("INFO", "json")
    structlog.contextvars.bind_contextvars(request_id="r-1")

    structlog.get_logger("telemetry_gateway.test").info("telemetry_accepted", status=200)

    line = capsys.readouterr().out.strip().splitlines()[-1]
    record = json.loads(line)
    assert record["event"] == "telemetry_accepted"
    assert record["request_id"] == "r-1"
    assert record["status"] == 200
    assert record["level"] == "info"


def test_level_filters_debug(restore_logging, capsys):
    configure_logging("warning", "json")
    structlog.get_logger("telemetry_gateway.test").debug("hidden")
    logging.getLogger("telemetry_gateway.test").info("hidden too")
    assert capsys.readouterr().out == ""
