"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys

import pytest

from habitpulse.config import BaseConfig
from habitpulse.logging_config import (
    JSONFormatter,
    RequestContextFilter,
    get_logger,
    setup_logging,
)


def _record(**overrides) -> logging.LogRecord:
    values = dict(
        name="test.logger",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Test message",
        args=(),
        exc_info=None,
    )
    values.update(overrides)
    record = logging.LogRecord(**values)
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """JSONFormatter emits the standard fields."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data
    assert "extra" not in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(
        JSONFormatter().format(_record(level=logging.ERROR, msg="Error occurred", exc_info=exc_info))
    )

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert "Traceback" in log_data["exception"]["traceback"]


def test_json_formatter_collects_extra_fields():
    record = _record(msg="Reminder pass finished")
    record.fired = 2
    record.evaluated = 5

    log_data = json.loads(JSONFormatter().format(record))
    assert log_data["extra"] == {"fired": 2, "evaluated": 5}


def test_setup_logging(tmp_path):
    """Logging setup creates a JSON log file under the data directory."""
    config = BaseConfig()
    config.DATA_DIR = str(tmp_path)
    config.DEV_MODE = True

    logger = setup_logging(config)

    assert logger.name == "habitpulse"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "habitpulse.log"
    get_logger("notifications").warning("Test warning message")
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text(encoding="utf-8").splitlines() if line.strip()]
    entries = [json.loads(line) for line in lines]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["logger"] == "habitpulse.notifications"


def test_setup_logging_twice_does_not_duplicate_handlers(tmp_path):
    config = BaseConfig()
    config.DATA_DIR = str(tmp_path)

    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


def test_get_logger():
    assert get_logger("module1").name == "habitpulse.module1"
    assert get_logger("module1") is not get_logger("module2")


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(tmp_path, dev_mode):
    """Console logging level adjusts based on dev mode."""
    config = BaseConfig()
    config.DATA_DIR = str(tmp_path)
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console_handler = next(
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler)
        and not isinstance(handler, logging.handlers.RotatingFileHandler)
    )
    assert console_handler.level == (logging.INFO if dev_mode else logging.WARNING)


def test_request_context_filter_tags_records(app):
    record = _record()

    with app.test_request_context("/habits/", method="POST", headers={"X-User-Id": "7"}):
        assert RequestContextFilter().filter(record) is True

    log_data = json.loads(JSONFormatter().format(record))
    assert log_data["extra"] == {"http_method": "POST", "http_path": "/habits/", "user_id": "7"}


def test_request_context_filter_outside_request():
    record = _record()
    assert RequestContextFilter().filter(record) is True
    assert not hasattr(record, "http_path")
