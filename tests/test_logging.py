"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from salem.config import BaseConfig
from salem.logging_config import JSONFormatter, get_logger, setup_logging


def _record(**kwargs) -> logging.LogRecord:
    defaults = dict(
        name="salem.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Test message",
        args=(),
        exc_info=None,
    )
    defaults.update(kwargs)
    return logging.LogRecord(**defaults)


def test_json_formatter():
    """JSONFormatter emits the core fields and extra attributes."""
    record = _record()
    record.account_id = 7

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "salem.test"
    assert log_data["message"] == "Test message"
    assert log_data["line"] == 42
    assert log_data["extra"] == {"account_id": 7}
    assert "timestamp" in log_data


def test_json_formatter_with_exception():
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record(level=logging.ERROR, exc_info=exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"]


def test_setup_logging(tmp_path, monkeypatch):
    """Logging setup creates a JSON log file under the data directory."""
    monkeypatch.setenv("SALEM_DATA_DIR", str(tmp_path))
    config = BaseConfig()

    logger = setup_logging(config)
    get_logger("services.allocator").info("Account balance updated", extra={"amount": -100})

    assert logger.name == "salem"
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "salem.log"
    lines = [json.loads(line) for line in log_file.read_text().splitlines() if line.strip()]
    assert lines[0]["message"] == "Logging initialized"
    assert lines[-1]["extra"] == {"amount": -100}
    assert lines[-1]["logger"] == "salem.services.allocator"


def test_setup_logging_twice_does_not_duplicate_handlers(tmp_path, monkeypatch):
    monkeypatch.setenv("SALEM_DATA_DIR", str(tmp_path))
    config = BaseConfig()

    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2


def test_get_logger_namespacing():
    assert get_logger("module1").name == "salem.module1"
    assert get_logger("salem.services.money").name == "salem.services.money"
    assert get_logger("salem").name == "salem"


@pytest.mark.parametrize("dev_mode", [True, False])
def test_logging_levels_by_mode(tmp_path, monkeypatch, dev_mode):
    monkeypatch.setenv("SALEM_DATA_DIR", str(tmp_path))
    config = BaseConfig()
    config.DEV_MODE = dev_mode

    logger = setup_logging(config)

    console = next(h for h in logger.handlers if not isinstance(h, logging.FileHandler))
    assert console.level == (logging.INFO if dev_mode else logging.WARNING)
    assert logger.level == (logging.DEBUG if dev_mode else logging.INFO)


def test_json_formatter_adds_request_fields():
    from flask import Flask, g

    app = Flask(__name__)
    with app.test_request_context("/accounts/", method="POST"):
        g.user_id = 3
        log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["request"] == {"method": "POST", "path": "/accounts/", "user_id": 3}


def test_json_formatter_outside_request_has_no_request_block():
    assert "request" not in json.loads(JSONFormatter().format(_record()))
