"""
Tests for structured logging.
"""

import json
import logging
from logging.handlers import RotatingFileHandler

from shared.config import settings
from shared.logging import JSONFormatter, get_logger, get_scenario_id, set_scenario_id


def _record(message="hello", **extra):
    record = logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_basic_fields():
    data = json.loads(JSONFormatter().format(_record()))

    assert data["level"] == "INFO"
    assert data["message"] == "hello"
    assert data["timestamp"].endswith("Z")


def test_json_formatter_includes_extra_fields():
    data = json.loads(JSONFormatter().format(_record(scene_index=2, tags=["a"])))

    assert data["scene_index"] == 2
    assert data["tags"] == "['a']"


def test_scenario_id_injected():
    set_scenario_id("scenario-42")
    try:
        data = json.loads(JSONFormatter().format(_record()))
        assert data["scenario_id"] == "scenario-42"
        assert get_scenario_id() == "scenario-42"
    finally:
        set_scenario_id(None)

    data = json.loads(JSONFormatter().format(_record()))
    assert "scenario_id" not in data


def test_get_logger_configures_handlers_once():
    logger = get_logger("test_logging_once")
    handlers = list(logger.handlers)

    assert get_logger("test_logging_once").handlers == handlers
    assert all(isinstance(handler.formatter, JSONFormatter) for handler in handlers)


def test_log_file_written_under_configured_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "log_dir", str(tmp_path / "logs"))
    logger = get_logger("test_logging_file")

    assert any(isinstance(handler, RotatingFileHandler) for handler in logger.handlers)
    assert (tmp_path / "logs" / "app.log").exists()


def test_file_logging_disabled_without_log_dir(monkeypatch):
    monkeypatch.setattr(settings, "log_dir", "")
    logger = get_logger("test_logging_stdout_only")

    assert len(logger.handlers) == 1
    assert not isinstance(logger.handlers[0], RotatingFileHandler)
