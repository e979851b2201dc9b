"""
JSON logging for the pipeline.

Every record is one JSON object on stdout (and in a rotating file when LOG_DIR
is set). Fields passed through ``extra=`` become top-level keys, and the
scenario being worked on is attached from a context variable so concurrent
requests keep their own tag.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

from shared.config import settings

scenario_id_context: ContextVar[Optional[str]] = ContextVar("scenario_id", default=None)

# Attributes every LogRecord has; anything else arrived through `extra`
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "taskName"}

_LOG_FILE_BYTES = 100 * 1024 * 1024
_LOG_FILE_BACKUPS = 5


def _jsonable(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    return str(value)


class JSONFormatter(logging.Formatter):
    """Render a record as a single-line JSON object."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "module": record.module,
            "message": record.getMessage(),
        }

        scenario_id = scenario_id_context.get()
        if scenario_id:
            entry["scenario_id"] = scenario_id

        entry.update({
            key: _jsonable(value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and not key.startswith("_")
        })

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def _handlers() -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if settings.log_dir:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(RotatingFileHandler(
            log_dir / "app.log", maxBytes=_LOG_FILE_BYTES, backupCount=_LOG_FILE_BACKUPS
        ))
    return handlers


def get_logger(name: str) -> logging.Logger:
    """
    Return the named logger, attaching JSON handlers on first use.

    Args:
        name: Component name, e.g. "storyboard_generator"
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    formatter = JSONFormatter()
    for handler in _handlers():
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def set_scenario_id(scenario_id: Optional[str]) -> None:
    """Tag subsequent log records in this context with a scenario (None clears it)."""
    scenario_id_context.set(scenario_id)


def get_scenario_id() -> Optional[str]:
    return scenario_id_context.get()
