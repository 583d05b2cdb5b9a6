"""
Logging setup shared by the launcher, the API and the engine modules.

Modules only ever call ``get_logger(__name__)``. Handlers are attached once,
at process start, by ``configure_logging()`` (see main.py). Until then the
loggers stay silent, which keeps library use and unit tests quiet.
"""

from __future__ import annotations

import json as _json
import logging
import time
from typing import Any, Dict, Optional

from infra.paths import LOG_DIR, STORAGE_DIR

ROOT_LOGGER_NAME = "skirmish"

_STANDARD_ATTRS = set(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Anything passed through ``extra=`` ends up as a record attribute
        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return _json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(
    level: str | int = "INFO",
    json: bool = False,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure console (and optional file) logging for the whole project.

    Safe to call more than once: previously installed handlers are replaced.

    Args:
        level: Log level name or number (e.g. "INFO", logging.DEBUG)
        json: Emit JSON lines instead of plain text
        log_file: Optional file name; relative names land under storage/logs

    Returns:
        The project root logger
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {level}")

    if json:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        LOG_DIR.mkdir(parents=True, exist_ok=True)
        path = LOG_DIR / log_file
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger nested under the project root logger.

    ``get_logger("env.scenario")`` -> ``skirmish.env.scenario``
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


# Until configure_logging() runs, swallow records instead of printing
# "No handlers could be found" style fallbacks.
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())

__all__ = ["configure_logging", "get_logger", "JsonFormatter", "STORAGE_DIR", "LOG_DIR"]
