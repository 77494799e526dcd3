"""Logging helpers for file-lock-manager.

The package logs through ``logging.getLogger("file_lock_manager")`` and
its children. Nothing is printed unless the embedding application
configures logging or calls ``setup_logging``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

from file_lock_manager.core.constants import LOGGER_NAME, VALID_LOG_FORMATS, VALID_LOG_LEVELS
from file_lock_manager.core.env import effective_log_config

_LOG_RECORD_RESERVED_FIELDS = set(logging.makeLogRecord({}).__dict__.keys()) | {"message", "asctime"}

# Marks handlers installed by setup_logging so repeated calls replace them.
_MANAGED_HANDLER_ATTR = "_file_lock_manager_handler"


def _safe_record_message(record: logging.LogRecord) -> str:
    try:
        return record.getMessage()
    except Exception:
        return f"{record.msg!s} [log-message-format-error]"


class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging output.

    Each log record becomes a single JSON object on one line, including
    any contextual fields such as ``lock_path``.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": _safe_record_message(record),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "process": record.process,
            "thread_name": record.threadName,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _LOG_RECORD_RESERVED_FIELDS or key.startswith("_"):
                continue
            log_entry.setdefault(key, value)

        return json.dumps(log_entry, default=str)


class ContextLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges contextual fields into record extras."""

    def process(self, msg: str, kwargs: dict) -> tuple[str, dict]:
        extra = kwargs.get("extra")
        merged_extra = dict(self.extra)
        if isinstance(extra, dict):
            merged_extra.update(extra)
        kwargs["extra"] = merged_extra
        return msg, kwargs


def _unwrap_logger(logger: logging.Logger | logging.LoggerAdapter) -> logging.Logger:
    current = logger
    while isinstance(current, logging.LoggerAdapter):
        current = current.logger
    return current


def with_log_context(
    logger: logging.Logger | logging.LoggerAdapter, **context: object
) -> logging.Logger | logging.LoggerAdapter:
    """Return a logger enriched with persistent contextual fields."""
    if not isinstance(logger, (logging.Logger, logging.LoggerAdapter)):
        # Preserve test doubles that do not implement the logging interfaces.
        return logger

    normalized_context = {k: v for k, v in context.items() if v is not None}
    existing_context = {}
    if isinstance(logger, logging.LoggerAdapter):
        existing_context = dict(getattr(logger, "extra", None) or {})

    existing_context.update(normalized_context)
    return ContextLoggerAdapter(_unwrap_logger(logger), existing_context)


def setup_logging(
    log_level: str | None = None,
    log_format: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Attach a console handler to the package logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: "text" (default) or "json" for structured logging
        stream: Output stream (default: sys.stderr)

    Returns:
        The configured package logger

    Priority: 1) Passed parameter, 2) FILE_LOCK_LOG_LEVEL / FILE_LOCK_LOG_FORMAT, 3) Defaults
    """
    env_config = effective_log_config()
    level = (log_level or env_config.level).upper()
    fmt = (log_format or env_config.format).lower()

    if level not in VALID_LOG_LEVELS:
        print(f"Warning: Invalid log level '{level}', using INFO", file=sys.stderr)
        level = "INFO"
    if fmt not in VALID_LOG_FORMATS:
        print(f"Warning: Invalid log format '{fmt}', using text", file=sys.stderr)
        fmt = "text"

    numeric_level = getattr(logging, level, logging.INFO)
    logger = logging.getLogger(LOGGER_NAME)

    for handler in logger.handlers[:]:
        if getattr(handler, _MANAGED_HANDLER_ATTR, False):
            handler.close()
            logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    setattr(handler, _MANAGED_HANDLER_ATTR, True)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    handler.setLevel(numeric_level)

    logger.addHandler(handler)
    logger.setLevel(numeric_level)
    logger.debug(f"Logging initialized at {level} ({fmt})")
    return logger
