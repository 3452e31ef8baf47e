#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Logging configuration for the sendBeneficiaries package.

Everything is written to stderr: stdout carries command output only (the
token printed by `token`, the records printed by `flatten`). Log files are
always JSON, one object per line, so a validate or create run can be
inspected row by row afterwards.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, TextIO

from sendBeneficiaries.errors import ConfigurationError

DEFAULT_LOG_LEVEL = logging.INFO

# Noisy HTTP libraries only report warnings and above
QUIET_LOGGERS = ("urllib3", "requests")

# LogRecord attributes that are not "extra" fields
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()
) | {"message", "asctime", "taskName"}

_RESET = "\033[0m"
LEVEL_COLORS = {
    "DEBUG": "\033[37m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}


class JSONFormatter(logging.Formatter):
    """
    Emit one JSON object per record.

    Context passed with ``extra=`` (for example ``row`` and ``account_name``
    from the batch processor) is copied into the object as top-level keys.
    """
    def __init__(self, include_timestamp: bool = True) -> None:
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {}
        if self.include_timestamp:
            entry["timestamp"] = datetime.fromtimestamp(record.created).isoformat()
        entry.update(
            level=record.levelname,
            logger=record.name,
            message=record.getMessage(),
        )
        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS
        )

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Human readable console lines, with the level name colored on a terminal."""

    DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"

    def __init__(self, use_colors: bool = False) -> None:
        super().__init__(fmt=self.DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        color = LEVEL_COLORS.get(record.levelname) if self.use_colors else None
        if not color:
            return super().format(record)

        # Color a copy so the file handler still sees the plain level name
        colored = logging.makeLogRecord(vars(record))
        colored.levelname = f"{color}{record.levelname}{_RESET}"
        return super().format(colored)


def _console_handler(stream: TextIO, json_output: bool) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        isatty = getattr(stream, "isatty", None)
        handler.setFormatter(ConsoleFormatter(use_colors=bool(isatty and isatty())))
    return handler


def _file_handler(log_file: str) -> logging.Handler:
    log_path = Path(log_file).absolute()
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Error setting up log file {log_file}: {e}") from e
    handler.setFormatter(JSONFormatter())
    return handler


def configure_logging(
    level: int | str = DEFAULT_LOG_LEVEL,
    json_output: bool = False,
    log_file: Optional[str] = None
) -> None:
    """
    Replace the root logger's handlers with a stderr handler and, optionally,
    a JSON file handler.

    Args:
        level: Logging level (name or number)
        json_output: Whether console logs are JSON instead of plain text
        log_file: Optional file to append JSON logs to

    Raises:
        ConfigurationError: If the log file cannot be opened
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = DEFAULT_LOG_LEVEL

    handlers = [_console_handler(sys.stderr, json_output)]
    if log_file:
        handlers.append(_file_handler(log_file))

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)
    for handler in handlers:
        handler.setLevel(level)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    root_logger.debug(
        "Logging configured: level=%s, json=%s, file=%s",
        logging.getLevelName(level), json_output, log_file or "none"
    )
