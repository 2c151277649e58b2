"""
mapcrud logging.

Every mapcrud logger lives under the ``mapcrud`` namespace and tags its
records with a component (``API`` for the HTTP boundary, ``CORE`` for mapping
tables, appliers and stores). ``setup_logging`` decides where records go:

- the console, in a short human-readable form
- optionally ``<log_dir>/mapcrud.log``, one JSON object per line

Modules obtain their loggers at import time; nothing needs ``setup_logging``
to have run before logging.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from collections import deque
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, TextIO

ROOT_LOGGER_NAME = "mapcrud"
LOG_FILE_NAME = "mapcrud.log"
DEFAULT_COMPONENT = "CORE"

# ANSI codes by level name and by component; disabled with NO_COLOR or off a tty
_ANSI = {
    "RESET": "\033[0m",
    "DIM": "\033[2m",
    "DEBUG": "\033[36m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
    "API": "\033[34m",
    "CORE": "\033[35m",
}


def _use_color(stream: TextIO) -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def _iso_millis(created: float) -> str:
    return (
        datetime.fromtimestamp(created, UTC)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


# =============================================================================
# Formatters
# =============================================================================


class JSONLFormatter(logging.Formatter):
    """
    One JSON object per record.

    Keys: ``timestamp`` (UTC, millisecond precision), ``level``, ``component``,
    ``logger`` and ``message``; ``context`` when the record carries structured
    context, ``source`` for warnings and above, ``exception`` when an
    exception is attached.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _iso_millis(record.created),
            "level": record.levelname,
            "component": getattr(record, "component", DEFAULT_COMPONENT),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if context := getattr(record, "context", None):
            entry["context"] = context
        if record.levelno >= logging.WARNING:
            entry["source"] = self._source(record)
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
            }
        return json.dumps(entry, default=str)

    @staticmethod
    def _source(record: logging.LogRecord) -> dict[str, Any]:
        source: dict[str, Any] = {"file": record.pathname, "line": record.lineno}
        if record.funcName and record.funcName != "<module>":
            source["function"] = record.funcName
        return source


class ConsoleFormatter(logging.Formatter):
    """
    ``HH:MM:SS [COMPONENT] LEVEL: message``; the level is omitted for INFO.

    Args:
        color: Wrap the timestamp, component and level in ANSI codes
    """

    def __init__(self, color: bool = False):
        super().__init__()
        self.color = color

    def _paint(self, key: str, text: str) -> str:
        if not self.color or key not in _ANSI:
            return text
        return f"{_ANSI[key]}{text}{_ANSI['RESET']}"

    def format(self, record: logging.LogRecord) -> str:
        component = getattr(record, "component", DEFAULT_COMPONENT)
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        parts = [self._paint("DIM", clock), self._paint(component, f"[{component}]")]
        if record.levelno != logging.INFO:
            parts.append(self._paint(record.levelname, record.levelname) + ":")
        parts.append(record.getMessage())

        line = " ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


# =============================================================================
# Setup
# =============================================================================

_log_dir: Path | None = None


def _resolve_level(level: int | str) -> int:
    if isinstance(level, int):
        return level
    return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)


def setup_logging(
    log_dir: Path | str | None = ".mapcrud/logs",
    level: int | str = logging.INFO,
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> Path | None:
    """
    Route ``mapcrud`` records to the console and, optionally, a JSONL file.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        log_dir: Directory for ``mapcrud.log``, or None for console only
        level: Minimum level (int or level name such as ``"DEBUG"``)
        max_bytes: Size at which the log file rotates
        backup_count: Rotated files to keep

    Returns:
        The log directory, or None when file logging is disabled
    """
    global _log_dir

    level = _resolve_level(level)
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(ConsoleFormatter(color=_use_color(sys.stdout)))
    root.addHandler(console)

    if log_dir is None:
        _log_dir = None
        return None

    _log_dir = Path(log_dir)
    _log_dir.mkdir(parents=True, exist_ok=True)
    log_file = _log_dir / LOG_FILE_NAME

    file_handler = RotatingFileHandler(
        log_file, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setFormatter(JSONLFormatter())
    root.addHandler(file_handler)

    log_with_context(
        get_core_logger(),
        logging.INFO,
        "mapcrud logging initialized",
        context={"log_file": str(log_file), "level": logging.getLevelName(level)},
    )
    return _log_dir


# =============================================================================
# Component Loggers
# =============================================================================


class ComponentFilter(logging.Filter):
    """Tags records with the component of the logger they were emitted on."""

    def __init__(self, component: str):
        super().__init__()
        self.component = component

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "component"):
            record.component = self.component
        return True


def get_logger(component: str) -> logging.Logger:
    """
    Get the logger for a component.

    Args:
        component: Component tag (e.g. "API", "CORE")

    Returns:
        ``mapcrud.<component>`` logger whose records carry the tag
    """
    logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{component.lower()}")
    if not any(isinstance(f, ComponentFilter) for f in logger.filters):
        logger.addFilter(ComponentFilter(component.upper()))
    return logger


def get_api_logger() -> logging.Logger:
    """Logger for the HTTP boundary."""
    return get_logger("API")


def get_core_logger() -> logging.Logger:
    """Logger for mapping tables, appliers, stores and resources."""
    return get_logger("CORE")


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    context: dict[str, Any] | None = None,
    **kwargs: Any,
) -> None:
    """
    Log a message with structured context.

    The context (``context`` merged with ``kwargs``) appears under the
    ``context`` key of JSONL entries.
    """
    merged = {**(context or {}), **kwargs}
    logger.log(level, message, extra={"context": merged} if merged else None)


# =============================================================================
# Reading Logs Back
# =============================================================================


def get_log_file() -> Path | None:
    """Path of the JSONL log file, when file logging is enabled."""
    return _log_dir / LOG_FILE_NAME if _log_dir else None


def get_recent_logs(count: int = 50, level: str | None = None) -> list[dict[str, Any]]:
    """
    Read the most recent JSONL entries, oldest first.

    Args:
        count: Maximum number of entries
        level: Only entries of this level (case-insensitive)

    Returns:
        Parsed entries; empty when there is no log file
    """
    log_file = get_log_file()
    if log_file is None or not log_file.exists():
        return []

    wanted = level.upper() if level else None
    recent: deque[dict[str, Any]] = deque(maxlen=count)
    with log_file.open(encoding="utf-8") as f:
        for line in f:
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                continue
            if wanted is None or entry.get("level") == wanted:
                recent.append(entry)
    return list(recent)
