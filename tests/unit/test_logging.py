"""
Tests for mapcrud logging setup and formatters.
"""

import json
import logging
import sys
from pathlib import Path

from mapcrud.runtime.logging import (
    ConsoleFormatter,
    JSONLFormatter,
    get_api_logger,
    get_core_logger,
    get_log_file,
    get_recent_logs,
    log_with_context,
    setup_logging,
)


def _record(level: int = logging.INFO, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord("mapcrud.api", level, __file__, 10, "hello %s", ("world",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_only(self) -> None:
        assert setup_logging(None) is None
        assert get_log_file() is None
        handlers = logging.getLogger("mapcrud").handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0].formatter, ConsoleFormatter)

    def test_file_logging_writes_jsonl(self, tmp_path: Path) -> None:
        log_dir = setup_logging(tmp_path / "logs", level="DEBUG")
        assert log_dir == tmp_path / "logs"

        log_with_context(get_core_logger(), logging.WARNING, "Untyped field", shape="NoteDto")

        entries = get_recent_logs()
        assert entries[0]["message"] == "mapcrud logging initialized"
        warning = entries[-1]
        assert warning["level"] == "WARNING"
        assert warning["component"] == "CORE"
        assert warning["context"] == {"shape": "NoteDto"}
        assert "source" in warning

    def test_recent_logs_filters_by_level(self, tmp_path: Path) -> None:
        setup_logging(tmp_path)
        logger = get_api_logger()
        logger.info("one")
        logger.error("two")

        errors = get_recent_logs(level="error")
        assert [entry["message"] for entry in errors] == ["two"]
        assert len(get_recent_logs(count=1)) == 1

    def test_level_respected(self, tmp_path: Path) -> None:
        setup_logging(tmp_path, level=logging.WARNING)
        get_core_logger().info("quiet")
        assert get_recent_logs() == []

    def test_repeat_setup_replaces_handlers(self, tmp_path: Path) -> None:
        setup_logging(tmp_path)
        setup_logging(tmp_path)
        assert len(logging.getLogger("mapcrud").handlers) == 2


class TestFormatters:
    """Tests for the JSONL and console formatters."""

    def test_jsonl_entry(self) -> None:
        entry = json.loads(JSONLFormatter().format(_record(component="API", context={"id": 1})))
        assert entry["message"] == "hello world"
        assert entry["component"] == "API"
        assert entry["context"] == {"id": 1}
        assert entry["timestamp"].endswith("Z")
        assert "source" not in entry

    def test_jsonl_exception(self) -> None:
        try:
            raise ValueError("bad")
        except ValueError:
            record = _record(logging.ERROR)
            record.exc_info = sys.exc_info()
        entry = json.loads(JSONLFormatter().format(record))
        assert entry["exception"] == {"type": "ValueError", "message": "bad"}

    def test_console_shows_level_except_info(self) -> None:
        formatter = ConsoleFormatter()
        assert "WARNING" in formatter.format(_record(logging.WARNING, component="API"))
        info = formatter.format(_record(logging.INFO, component="API"))
        assert "[API]" in info
        assert "INFO" not in info
        assert info.endswith("hello world")
