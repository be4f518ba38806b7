"""Tests for console/file logging configuration."""

import logging
import re

from common.logging_utils import (
    PROGRESS,
    SUCCESS,
    ConsoleFormatter,
    configure_logging,
    log_to_file,
    safe_url,
    success,
)

LINE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} - [A-Z]+: .+$")


def _record(level, msg):
    return logging.LogRecord("t", level, __file__, 1, msg, (), None)


class TestFileLog:
    """The append-only timestamped log file."""

    def test_line_format(self, tmp_path):
        log_file = tmp_path / "sync.log"
        configure_logging(str(log_file), use_color=False)

        logging.getLogger("test").info("hello %s", "world")
        success(logging.getLogger("test"), "done")

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert all(LINE.match(line) for line in lines)
        assert lines[0].endswith("INFO: hello world")
        assert lines[1].endswith("SUCCESS: done")

    def test_appends(self, tmp_path):
        log_file = tmp_path / "sync.log"
        log_file.write_text("2024-01-01 00:00:00 - INFO: earlier run\n", encoding="utf-8")
        configure_logging(str(log_file), use_color=False)

        logging.getLogger("test").warning("again")

        content = log_file.read_text(encoding="utf-8")
        assert content.startswith("2024-01-01 00:00:00 - INFO: earlier run\n")
        assert "WARNING: again" in content

    def test_quiet_keeps_file_complete(self, tmp_path, capsys):
        log_file = tmp_path / "nested" / "sync.log"
        configure_logging(str(log_file), quiet=True, use_color=False)

        logging.getLogger("test").info("only in file")
        logging.getLogger("test").error("everywhere")

        captured = capsys.readouterr()
        assert "only in file" not in captured.out
        assert "everywhere" in captured.err
        content = log_file.read_text(encoding="utf-8")
        assert "INFO: only in file" in content
        assert "ERROR: everywhere" in content

    def test_file_only_records(self, tmp_path, capsys):
        log_file = tmp_path / "sync.log"
        configure_logging(str(log_file), use_color=False)

        log_to_file(logging.getLogger("test"), "=== Starting node-sync v1.0.0 ===")

        assert "Starting" not in capsys.readouterr().out
        assert "INFO: === Starting node-sync v1.0.0 ===" in log_file.read_text(encoding="utf-8")

    def test_reconfigure_replaces_handlers(self, tmp_path):
        configure_logging(str(tmp_path / "a.log"), use_color=False)
        before = len(logging.getLogger().handlers)
        configure_logging(str(tmp_path / "b.log"), use_color=False)
        assert len(logging.getLogger().handlers) == before


class TestConsoleFormatter:
    def test_plain_symbols(self):
        formatter = ConsoleFormatter(use_color=False)
        assert formatter.format(_record(SUCCESS, "ok")) == "✅ ok"
        assert formatter.format(_record(PROGRESS, "working")) == "🔄 working"
        assert formatter.format(_record(logging.ERROR, "bad")) == "❌ bad"

    def test_color(self):
        text = ConsoleFormatter(use_color=True).format(_record(logging.ERROR, "bad"))
        assert text.startswith("\033[0;31m") and text.endswith("\033[0m")

    def test_level_names(self):
        assert logging.getLevelName(SUCCESS) == "SUCCESS"
        assert logging.getLevelName(PROGRESS) == "PROGRESS"


def test_safe_url_strips_credentials():
    assert safe_url("https://u:p@host.test:8443/a/b?token=1") == "https://host.test:8443/a/b"
