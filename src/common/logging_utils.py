"""Centralized logging setup for the sync tools.

Console output is colored and symbol-prefixed for humans; the log file gets
one timestamped line per record in the form
``YYYY-MM-DD HH:MM:SS - LEVEL: message`` and is only ever appended to.

Console verbosity is decided once, at startup: quiet mode raises the console
threshold to WARNING while the file handler keeps recording everything.
"""
from __future__ import annotations

import logging
import os
import sys
import time
from typing import Any, Dict, Optional
from urllib.parse import urlsplit, urlunsplit

from constants import Constants

PROGRESS = 22
SUCCESS = 25

logging.addLevelName(PROGRESS, "PROGRESS")
logging.addLevelName(SUCCESS, "SUCCESS")

_RESET = "\033[0m"
_STYLES = {
    logging.DEBUG: ("\033[0;36m", "..."),
    logging.INFO: ("\033[0;34m", "ℹ️ "),
    PROGRESS: ("\033[0;35m", "🔄"),
    SUCCESS: ("\033[0;32m", "✅"),
    logging.WARNING: ("\033[1;33m", "⚠️ "),
    logging.ERROR: ("\033[0;31m", "❌"),
    logging.CRITICAL: ("\033[0;31m", "❌"),
}

# Handlers installed by configure_logging, so repeated calls replace them.
_managed_handlers: list[logging.Handler] = []


class ConsoleFormatter(logging.Formatter):
    """Render records as colored, symbol-prefixed console lines."""

    def __init__(self, use_color: bool = True):
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color, symbol = _STYLES.get(record.levelno, ("", ""))
        if not self.use_color:
            return f"{symbol} {message}" if symbol else message
        return f"{color}{symbol} {message}{_RESET}"


class _MaxLevelFilter(logging.Filter):
    """Let through records strictly below a level (stdout half of the console)."""

    def __init__(self, level: int):
        super().__init__()
        self.level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.level


class _FileOnlyFilter(logging.Filter):
    """Keep records tagged ``file_only`` off the console."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not getattr(record, "file_only", False)


def _resolve_level(level: Optional[str], quiet: bool) -> int:
    if quiet:
        return logging.WARNING
    name = (level or os.environ.get(Constants.ENV_LOG_LEVEL) or "INFO").upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    log_file: Optional[str] = None,
    *,
    quiet: bool = False,
    level: Optional[str] = None,
    use_color: Optional[bool] = None,
) -> None:
    """Configure root logging for a sync run.

    Args:
        log_file: Path of the append-only log file, or None for console only.
        quiet: Restrict console output to warnings and errors.
        level: Console level name; falls back to RUNTIME_SYNC_LOG_LEVEL, then INFO.
        use_color: Force ANSI colors on/off; defaults to whether stdout is a TTY.
    """
    root = logging.getLogger()
    for handler in _managed_handlers:
        root.removeHandler(handler)
        handler.close()
    _managed_handlers.clear()

    console_level = _resolve_level(level, quiet)
    if use_color is None:
        use_color = sys.stdout.isatty()
    formatter = ConsoleFormatter(use_color=use_color)

    out_handler = logging.StreamHandler(sys.stdout)
    out_handler.setLevel(console_level)
    out_handler.addFilter(_MaxLevelFilter(logging.ERROR))
    out_handler.addFilter(_FileOnlyFilter())
    out_handler.setFormatter(formatter)

    err_handler = logging.StreamHandler(sys.stderr)
    err_handler.setLevel(max(console_level, logging.ERROR))
    err_handler.addFilter(_FileOnlyFilter())
    err_handler.setFormatter(formatter)

    _managed_handlers.extend([out_handler, err_handler])
    root_level = console_level

    if log_file:
        path = os.path.expanduser(log_file)
        parent = os.path.dirname(path)
        if parent:
            os.makedirs(parent, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_level = min(console_level, logging.INFO)
        file_handler.setLevel(file_level)
        file_handler.setFormatter(
            logging.Formatter(Constants.LOG_FORMAT, datefmt=Constants.LOG_DATE_FORMAT)
        )
        _managed_handlers.append(file_handler)
        root_level = min(root_level, file_level)

    for handler in _managed_handlers:
        root.addHandler(handler)
    root.setLevel(root_level)

    # requests/urllib3 chatter only belongs in DEBUG sessions
    logging.getLogger("urllib3").setLevel(
        logging.DEBUG if console_level <= logging.DEBUG else logging.WARNING
    )


def is_debug_enabled(logger: logging.Logger) -> bool:
    """Return True when DEBUG records from this logger would be emitted."""
    return logger.isEnabledFor(logging.DEBUG)


def extra_context(**fields: Any) -> Dict[str, Any]:
    """Build the ``extra`` mapping for structured DEBUG traces.

    None values are dropped so formatters never see half-populated keys.
    """
    return {key: value for key, value in fields.items() if value is not None}


def safe_url(url: str) -> str:
    """Strip credentials and query strings from a URL before logging it."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return "<invalid url>"
    netloc = parts.hostname or ""
    if parts.port:
        netloc = f"{netloc}:{parts.port}"
    return urlunsplit((parts.scheme, netloc, parts.path, "", ""))


class Timer:
    """Context manager measuring elapsed wall time in milliseconds."""

    def __init__(self) -> None:
        self._start = 0.0
        self._end: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._end = time.perf_counter()

    def duration_ms(self) -> int:
        end = self._end if self._end is not None else time.perf_counter()
        return int((end - self._start) * 1000)


def progress(logger: logging.Logger, msg: str, *args: Any) -> None:
    """Log a PROGRESS record."""
    logger.log(PROGRESS, msg, *args)


def success(logger: logging.Logger, msg: str, *args: Any) -> None:
    """Log a SUCCESS record."""
    logger.log(SUCCESS, msg, *args)


def log_to_file(logger: logging.Logger, msg: str, *args: Any) -> None:
    """Log an INFO record that only the log file receives."""
    logger.info(msg, *args, extra={"file_only": True})
