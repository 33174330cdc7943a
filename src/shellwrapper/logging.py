"""Logging configuration for shellwrapper.

Uses Python's standard logging module with support for:
- File logging via config or SHELLWRAPPER_LOG environment variable
- Verbosity levels: error(0), warning(1), info(2), verbose(3), trace(4)
- Per-session records tagged with the shell's pid
- Console output only where it cannot be mistaken for captured shell stderr
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from shellwrapper.config.schema import LoggingConfig

# Custom log levels
TRACE = 5  # every submitted command
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

logger = logging.getLogger("shellwrapper")

_initialized = False
_handlers: list[logging.Handler] = []

_LEVEL_MAP = {
    "TRACE": TRACE,
    "DEBUG": logging.DEBUG,
    "VERBOSE": VERBOSE,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

# Map --verbose=N to log levels (0=errors only, 4=every command)
_VERBOSITY_MAP = {
    0: logging.ERROR,
    1: logging.WARNING,
    2: logging.INFO,
    3: VERBOSE,
    4: TRACE,
}

_FORMAT = "%(asctime)s %(levelname)s [shellwrapper] %(message)s"


class _LowercaseLevelFormatter(logging.Formatter):
    """Formatter that emits lowercase level names."""

    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        return super().format(record)


class SessionLogAdapter(logging.LoggerAdapter):
    """Prefixes records with the pid of the shell they concern."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        return f"[pid {self.extra['pid']}] {msg}", kwargs


def session_logger(pid: int) -> SessionLogAdapter:
    """Logger for one shell session."""
    return SessionLogAdapter(get_logger("session"), {"pid": pid})


def resolve_level(config: LoggingConfig | None) -> int:
    """Work out the effective log level for a logging config.

    ``verbose`` (int) takes precedence over ``level`` (str); INFO is the default.
    """
    if config:
        if config.verbose is not None:
            return _VERBOSITY_MAP.get(config.verbose, TRACE)
        if config.level:
            return _LEVEL_MAP.get(config.level.upper(), logging.INFO)
    return logging.INFO


def setup_logging(config: LoggingConfig | None = None, *, console: bool | None = None) -> None:
    """Initialize logging based on configuration.

    Call this once at startup. Subsequent calls are no-ops.

    Args:
        config: Optional LoggingConfig with level, verbose, and file settings.
        console: Whether to log to stderr. None logs there only when stderr is
            a terminal and no log file is configured. Callers that relay the
            shell's own stderr pass False unless logging was asked for, so log
            lines do not interleave with command output.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    log_level = resolve_level(config)
    logger.setLevel(log_level)

    formatter = _LowercaseLevelFormatter(_FORMAT, datefmt="%H:%M:%S")

    log_path = config.file if config and config.file else os.environ.get("SHELLWRAPPER_LOG")

    if log_path:
        log_path = os.path.expanduser(log_path)
        try:
            _add_handler(logging.FileHandler(log_path, mode="a", encoding="utf-8"), formatter, log_level)
        except OSError as e:
            print(f"[shellwrapper] Failed to open log file: {e}", file=sys.stderr)
            if console is not False:
                _add_handler(logging.StreamHandler(sys.stderr), formatter, log_level)
            return
        if not console:
            return

    if console or (console is None and sys.stderr.isatty()):
        _add_handler(logging.StreamHandler(sys.stderr), formatter, log_level)


def _add_handler(handler: logging.Handler, formatter: logging.Formatter, level: int) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    _handlers.append(handler)


def reset_logging() -> None:
    """Remove handlers installed by setup_logging() so it can run again."""
    global _initialized
    for handler in _handlers:
        logger.removeHandler(handler)
        handler.close()
    _handlers.clear()
    logger.setLevel(logging.NOTSET)
    _initialized = False


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Optional name for a child logger (e.g., "session", "cli").
              If None, returns the root shellwrapper logger.
    """
    if name:
        return logger.getChild(name)
    return logger
