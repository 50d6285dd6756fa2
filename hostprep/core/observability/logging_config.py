"""
Logging configuration — one root setup for the whole CLI process.

main.py calls ``setup_logging()`` before any command runs; modules only
ever do ``logger = logging.getLogger(__name__)``.

Console level, highest precedence first:
    --debug / --verbose / --quiet  >  HOSTPREP_LOG_LEVEL  >  WARNING

A diagnostic log file is added when HOSTPREP_LOG_FILE is set (its level
from HOSTPREP_LOG_FILE_LEVEL).  Command stdout never goes here; that is
``Settings.log_file``.
"""

from __future__ import annotations

import logging
import os
import sys

LOG_LEVEL_ENV = "HOSTPREP_LOG_LEVEL"
LOG_FILE_ENV = "HOSTPREP_LOG_FILE"
LOG_FILE_LEVEL_ENV = "HOSTPREP_LOG_FILE_LEVEL"

# ── Formats ─────────────────────────────────────────────────────

# (max level, format, datefmt): first row whose level is >= the
# configured level wins
_CONSOLE_FORMATS: tuple[tuple[int, str, str | None], ...] = (
    (logging.DEBUG, "%(asctime)s %(levelname)-5s [%(name)s:%(lineno)d] %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s %(message)s", "%H:%M:%S"),
)
_CONSOLE_DEFAULT_FORMAT = "%(levelname)s: %(message)s"

_FILE_FORMAT = "%(asctime)s %(levelname)-5s [%(name)s:%(lineno)d] %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(flag_level: str | None = None) -> str:
    """Level name from the CLI flag, then the env var, then WARNING."""
    return flag_level or os.environ.get(LOG_LEVEL_ENV) or "WARNING"


def _console_formatter(level: int) -> logging.Formatter:
    for max_level, fmt, datefmt in _CONSOLE_FORMATS:
        if level <= max_level:
            return logging.Formatter(fmt, datefmt=datefmt)
    return logging.Formatter(_CONSOLE_DEFAULT_FORMAT)


def _to_level(name: str | None, default: int = logging.WARNING) -> int:
    """``"info"`` → ``logging.INFO``; unknown or empty names → ``default``."""
    value = logging.getLevelName(name.upper()) if name else None
    return value if isinstance(value, int) else default


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with hostprep's.

    Safe to call more than once; each call starts from a clean root.

    Args:
        level: Console level name.
        log_file: Diagnostic log path (default: ``HOSTPREP_LOG_FILE``).
        log_file_level: Level for the file (default:
            ``HOSTPREP_LOG_FILE_LEVEL``, then ``level``).
    """
    console_level = _to_level(level)
    log_file = log_file or os.environ.get(LOG_FILE_ENV)
    file_level_name = log_file_level or os.environ.get(LOG_FILE_LEVEL_ENV)

    handlers: list[logging.Handler] = []

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(_console_formatter(console_level))
    handlers.append(console)

    if log_file:
        file_level = _to_level(file_level_name, default=console_level)
        file_handler = logging.FileHandler(os.path.expanduser(log_file), encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
        handlers.append(file_handler)

    root = logging.getLogger()
    for old in list(root.handlers):
        root.removeHandler(old)
    for handler in handlers:
        root.addHandler(handler)

    # Root passes everything any handler wants; handlers filter
    root.setLevel(min(h.level for h in handlers))

    # Errors inside handlers are not re-raised
    logging.raiseExceptions = False
