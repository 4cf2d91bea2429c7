"""
Logging configuration for the toolconf CLI.

``setup_logging`` is called once from the click group callback; all
modules log through ``logging.getLogger(__name__)``.

Console level: --debug / --verbose / --quiet, then TOOLCONF_LOG_LEVEL,
then WARNING.  TOOLCONF_LOG_FILE adds a file handler whose level comes
from TOOLCONF_LOG_FILE_LEVEL (default: the console level).
"""

from __future__ import annotations

import logging
import os
import sys

ENV_LOG_LEVEL = "TOOLCONF_LOG_LEVEL"
ENV_LOG_FILE = "TOOLCONF_LOG_FILE"
ENV_LOG_FILE_LEVEL = "TOOLCONF_LOG_FILE_LEVEL"

# console (format, datefmt), most verbose first
_CONSOLE_FORMATS: list[tuple[int, str, str | None]] = [
    (logging.DEBUG, "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d  %(message)s", "%H:%M:%S"),
    (logging.INFO, "%(asctime)s [%(name)s] %(message)s", "%H:%M:%S"),
    (logging.CRITICAL, "%(levelname)s: %(message)s", None),
]

_FILE_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(lineno)d  %(message)s"
_FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(ENV_LOG_LEVEL, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Replace the root logger's handlers with toolconf's.

    Args:
        level: Console level name; unknown names mean WARNING.
        log_file: Also log to this file.
        log_file_level: Level for ``log_file``, default ``level``.
    """
    console_level = _parse_level(level)
    handlers = [_console_handler(console_level)]
    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else console_level
        handlers.append(_file_handler(log_file, file_level))

    root = logging.getLogger()
    root.handlers.clear()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(min(h.level for h in handlers))
    logging.raiseExceptions = False


def _console_handler(level: int) -> logging.Handler:
    fmt, datefmt = next((f, d) for limit, f, d in _CONSOLE_FORMATS if level <= limit)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    return handler


def _file_handler(path: str, level: int) -> logging.Handler:
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_FILE_DATEFMT))
    return handler


def _parse_level(level: str | None) -> int:
    return logging.getLevelNamesMapping().get((level or "").upper(), logging.WARNING)
