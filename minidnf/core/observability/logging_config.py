"""
Logging configuration — central setup for the CLI entrypoint.

Two layers are configured here, once, at startup:

1. Python ``logging`` (console on stderr, optional file), used by
   library modules through ``logging.getLogger(__name__)``.
2. The process ``Logger`` (``minidnf.core.logger``) that install stages
   report through: a ``LogRouter`` holding a ``StdlibLogger`` bridge and,
   when a log file is configured, a ``StringLogger`` appending to it.

Levels are resolved in precedence order:
    CLI flag  >  MINIDNF_LOG_LEVEL env var  >  WARNING (default)

Optional extra file output for Python logging via MINIDNF_LOG_FILE /
MINIDNF_LOG_FILE_LEVEL env vars.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from minidnf.core.logger import (
    FileLineSink,
    Level,
    LogRouter,
    StdlibLogger,
    StringLogger,
)
from minidnf.core.logger.sinks import NOTICE, TRACE, from_stdlib_level

# WARNING level — message only
_FMT_MINIMAL = "%(message)s"

# INFO / NOTICE — timestamped with module context
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

# DEBUG / TRACE — file:line included
_FMT_DEBUG = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"

_FMT_FILE = "%(asctime)s %(levelname)-7s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

_NOISY_LOGGERS = ("urllib3", "charset_normalizer")

_EXTRA_LEVELS = {"NOTICE": NOTICE, "TRACE": TRACE}


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> None:
    """Configure Python logging for the entire process.

    Args:
        level: Level name (TRACE, DEBUG, INFO, NOTICE, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Optional separate level for the log file.
            Defaults to the same as ``level``.
        quiet_third_party: Keep noisy third-party loggers at WARNING
            unless running at DEBUG or below.
    """
    numeric_level = parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DEBUG, _DATEFMT_DEBUG
    elif numeric_level <= NOTICE:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # Logging must never take the process down
    logging.raiseExceptions = False


def parse_level(level: str | None) -> int:
    """Convert a level name string to its numeric ``logging`` constant."""
    if not level:
        return logging.WARNING
    name = level.upper()
    if name in _EXTRA_LEVELS:
        return _EXTRA_LEVELS[name]
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric


def build_process_logger(level: str = "WARNING", logfile: Path | None = None) -> LogRouter:
    """Create the process ``Logger`` for install stages.

    The console bridge follows ``level``; the optional log file always
    receives everything down to DEBUG, like a package manager's own log.
    """
    bridge = StdlibLogger(logging.getLogger("minidnf"))
    bridge.set_level(from_stdlib_level(parse_level(level)))
    router = LogRouter([bridge])

    threshold = bridge.get_level()
    if logfile is not None:
        file_logger = StringLogger(FileLineSink(logfile))
        file_logger.set_level(Level.DEBUG)
        router.add_logger(file_logger)
        threshold = max(threshold, Level.DEBUG)

    router.set_level(threshold)
    return router
