"""
Concrete loggers — where log records end up.

    MemoryLogger   keeps records in a list (buffering, tests)
    StringLogger   renders one text line per record, hands it to a line sink
    StdlibLogger   forwards into Python's ``logging`` module
    LogRouter      fans a record out to several loggers
"""

from __future__ import annotations

import logging
from collections import deque
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol, TextIO

from minidnf.core.logger.base import Clock, Level, Logger, LogRecord, level_to_str

# Python logging has no NOTICE or TRACE; register both once.
NOTICE = 25
TRACE = 5
logging.addLevelName(NOTICE, "NOTICE")
logging.addLevelName(TRACE, "TRACE")

_STDLIB_LEVELS = {
    Level.CRITICAL: logging.CRITICAL,
    Level.ERROR: logging.ERROR,
    Level.WARNING: logging.WARNING,
    Level.NOTICE: NOTICE,
    Level.INFO: logging.INFO,
    Level.DEBUG: logging.DEBUG,
    Level.TRACE: TRACE,
}


def to_stdlib_level(level: Level) -> int:
    """Map a ``Level`` to the numeric level used by ``logging``."""
    return _STDLIB_LEVELS[level]


def from_stdlib_level(numeric: int) -> Level:
    """Most verbose ``Level`` whose stdlib value is still >= ``numeric``."""
    for level in sorted(Level, reverse=True):
        if _STDLIB_LEVELS[level] >= numeric:
            return level
    return Level.CRITICAL


# ── Memory ──────────────────────────────────────────────────────


class MemoryLogger(Logger):
    """Keeps records in memory.

    Args:
        max_items: Keep only the newest N records (0 = unlimited).
    """

    def __init__(self, max_items: int = 0, clock: Clock | None = None):
        super().__init__(clock)
        self._records: deque[LogRecord] = deque(maxlen=max_items or None)

    @property
    def records(self) -> list[LogRecord]:
        return list(self._records)

    def write(self, time: datetime, pid: int, level: Level, message: str) -> None:
        self._records.append(LogRecord(time, pid, level, message))

    def write_to(self, logger: Logger) -> None:
        """Replay buffered records into another logger's sink.

        Records keep their original time and pid.
        """
        for record in self._records:
            logger.write(record.time, record.pid, record.level, record.message)

    def clear(self) -> None:
        self._records.clear()


# ── Line-oriented ───────────────────────────────────────────────


class LineSink(Protocol):
    def write(self, line: str) -> None: ...


def format_line(time: datetime, pid: int, level: Level, message: str) -> str:
    """Render a record as ``2021-03-01T10:00:00Z [1234] INFO message``."""
    stamp = time.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%SZ")
    return f"{stamp} [{pid}] {level_to_str(level)} {message}\n"


class StringLogger(Logger):
    """Formats each record as a text line and passes it to ``line_sink``."""

    def __init__(self, line_sink: LineSink, clock: Clock | None = None):
        super().__init__(clock)
        self._sink = line_sink

    @property
    def sink(self) -> LineSink:
        return self._sink

    def write(self, time: datetime, pid: int, level: Level, message: str) -> None:
        self._sink.write(format_line(time, pid, level, message))


class StreamLineSink:
    """Writes lines to an open text stream (stderr, a StringIO, ...)."""

    def __init__(self, stream: TextIO):
        self._stream = stream

    def write(self, line: str) -> None:
        self._stream.write(line)
        self._stream.flush()


class FileLineSink:
    """Appends lines to a file, creating parent directories on first use."""

    def __init__(self, path: Path):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, line: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(line)


class ListLineSink:
    """Collects lines in a list."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def write(self, line: str) -> None:
        self.lines.append(line)


# ── Bridges ─────────────────────────────────────────────────────


class StdlibLogger(Logger):
    """Forwards records to a ``logging.Logger``.

    Time and pid are carried as ``extra`` attributes (``dnf_time``,
    ``dnf_pid``); the stdlib record keeps its own timestamp.
    """

    def __init__(self, target: logging.Logger | None = None, clock: Clock | None = None):
        super().__init__(clock)
        self._target = target or logging.getLogger("minidnf")

    def write(self, time: datetime, pid: int, level: Level, message: str) -> None:
        self._target.log(
            to_stdlib_level(level),
            message,
            extra={"dnf_time": time, "dnf_pid": pid},
        )


class LogRouter(Logger):
    """Sends every record to each attached logger.

    The router's own threshold decides what is formatted. Records that
    come through the router's ``log()`` path skip attached loggers whose
    threshold is set and rejects the level; ``write()`` is a plain sink
    and forwards every record.
    """

    def __init__(self, loggers: list[Logger] | None = None, clock: Clock | None = None):
        super().__init__(clock)
        self._loggers: list[Logger] = list(loggers or [])

    @property
    def loggers(self) -> list[Logger]:
        return list(self._loggers)

    def add_logger(self, logger: Logger) -> None:
        self._loggers.append(logger)

    def log_line(self, level: Level, message: str) -> None:
        try:
            time, pid = self._clock.now(), self._clock.pid()
        except Exception:
            return
        targets = [
            logger for logger in self._loggers
            if not logger.is_level_set() or logger.is_enabled_for(level)
        ]
        self._dispatch(targets, time, pid, level, message)

    def write(self, time: datetime, pid: int, level: Level, message: str) -> None:
        self._dispatch(self._loggers, time, pid, level, message)

    @staticmethod
    def _dispatch(
        loggers: list[Logger], time: datetime, pid: int, level: Level, message: str,
    ) -> None:
        for logger in loggers:
            try:
                logger.write(time, pid, level, message)
            except Exception:
                continue
