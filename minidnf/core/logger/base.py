"""
Logger — abstract leveled logging used by every install stage.

A concrete logger only implements ``write()``: the sink that receives
one record (time, pid, level, message). Everything else — threshold
handling, lazy formatting, stamping — lives here.

Levels run from most to least severe:

    CRITICAL < ERROR < WARNING < NOTICE < INFO < DEBUG < TRACE

A logger has no threshold until ``set_level()`` is called. Until then
``get_level()`` raises and ``is_enabled_for()`` is False for every
level, so nothing is formatted or written.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from enum import IntEnum
from typing import Any, NamedTuple, Protocol

from minidnf.core.clock import SystemClock


class Level(IntEnum):
    """Log levels. Lower value = more severe."""

    CRITICAL = 0
    ERROR = 1
    WARNING = 2
    NOTICE = 3
    INFO = 4
    DEBUG = 5
    TRACE = 6


def level_to_str(level: int) -> str:
    """Upper-case level name, ``"UNDEFINED"`` for unknown values."""
    try:
        return Level(level).name
    except ValueError:
        return "UNDEFINED"


class LoggerLevelNotSetError(RuntimeError):
    """Raised by ``Logger.get_level()`` before a threshold was set."""

    def __init__(self) -> None:
        super().__init__("Logger level is not set")


class LogRecord(NamedTuple):
    """One log entry as handed to a sink."""

    time: datetime
    pid: int
    level: Level
    message: str


class Clock(Protocol):
    def now(self) -> datetime: ...

    def pid(self) -> int: ...


# A template is either a str.format() pattern or a thunk producing the text.
Template = str | Callable[[], str]


class Logger(ABC):
    """Abstract leveled logger.

    Subclasses implement ``write()``; the per-level methods and
    ``log()`` only format the message when the level is enabled.
    """

    def __init__(self, clock: Clock | None = None):
        self._level: Level | None = None
        self._clock: Clock = clock or SystemClock()

    # ── Threshold ───────────────────────────────────────────────

    def set_level(self, level: Level) -> None:
        """Set the least severe level that will still be written."""
        self._level = Level(level)

    def get_level(self) -> Level:
        """Return the threshold.

        Raises:
            LoggerLevelNotSetError: If ``set_level()`` was never called.
        """
        if self._level is None:
            raise LoggerLevelNotSetError()
        return self._level

    def is_level_set(self) -> bool:
        return self._level is not None

    def is_enabled_for(self, msg_level: Level) -> bool:
        """Whether a message of ``msg_level`` passes the threshold."""
        if self._level is None:
            return False
        return msg_level <= self._level

    # ── Per-level shortcuts ─────────────────────────────────────

    def critical(self, template: Template, *args: Any) -> None:
        self.log(Level.CRITICAL, template, *args)

    def error(self, template: Template, *args: Any) -> None:
        self.log(Level.ERROR, template, *args)

    def warning(self, template: Template, *args: Any) -> None:
        self.log(Level.WARNING, template, *args)

    def notice(self, template: Template, *args: Any) -> None:
        self.log(Level.NOTICE, template, *args)

    def info(self, template: Template, *args: Any) -> None:
        self.log(Level.INFO, template, *args)

    def debug(self, template: Template, *args: Any) -> None:
        self.log(Level.DEBUG, template, *args)

    def trace(self, template: Template, *args: Any) -> None:
        self.log(Level.TRACE, template, *args)

    # ── Entry points ────────────────────────────────────────────

    def log(self, level: Level, template: Template, *args: Any) -> None:
        """Format ``template`` with ``args`` and log it, if enabled.

        Arguments are not stringified when the level is suppressed.
        A template that fails to format is dropped.
        """
        if not self.is_enabled_for(level):
            return
        try:
            if callable(template):
                message = template()
            elif args:
                message = template.format(*args)
            else:
                message = template
        except Exception:
            return
        self.log_line(level, message)

    def log_line(self, level: Level, message: str) -> None:
        """Stamp a pre-formatted message and pass it to the sink.

        Never raises.
        """
        try:
            self.write(self._clock.now(), self._clock.pid(), level, message)
        except Exception:
            pass

    @abstractmethod
    def write(self, time: datetime, pid: int, level: Level, message: str) -> None:
        """Sink for one record.

        Called for any level; filtering is done by the callers through
        ``is_enabled_for()``.
        """
