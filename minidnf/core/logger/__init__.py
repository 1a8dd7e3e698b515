"""
Leveled logging abstraction.

    from minidnf.core.logger import Level, MemoryLogger

    log = MemoryLogger()
    log.set_level(Level.INFO)
    log.info("Installing {} package(s)", 3)
"""

from minidnf.core.logger.base import (
    Level,
    Logger,
    LoggerLevelNotSetError,
    LogRecord,
    level_to_str,
)
from minidnf.core.logger.sinks import (
    FileLineSink,
    ListLineSink,
    LogRouter,
    MemoryLogger,
    StdlibLogger,
    StreamLineSink,
    StringLogger,
    format_line,
)

__all__ = [
    "FileLineSink",
    "Level",
    "ListLineSink",
    "LogRecord",
    "LogRouter",
    "Logger",
    "LoggerLevelNotSetError",
    "MemoryLogger",
    "StdlibLogger",
    "StreamLineSink",
    "StringLogger",
    "format_line",
    "level_to_str",
]
