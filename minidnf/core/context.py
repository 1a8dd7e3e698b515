"""
Process context — the logger every core service reports through.

The logger is set ONCE at startup by the entry point:

    - CLI:    main.py   → context.set_logger(router)
    - Tests:  fixtures  → context.set_logger(MemoryLogger())

Module-level singleton (not a class). Until an entry point sets one,
``get_logger()`` hands out a ``StdlibLogger`` with no threshold, which
writes nothing.
"""

from __future__ import annotations

from minidnf.core.logger import Logger, StdlibLogger

_logger: Logger | None = None


def set_logger(logger: Logger) -> None:
    """Register the process-wide logger."""
    global _logger
    _logger = logger


def get_logger() -> Logger:
    """Return the process-wide logger, creating the default one if unset."""
    global _logger
    if _logger is None:
        _logger = StdlibLogger()
    return _logger


def reset_logger() -> None:
    """Forget the registered logger."""
    global _logger
    _logger = None
