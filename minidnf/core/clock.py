"""
Clock and process identity — the only place that samples wall-clock
time and the current process id.

Loggers and the install pipeline take a clock object instead of calling
``datetime.now()`` / ``os.getpid()`` directly, so tests can pass a
fixed one.
"""

from __future__ import annotations

import os
from datetime import UTC, datetime


class SystemClock:
    """Real wall clock and real process id."""

    def now(self) -> datetime:
        """Current UTC time (timezone-aware)."""
        return datetime.now(UTC)

    def timestamp(self) -> int:
        """Current time as whole seconds since the epoch."""
        return int(self.now().timestamp())

    def pid(self) -> int:
        return os.getpid()
