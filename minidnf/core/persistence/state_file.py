"""
State file persistence — atomic read/write for the installed-package view.

The installed set is stored as JSON in <persistdir>/installed.json.
Writes are atomic (write to temp file, then rename) to prevent
corruption if the process crashes mid-write.
"""

from __future__ import annotations

import json
import logging
import tempfile
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

from minidnf.core.models.package import Package

logger = logging.getLogger(__name__)

DEFAULT_STATE_FILE = "installed.json"


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class InstalledState(BaseModel):
    """Packages currently installed, keyed by name."""

    schema_version: int = 1
    updated_at: str = Field(default_factory=_now_iso)
    packages: dict[str, Package] = Field(default_factory=dict)

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = _now_iso()

    def get(self, name: str) -> Package | None:
        return self.packages.get(name)

    def add(self, package: Package) -> None:
        """Install ``package``, replacing any installed version of it."""
        self.packages[package.name] = package

    def remove(self, name: str) -> None:
        self.packages.pop(name, None)


def default_state_path(persistdir: Path) -> Path:
    """Get the installed-state file path under a persist directory."""
    return persistdir / DEFAULT_STATE_FILE


def atomic_write_text(path: Path, content: str, prefix: str = ".state_") -> None:
    """Write ``content`` to ``path`` via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=prefix, suffix=".tmp")
    tmp = Path(tmp_path)
    try:
        with open(fd, "w", encoding="utf-8") as f:
            f.write(content)
        tmp.replace(path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def load_state(path: Path) -> InstalledState:
    """Load the installed-package state from a JSON file.

    Args:
        path: Path to the state JSON file.

    Returns:
        InstalledState. If the file doesn't exist or is unreadable,
        returns a fresh (empty) state.
    """
    if not path.is_file():
        logger.info("No state file at %s — starting fresh", path)
        return InstalledState()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        state = InstalledState.model_validate(data)
        logger.debug("Loaded installed state from %s (%d packages)", path, len(state.packages))
        return state
    except json.JSONDecodeError as e:
        logger.warning("Corrupt state file %s: %s — starting fresh", path, e)
        return InstalledState()
    except Exception as e:
        logger.warning("Cannot load state from %s: %s — starting fresh", path, e)
        return InstalledState()


def save_state(state: InstalledState, path: Path) -> None:
    """Save the installed-package state (atomic write).

    Args:
        state: The state to save.
        path: Target path for the state file.
    """
    state.touch()
    content = json.dumps(state.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"
    try:
        atomic_write_text(path, content)
        logger.debug("State saved to %s", path)
    except Exception as e:
        logger.error("Failed to save state to %s: %s", path, e)
        raise
