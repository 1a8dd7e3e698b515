"""
History use case — list persisted install transactions.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from minidnf.core.config.loader import ConfigError, load_config
from minidnf.core.models.transaction import TransactionRecord
from minidnf.core.persistence.history import HistoryStore


@dataclass
class HistoryResult:
    records: list[TransactionRecord] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        return {"transactions": [r.model_dump(mode="json") for r in self.records]}


def list_history(config_path: Path | None = None, limit: int = 20) -> HistoryResult:
    """Most recent ``limit`` transactions, newest first."""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        return HistoryResult(error=str(e))

    records = HistoryStore.in_dir(config.persistdir).records()
    return HistoryResult(records=list(reversed(records))[:limit])
