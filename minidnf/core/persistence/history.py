"""
Transaction history — persisted records of install runs.

Records are stored as a JSON document in <persistdir>/history.json and
rewritten atomically on every change. A record is written for the first
time when it is started, and again when it is finished; nothing is
persisted for a run that never reached execution.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from minidnf.core.models.transaction import (
    TransactionItem,
    TransactionRecord,
    TransactionState,
)
from minidnf.core.persistence.state_file import atomic_write_text

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_FILE = "history.json"


class TransactionHandle:
    """Mutable view of one record, owned by a single install run.

    Each mutating call is validated by the record and, for ``start()``
    and ``finish()``, persisted immediately.
    """

    def __init__(self, store: HistoryStore, record: TransactionRecord):
        self._store = store
        self._record = record

    @property
    def record(self) -> TransactionRecord:
        return self._record

    @property
    def id(self) -> int:
        return self._record.id

    def add_items(self, items: list[TransactionItem]) -> None:
        """Attach items to the record, linking each to its id."""
        for item in items:
            item.transaction_id = self._record.id
            self._record.items.append(item)

    def set_start(self, timestamp: int) -> None:
        self._record.set_start(timestamp)

    def start(self) -> None:
        self._record.start()
        self._store.save(self._record)

    def set_end(self, timestamp: int) -> None:
        self._record.set_end(timestamp)

    def finish(self, state: TransactionState) -> None:
        self._record.finish(state)
        self._store.save(self._record)


class HistoryStore:
    """JSON-file backed store of ``TransactionRecord``s."""

    def __init__(self, path: Path):
        self._path = path

    @classmethod
    def in_dir(cls, persistdir: Path) -> HistoryStore:
        return cls(persistdir / DEFAULT_HISTORY_FILE)

    @property
    def path(self) -> Path:
        return self._path

    def records(self) -> list[TransactionRecord]:
        """All persisted records, oldest first."""
        if not self._path.is_file():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Cannot read history %s: %s", self._path, e)
            return []
        if not isinstance(data, dict):
            logger.warning("Cannot read history %s: expected a mapping", self._path)
            return []

        records = []
        for raw in data.get("transactions", []):
            try:
                records.append(TransactionRecord.model_validate(raw))
            except Exception as e:
                logger.warning("Skipping corrupt history entry: %s", e)
        return sorted(records, key=lambda r: r.id)

    def get(self, transaction_id: int) -> TransactionRecord | None:
        for record in self.records():
            if record.id == transaction_id:
                return record
        return None

    def last(self) -> TransactionRecord | None:
        records = self.records()
        return records[-1] if records else None

    def create_record(self, cmdline: str = "") -> TransactionHandle:
        """Allocate the next record id. Nothing is written yet."""
        last = self.last()
        record = TransactionRecord(id=(last.id + 1) if last else 1, cmdline=cmdline)
        logger.debug("Created transaction record %d", record.id)
        return TransactionHandle(self, record)

    def save(self, record: TransactionRecord) -> None:
        """Insert or replace ``record`` and rewrite the history file."""
        records = {r.id: r for r in self.records()}
        records[record.id] = record
        data = {
            "schema_version": 1,
            "transactions": [
                r.model_dump(mode="json") for r in sorted(records.values(), key=lambda r: r.id)
            ],
        }
        atomic_write_text(
            self._path,
            json.dumps(data, indent=2, ensure_ascii=False) + "\n",
            prefix=".history_",
        )
        logger.debug("Transaction %d saved (%s)", record.id, record.state.value)
