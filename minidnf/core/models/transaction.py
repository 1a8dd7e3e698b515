"""
Transaction models — planned package changes and their history record.

A ``TransactionItem`` is one package action produced by resolution.
A ``TransactionRecord`` is the persisted audit entry for one install run.

Record lifecycle (each step at most once):

    NEW ──set_start/start──▶ STARTED ──set_end/finish──▶ DONE

Invariants enforced here:
    - dt_end >= dt_begin
    - a terminal state is only set once dt_end is set
    - a finished record is never modified again
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from minidnf.core.models.package import Package


class TransactionStateError(RuntimeError):
    """Raised when a record is mutated out of order."""


class TransactionState(StrEnum):
    NEW = "new"
    STARTED = "started"
    DONE = "done"


TERMINAL_STATES = frozenset({TransactionState.DONE})


class ItemAction(StrEnum):
    INSTALL = "install"
    UPGRADE = "upgrade"
    REMOVE = "remove"


class ItemReason(StrEnum):
    USER = "user"
    DEPENDENCY = "dependency"


class TransactionItem(BaseModel):
    """One planned package change."""

    package: Package
    action: ItemAction = ItemAction.INSTALL
    reason: ItemReason = ItemReason.USER
    replaces: Package | None = None      # the installed package an upgrade replaces
    transaction_id: int | None = None    # set once linked to a record

    def __str__(self) -> str:
        return f"{self.action.value} {self.package.nevra}"


class TransactionRecord(BaseModel):
    """Persisted history entry for one install run."""

    id: int
    cmdline: str = ""
    dt_begin: int | None = None     # seconds since the epoch
    dt_end: int | None = None
    state: TransactionState = TransactionState.NEW
    items: list[TransactionItem] = Field(default_factory=list)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def set_start(self, timestamp: int) -> None:
        if self.state != TransactionState.NEW:
            raise TransactionStateError(
                f"Transaction {self.id}: start time can only be set before start()"
            )
        self.dt_begin = timestamp

    def start(self) -> None:
        if self.state != TransactionState.NEW:
            raise TransactionStateError(f"Transaction {self.id} already started")
        if self.dt_begin is None:
            raise TransactionStateError(f"Transaction {self.id}: start time not set")
        self.state = TransactionState.STARTED

    def set_end(self, timestamp: int) -> None:
        if self.state != TransactionState.STARTED:
            raise TransactionStateError(
                f"Transaction {self.id}: end time can only be set on a started transaction"
            )
        assert self.dt_begin is not None
        if timestamp < self.dt_begin:
            raise TransactionStateError(
                f"Transaction {self.id}: end time {timestamp} precedes start {self.dt_begin}"
            )
        self.dt_end = timestamp

    def finish(self, state: TransactionState) -> None:
        if state not in TERMINAL_STATES:
            raise TransactionStateError(f"Not a terminal state: {state}")
        if self.state != TransactionState.STARTED:
            raise TransactionStateError(f"Transaction {self.id} is not running")
        if self.dt_end is None:
            raise TransactionStateError(f"Transaction {self.id}: end time not set")
        self.state = state
