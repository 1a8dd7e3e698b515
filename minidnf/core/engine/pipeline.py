"""
Install pipeline — drives one install request from patterns to a
finished history record.

Flow (strict order, each stage runs at most once):

    INIT
      → REPOSITORIES_READY   installed view + enabled repos loaded
      → GOAL_BUILT           one install job per pattern
      → RESOLVED             resolver returned a plan or problems (problems → NO_CHANGE)
      → CONFIRMED            preview shown and accepted (or → NO_CHANGE)
      → DOWNLOADED           all packages fetched
      → COMMITTED            history record started
      → FINISHED             transaction applied, record finished (DONE)

Soft exits (resolution problems, nothing to do, user said no) end in
NO_CHANGE with a ``reason``. Collaborator failures end in FAILED with
the collaborator's error. Once execution has been attempted the record
is always finished, whatever the runner reports or raises.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Protocol

from minidnf.adapters.base import (
    Downloader,
    LoadFlags,
    RepositoryLoader,
    Resolver,
    TransactionRunner,
    TransactionUI,
)
from minidnf.core.clock import SystemClock
from minidnf.core.engine.goal import ResolutionOutcome, build_goal
from minidnf.core.logger import Logger
from minidnf.core.models.receipt import Receipt
from minidnf.core.models.transaction import (
    TransactionItem,
    TransactionRecord,
    TransactionState,
)
from minidnf.core.persistence.history import HistoryStore, TransactionHandle

# Metadata loaded for install: file lists, delta info, update info, other.
INSTALL_LOAD_FLAGS = LoadFlags.FILELISTS | LoadFlags.PRESTO | LoadFlags.UPDATEINFO | LoadFlags.OTHER

ABORTED_MESSAGE = "Operation aborted."


class PipelineState(StrEnum):
    INIT = "init"
    REPOSITORIES_READY = "repositories_ready"
    GOAL_BUILT = "goal_built"
    RESOLVED = "resolved"
    CONFIRMED = "confirmed"
    DOWNLOADED = "downloaded"
    COMMITTED = "committed"
    FINISHED = "finished"
    NO_CHANGE = "no_change"
    FAILED = "failed"


class NoChangeReason(StrEnum):
    PROBLEMS = "problems"
    NOTHING_TO_DO = "nothing_to_do"
    ABORTED = "aborted"


TERMINAL_STATES = frozenset({PipelineState.FINISHED, PipelineState.NO_CHANGE, PipelineState.FAILED})

_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.INIT: frozenset({PipelineState.REPOSITORIES_READY, PipelineState.FAILED}),
    PipelineState.REPOSITORIES_READY: frozenset({PipelineState.GOAL_BUILT}),
    PipelineState.GOAL_BUILT: frozenset({PipelineState.RESOLVED}),
    PipelineState.RESOLVED: frozenset({PipelineState.CONFIRMED, PipelineState.NO_CHANGE}),
    PipelineState.CONFIRMED: frozenset({PipelineState.DOWNLOADED, PipelineState.FAILED}),
    PipelineState.DOWNLOADED: frozenset({PipelineState.COMMITTED}),
    PipelineState.COMMITTED: frozenset({PipelineState.FINISHED, PipelineState.FAILED}),
}


class PipelineStateError(RuntimeError):
    """Raised on a transition the pipeline does not allow."""


class Clock(Protocol):
    def timestamp(self) -> int: ...


@dataclass
class InstallSession:
    """Collaborators for one install run."""

    repositories: RepositoryLoader
    resolver: Resolver
    downloader: Downloader
    runner: TransactionRunner
    history: HistoryStore
    ui: TransactionUI
    logger: Logger
    clock: Clock = field(default_factory=SystemClock)


@dataclass
class InstallResult:
    """What an install run ended with."""

    state: PipelineState = PipelineState.INIT
    reason: NoChangeReason | None = None
    problems: list[str] = field(default_factory=list)
    items: list[TransactionItem] = field(default_factory=list)
    record: TransactionRecord | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.state in (PipelineState.FINISHED, PipelineState.NO_CHANGE)

    @property
    def changed(self) -> bool:
        return self.state == PipelineState.FINISHED

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"state": self.state.value}
        if self.reason:
            result["reason"] = self.reason.value
        if self.error:
            result["error"] = self.error
        if self.problems:
            result["problems"] = list(self.problems)
        result["items"] = [
            {
                "action": item.action.value,
                "package": item.package.nevra,
                "repoid": item.package.repoid,
            }
            for item in self.items
        ]
        if self.record is not None:
            result["transaction"] = self.record.model_dump(mode="json", exclude={"items"})
        return result


class InstallPipeline:
    """Single-use driver for one install request.

    Usage:
        result = InstallPipeline(session).run(["foo", "bar-1.0*"])
    """

    def __init__(self, session: InstallSession):
        self._session = session
        self._log = session.logger
        self._visited: set[PipelineState] = {PipelineState.INIT}
        self.result = InstallResult()

    @property
    def state(self) -> PipelineState:
        return self.result.state

    def run(self, patterns: list[str], cmdline: str = "") -> InstallResult:
        """Run every stage in order until a terminal state is reached."""
        if self.state != PipelineState.INIT:
            raise PipelineStateError("An install pipeline can only be run once")
        if not patterns:
            raise ValueError("At least one package pattern is required")

        session = self._session
        self._log.debug("Install requested for: {}", ", ".join(patterns))

        # ── Repositories ────────────────────────────────────────
        session.repositories.activate_local_view()
        receipt = session.repositories.load_remote(INSTALL_LOAD_FLAGS)
        if not self._check(receipt, "Failed to load repositories"):
            return self.result
        self._transition(PipelineState.REPOSITORIES_READY)

        # ── Goal ────────────────────────────────────────────────
        goal = build_goal(patterns)
        self._transition(PipelineState.GOAL_BUILT)

        # ── Resolve ─────────────────────────────────────────────
        outcome = goal.resolve(session.resolver, strict=False)
        if not self._handle_outcome(outcome):
            return self.result
        items = self.result.items

        # ── Preview + confirm ───────────────────────────────────
        if not session.ui.render_preview(items):
            self._stop(NoChangeReason.NOTHING_TO_DO)
            return self.result
        if not session.ui.confirm():
            session.ui.notify(ABORTED_MESSAGE)
            self._stop(NoChangeReason.ABORTED)
            return self.result
        self._transition(PipelineState.CONFIRMED)

        # ── Download ────────────────────────────────────────────
        receipt = session.downloader.fetch(items)
        if not self._check(receipt, "Failed to download packages"):
            return self.result
        self._transition(PipelineState.DOWNLOADED)

        # ── Commit ──────────────────────────────────────────────
        self._commit(items, cmdline)
        return self.result

    def _handle_outcome(self, outcome: ResolutionOutcome) -> bool:
        """Record the resolution outcome; False when the run ends here."""
        self._transition(PipelineState.RESOLVED)
        if outcome.has_problems:
            self.result.problems = list(outcome.problems)
            self._log.info("Resolution reported {} problem(s)", len(outcome.problems))
            self._session.ui.render_problems(outcome.format_problems())
            self._stop(NoChangeReason.PROBLEMS)
            return False

        self.result.items = list(outcome.items)
        self._log.info("Resolved {} transaction item(s)", len(outcome.items))
        return True

    def _commit(self, items: list[TransactionItem], cmdline: str) -> None:
        session = self._session
        handle = session.history.create_record(cmdline)
        handle.add_items(items)
        handle.set_start(session.clock.timestamp())
        handle.start()
        self.result.record = handle.record
        self._transition(PipelineState.COMMITTED)
        self._log.notice("Transaction {} started", handle.id)

        try:
            receipt = session.runner.apply(items)
        except BaseException:
            # The runner's exception wins over a bookkeeping failure.
            try:
                self._finish_record(handle)
            except Exception as e:
                self._log.error("Cannot finish transaction {}: {}", handle.id, e)
            raise
        self._finish_record(handle)

        if self._check(receipt, "Transaction failed"):
            self._transition(PipelineState.FINISHED)

    def _finish_record(self, handle: TransactionHandle) -> None:
        clock = self._session.clock
        handle.set_end(max(clock.timestamp(), handle.record.dt_begin or 0))
        handle.finish(TransactionState.DONE)
        self._log.notice("Transaction {} finished", handle.id)

    def _check(self, receipt: Receipt, what: str) -> bool:
        """Pass through ok receipts; turn failed ones into a FAILED result."""
        if receipt.ok:
            return True
        self.result.error = f"{what}: {receipt.error}" if receipt.error else what
        self._log.error("{}", self.result.error)
        self._transition(PipelineState.FAILED)
        return False

    def _stop(self, reason: NoChangeReason) -> None:
        self.result.reason = reason
        self._log.info("No changes made ({})", reason.value)
        self._transition(PipelineState.NO_CHANGE)

    def _transition(self, new_state: PipelineState) -> None:
        old = self.state
        if new_state not in _TRANSITIONS.get(old, frozenset()) or new_state in self._visited:
            raise PipelineStateError(f"Illegal transition {old.value} → {new_state.value}")
        self._visited.add(new_state)
        self.result.state = new_state
        self._log.debug("Install pipeline: {} → {}", old.value, new_state.value)


def run_install(session: InstallSession, patterns: list[str], cmdline: str = "") -> InstallResult:
    """Convenience wrapper: build a pipeline and run it."""
    return InstallPipeline(session).run(patterns, cmdline=cmdline)
