"""
Mock backend — test double for every pipeline collaborator.

By default everything succeeds: repositories load, each pattern
resolves to one install item, downloads and execution succeed, the
preview has content and the user says yes. Each behaviour can be
overridden, and every call is recorded in ``calls``.
"""

from __future__ import annotations

from minidnf.adapters.base import (
    Downloader,
    LoadFlags,
    RepositoryLoader,
    Resolver,
    TransactionRunner,
    TransactionUI,
)
from minidnf.core.engine.goal import GoalJob, ResolutionOutcome
from minidnf.core.models.package import Package
from minidnf.core.models.receipt import Receipt
from minidnf.core.models.transaction import TransactionItem


class MockBackend(RepositoryLoader, Resolver, Downloader, TransactionRunner, TransactionUI):
    """Universal mock for tests."""

    def __init__(self) -> None:
        self.calls: list[str] = []
        self.loaded_flags: LoadFlags | None = None
        self.resolved_jobs: list[GoalJob] = []
        self.strict: bool | None = None
        self.output: list[str] = []

        self._outcome: ResolutionOutcome | None = None
        self._failures: dict[str, str] = {}
        self._apply_exception: Exception | None = None
        self._preview = True
        self._confirm = True

    # ── Configuration ───────────────────────────────────────────

    def set_outcome(self, outcome: ResolutionOutcome) -> None:
        """Return ``outcome`` from resolve() instead of one item per job."""
        self._outcome = outcome

    def set_failure(self, operation: str, error: str = "Mock failure") -> None:
        """Make ``load_repos``, ``download`` or ``apply`` fail."""
        self._failures[operation] = error

    def raise_on_apply(self, exc: Exception) -> None:
        self._apply_exception = exc

    def set_preview(self, has_content: bool) -> None:
        self._preview = has_content

    def set_confirm(self, answer: bool) -> None:
        self._confirm = answer

    def count(self, call: str) -> int:
        return self.calls.count(call)

    def _receipt(self, operation: str) -> Receipt:
        if operation in self._failures:
            return Receipt.failure(operation, self._failures[operation])
        return Receipt.success(operation, output="[mock]")

    # ── Collaborators ───────────────────────────────────────────

    def activate_local_view(self) -> None:
        self.calls.append("activate_local_view")

    def load_remote(self, flags: LoadFlags) -> Receipt:
        self.calls.append("load_remote")
        self.loaded_flags = flags
        return self._receipt("load_repos")

    def resolve(self, jobs: list[GoalJob], strict: bool = False) -> ResolutionOutcome:
        self.calls.append("resolve")
        self.resolved_jobs = list(jobs)
        self.strict = strict
        if self._outcome is not None:
            return self._outcome
        return ResolutionOutcome.clean([
            TransactionItem(package=Package(name=job.pattern, version="1.0", repoid="mock"))
            for job in jobs
        ])

    def fetch(self, items: list[TransactionItem]) -> Receipt:
        self.calls.append("fetch")
        return self._receipt("download")

    def apply(self, items: list[TransactionItem]) -> Receipt:
        self.calls.append("apply")
        if self._apply_exception is not None:
            raise self._apply_exception
        return self._receipt("apply")

    def render_problems(self, text: str) -> None:
        self.calls.append("render_problems")
        self.output.append(text)

    def render_preview(self, items: list[TransactionItem]) -> bool:
        self.calls.append("render_preview")
        return self._preview

    def confirm(self) -> bool:
        self.calls.append("confirm")
        return self._confirm

    def notify(self, message: str) -> None:
        self.calls.append("notify")
        self.output.append(message)

    def reset(self) -> None:
        """Clear the call log and captured output."""
        self.calls.clear()
        self.output.clear()
