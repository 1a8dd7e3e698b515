"""
Goal — the set of package requests submitted to the resolver.

The orchestrator adds one install job per user pattern, in command-line
order, then resolves the goal once. Job order only affects the order
diagnostics are reported in.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from minidnf.core.models.transaction import TransactionItem

if TYPE_CHECKING:
    from minidnf.adapters.base import Resolver


class GoalAction(StrEnum):
    INSTALL = "install"


@dataclass(frozen=True)
class GoalJob:
    """One request: do ``action`` for packages matching ``pattern``."""

    action: GoalAction
    pattern: str


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of resolving a goal: either a plan or a list of problems.

    Use the ``clean()`` / ``with_problems()`` constructors; exactly one
    of ``items`` and ``problems`` carries data.
    """

    items: tuple[TransactionItem, ...] = ()
    problems: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if self.items and self.problems:
            raise ValueError("A resolution outcome cannot carry both items and problems")

    @classmethod
    def clean(cls, items: list[TransactionItem]) -> ResolutionOutcome:
        return cls(items=tuple(items))

    @classmethod
    def with_problems(cls, problems: list[str]) -> ResolutionOutcome:
        if not problems:
            raise ValueError("with_problems() needs at least one problem")
        return cls(problems=tuple(problems))

    @property
    def has_problems(self) -> bool:
        return bool(self.problems)

    def format_problems(self) -> str:
        """Render problems for the user.

        One problem prints as ``Problem: ...``; several are numbered
        ``Problem 1: ...``, ``Problem 2: ...``.
        """
        if len(self.problems) == 1:
            return f"Problem: {self.problems[0]}"
        return "\n".join(
            f"Problem {i}: {text}" for i, text in enumerate(self.problems, start=1)
        )


@dataclass
class Goal:
    """Accumulates jobs for a single resolution."""

    jobs: list[GoalJob] = field(default_factory=list)

    def add_install(self, pattern: str) -> None:
        """Request installation of packages matching ``pattern``."""
        self.jobs.append(GoalJob(GoalAction.INSTALL, pattern))

    @property
    def patterns(self) -> list[str]:
        return [job.pattern for job in self.jobs]

    def resolve(self, resolver: Resolver, strict: bool = False) -> ResolutionOutcome:
        """Submit all jobs to ``resolver``.

        Args:
            resolver: The resolution engine.
            strict: Treat soft problems (e.g. a request that is already
                satisfied) as errors instead of skipping them.
        """
        return resolver.resolve(list(self.jobs), strict=strict)


def build_goal(patterns: list[str]) -> Goal:
    """Create a goal with one install job per pattern, in order."""
    goal = Goal()
    for pattern in patterns:
        goal.add_install(pattern)
    return goal
