"""
Collaborator contracts — what the install pipeline needs from the outside.

The pipeline never talks to a repository, solver, downloader, or RPM
layer directly; it only sees these interfaces:

    RepositoryLoader   installed-package view + enabled remote repositories
    Resolver           turns goal jobs into a plan or a problem list
    Downloader         fetches the packages of a plan
    TransactionRunner  applies a plan to the system
    TransactionUI      shows problems / preview, asks for confirmation

Operations that can fail return a ``Receipt``. They do not raise for
expected failures (unreachable repository, missing file); anything
they do raise propagates through the pipeline unchanged.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Flag, auto

from minidnf.core.engine.goal import GoalJob, ResolutionOutcome
from minidnf.core.models.receipt import Receipt
from minidnf.core.models.transaction import TransactionItem


class LoadFlags(Flag):
    """Auxiliary metadata to load along with the primary repository data."""

    NONE = 0
    FILELISTS = auto()
    PRESTO = auto()       # delta RPM info
    UPDATEINFO = auto()
    OTHER = auto()        # changelogs and other per-package metadata


class RepositoryLoader(ABC):
    """Makes installed and available packages visible to the resolver."""

    @abstractmethod
    def activate_local_view(self) -> None:
        """Load the installed-package ("system") repository."""

    @abstractmethod
    def load_remote(self, flags: LoadFlags) -> Receipt:
        """Load every enabled remote repository with the given metadata."""


class Resolver(ABC):
    @abstractmethod
    def resolve(self, jobs: list[GoalJob], strict: bool = False) -> ResolutionOutcome:
        """Resolve jobs into transaction items, or report problems."""


class Downloader(ABC):
    @abstractmethod
    def fetch(self, items: list[TransactionItem]) -> Receipt:
        """Download all packages referenced by ``items``.

        Either everything is fetched, or a failed receipt is returned.
        """


class TransactionRunner(ABC):
    @abstractmethod
    def apply(self, items: list[TransactionItem]) -> Receipt:
        """Apply the package changes to the system."""


class TransactionUI(ABC):
    """User-facing output and confirmation."""

    @abstractmethod
    def render_problems(self, text: str) -> None:
        """Show resolution problems."""

    @abstractmethod
    def render_preview(self, items: list[TransactionItem]) -> bool:
        """Show the planned transaction.

        Returns:
            False if there was nothing to show.
        """

    @abstractmethod
    def confirm(self) -> bool:
        """Ask whether to proceed. Anything but an explicit yes is False."""

    @abstractmethod
    def notify(self, message: str) -> None:
        """Show a neutral one-line notice."""
