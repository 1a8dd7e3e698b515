"""
Catalog backend — file-based repositories and installed-package database.

Implements every pipeline collaborator except the UI on top of plain
files, so the CLI works end to end without an RPM stack:

    repositories   declared in minidnf.yml (inline or metadata YAML)
    installed db   <persistdir>/installed.json
    download       copies package files into <cachedir>/<repoid>/packages/

Resolution here is name matching plus "newest version wins"; there is
no dependency solving.
"""

from __future__ import annotations

import fnmatch
import logging
import shutil
from pathlib import Path

from minidnf.adapters.base import (
    Downloader,
    LoadFlags,
    RepositoryLoader,
    Resolver,
    TransactionRunner,
)
from minidnf.core.config.loader import ConfigError, load_repo_metadata
from minidnf.core.engine.goal import GoalAction, GoalJob, ResolutionOutcome
from minidnf.core.models.config import MainConfig
from minidnf.core.models.package import Package
from minidnf.core.models.receipt import Receipt
from minidnf.core.models.transaction import ItemAction, TransactionItem
from minidnf.core.persistence.state_file import (
    InstalledState,
    default_state_path,
    load_state,
    save_state,
)

logger = logging.getLogger(__name__)


def match_packages(pattern: str, packages: list[Package]) -> list[Package]:
    """Packages with any spelling (name, name.arch, NEVRA, ...) matching ``pattern``."""
    return [
        pkg for pkg in packages
        if any(fnmatch.fnmatchcase(key, pattern) for key in pkg.match_keys())
    ]


def newest_per_name(packages: list[Package]) -> list[Package]:
    """Keep the highest EVR of each package name, in first-seen name order."""
    best: dict[str, Package] = {}
    for pkg in packages:
        current = best.get(pkg.name)
        if current is None or pkg.evr_key() > current.evr_key():
            best[pkg.name] = pkg
    return list(best.values())


class CatalogBackend(RepositoryLoader, Resolver, Downloader, TransactionRunner):
    """Repositories, resolver, downloader, and runner backed by local files."""

    def __init__(self, config: MainConfig):
        self._config = config
        self._state_path = default_state_path(config.persistdir)
        self._installed: InstalledState | None = None
        self._available: list[Package] = []
        self._loaded_flags = LoadFlags.NONE

    @property
    def installed(self) -> InstalledState:
        if self._installed is None:
            raise RuntimeError("Installed-package view is not active")
        return self._installed

    @property
    def available(self) -> list[Package]:
        return list(self._available)

    @property
    def loaded_flags(self) -> LoadFlags:
        return self._loaded_flags

    # ── Repositories ────────────────────────────────────────────

    def activate_local_view(self) -> None:
        self._installed = load_state(self._state_path)
        logger.debug("System repository: %d installed package(s)", len(self._installed.packages))

    def load_remote(self, flags: LoadFlags) -> Receipt:
        available: list[Package] = []
        loaded: list[str] = []

        for repo in self._config.enabled_repos():
            packages = list(repo.packages)
            if repo.metadata:
                try:
                    packages.extend(load_repo_metadata(Path(repo.metadata)))
                except ConfigError as e:
                    return Receipt.failure("load_repos", f"repository '{repo.id}': {e}")

            for pkg in packages:
                available.append(pkg.model_copy(update={"repoid": repo.id}))
            loaded.append(repo.id)
            logger.debug("Repository '%s': %d package(s)", repo.id, len(packages))

        self._available = available
        self._loaded_flags = flags
        return Receipt.success(
            "load_repos",
            output=f"{len(loaded)} repositories, {len(available)} packages",
            metadata={"repos": loaded, "flags": str(flags)},
        )

    # ── Resolution ──────────────────────────────────────────────

    def resolve(self, jobs: list[GoalJob], strict: bool = False) -> ResolutionOutcome:
        problems: list[str] = []
        items: dict[str, TransactionItem] = {}

        for job in jobs:
            if job.action != GoalAction.INSTALL:
                problems.append(f"Unsupported goal action: {job.action}")
                continue

            matches = match_packages(job.pattern, self._available)
            if not matches:
                problems.append(f"No match for argument: {job.pattern}")
                continue

            for pkg in newest_per_name(matches):
                if pkg.name in items:
                    continue
                item = self._plan_install(pkg, strict, problems)
                if item is not None:
                    items[pkg.name] = item

        if problems:
            return ResolutionOutcome.with_problems(problems)
        return ResolutionOutcome.clean(list(items.values()))

    def _plan_install(
        self, pkg: Package, strict: bool, problems: list[str],
    ) -> TransactionItem | None:
        installed = self.installed.get(pkg.name)
        if installed is None:
            return TransactionItem(package=pkg, action=ItemAction.INSTALL)

        if pkg.evr_key() > installed.evr_key():
            return TransactionItem(package=pkg, action=ItemAction.UPGRADE, replaces=installed)

        message = f"Package {installed.nevra} is already installed."
        if strict:
            problems.append(message)
        else:
            logger.info(message)
        return None

    # ── Download ────────────────────────────────────────────────

    def fetch(self, items: list[TransactionItem]) -> Receipt:
        fetched: list[str] = []
        for item in items:
            pkg = item.package
            if not pkg.location:
                continue

            repo = self._config.get_repo(pkg.repoid)
            if repo is None:
                return Receipt.failure("download", f"{pkg.nevra}: unknown repository '{pkg.repoid}'")

            source = Path(repo.baseurl) / pkg.location
            target = self._config.cachedir / pkg.repoid / "packages" / Path(pkg.location).name
            try:
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, target)
            except OSError as e:
                return Receipt.failure("download", f"{pkg.nevra}: {e}")
            fetched.append(str(target))

        return Receipt.success("download", output=f"{len(fetched)} file(s)", metadata={"files": fetched})

    # ── Execution ───────────────────────────────────────────────

    def apply(self, items: list[TransactionItem]) -> Receipt:
        state = self.installed.model_copy(deep=True)
        for item in items:
            if item.action == ItemAction.REMOVE:
                state.remove(item.package.name)
            else:
                state.add(item.package)
        try:
            save_state(state, self._state_path)
        except OSError as e:
            return Receipt.failure("apply", str(e))
        self._installed = state
        return Receipt.success("apply", output=f"{len(items)} package(s) changed")
