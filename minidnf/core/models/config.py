"""
Configuration models — the validated contents of minidnf.yml.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

from minidnf.core.models.package import Package


class RepoConfig(BaseModel):
    """One repository declaration.

    Packages are listed inline or in a separate ``metadata`` YAML file
    (a mapping with a ``packages`` list). ``baseurl`` is the directory
    package ``location`` paths are relative to.
    """

    id: str
    name: str = ""
    enabled: bool = True
    baseurl: str = ""
    metadata: str | None = None
    packages: list[Package] = Field(default_factory=list)


class MainConfig(BaseModel):
    """Root configuration."""

    installroot: Path = Path("/")
    cachedir: Path = Path(".cache/minidnf")
    persistdir: Path = Path(".state")
    logfile: Path | None = None
    assumeyes: bool = False
    assumeno: bool = False
    repos: list[RepoConfig] = Field(default_factory=list)

    def enabled_repos(self) -> list[RepoConfig]:
        return [r for r in self.repos if r.enabled]

    def get_repo(self, repoid: str) -> RepoConfig | None:
        for repo in self.repos:
            if repo.id == repoid:
                return repo
        return None
