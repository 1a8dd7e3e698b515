"""
Package model — one RPM-style package known to a repository.

Identity is the NEVRA: name, epoch, version, release, arch.
"""

from __future__ import annotations

import re

from pydantic import BaseModel

_VERSION_SPLIT = re.compile(r"(\d+|[A-Za-z]+)")


def version_key(version: str) -> tuple:
    """Sort key for version/release strings.

    Numeric segments compare as numbers and rank above alphabetic
    ones, so ``1.10 > 1.9`` and ``1.0 > 1.a``.
    """
    key: list[tuple[int, int | str]] = []
    for part in _VERSION_SPLIT.findall(version):
        if part.isdigit():
            key.append((1, int(part)))
        else:
            key.append((0, part))
    return tuple(key)


class Package(BaseModel):
    """A package available from a repository or installed on the system."""

    name: str
    epoch: int = 0
    version: str
    release: str = "1"
    arch: str = "noarch"
    repoid: str = ""
    summary: str = ""
    size: int = 0                   # download size in bytes
    location: str | None = None     # file path relative to the repo baseurl

    @property
    def evr(self) -> str:
        prefix = f"{self.epoch}:" if self.epoch else ""
        return f"{prefix}{self.version}-{self.release}"

    @property
    def nevra(self) -> str:
        return f"{self.name}-{self.evr}.{self.arch}"

    @property
    def nvra(self) -> str:
        return f"{self.name}-{self.version}-{self.release}.{self.arch}"

    def evr_key(self) -> tuple:
        """Comparable key: epoch, then version, then release."""
        return (self.epoch, version_key(self.version), version_key(self.release))

    def match_keys(self) -> list[str]:
        """The spellings a user pattern may match against."""
        return [
            self.name,
            f"{self.name}.{self.arch}",
            f"{self.name}-{self.version}",
            f"{self.name}-{self.version}-{self.release}",
            self.nvra,
            self.nevra,
        ]

    def __str__(self) -> str:
        return self.nevra
