"""
Shared test fixtures and configuration.
"""

import textwrap
from datetime import UTC, datetime
from pathlib import Path

import pytest

from minidnf.adapters.mock import MockBackend
from minidnf.core import context
from minidnf.core.engine.pipeline import InstallSession
from minidnf.core.logger import Level, MemoryLogger
from minidnf.core.persistence.history import HistoryStore


class FakeClock:
    """Deterministic clock: every timestamp() call advances one second."""

    def __init__(self, start: int = 1_600_000_000, pid: int = 4242):
        self.current = start
        self._pid = pid

    def now(self) -> datetime:
        return datetime.fromtimestamp(self.current, UTC)

    def timestamp(self) -> int:
        value = self.current
        self.current += 1
        return value

    def pid(self) -> int:
        return self._pid


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_logger(clock: FakeClock) -> MemoryLogger:
    log = MemoryLogger(clock=clock)
    log.set_level(Level.TRACE)
    return log


@pytest.fixture
def mock_backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def history(tmp_path: Path) -> HistoryStore:
    return HistoryStore.in_dir(tmp_path / "state")


@pytest.fixture
def session(mock_backend, history, memory_logger, clock) -> InstallSession:
    """Install session where every collaborator is the mock backend."""
    return InstallSession(
        repositories=mock_backend,
        resolver=mock_backend,
        downloader=mock_backend,
        runner=mock_backend,
        history=history,
        ui=mock_backend,
        logger=memory_logger,
        clock=clock,
    )


@pytest.fixture(autouse=True)
def _reset_process_logger():
    yield
    context.reset_logger()


@pytest.fixture
def catalog_config(tmp_path: Path) -> Path:
    """A minidnf.yml with one inline repo and one metadata-file repo."""
    repo_dir = tmp_path / "repo"
    (repo_dir / "Packages").mkdir(parents=True)
    (repo_dir / "Packages" / "foo-1.2-1.x86_64.rpm").write_bytes(b"foo-payload")

    (tmp_path / "updates.yml").write_text(textwrap.dedent("""\
        packages:
          - name: bar
            version: "2.0"
            release: "3"
            arch: noarch
          - name: bar
            version: "1.9"
            arch: noarch
    """))

    config = tmp_path / "minidnf.yml"
    config.write_text(textwrap.dedent("""\
        cachedir: cache
        persistdir: state
        repos:
          - id: base
            name: Base
            baseurl: repo
            packages:
              - name: foo
                version: "1.2"
                release: "1"
                arch: x86_64
                size: 2048
                location: Packages/foo-1.2-1.x86_64.rpm
              - name: foo
                version: "1.10"
                release: "1"
                arch: x86_64
                location: Packages/missing.rpm
              - name: baz
                version: "0.1"
          - id: updates
            metadata: updates.yml
          - id: disabled
            enabled: false
            packages:
              - name: ghost
                version: "1"
    """))
    return config
