"""
Install use case — wire configuration and collaborators, run the pipeline.

The full vertical slice from ``minidnf install foo`` to a finished
history record: load config, build the catalog backend and history
store, run the install pipeline.
"""

from __future__ import annotations

import logging
from pathlib import Path

from minidnf.adapters.base import TransactionUI
from minidnf.adapters.catalog import CatalogBackend
from minidnf.core.config.loader import ConfigError, load_config
from minidnf.core.context import get_logger
from minidnf.core.engine.pipeline import (
    InstallPipeline,
    InstallResult,
    InstallSession,
    PipelineState,
)
from minidnf.core.logger import Logger
from minidnf.core.models.config import MainConfig
from minidnf.core.persistence.history import HistoryStore

logger = logging.getLogger(__name__)


def run_install(
    patterns: list[str],
    ui: TransactionUI,
    config_path: Path | None = None,
    config: MainConfig | None = None,
    log: Logger | None = None,
    cmdline: str = "",
) -> InstallResult:
    """Install packages matching ``patterns``.

    Args:
        patterns: Package patterns, in command-line order.
        ui: Where problems and the preview go, and who confirms.
        config_path: Optional explicit path to minidnf.yml.
        config: Already loaded config (skips loading).
        log: Logger for the pipeline (default: the process logger).
        cmdline: Command line recorded in the history entry.

    Returns:
        InstallResult. Configuration errors come back as a FAILED
        result with ``error`` set.
    """
    if config is None:
        try:
            config = load_config(config_path)
        except ConfigError as e:
            return InstallResult(state=PipelineState.FAILED, error=str(e))

    backend = CatalogBackend(config)
    session = InstallSession(
        repositories=backend,
        resolver=backend,
        downloader=backend,
        runner=backend,
        history=HistoryStore.in_dir(config.persistdir),
        ui=ui,
        logger=log or get_logger(),
    )
    result = InstallPipeline(session).run(patterns, cmdline=cmdline)
    logger.debug("Install finished in state %s", result.state.value)
    return result
