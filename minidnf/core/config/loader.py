"""
Configuration loader — reads minidnf.yml into a MainConfig.

Lookup order for the config file:
    --config PATH  >  MINIDNF_CONFIG env var  >  minidnf.yml found walking up from cwd

No file at all is not an error: defaults apply and no repositories
are configured. Relative paths in the file are resolved against the
directory holding it.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from minidnf.core.models.config import MainConfig
from minidnf.core.models.package import Package

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "minidnf.yml"
CONFIG_ENV_VAR = "MINIDNF_CONFIG"


class ConfigError(Exception):
    """Raised when configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for minidnf.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to minidnf.yml, or None if not found.
    """
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path and start_dir is None:
        return Path(env_path)

    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _read_yaml(path: Path) -> Any:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e


def _resolve(base: Path, value: Path) -> Path:
    return value if value.is_absolute() else (base / value).resolve()


def load_repo_metadata(path: Path) -> list[Package]:
    """Load a repository metadata file (a mapping with a ``packages`` list).

    Raises:
        ConfigError: If the file is missing or malformed.
    """
    if not path.is_file():
        raise ConfigError(f"Repository metadata not found: {path}")

    data = _read_yaml(path) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        return [Package.model_validate(p) for p in data.get("packages", [])]
    except Exception as e:
        raise ConfigError(f"Invalid package metadata in {path}: {e}") from e


def load_config(path: Path | None = None) -> MainConfig:
    """Load and validate configuration.

    Args:
        path: Explicit path to minidnf.yml. If None, searches for one.

    Returns:
        Validated MainConfig with absolute paths.

    Raises:
        ConfigError: If an explicit file is missing or any file is invalid.
    """
    if path is None:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found, using defaults", CONFIG_FILE)
        return _absolutize(MainConfig(), Path.cwd())

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)
    data = _read_yaml(path) or {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # Accept both a flat file and one wrapped under a "main" key
    main_data = dict(data.get("main", data))
    if "repos" in data and "repos" not in main_data:
        main_data["repos"] = data["repos"]

    try:
        config = MainConfig.model_validate(main_data)
    except Exception as e:
        raise ConfigError(f"Invalid configuration: {e}") from e

    config = _absolutize(config, path.parent.resolve())
    logger.info("Loaded config with %d repositories", len(config.repos))
    return config


def _absolutize(config: MainConfig, base: Path) -> MainConfig:
    """Resolve relative paths against ``base`` and pull in repo metadata files."""
    config.installroot = _resolve(base, config.installroot)
    config.cachedir = _resolve(base, config.cachedir)
    config.persistdir = _resolve(base, config.persistdir)
    if config.logfile is not None:
        config.logfile = _resolve(base, config.logfile)

    for repo in config.repos:
        if repo.baseurl.startswith("file://"):
            repo.baseurl = repo.baseurl[len("file://"):]
        if repo.baseurl:
            repo.baseurl = str(_resolve(base, Path(repo.baseurl)))
        if repo.metadata:
            metadata_path = _resolve(base, Path(repo.metadata))
            repo.metadata = str(metadata_path)
    return config
