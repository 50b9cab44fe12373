"""Locations of the configuration and data directories."""

from __future__ import annotations

import os
from pathlib import Path

import platformdirs

from .errors import ConfigError, IoError

CONFIG_DIR_NAME = "garmin"


def config_dir() -> Path:
    """Return the directory holding configuration files."""
    base = platformdirs.user_config_dir()
    if not base:
        raise ConfigError("Could not determine config directory")
    return Path(base) / CONFIG_DIR_NAME


def data_dir() -> Path:
    """Return the directory holding tokens and the local database."""
    base = platformdirs.user_data_dir()
    if not base:
        raise ConfigError("Could not determine data directory")
    return Path(base) / CONFIG_DIR_NAME


def ensure_dir(path: str | os.PathLike[str]) -> None:
    """Create ``path`` and any missing parents if it does not exist yet."""
    target = Path(path)
    if target.exists():
        return
    try:
        target.mkdir(parents=True, exist_ok=True)
    except OSError as err:
        raise IoError(str(err)) from err