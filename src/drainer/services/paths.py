"""Locations of the drainer's config file and logs."""
from __future__ import annotations

import os
from pathlib import Path

CONFIG_DIR = Path(os.environ.get("DRAINER_CONFIG_DIR") or Path.home() / ".config" / "file-drainer").expanduser()
CONFIG_FILE = CONFIG_DIR / "config.json"
LOG_DIR = CONFIG_DIR / "logs"


def ensure_config_dir() -> Path:
    """Ensure the configuration directory exists and return it."""

    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR


def ensure_log_dir() -> Path:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    return LOG_DIR
