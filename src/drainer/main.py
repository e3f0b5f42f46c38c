"""Entry point for the ``drainer`` command."""
from __future__ import annotations

import logging
import sys

from drainer.cli import app
from drainer.services.paths import ensure_log_dir
from drainer.services.settings import SettingsManager


def setup_logging(level: str = "INFO") -> None:
    """Configure logging to output to console and file."""
    log_file = ensure_log_dir() / "drainer.log"

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, mode='a', encoding='utf-8'),
        ],
    )


def main() -> None:
    """Configure logging from the stored settings and run the CLI."""
    setup_logging(SettingsManager().config.log_level)
    app()


if __name__ == "__main__":
    main()
