"""Persistent storage for drain run defaults."""
from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError
from .paths import CONFIG_FILE, ensure_config_dir
from .relocation import DEFAULT_MAX_WORKERS

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class DrainConfig(BaseModel):
    """Defaults applied when a CLI option is not given explicitly."""

    delete_empty_dirs: bool = Field(False, description="Remove emptied folders after relocation.")
    recursive: bool = Field(True, description="Descend into subfolders of the source.")
    max_workers: int = Field(DEFAULT_MAX_WORKERS, ge=1, description="Size of the relocation worker pool.")
    log_level: str = Field("INFO", description="Logging level for console and log file.")

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level


def load_config(path: Path) -> DrainConfig:
    """Read a config file, raising :class:`ConfigError` when it is unusable."""

    path = Path(path).expanduser()
    try:
        return DrainConfig.model_validate_json(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read config {path}: {exc}") from exc
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {path}: {exc}") from exc


class SettingsManager:
    """Load and persist drain defaults to the config directory."""

    def __init__(self, path: Path | None = None) -> None:
        ensure_config_dir()
        self.path = Path(path or CONFIG_FILE).expanduser()
        self._config = self._load()

    @property
    def config(self) -> DrainConfig:
        """Current configuration in memory."""

        return self._config

    def _load(self) -> DrainConfig:
        if self.path.exists():
            try:
                return load_config(self.path)
            except ConfigError as exc:
                logger.warning("Ignoring config file: %s", exc)
        return DrainConfig()

    def save(self) -> None:
        """Write current configuration to disk."""

        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(self._config.model_dump_json(indent=2), encoding="utf-8")

    def update(self, **changes: object) -> None:
        """Persist new values for the given fields; ``None`` leaves a field unchanged."""

        values = {key: value for key, value in changes.items() if value is not None}
        unknown = set(values) - set(DrainConfig.model_fields)
        if unknown:
            raise ConfigError(f"Unknown setting(s): {', '.join(sorted(unknown))}")
        try:
            self._config = DrainConfig.model_validate({**self._config.model_dump(), **values})
        except ValidationError as exc:
            raise ConfigError(str(exc)) from exc
        self.save()
