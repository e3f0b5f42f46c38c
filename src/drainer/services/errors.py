"""Error taxonomy for drain runs."""
from __future__ import annotations

from pathlib import Path


class DrainerError(Exception):
    """Base error for the project."""


class InvalidRootError(DrainerError):
    """Source (or destination) root is missing, not a directory, or nested badly."""


class ConfigError(DrainerError):
    pass


class _PathError(DrainerError):
    def __init__(self, path: Path, message: str) -> None:
        super().__init__(message)
        self.path = path


class WalkError(_PathError):
    """A directory could not be listed."""


class MoveError(_PathError):
    """A single file could not be relocated."""


class PruneError(_PathError):
    """A single directory could not be removed."""
