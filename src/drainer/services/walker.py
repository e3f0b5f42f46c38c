"""Directory walking that captures a tree as an immutable snapshot."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List

from .errors import InvalidRootError, WalkError
from .models import DirectoryEntry, FileEntry, WalkFailure, WalkSnapshot

logger = logging.getLogger(__name__)


def validate_root(root: Path) -> Path:
    """Return ``root`` as an absolute path, raising if it is not a usable directory."""

    resolved = Path(root).expanduser().absolute()
    if not resolved.exists():
        raise InvalidRootError(f"Source folder does not exist: {resolved}")
    if not resolved.is_dir():
        raise InvalidRootError(f"Source folder is not a directory: {resolved}")
    return resolved


class TreeWalker:
    """Walk a directory once and record every file and subdirectory below it.

    Symbolic links are never descended into. A link (to a file or to a directory)
    is reported as a file entry so it is relocated as an opaque leaf.
    """

    def __init__(self, root: Path, recursive: bool = True) -> None:
        self.root = validate_root(root)
        self.recursive = recursive

    def walk(self) -> WalkSnapshot:
        """Perform the walk synchronously and return the snapshot.

        Raises :class:`WalkError` when the root itself cannot be listed. Unreadable
        subdirectories are skipped and reported in ``WalkSnapshot.failures``.
        """

        files: List[FileEntry] = []
        directories: List[DirectoryEntry] = []
        failures: List[WalkFailure] = []

        def _on_error(exc: OSError) -> None:
            failed = Path(exc.filename) if exc.filename else self.root
            if failed == self.root:
                raise WalkError(self.root, f"Unable to read source folder {self.root}: {exc.strerror or exc}") from exc
            logger.warning("Skipping unreadable directory %s: %s", failed, exc)
            failures.append(WalkFailure(path=failed, reason=exc.strerror or str(exc)))

        for current, dirs, names in os.walk(self.root, onerror=_on_error, followlinks=False):
            current_path = Path(current)
            descend: List[str] = []
            for name in dirs:
                path = current_path / name
                if path.is_symlink():
                    files.append(self._file_entry(path))
                    continue
                directories.append(DirectoryEntry(path=path, depth=len(path.relative_to(self.root).parts)))
                descend.append(name)
            dirs[:] = descend if self.recursive else []

            for name in names:
                path = current_path / name
                if path.is_symlink() or path.is_file():
                    files.append(self._file_entry(path))
                else:
                    logger.debug("Ignoring special file %s", path)

        logger.info(
            "Walked %s: %d file(s), %d folder(s), %d unreadable",
            self.root,
            len(files),
            len(directories),
            len(failures),
        )
        return WalkSnapshot(
            root=self.root,
            files=tuple(files),
            directories=tuple(directories),
            failures=tuple(failures),
        )

    def _file_entry(self, path: Path) -> FileEntry:
        return FileEntry(path=path, relative_path=path.relative_to(self.root))


def walk_tree(root: Path, recursive: bool = True) -> WalkSnapshot:
    """Convenience function to walk ``root`` without holding a walker instance."""

    return TreeWalker(root, recursive=recursive).walk()
