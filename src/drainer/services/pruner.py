"""Bottom-up removal of the directories captured by a walk."""
from __future__ import annotations

import errno
import logging
import os
import time
from typing import Iterable, List

from .errors import PruneError
from .models import DirectoryEntry, PruneResult

logger = logging.getLogger(__name__)


def prune_order(entries: Iterable[DirectoryEntry]) -> List[DirectoryEntry]:
    """Return ``entries`` deepest first so every child precedes its parent."""

    return sorted(entries, key=lambda entry: entry.depth, reverse=True)


class DirectoryPruner:
    """Delete snapshot directories deepest first, recording every outcome.

    Only empty directories are removed. A directory that still holds content (for
    example a file whose relocation failed) is reported and left in place, and its
    ancestors fail the same way.
    """

    def prune(self, entries: Iterable[DirectoryEntry]) -> List[PruneResult]:
        results: List[PruneResult] = []
        for entry in prune_order(entries):
            attempted_at = time.monotonic_ns()
            try:
                self._remove(entry)
            except PruneError as exc:
                logger.warning("Unable to delete %s: %s", exc.path, exc)
                results.append(PruneResult(path=entry.path, deleted=False, reason=str(exc), attempted_at=attempted_at))
                continue
            logger.info("Deleted: %s", entry.path)
            results.append(PruneResult(path=entry.path, deleted=True, attempted_at=attempted_at))
        return results

    def _remove(self, entry: DirectoryEntry) -> None:
        try:
            os.rmdir(entry.path)
        except OSError as exc:
            if exc.errno in (errno.ENOTEMPTY, errno.EEXIST):
                reason = "directory not empty"
            elif isinstance(exc, FileNotFoundError):
                reason = "directory no longer exists"
            elif isinstance(exc, PermissionError):
                reason = "permission denied"
            else:
                reason = exc.strerror or str(exc)
            raise PruneError(entry.path, reason) from exc
