"""Sequence the walk, relocate and prune phases of a drain run."""
from __future__ import annotations

import logging
import threading
from enum import Enum
from pathlib import Path
from typing import List

from .errors import InvalidRootError
from .models import OutcomeReport, PruneResult
from .pruner import DirectoryPruner
from .relocation import DEFAULT_MAX_WORKERS, ProgressCallback, RelocationScheduler
from .walker import TreeWalker

logger = logging.getLogger(__name__)


class DrainPhase(str, Enum):
    IDLE = "idle"
    WALKING = "walking"
    RELOCATING = "relocating"
    PRUNING = "pruning"
    DONE = "done"


def _validate_destination(source: Path, destination: Path | None) -> Path:
    if destination is None:
        return source
    target = Path(destination).expanduser().absolute()
    if target.exists() and not target.is_dir():
        raise InvalidRootError(f"Destination is not a directory: {target}")
    resolved_source = source.resolve()
    resolved_target = target.resolve()
    if resolved_target != resolved_source and resolved_source in resolved_target.parents:
        raise InvalidRootError("Destination cannot be inside the source folder.")
    if resolved_target in resolved_source.parents:
        raise InvalidRootError("Destination cannot contain the source folder.")
    return target


class Drainer:
    """Relocate every file under ``source`` into ``destination`` and optionally prune.

    Phases run strictly in order: the tree is walked once, every file is moved by a
    pooled task and joined, then (if requested) the walked directories are removed
    deepest first. Per-file and per-directory failures land in the returned
    :class:`OutcomeReport`; only an unusable root raises.
    """

    def __init__(
        self,
        source: Path,
        destination: Path | None = None,
        *,
        delete_empty_dirs: bool = False,
        recursive: bool = True,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self.walker = TreeWalker(source, recursive=recursive)
        self.source = self.walker.root
        self.destination = _validate_destination(self.source, destination)
        self.delete_empty_dirs = delete_empty_dirs
        self._cancel_event = threading.Event()
        self.scheduler = RelocationScheduler(max_workers=max_workers, cancel_event=self._cancel_event)
        self.pruner = DirectoryPruner()
        self.phase = DrainPhase.IDLE

    def cancel(self) -> None:
        """Stop scheduling new moves; moves already started run to completion.

        The request applies to the current (or next) run only.
        """

        self._cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancel_event.is_set()

    def run(self, progress_callback: ProgressCallback | None = None) -> OutcomeReport:
        self.phase = DrainPhase.WALKING
        snapshot = self.walker.walk()

        self.phase = DrainPhase.RELOCATING
        logger.info("Relocating %d file(s) from %s to %s", len(snapshot.files), self.source, self.destination)
        tasks = self.scheduler.relocate(snapshot.files, self.destination, progress_callback=progress_callback)

        prunes: List[PruneResult] = []
        pruned = False
        if self.delete_empty_dirs and self.cancelled:
            logger.warning("Run cancelled; leaving folders in place")
        elif self.delete_empty_dirs:
            self.phase = DrainPhase.PRUNING
            prunes = self.pruner.prune(snapshot.directories)
            pruned = True

        self.phase = DrainPhase.DONE
        report = OutcomeReport(
            tasks=tuple(task.freeze() for task in tasks),
            prunes=tuple(prunes),
            walk_failures=snapshot.failures,
            cancelled=self.cancelled,
            pruned=pruned,
        )
        self._cancel_event.clear()
        logger.info(
            "Drain finished: %d moved, %d failed, %d folder(s) deleted, %d not deleted",
            report.moved_count,
            len(report.failed_moves),
            len(report.deleted_dirs),
            len(report.failed_prunes),
        )
        return report


def run_drain(
    source: Path,
    destination: Path | None = None,
    *,
    delete_empty_dirs: bool = False,
    recursive: bool = True,
    max_workers: int = DEFAULT_MAX_WORKERS,
    progress_callback: ProgressCallback | None = None,
) -> OutcomeReport:
    """Convenience function to run a drain without holding a :class:`Drainer`."""

    drainer = Drainer(
        source,
        destination,
        delete_empty_dirs=delete_empty_dirs,
        recursive=recursive,
        max_workers=max_workers,
    )
    return drainer.run(progress_callback=progress_callback)


def render_summary(report: OutcomeReport) -> str:
    """Format ``report`` as the human readable summary printed by the CLI."""

    lines = [f"Moved {report.moved_count} file(s)."]
    if report.pruned:
        lines.append(f"Deleted {len(report.deleted_dirs)} folder(s).")
    if report.cancelled:
        lines.append("Run was cancelled before all files were moved.")
    if report.walk_failures:
        lines.append(f"Unreadable folders ({len(report.walk_failures)}):")
        lines.extend(f"- {failure.path}: {failure.reason}" for failure in report.walk_failures)
    if report.failed_moves:
        lines.append(f"Failed moves ({len(report.failed_moves)}):")
        lines.extend(f"- {path}: {reason}" for path, reason in report.failed_moves)
    if report.failed_prunes:
        lines.append(f"Folders not deleted ({len(report.failed_prunes)}):")
        lines.extend(f"- {path}: {reason}" for path, reason in report.failed_prunes)
    return "\n".join(lines)
