"""Fan-out relocation of walked files into a destination root."""
from __future__ import annotations

import errno
import logging
import os
import shutil
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Callable, Iterable, List

from .errors import MoveError
from .models import FileEntry, RelocationTask, TaskState

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

DEFAULT_MAX_WORKERS = 8


def describe_os_error(exc: OSError) -> str:
    """Return a short human readable reason for a filesystem failure."""

    if isinstance(exc, PermissionError):
        return "permission denied"
    if isinstance(exc, FileNotFoundError):
        return "source no longer exists"
    if isinstance(exc, IsADirectoryError):
        return "destination is a directory"
    return exc.strerror or str(exc)


class RelocationScheduler:
    """Move every file entry to its mirrored path, one pooled task per file.

    :meth:`relocate` returns only after every submitted task has settled, so callers
    never observe a partially relocated tree.
    """

    def __init__(
        self,
        *,
        max_workers: int = DEFAULT_MAX_WORKERS,
        cancel_event: threading.Event | None = None,
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.max_workers = max_workers
        self.cancel_event = cancel_event or threading.Event()

    def plan(self, entries: Iterable[FileEntry], destination_root: Path) -> List[RelocationTask]:
        """Build one pending task per entry without touching the filesystem."""

        return [
            RelocationTask(source=entry.path, destination=destination_root / entry.relative_path)
            for entry in entries
        ]

    def relocate(
        self,
        entries: Iterable[FileEntry],
        destination_root: Path,
        *,
        progress_callback: ProgressCallback | None = None,
    ) -> List[RelocationTask]:
        tasks = self.plan(entries, destination_root)
        total = len(tasks)
        if not tasks:
            return tasks

        completed = 0
        with ThreadPoolExecutor(max_workers=min(self.max_workers, total), thread_name_prefix="relocate") as pool:
            futures = {pool.submit(self._run_task, task): task for task in tasks}
            for future in as_completed(futures):
                task = futures[future]
                try:
                    future.result()
                except Exception as exc:  # pragma: no cover - unexpected worker failure
                    logger.exception("Relocation of %s crashed", task.source)
                    self._settle(task, TaskState.FAILED, reason=f"unexpected error: {exc}")
                completed += 1
                if progress_callback is not None:
                    try:
                        progress_callback(completed, total)
                    except Exception:
                        logger.exception("Progress callback failed at %d/%d", completed, total)

        return tasks

    def _run_task(self, task: RelocationTask) -> None:
        if self.cancel_event.is_set():
            self._settle(task, TaskState.FAILED, reason="cancelled")
            return

        task.state = TaskState.IN_FLIGHT
        if task.source == task.destination:
            task.skipped = True
            self._settle(task, TaskState.SUCCEEDED)
            logger.debug("Skipped %s: already in place", task.source)
            return

        try:
            task.copied = self._relocate_one(task)
        except MoveError as exc:
            self._settle(task, TaskState.FAILED, reason=str(exc))
            logger.warning("Unable to move %s: %s", exc.path, exc)
            return

        self._settle(task, TaskState.SUCCEEDED)
        logger.info("Moved: %s -> %s%s", task.source, task.destination, " (copied)" if task.copied else "")

    def _relocate_one(self, task: RelocationTask) -> bool:
        try:
            task.destination.parent.mkdir(parents=True, exist_ok=True)
            return self._move_file(task.source, task.destination)
        except OSError as exc:
            raise MoveError(task.source, describe_os_error(exc)) from exc

    def _move_file(self, source: Path, destination: Path) -> bool:
        """Move ``source`` over ``destination`` and return ``True`` if a copy was needed."""

        try:
            os.replace(source, destination)
            return False
        except OSError as exc:
            if exc.errno != errno.EXDEV:
                raise
        logger.debug("Cross-device move for %s, falling back to copy and delete", source)
        shutil.copy2(source, destination, follow_symlinks=False)
        os.unlink(source)
        return True

    @staticmethod
    def _settle(task: RelocationTask, state: TaskState, reason: str | None = None) -> None:
        task.state = state
        task.reason = reason
        task.finished_at = time.monotonic_ns()
