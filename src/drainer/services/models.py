"""Value types shared by the walk, relocate and prune phases."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True, slots=True)
class FileEntry:
    """A file discovered during the walk."""

    path: Path
    relative_path: Path


@dataclass(frozen=True, slots=True)
class DirectoryEntry:
    """A directory discovered during the walk, tagged with its depth below the root."""

    path: Path
    depth: int


@dataclass(frozen=True, slots=True)
class WalkFailure:
    """A subtree that could not be listed and was skipped."""

    path: Path
    reason: str


class TaskState(str, Enum):
    PENDING = "pending"
    IN_FLIGHT = "in_flight"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(slots=True)
class RelocationTask:
    """One unit of work moving ``source`` to ``destination``."""

    source: Path
    destination: Path
    state: TaskState = TaskState.PENDING
    reason: str | None = None
    skipped: bool = False
    copied: bool = False
    finished_at: int | None = None

    @property
    def settled(self) -> bool:
        return self.state in (TaskState.SUCCEEDED, TaskState.FAILED)

    @property
    def succeeded(self) -> bool:
        return self.state is TaskState.SUCCEEDED

    def freeze(self) -> RelocationResult:
        """Return an immutable copy of the task as it stands now."""

        return RelocationResult(
            source=self.source,
            destination=self.destination,
            state=self.state,
            reason=self.reason,
            skipped=self.skipped,
            copied=self.copied,
            finished_at=self.finished_at,
        )


@dataclass(frozen=True, slots=True)
class RelocationResult:
    """Settled outcome of a relocation task, as stored in a report."""

    source: Path
    destination: Path
    state: TaskState
    reason: str | None = None
    skipped: bool = False
    copied: bool = False
    finished_at: int | None = None

    @property
    def settled(self) -> bool:
        return self.state in (TaskState.SUCCEEDED, TaskState.FAILED)

    @property
    def succeeded(self) -> bool:
        return self.state is TaskState.SUCCEEDED


@dataclass(frozen=True, slots=True)
class PruneResult:
    """Outcome of one directory removal attempt."""

    path: Path
    deleted: bool
    reason: str | None = None
    attempted_at: int = 0


@dataclass(frozen=True, slots=True)
class WalkSnapshot:
    """Immutable result of walking a tree once."""

    root: Path
    files: Tuple[FileEntry, ...] = ()
    directories: Tuple[DirectoryEntry, ...] = ()
    failures: Tuple[WalkFailure, ...] = ()


@dataclass(frozen=True, slots=True)
class OutcomeReport:
    """Aggregate result of a drain run."""

    tasks: Tuple[RelocationResult, ...] = ()
    prunes: Tuple[PruneResult, ...] = ()
    walk_failures: Tuple[WalkFailure, ...] = ()
    cancelled: bool = False
    pruned: bool = False

    @property
    def moved_count(self) -> int:
        return sum(1 for task in self.tasks if task.succeeded)

    @property
    def failed_moves(self) -> list[tuple[Path, str]]:
        return [(task.source, task.reason or "unknown error") for task in self.tasks if not task.succeeded]

    @property
    def deleted_dirs(self) -> list[Path]:
        return [result.path for result in self.prunes if result.deleted]

    @property
    def failed_prunes(self) -> list[tuple[Path, str]]:
        return [(result.path, result.reason or "unknown error") for result in self.prunes if not result.deleted]

    @property
    def ok(self) -> bool:
        return not (self.failed_moves or self.failed_prunes or self.walk_failures)
