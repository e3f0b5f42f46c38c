import errno
import os
import threading
from pathlib import Path
from types import MethodType

import pytest

from drainer.services.models import FileEntry, TaskState
from drainer.services.relocation import RelocationScheduler


def _entry(root: Path, relative: str, content: str | None = None) -> FileEntry:
    path = root / relative
    if content is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    return FileEntry(path=path, relative_path=Path(relative))


def test_relocate_mirrors_relative_paths(tmp_path: Path) -> None:
    source = tmp_path / "src"
    dest = tmp_path / "dst"
    entries = [_entry(source, "a/b/one.txt", "one"), _entry(source, "two.txt", "two")]

    tasks = RelocationScheduler(max_workers=2).relocate(entries, dest)

    assert all(task.state is TaskState.SUCCEEDED for task in tasks)
    assert (dest / "a" / "b" / "one.txt").read_text() == "one"
    assert (dest / "two.txt").read_text() == "two"
    assert not (source / "a" / "b" / "one.txt").exists()
    assert not (source / "two.txt").exists()


def test_existing_destination_file_is_replaced(tmp_path: Path) -> None:
    source = tmp_path / "src"
    dest = tmp_path / "dst"
    entry = _entry(source, "clip.txt", "new")
    dest.mkdir()
    (dest / "clip.txt").write_text("old")

    [task] = RelocationScheduler().relocate([entry], dest)

    assert task.succeeded
    assert (dest / "clip.txt").read_text() == "new"


def test_shared_missing_ancestor_is_created_once_without_errors(tmp_path: Path) -> None:
    source = tmp_path / "src"
    dest = tmp_path / "dst"
    entries = [_entry(source, f"deep/er/still/file{index}.txt", str(index)) for index in range(40)]

    tasks = RelocationScheduler(max_workers=8).relocate(entries, dest)

    assert [task.reason for task in tasks if not task.succeeded] == []
    assert len(list((dest / "deep" / "er" / "still").iterdir())) == 40


def test_one_failure_does_not_affect_siblings(tmp_path: Path) -> None:
    source = tmp_path / "src"
    dest = tmp_path / "dst"
    entries = [_entry(source, f"file{index}.txt", str(index)) for index in range(5)]
    scheduler = RelocationScheduler(max_workers=3)
    original = scheduler._move_file

    def flaky_move(self, src, dst):
        if src.name == "file2.txt":
            raise PermissionError(13, "Permission denied", str(src))
        return original(src, dst)

    scheduler._move_file = MethodType(flaky_move, scheduler)

    tasks = scheduler.relocate(entries, dest)

    failed = [task for task in tasks if not task.succeeded]
    assert [task.source.name for task in failed] == ["file2.txt"]
    assert failed[0].reason == "permission denied"
    assert (source / "file2.txt").exists()
    assert sorted(path.name for path in dest.iterdir()) == ["file0.txt", "file1.txt", "file3.txt", "file4.txt"]


def test_missing_source_is_reported(tmp_path: Path) -> None:
    entry = _entry(tmp_path / "src", "gone.txt")

    [task] = RelocationScheduler().relocate([entry], tmp_path / "dst")

    assert task.state is TaskState.FAILED
    assert task.reason == "source no longer exists"


def test_cross_device_move_falls_back_to_copy(tmp_path: Path, monkeypatch) -> None:
    source = tmp_path / "src"
    dest = tmp_path / "dst"
    entry = _entry(source, "a/photo.txt", "pixels")

    def no_rename(src, dst):
        raise OSError(errno.EXDEV, "Invalid cross-device link")

    monkeypatch.setattr(os, "replace", no_rename)

    [task] = RelocationScheduler().relocate([entry], dest)

    assert task.succeeded
    assert task.copied
    assert (dest / "a" / "photo.txt").read_text() == "pixels"
    assert not entry.path.exists()


def test_every_task_is_settled_when_relocate_returns(tmp_path: Path) -> None:
    source = tmp_path / "src"
    entries = [_entry(source, f"d{index % 3}/f{index}.txt", "x") for index in range(12)]
    seen: list[tuple[int, int]] = []

    tasks = RelocationScheduler(max_workers=4).relocate(
        entries, tmp_path / "dst", progress_callback=lambda done, total: seen.append((done, total))
    )

    assert len(tasks) == 12
    assert all(task.settled and task.finished_at is not None for task in tasks)
    assert seen[-1] == (12, 12)
    assert [done for done, _ in seen] == list(range(1, 13))


def test_cancelled_tasks_leave_files_in_place(tmp_path: Path) -> None:
    source = tmp_path / "src"
    entries = [_entry(source, f"f{index}.txt", "x") for index in range(3)]
    cancel = threading.Event()
    cancel.set()

    tasks = RelocationScheduler(cancel_event=cancel).relocate(entries, tmp_path / "dst")

    assert {task.reason for task in tasks} == {"cancelled"}
    assert all(entry.path.exists() for entry in entries)
    assert not (tmp_path / "dst").exists()


def test_same_path_is_skipped(tmp_path: Path) -> None:
    entry = _entry(tmp_path, "a/keep.txt", "keep")

    [task] = RelocationScheduler().relocate([entry], tmp_path)

    assert task.succeeded and task.skipped
    assert entry.path.read_text() == "keep"


def test_no_entries_returns_empty_list(tmp_path: Path) -> None:
    assert RelocationScheduler().relocate([], tmp_path) == []


def test_worker_count_must_be_positive() -> None:
    with pytest.raises(ValueError):
        RelocationScheduler(max_workers=0)


def test_progress_callback_errors_do_not_escape(tmp_path: Path) -> None:
    source = tmp_path / "src"
    entries = [_entry(source, f"f{index}.txt", "x") for index in range(3)]
    calls: list[int] = []

    def broken(done: int, total: int) -> None:
        calls.append(done)
        raise RuntimeError("boom")

    tasks = RelocationScheduler(max_workers=2).relocate(entries, tmp_path / "dst", progress_callback=broken)

    assert all(task.succeeded for task in tasks)
    assert calls == [1, 2, 3]
