"""Split the files of one folder into fixed-size ``Group_N`` subfolders."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from .models import FileEntry, RelocationTask
from .relocation import DEFAULT_MAX_WORKERS, ProgressCallback, RelocationScheduler
from .walker import validate_root

logger = logging.getLogger(__name__)

GROUP_PREFIX = "Group_"


class FileGrouper:
    """Move the regular files directly inside a folder into numbered groups.

    Files are ordered by name, or by modification time when ``sort_by_date`` is set,
    and the first ``group_size`` land in ``Group_1``, the next in ``Group_2`` and so
    on. Existing files of the same name inside a group folder are replaced.
    """

    def __init__(self, group_size: int, *, sort_by_date: bool = False, max_workers: int = DEFAULT_MAX_WORKERS) -> None:
        if group_size < 1:
            raise ValueError("group_size must be at least 1")
        self.group_size = group_size
        self.sort_by_date = sort_by_date
        self.scheduler = RelocationScheduler(max_workers=max_workers)

    def plan(self, source_dir: Path) -> List[FileEntry]:
        root = validate_root(source_dir)
        files = [path for path in root.iterdir() if path.is_file()]
        if self.sort_by_date:
            files.sort(key=lambda path: (path.stat().st_mtime_ns, path.name))
        else:
            files.sort(key=lambda path: path.name)

        return [
            FileEntry(path=path, relative_path=Path(f"{GROUP_PREFIX}{index // self.group_size + 1}", path.name))
            for index, path in enumerate(files)
        ]

    def group(self, source_dir: Path, progress_callback: ProgressCallback | None = None) -> List[RelocationTask]:
        root = validate_root(source_dir)
        entries = self.plan(root)
        logger.info("Grouping %d file(s) in %s into folders of %d", len(entries), root, self.group_size)
        return self.scheduler.relocate(entries, root, progress_callback=progress_callback)
