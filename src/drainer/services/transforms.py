"""Boundary for per-file transforms applied across a walked tree.

Concrete transforms (timestamp rewriting, image conversion, archiving) live outside
this package. They only need to be callables taking a source path and returning a
:class:`TransformOutcome`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Protocol

from .walker import TreeWalker

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransformOutcome:
    """Result of applying a transform to one file."""

    source: Path
    success: bool
    detail: str = ""


class FileTransform(Protocol):
    def __call__(self, source: Path) -> TransformOutcome:  # pragma: no cover - protocol
        ...


def _normalize_extensions(extensions: Iterable[str] | None) -> set[str]:
    normalized: set[str] = set()
    for ext in extensions or ():
        ext = ext.strip().lower()
        if not ext:
            continue
        normalized.add(ext if ext.startswith(".") else f".{ext}")
    return normalized


class TransformRunner:
    """Invoke a transform exactly once for every matching file under a root."""

    def __init__(
        self,
        transform: FileTransform,
        extensions: Iterable[str] | None = None,
        recursive: bool = True,
    ) -> None:
        self.transform = transform
        self.extensions = _normalize_extensions(extensions)
        self.recursive = recursive

    def matches(self, path: Path) -> bool:
        return not self.extensions or path.suffix.lower() in self.extensions

    def run(self, root: Path) -> List[TransformOutcome]:
        snapshot = TreeWalker(root, recursive=self.recursive).walk()
        outcomes: List[TransformOutcome] = []
        for entry in snapshot.files:
            if not self.matches(entry.path):
                continue
            try:
                outcome = self.transform(entry.path)
            except Exception as exc:
                logger.warning("Transform failed for %s: %s", entry.path, exc)
                outcome = TransformOutcome(source=entry.path, success=False, detail=str(exc))
            outcomes.append(outcome)
        return outcomes
