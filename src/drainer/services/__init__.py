"""Services for walking, relocating and pruning directory trees."""

from .errors import ConfigError, DrainerError, InvalidRootError, MoveError, PruneError, WalkError
from .grouper import FileGrouper
from .models import (
    DirectoryEntry,
    FileEntry,
    OutcomeReport,
    PruneResult,
    RelocationResult,
    RelocationTask,
    TaskState,
    WalkFailure,
    WalkSnapshot,
)
from .orchestrator import Drainer, DrainPhase, render_summary, run_drain
from .paths import CONFIG_DIR, CONFIG_FILE, LOG_DIR, ensure_config_dir, ensure_log_dir
from .pruner import DirectoryPruner, prune_order
from .relocation import RelocationScheduler
from .settings import DrainConfig, SettingsManager, load_config
from .transforms import FileTransform, TransformOutcome, TransformRunner
from .walker import TreeWalker, walk_tree

__all__ = [
    "ConfigError",
    "DrainerError",
    "InvalidRootError",
    "MoveError",
    "PruneError",
    "WalkError",
    "FileGrouper",
    "DirectoryEntry",
    "FileEntry",
    "OutcomeReport",
    "PruneResult",
    "RelocationResult",
    "RelocationTask",
    "TaskState",
    "WalkFailure",
    "WalkSnapshot",
    "Drainer",
    "DrainPhase",
    "render_summary",
    "run_drain",
    "CONFIG_DIR",
    "CONFIG_FILE",
    "LOG_DIR",
    "ensure_config_dir",
    "ensure_log_dir",
    "DirectoryPruner",
    "prune_order",
    "RelocationScheduler",
    "DrainConfig",
    "SettingsManager",
    "load_config",
    "FileTransform",
    "TransformOutcome",
    "TransformRunner",
    "TreeWalker",
    "walk_tree",
]
