from .repo import Repository, VersionCatalog
from .version import Version, SourceFile, FileComparison, walk_files, find_file
from .workqueue import WorkQueue, TaskQueue
from .progress import ProgressTracker, ProgressSnapshot
from .session import CopySession, classify, plan_copy
from .config import Config, load_config, resolve_config
from .exceptions import SnCopyError, QueueClosedError, ConfigError, NoSourceVersionError
from ._types import Classification, CopyPlan, PlannedFile

__all__ = [
    "Repository", "VersionCatalog",
    "Version", "SourceFile", "FileComparison", "walk_files", "find_file",
    "WorkQueue", "TaskQueue",
    "ProgressTracker", "ProgressSnapshot",
    "CopySession", "classify", "plan_copy",
    "Config", "load_config", "resolve_config",
    "SnCopyError", "QueueClosedError", "ConfigError", "NoSourceVersionError",
    "Classification", "CopyPlan", "PlannedFile",
]
