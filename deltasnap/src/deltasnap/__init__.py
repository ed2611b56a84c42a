from deltasnap.__version__ import __version__

from deltasnap.delta import (
    ActiveFileMap,
    SnapshotResolver,
    TableRowReader,
    apply_checkpoint,
    apply_commit_log,
    classify_log_entries,
    combine_paths,
    delta_log_path,
    normalize_path,
    parse_log_file_name,
    read_active_data_files,
    read_data_file_rows,
)
from deltasnap.types import LogDescriptor, LogEntry
from deltasnap.constants import LogFileKind

from deltasnap.common.exceptions import (
    CheckpointReadError,
    CommitLogError,
    DeltaSnapError,
    ErrorCode,
)


__all__ = [
    "__version__",

    # Resolution
    "SnapshotResolver",
    "read_active_data_files",
    "TableRowReader",
    "read_data_file_rows",

    # Log classification
    "LogDescriptor",
    "LogEntry",
    "LogFileKind",
    "parse_log_file_name",
    "classify_log_entries",

    # Replay building blocks
    "ActiveFileMap",
    "apply_checkpoint",
    "apply_commit_log",

    # Paths
    "normalize_path",
    "combine_paths",
    "delta_log_path",

    # Exceptions (public API)
    "DeltaSnapError",
    "ErrorCode",
    "CommitLogError",
    "CheckpointReadError",
]
