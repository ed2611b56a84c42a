"""Transaction log replay.

Leaf-first: path helpers, log file classification, the active-file map,
the checkpoint and commit appliers, the snapshot resolver, and the row
reader built on top of it.
"""

from .active_files import ActiveFileMap
from .checkpoint import apply_checkpoint
from .commit import apply_commit_log
from .log_files import classify_log_entries, parse_log_file_name
from .paths import combine_paths, delta_log_path, normalize_path
from .reader import TableRowReader, read_data_file_rows
from .resolver import SnapshotResolver, read_active_data_files

__all__ = [
    "ActiveFileMap",
    "apply_checkpoint",
    "apply_commit_log",
    "classify_log_entries",
    "parse_log_file_name",
    "combine_paths",
    "delta_log_path",
    "normalize_path",
    "TableRowReader",
    "read_data_file_rows",
    "SnapshotResolver",
    "read_active_data_files",
]
