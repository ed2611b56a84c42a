"""Transaction log constants and enumerations.

This module contains the enum types and literal names used when
classifying and replaying a table's ``_delta_log`` directory.
"""

from enum import Enum


class LogFileKind(str, Enum):
    """Enum for transaction log file kinds.

    Values:
        COMMIT: Line-delimited JSON file recording the actions of one version
        CHECKPOINT_PART: One Parquet part of a checkpoint compacting the
            active-file state as of (and including) its version
    """

    COMMIT = "commit"
    CHECKPOINT_PART = "checkpoint_part"


DEFAULT_DELTA_LOG_DIR = "_delta_log"

COMMIT_SUFFIX = ".json"
CHECKPOINT_MARKER = ".checkpoint"
CHECKSUM_SUFFIX = ".crc"
CHECKPOINT_SEGMENT = "checkpoint"
PARQUET_SEGMENT = "parquet"

# Projected checkpoint columns
ADD_PATH_COLUMN = "add.path"
REMOVE_PATH_COLUMN = "remove.path"

# Commit action keys
ADD_ACTION = "add"
REMOVE_ACTION = "remove"
PATH_FIELD = "path"

MAX_VERSION = 2**64 - 1
MAX_PART_NUMBER = 2**32 - 1
