"""Constants module for deltasnap.

This module contains all constant values and enumerations used throughout
deltasnap. As Layer 0 in the architecture, this module has no dependencies
on other deltasnap modules.

Organization:
    - delta_log: Log file kinds, file name markers and action field names
"""

from deltasnap.constants.delta_log import (
    LogFileKind,
    DEFAULT_DELTA_LOG_DIR,
    COMMIT_SUFFIX,
    CHECKPOINT_MARKER,
    CHECKSUM_SUFFIX,
    CHECKPOINT_SEGMENT,
    PARQUET_SEGMENT,
    ADD_PATH_COLUMN,
    REMOVE_PATH_COLUMN,
    ADD_ACTION,
    REMOVE_ACTION,
    PATH_FIELD,
    MAX_VERSION,
    MAX_PART_NUMBER,
)

__all__ = [
    "LogFileKind",
    "DEFAULT_DELTA_LOG_DIR",
    "COMMIT_SUFFIX",
    "CHECKPOINT_MARKER",
    "CHECKSUM_SUFFIX",
    "CHECKPOINT_SEGMENT",
    "PARQUET_SEGMENT",
    "ADD_PATH_COLUMN",
    "REMOVE_PATH_COLUMN",
    "ADD_ACTION",
    "REMOVE_ACTION",
    "PATH_FIELD",
    "MAX_VERSION",
    "MAX_PART_NUMBER",
]
