"""Common utilities and exceptions for deltasnap.

Key Components:
    - **Exceptions**: Exception hierarchy with error codes

Exception Design:
    The exception system uses error codes for categorization rather than
    numerous specific exception classes. All exceptions inherit from
    DeltaSnapError and include structured error information. The two
    subclasses mark the fatal log-content failures: a commit line that is
    not a JSON object and a checkpoint part that is not readable Parquet.
"""

from deltasnap.common.exceptions import (
    DeltaSnapError,
    ErrorCode,
    CommitLogError,
    CheckpointReadError,
    # Helper functions
    validation_error,
    data_integrity_error,
)

__all__ = [
    "DeltaSnapError",
    "ErrorCode",
    "CommitLogError",
    "CheckpointReadError",
    "validation_error",
    "data_integrity_error",
]
