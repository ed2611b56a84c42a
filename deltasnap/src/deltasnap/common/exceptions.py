from enum import Enum
from typing import Any, Dict, Optional


class ErrorCode(Enum):
    """Standard error codes for deltasnap operations.

    This enum provides categorized error codes that can be used
    to identify error types without creating numerous exception classes.
    Each category has a specific number range for easy identification.

    Attributes:
        VALIDATION_*: Input validation errors (2xxx)
        DATA_*: Data quality and integrity errors (6xxx)
        OPERATION_*: High-level operation errors (8xxx)
    """
    # Validation errors (2xxx)
    VALIDATION_ERROR = "VALIDATION_001"

    # Data errors (6xxx)
    DATA_INTEGRITY_ERROR = "DATA_003"
    MALFORMED_COMMIT = "DATA_004"
    MALFORMED_CHECKPOINT = "DATA_005"

    # Operation errors (8xxx)
    OPERATION_ERROR = "OPERATION_001"


class DeltaSnapError(Exception):
    """Base exception for all deltasnap-related errors.

    This exception class uses error codes for categorization
    instead of creating numerous specific exception classes.

    Attributes:
        message: Error message
        error_code: Error code from ErrorCode enum
        details: Additional error details
        cause: Optional underlying exception
        is_retryable: Whether the error is transient and can be retried
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.OPERATION_ERROR,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        is_retryable: bool = False
    ):
        """Initialize deltasnap error.

        Args:
            message: Error message
            error_code: Error code from ErrorCode enum
            details: Additional error details
            cause: Optional underlying exception
            is_retryable: Whether error is transient
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.is_retryable = is_retryable

        # Lazy import to avoid circular dependency
        from deltasnap.logging import get_logger
        logger = get_logger(__name__)
        logger.error(
            message,
            extra={
                "error_code": error_code.value,
                "details": self.details,
                "is_retryable": is_retryable,
            },
            exc_info=(type(cause), cause, cause.__traceback__) if cause is not None else None,
        )

    def __str__(self) -> str:
        """String representation of the error."""
        msg = f"[{self.error_code.value}] {self.message}"
        if self.cause:
            msg = f"{msg} (caused by: {type(self.cause).__name__}: {str(self.cause)})"
        return msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code.value,
            "error_name": self.error_code.name,
            "details": self.details,
            "is_retryable": self.is_retryable
        }


class CommitLogError(DeltaSnapError):
    """Raised when a commit file contains a line that is not a JSON object.

    A commit that exists but cannot be parsed aborts the whole resolution.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        line_number: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        details: Dict[str, Any] = {}
        if path:
            details["path"] = path
        if line_number is not None:
            details["line_number"] = line_number

        super().__init__(
            message=message,
            error_code=ErrorCode.MALFORMED_COMMIT,
            details=details,
            cause=cause,
        )
        self.path = path
        self.line_number = line_number


class CheckpointReadError(DeltaSnapError):
    """Raised when a checkpoint part cannot be decoded as a Parquet file."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            error_code=ErrorCode.MALFORMED_CHECKPOINT,
            details={"path": path} if path else {},
            cause=cause,
        )
        self.path = path


# Helper functions for common error scenarios
def validation_error(
    message: str,
    field: Optional[str] = None,
    value: Any = None,
    **kwargs
) -> DeltaSnapError:
    """Create a validation error.

    Args:
        message: Error message
        field: Field that failed validation
        value: Invalid value
        **kwargs: Additional error details

    Returns:
        DeltaSnapError with VALIDATION_ERROR code
    """
    details = kwargs.get('details', {})
    if field:
        details["field"] = field
    if value is not None:
        details["value"] = str(value)

    return DeltaSnapError(
        message=message,
        error_code=ErrorCode.VALIDATION_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )


def data_integrity_error(
    message: str,
    path: Optional[str] = None,
    **kwargs
) -> DeltaSnapError:
    """Create a data integrity error.

    Args:
        message: Error message
        path: Log or data file the problem was found in
        **kwargs: Additional error details

    Returns:
        DeltaSnapError with DATA_INTEGRITY_ERROR code
    """
    details = kwargs.get('details', {})
    if path:
        details["path"] = path

    return DeltaSnapError(
        message=message,
        error_code=ErrorCode.DATA_INTEGRITY_ERROR,
        details=details,
        **{k: v for k, v in kwargs.items() if k != 'details'}
    )
