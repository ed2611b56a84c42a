"""Logging filters for context injection.

This module provides filters that inject context variables into log records,
enabling correlation of logs across resolution calls and the tables they read.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Dict, Iterator, Optional
from deltasnap.__version__ import __version__

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
table_path_var: ContextVar[Optional[str]] = ContextVar("table_path", default=None)

_static_context: Dict[str, Any] = {}


class ContextFilter(logging.Filter):
    """Logging filter that adds context variables to log records.

    This filter extracts values from context variables and adds them to
    log records, enabling log correlation across async operations.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Add context variables to the log record.

        Args:
            record: Log record to enhance

        Returns:
            Always True (doesn't filter out any records)
        """
        setattr(record, "request_id", request_id_var.get())
        setattr(record, "table_path", table_path_var.get())
        setattr(record, "sdk_name", "deltasnap")
        setattr(record, "sdk_version", __version__)

        for key, value in _static_context.items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return True


def set_logging_context(
    environment: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """Replace the static context stamped on every record.

    Args:
        environment: Deployment environment name (omitted when None)
        extra: Additional static key/value pairs
    """
    _static_context.clear()
    if environment is not None:
        _static_context["environment"] = environment
    if extra:
        _static_context.update(extra)


def set_request_context(
    request_id: Optional[str] = None,
    table_path: Optional[str] = None,
) -> None:
    """Set request context variables."""
    if request_id is not None:
        request_id_var.set(request_id)
    if table_path is not None:
        table_path_var.set(table_path)


def clear_request_context() -> None:
    """Clear all request context variables."""
    request_id_var.set(None)
    table_path_var.set(None)


@contextmanager
def request_scope(
    request_id: Optional[str] = None,
    table_path: Optional[str] = None,
) -> Iterator[str]:
    """Bind request context for the duration of a block.

    Previous values are restored on exit, so nested and concurrent
    (task-local) scopes do not leak into each other.

    Args:
        request_id: Correlation id; a new UUID is generated when omitted
        table_path: Table the request operates on

    Yields:
        The request id in effect
    """
    request_id = request_id or str(uuid.uuid4())
    request_token = request_id_var.set(request_id)
    table_token = table_path_var.set(table_path)
    try:
        yield request_id
    finally:
        table_path_var.reset(table_token)
        request_id_var.reset(request_token)
