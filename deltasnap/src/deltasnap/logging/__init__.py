"""Logging infrastructure for deltasnap.

This module provides structured logging with JSON output, context tracking,
and OpenTelemetry trace correlation.
"""

from deltasnap.logging.filters import (
    ContextFilter,
    clear_request_context,
    request_scope,
    set_logging_context,
    set_request_context,
)
from deltasnap.logging.logger import CustomJsonFormatter, get_logger, setup_logging

__all__ = [
    "get_logger",
    "setup_logging",
    "CustomJsonFormatter",
    "ContextFilter",
    "set_logging_context",
    "set_request_context",
    "clear_request_context",
    "request_scope",
]
