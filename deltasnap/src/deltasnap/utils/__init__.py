"""Utility functions for deltasnap.

This module provides tracing decorators and cooperative cancellation helpers
used by the transaction log core.
"""

from .cancellation import CancelEvent, is_cancelled, raise_if_cancelled
from .decorators import traced

__all__ = [
    "CancelEvent",
    "is_cancelled",
    "raise_if_cancelled",
    "traced",
]
