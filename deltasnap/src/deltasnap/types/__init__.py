"""Type definitions for deltasnap."""

from .base import DeltaSnapBaseModel
from .log import LogDescriptor, LogEntry

__all__ = [
    'DeltaSnapBaseModel',
    'LogDescriptor',
    'LogEntry',
]
