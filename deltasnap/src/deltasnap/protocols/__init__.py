"""Protocol definitions for deltasnap collaborators."""

from .io import LogDescriptorSource, LogStreamOpener

__all__ = [
    "LogDescriptorSource",
    "LogStreamOpener",
]
