"""Collaborator protocol definitions.

The resolver performs no storage I/O of its own. Callers inject two
callables matching these protocols: one enumerating a table's classified
log files and one opening a readable binary stream for a given path.
"""

import asyncio
from typing import AsyncIterator, Awaitable, BinaryIO, Optional, Protocol, runtime_checkable

from deltasnap.types import LogDescriptor


@runtime_checkable
class LogDescriptorSource(Protocol):
    """Enumerates the classified log files of one table.

    Implementations typically list ``<table>/_delta_log`` and pass every
    entry through ``classify_log_entries``. Ordering is not required.
    """

    def __call__(self, cancel: Optional[asyncio.Event]) -> AsyncIterator[LogDescriptor]:
        """Return an async iterator of log descriptors.

        Args:
            cancel: Optional cancellation event shared with the resolver

        Returns:
            Async iterator yielding LogDescriptor values
        """
        ...


@runtime_checkable
class LogStreamOpener(Protocol):
    """Opens a fresh, forward-readable binary stream for a path.

    Each call corresponds to exactly one open/use/close cycle; the caller
    of the opener closes the stream. Checkpoint and data files are decoded
    as Parquet, so those streams must also be seekable.
    """

    def __call__(self, path: str, cancel: Optional[asyncio.Event]) -> Awaitable[BinaryIO]:
        """Open a stream for ``path``.

        Args:
            path: Log or data file path
            cancel: Optional cancellation event shared with the resolver

        Returns:
            Awaitable resolving to a binary file object

        Raises:
            Any I/O error of the underlying storage, unchanged
        """
        ...
