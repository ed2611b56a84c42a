"""Cooperative cancellation checks.

Resolution work runs long synchronous loops (rows of a checkpoint, lines of
a commit) between awaits, so native task cancellation alone cannot interrupt
them. Callers may pass an ``asyncio.Event``; once it is set, the next check
raises ``asyncio.CancelledError`` and the call produces no result.
"""

import asyncio
from typing import Optional


CancelEvent = Optional[asyncio.Event]


def is_cancelled(cancel: CancelEvent) -> bool:
    """Return True when a cancellation event was supplied and has been set."""
    return cancel is not None and cancel.is_set()


def raise_if_cancelled(cancel: CancelEvent) -> None:
    """Raise ``asyncio.CancelledError`` if ``cancel`` has been set.

    Args:
        cancel: Optional cancellation event

    Raises:
        asyncio.CancelledError: If cancellation was requested
    """
    if is_cancelled(cancel):
        raise asyncio.CancelledError("snapshot resolution cancelled")
