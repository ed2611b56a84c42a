"""Classification of transaction log file names.

Recognized shapes (case-insensitive):

- ``<version>.json`` - a commit
- ``<version>.checkpoint.parquet`` - a single-part checkpoint
- ``<version>.checkpoint.<sequence>.<total>.parquet`` - one part of a
  multi-part checkpoint

Anything else (``.crc`` checksums, ``_last_checkpoint``, temp files,
sub-directories) is not a log file. That is not an error: log directories
routinely hold incidental files, so unrecognized names are dropped.
"""

import asyncio
import re
from typing import AsyncIterable, AsyncIterator, Optional, Union

from deltasnap.constants import (
    CHECKPOINT_MARKER,
    CHECKPOINT_SEGMENT,
    CHECKSUM_SUFFIX,
    COMMIT_SUFFIX,
    MAX_PART_NUMBER,
    MAX_VERSION,
    PARQUET_SEGMENT,
)
from deltasnap.logging import get_logger
from deltasnap.types import LogDescriptor, LogEntry
from deltasnap.utils import raise_if_cancelled

logger = get_logger(__name__)

_DIGITS = re.compile(r"[0-9]+")


def _parse_unsigned(text: str, max_value: int) -> Optional[int]:
    """Parse plain ASCII digits; no sign, whitespace or separators."""
    if not _DIGITS.fullmatch(text):
        return None

    value = int(text)
    if value > max_value:
        return None
    return value


def _file_name(path: str) -> str:
    return path.replace("\\", "/").rsplit("/", 1)[-1]


def parse_log_file_name(path: Optional[str]) -> Optional[LogDescriptor]:
    """Classify a log file by its name.

    Args:
        path: Bare file name or listed path; only the final segment is
            inspected and the descriptor keeps ``path`` as given

    Returns:
        LogDescriptor for a commit or checkpoint part, or None when the
        name is not a transaction log file
    """
    if path is None or not path.strip():
        return None

    name = _file_name(path)
    lowered = name.lower()

    if lowered.endswith(COMMIT_SUFFIX):
        version = _parse_unsigned(name[:-len(COMMIT_SUFFIX)], MAX_VERSION)
        if version is None:
            return None
        return LogDescriptor.commit(path, version)

    if CHECKPOINT_MARKER not in lowered or lowered.endswith(CHECKSUM_SUFFIX):
        return None

    segments = [segment for segment in name.split(".") if segment]
    if len(segments) < 3:
        return None

    version = _parse_unsigned(segments[0], MAX_VERSION)
    if version is None or segments[1].lower() != CHECKPOINT_SEGMENT:
        return None

    if len(segments) == 3 and segments[2].lower() == PARQUET_SEGMENT:
        return LogDescriptor.checkpoint_part(path, version)

    if len(segments) == 5 and segments[4].lower() == PARQUET_SEGMENT:
        sequence = _parse_unsigned(segments[2], MAX_PART_NUMBER)
        total = _parse_unsigned(segments[3], MAX_PART_NUMBER)
        if sequence is None or total is None:
            return None
        return LogDescriptor.checkpoint_part(path, version, sequence, total)

    return None


async def classify_log_entries(
    entries: AsyncIterable[Union[LogEntry, str]],
    cancel: Optional[asyncio.Event] = None,
) -> AsyncIterator[LogDescriptor]:
    """Turn a raw log directory listing into log descriptors.

    Directories and unrecognized names are skipped silently.

    Args:
        entries: Listed entries (``LogEntry`` or plain paths)
        cancel: Optional cancellation event

    Yields:
        LogDescriptor for every classifiable file
    """
    skipped = 0
    async for entry in entries:
        raise_if_cancelled(cancel)

        if isinstance(entry, LogEntry):
            if entry.is_directory:
                continue
            path = entry.path
        else:
            path = entry

        descriptor = parse_log_file_name(path)
        if descriptor is None:
            skipped += 1
            continue

        yield descriptor

    if skipped:
        logger.debug(f"Ignored {skipped} non-log entries while listing the transaction log")
