"""Replay of a line-delimited JSON commit into an active-file map."""

import asyncio
import codecs
import json
from typing import Any, BinaryIO, Iterator, Optional

from deltasnap.common.exceptions import CommitLogError
from deltasnap.constants import ADD_ACTION, PATH_FIELD, REMOVE_ACTION
from deltasnap.utils import raise_if_cancelled
from .active_files import ActiveFileMap


def _action_path(record: dict, action: str) -> Optional[str]:
    """``record[action]["path"]`` when it is a string, else None."""
    body = record.get(action)
    if not isinstance(body, dict):
        return None

    path = body.get(PATH_FIELD)
    return path if isinstance(path, str) else None


def _iter_lines(stream: BinaryIO) -> Iterator[bytes]:
    """Lines split on ``\\n``, ``\\r\\n`` or a lone ``\\r``."""
    for chunk in iter(stream.readline, b""):
        # readline() stops at "\n", so "\r\n" is never split across chunks
        yield from chunk.splitlines()


def _decode_line(raw: bytes, line_number: int, source: Optional[str]) -> str:
    if line_number == 1 and raw.startswith(codecs.BOM_UTF8):
        raw = raw[len(codecs.BOM_UTF8):]

    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise CommitLogError(
            f"Commit line {line_number} is not valid UTF-8: {source or '<stream>'}",
            path=source,
            line_number=line_number,
            cause=e,
        ) from e


def apply_commit_log(
    stream: BinaryIO,
    active_files: ActiveFileMap,
    cancel: Optional[asyncio.Event] = None,
    source: Optional[str] = None,
) -> int:
    """Apply one commit file to ``active_files``.

    Each non-blank line is one JSON action object. Lines end at ``\\n``,
    ``\\r\\n`` or a lone ``\\r``. Only ``add.path`` and
    ``remove.path`` are interpreted; ``add`` is applied before ``remove``
    when a line carries both. Other actions (metaData, protocol,
    commitInfo, ...) are ignored.

    Args:
        stream: Readable binary stream over the commit file
        active_files: Map mutated in place
        cancel: Optional cancellation event, checked per line
        source: Path of the commit file, used in errors

    Returns:
        Number of add/remove actions applied

    Raises:
        CommitLogError: If a non-blank line is not a JSON object
        asyncio.CancelledError: If cancellation was requested
    """
    applied = 0
    line_number = 0

    for raw in _iter_lines(stream):
        raise_if_cancelled(cancel)
        line_number += 1

        line = _decode_line(raw, line_number, source)
        if not line.strip():
            continue

        try:
            record: Any = json.loads(line)
        except json.JSONDecodeError as e:
            raise CommitLogError(
                f"Malformed JSON on commit line {line_number}: {source or '<stream>'}",
                path=source,
                line_number=line_number,
                cause=e,
            ) from e

        if not isinstance(record, dict):
            raise CommitLogError(
                f"Commit line {line_number} is not a JSON object: {source or '<stream>'}",
                path=source,
                line_number=line_number,
            )

        add_path = _action_path(record, ADD_ACTION)
        if add_path is not None and active_files.add(add_path):
            applied += 1

        remove_path = _action_path(record, REMOVE_ACTION)
        if remove_path is not None and active_files.remove(remove_path):
            applied += 1

    return applied
