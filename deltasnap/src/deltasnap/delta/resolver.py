"""Reconstruction of a table's active data files from its transaction log."""

import asyncio
from contextlib import closing
from typing import Dict, List, Optional

from deltasnap.common.exceptions import validation_error
from deltasnap.logging import get_logger, request_scope
from deltasnap.protocols import LogDescriptorSource, LogStreamOpener
from deltasnap.types import LogDescriptor
from deltasnap.utils import raise_if_cancelled, traced
from .active_files import ActiveFileMap
from .checkpoint import apply_checkpoint
from .commit import apply_commit_log
from .paths import combine_paths, normalize_path

logger = get_logger(__name__)


class SnapshotResolver:
    """Resolves the active data files of a table.

    The resolver owns no state between calls. Each ``resolve`` call:

    1. drains the log enumeration (the newest commit version must be known
       before any replay decision),
    2. picks the newest checkpoint at or below that version,
    3. applies its parts in ascending part sequence,
    4. replays every later commit in ascending version order,
    5. returns the surviving paths sorted case-insensitively and joined
       with the table root.

    Streams are opened one at a time and closed before the next is opened.

    Example:
        ```python
        resolver = SnapshotResolver(list_log_files, open_file)
        files = await resolver.resolve("Tables/essays")
        ```
    """

    def __init__(
        self,
        enumerate_log_descriptors: LogDescriptorSource,
        open_stream: LogStreamOpener,
    ):
        """Initialize the resolver.

        Args:
            enumerate_log_descriptors: Callable returning an async iterator of
                the table's classified log files
            open_stream: Coroutine function opening a binary stream for a path

        Raises:
            DeltaSnapError: If either collaborator is missing
        """
        if enumerate_log_descriptors is None:
            raise validation_error(
                "A log descriptor source is required",
                field="enumerate_log_descriptors",
            )
        if open_stream is None:
            raise validation_error(
                "A log stream opener is required",
                field="open_stream",
            )

        self._enumerate_log_descriptors = enumerate_log_descriptors
        self._open_stream = open_stream

    @traced(
        span_name="deltasnap.snapshot.resolve",
        attribute_getter=lambda self, table_root_path, cancel=None: {
            "deltasnap.table_path": normalize_path(table_root_path),
        },
    )
    async def resolve(
        self,
        table_root_path: str,
        cancel: Optional[asyncio.Event] = None,
    ) -> List[str]:
        """Resolve the table's active data files.

        Args:
            table_root_path: Table root joined onto every relative path
            cancel: Optional cancellation event

        Returns:
            Fully-qualified active data file paths; empty when the log is
            empty or holds no commit

        Raises:
            CommitLogError: If a commit contains a malformed line
            CheckpointReadError: If a checkpoint part is not readable Parquet
            asyncio.CancelledError: If cancellation was requested
            Exception: Any stream-open failure, unchanged
        """
        table_path = normalize_path(table_root_path)

        with request_scope(table_path=table_path):
            log_files = await self._collect_log_files(cancel)
            if not log_files:
                logger.info(f"Transaction log is empty for table: {table_path}")
                return []

            commits = [log_file for log_file in log_files if log_file.is_commit]
            if not commits:
                logger.warning(
                    f"Transaction log has {len(log_files)} files but no commits; "
                    f"table is unresolved: {table_path}"
                )
                return []

            latest_version = max(commit.version for commit in commits)
            active_files = ActiveFileMap()

            checkpoint_parts = self._select_checkpoint(log_files, latest_version)
            starting_version = -1
            if checkpoint_parts:
                starting_version = checkpoint_parts[0].version
                await self._apply_checkpoint_parts(checkpoint_parts, active_files, cancel)

            replay = sorted(
                (
                    commit for commit in commits
                    if starting_version < commit.version <= latest_version
                ),
                key=lambda commit: commit.version,
            )
            logger.debug(
                f"Replaying {len(replay)} commits after version {starting_version} "
                f"up to {latest_version}"
            )
            await self._apply_commits(replay, active_files, cancel)

            if not active_files:
                logger.info(f"No active data files at version {latest_version}: {table_path}")
                return []

            result = [combine_paths(table_path, path) for path in active_files.sorted_paths()]
            logger.info(
                f"Resolved {len(result)} active data files at version {latest_version}: {table_path}"
            )
            return result

    async def _collect_log_files(self, cancel: Optional[asyncio.Event]) -> List[LogDescriptor]:
        raise_if_cancelled(cancel)

        log_files: List[LogDescriptor] = []
        async for log_file in self._enumerate_log_descriptors(cancel):
            raise_if_cancelled(cancel)
            log_files.append(log_file)

        return log_files

    @staticmethod
    def _select_checkpoint(
        log_files: List[LogDescriptor],
        latest_version: int,
    ) -> List[LogDescriptor]:
        """Parts of the newest usable checkpoint, ordered by part sequence.

        A checkpoint newer than the newest commit is ignored. Parts are not
        checked against the declared total; whatever parts were listed are
        applied.
        """
        groups: Dict[int, List[LogDescriptor]] = {}
        for log_file in log_files:
            if log_file.is_checkpoint and log_file.version <= latest_version:
                groups.setdefault(log_file.version, []).append(log_file)

        if not groups:
            return []

        version = max(groups)
        parts = sorted(groups[version], key=lambda part: part.part_sequence)

        declared = parts[0].part_total
        if len(parts) != declared:
            logger.warning(
                f"Checkpoint {version} declares {declared} parts but {len(parts)} were listed"
            )

        return parts

    async def _apply_checkpoint_parts(
        self,
        parts: List[LogDescriptor],
        active_files: ActiveFileMap,
        cancel: Optional[asyncio.Event],
    ) -> None:
        for part in parts:
            raise_if_cancelled(cancel)

            with closing(await self._open_stream(part.path, cancel)) as stream:
                rows = apply_checkpoint(stream, active_files, cancel, source=part.path)

            logger.debug(
                f"Applied checkpoint {part.version} part {part.part_sequence}/{part.part_total} "
                f"({rows} rows)"
            )

    async def _apply_commits(
        self,
        commits: List[LogDescriptor],
        active_files: ActiveFileMap,
        cancel: Optional[asyncio.Event],
    ) -> None:
        for commit in commits:
            raise_if_cancelled(cancel)

            with closing(await self._open_stream(commit.path, cancel)) as stream:
                actions = apply_commit_log(stream, active_files, cancel, source=commit.path)

            logger.debug(f"Applied commit {commit.version} ({actions} actions)")


async def read_active_data_files(
    enumerate_log_descriptors: LogDescriptorSource,
    open_stream: LogStreamOpener,
    table_path: str,
    cancel: Optional[asyncio.Event] = None,
) -> List[str]:
    """Resolve a table's active data files in one call.

    Args:
        enumerate_log_descriptors: Source of the table's classified log files
        open_stream: Opener for log file streams
        table_path: Table root joined onto every relative path
        cancel: Optional cancellation event

    Returns:
        Fully-qualified active data file paths
    """
    resolver = SnapshotResolver(enumerate_log_descriptors, open_stream)
    return await resolver.resolve(table_path, cancel)
