"""Replay of a Parquet checkpoint part into an active-file map.

Only two columns are projected: ``add.path`` and ``remove.path``. Delta
writers store them as the ``path`` child of the top-level ``add`` and
``remove`` struct columns; a flattened top-level column literally named
``add.path`` is accepted as well. Struct columns are read down to the
``path`` leaf only, so stats, partition values and tags are never decoded. A
missing column means every row is absent for it.
"""

import asyncio
from typing import BinaryIO, List, Optional, Sequence, Tuple

import pyarrow as pa
import pyarrow.parquet as pq

from deltasnap.common.exceptions import CheckpointReadError
from deltasnap.constants import ADD_PATH_COLUMN, REMOVE_PATH_COLUMN
from deltasnap.logging import get_logger
from deltasnap.utils import raise_if_cancelled
from .active_files import ActiveFileMap

logger = get_logger(__name__)

# (top-level column name, struct child name or None)
ColumnRef = Tuple[str, Optional[str]]


def _find_column(schema: pa.Schema, dotted_name: str) -> Optional[ColumnRef]:
    wanted = dotted_name.lower()
    parent, _, child = wanted.partition(".")

    for field in schema:
        if field.name.lower() == wanted:
            return field.name, None

    for field in schema:
        if field.name.lower() != parent or not pa.types.is_struct(field.type):
            continue
        for index in range(field.type.num_fields):
            sub_field = field.type.field(index)
            if sub_field.name.lower() == child:
                return field.name, sub_field.name

    return None


def _projection(column: ColumnRef) -> str:
    top_name, child_name = column
    return top_name if child_name is None else f"{top_name}.{child_name}"


def _column_values(table: pa.Table, column: Optional[ColumnRef]) -> Sequence[object]:
    if column is None:
        return []

    top_name, child_name = column
    values = table.column(top_name)
    if child_name is None:
        return values.to_pylist()

    # flatten() merges the parent's validity, so a null struct row gives None
    index = values.type.get_field_index(child_name)
    return values.flatten()[index].to_pylist()


def _value_at(values: Sequence[object], index: int) -> Optional[str]:
    """Value of one row, or None past the column's own length."""
    if index < 0 or index >= len(values):
        return None

    value = values[index]
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def apply_checkpoint(
    stream: BinaryIO,
    active_files: ActiveFileMap,
    cancel: Optional[asyncio.Event] = None,
    source: Optional[str] = None,
) -> int:
    """Apply one checkpoint part to ``active_files``.

    For every row the ``add.path`` value (if any) is marked active first,
    then the ``remove.path`` value (if any) is retired, so a row carrying
    both ends up removed.

    Args:
        stream: Readable, seekable stream over the Parquet part
        active_files: Map mutated in place
        cancel: Optional cancellation event, checked per row
        source: Path of the part, used in logs and errors

    Returns:
        Number of rows visited

    Raises:
        CheckpointReadError: If the stream is not a readable Parquet file
        asyncio.CancelledError: If cancellation was requested
    """
    try:
        parquet_file = pq.ParquetFile(stream)
    except pa.ArrowException as e:
        raise CheckpointReadError(
            f"Checkpoint part is not a readable Parquet file: {source or '<stream>'}",
            path=source,
            cause=e,
        ) from e

    schema = parquet_file.schema_arrow
    add_column = _find_column(schema, ADD_PATH_COLUMN)
    remove_column = _find_column(schema, REMOVE_PATH_COLUMN)

    if add_column is None and remove_column is None:
        logger.debug(f"Checkpoint part has neither add.path nor remove.path: {source}")
        return 0

    projected: List[str] = []
    for column in (add_column, remove_column):
        if column is not None and _projection(column) not in projected:
            projected.append(_projection(column))

    rows_visited = 0
    for row_group in range(parquet_file.num_row_groups):
        raise_if_cancelled(cancel)

        try:
            table = parquet_file.read_row_group(row_group, columns=projected)
        except pa.ArrowException as e:
            raise CheckpointReadError(
                f"Failed to read row group {row_group} of checkpoint part: {source or '<stream>'}",
                path=source,
                cause=e,
            ) from e

        add_paths = _column_values(table, add_column)
        remove_paths = _column_values(table, remove_column)
        row_count = max(len(add_paths), len(remove_paths))

        for row in range(row_count):
            raise_if_cancelled(cancel)

            add_path = _value_at(add_paths, row)
            if add_path:
                active_files.add(add_path)

            remove_path = _value_at(remove_paths, row)
            if remove_path:
                active_files.remove(remove_path)

        rows_visited += row_count

    return rows_visited
