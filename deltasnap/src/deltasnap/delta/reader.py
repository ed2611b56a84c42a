"""Row materialization for the active data files of a table."""

import asyncio
from contextlib import closing
from datetime import date, datetime
from typing import Any, BinaryIO, Dict, List, Optional

import pandas as pd
import pyarrow as pa
import pyarrow.parquet as pq

from deltasnap.common.exceptions import data_integrity_error
from deltasnap.logging import get_logger
from deltasnap.protocols import LogDescriptorSource, LogStreamOpener
from deltasnap.utils import raise_if_cancelled, traced
from .paths import normalize_path
from .resolver import SnapshotResolver

logger = get_logger(__name__)

Row = Dict[str, Any]


def _to_row_value(value: Any) -> Any:
    # Temporal values are handed out as ISO-8601 text
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def read_data_file_rows(
    stream: BinaryIO,
    cancel: Optional[asyncio.Event] = None,
    source: Optional[str] = None,
) -> List[Row]:
    """Decode every row of one Parquet data file.

    Args:
        stream: Readable, seekable stream over the data file
        cancel: Optional cancellation event, checked per row
        source: Path of the file, used in errors

    Returns:
        One dict per row, keyed by column name; a column shorter than the
        row group yields None for the missing rows

    Raises:
        DeltaSnapError: If the stream is not a readable Parquet file
    """
    try:
        parquet_file = pq.ParquetFile(stream)
    except pa.ArrowException as e:
        raise data_integrity_error(
            f"Data file is not a readable Parquet file: {source or '<stream>'}",
            path=source,
            cause=e,
        ) from e

    rows: List[Row] = []
    for row_group in range(parquet_file.num_row_groups):
        raise_if_cancelled(cancel)

        try:
            columns = parquet_file.read_row_group(row_group).to_pydict()
        except pa.ArrowException as e:
            raise data_integrity_error(
                f"Failed to read row group {row_group} of data file: {source or '<stream>'}",
                path=source,
                cause=e,
            ) from e

        if not columns:
            continue

        row_count = max(len(values) for values in columns.values())
        for index in range(row_count):
            raise_if_cancelled(cancel)
            rows.append({
                name: _to_row_value(values[index]) if index < len(values) else None
                for name, values in columns.items()
            })

    return rows


class TableRowReader:
    """Reads the rows of a table's current snapshot.

    The active data files are resolved from the transaction log first, then
    opened and decoded one at a time through the same stream opener.
    """

    def __init__(
        self,
        enumerate_log_descriptors: LogDescriptorSource,
        open_stream: LogStreamOpener,
    ):
        self._resolver = SnapshotResolver(enumerate_log_descriptors, open_stream)
        self._open_stream = open_stream

    @traced(
        span_name="deltasnap.table.read_rows",
        attribute_getter=lambda self, table_path, cancel=None: {
            "deltasnap.table_path": normalize_path(table_path),
        },
    )
    async def read_rows(
        self,
        table_path: str,
        cancel: Optional[asyncio.Event] = None,
    ) -> List[Row]:
        """Read every row of every active data file.

        Args:
            table_path: Table root path
            cancel: Optional cancellation event

        Returns:
            Rows in active-file order, then file order
        """
        data_files = await self._resolver.resolve(table_path, cancel)

        rows: List[Row] = []
        for data_file in data_files:
            raise_if_cancelled(cancel)

            with closing(await self._open_stream(data_file, cancel)) as stream:
                file_rows = read_data_file_rows(stream, cancel, source=data_file)

            logger.debug(f"Read {len(file_rows)} rows from {data_file}")
            rows.extend(file_rows)

        return rows

    async def read_frame(
        self,
        table_path: str,
        cancel: Optional[asyncio.Event] = None,
    ) -> pd.DataFrame:
        """Read the table's current rows into a DataFrame."""
        rows = await self.read_rows(table_path, cancel)
        return pd.DataFrame.from_records(rows)
