"""Shared fixtures: an in-memory Delta table with a transaction log."""

import asyncio
import io
import json
from typing import Dict, Iterable, List, Optional

import pyarrow as pa
import pyarrow.parquet as pq
import pytest

from deltasnap.delta import parse_log_file_name
from deltasnap.settings import reload_settings


PATH_STRUCT = pa.struct([("path", pa.string())])


def checkpoint_bytes(
    add_paths: Iterable[str] = (),
    remove_paths: Iterable[str] = (),
    row_group_size: Optional[int] = None,
) -> bytes:
    """Checkpoint Parquet with Delta's ``add``/``remove`` struct columns."""
    adds: List[Optional[dict]] = []
    removes: List[Optional[dict]] = []
    for path in add_paths:
        adds.append({"path": path})
        removes.append(None)
    for path in remove_paths:
        adds.append(None)
        removes.append({"path": path})

    table = pa.table({
        "add": pa.array(adds, type=PATH_STRUCT),
        "remove": pa.array(removes, type=PATH_STRUCT),
    })
    return parquet_bytes(table, row_group_size)


def parquet_bytes(table: pa.Table, row_group_size: Optional[int] = None) -> bytes:
    buffer = io.BytesIO()
    pq.write_table(table, buffer, row_group_size=row_group_size)
    return buffer.getvalue()


def commit_bytes(*actions: dict) -> bytes:
    return "\n".join(json.dumps(action) for action in actions).encode("utf-8")


class TrackingStream(io.BytesIO):
    """BytesIO that reports open/close to its owning log."""

    def __init__(self, owner: "InMemoryDeltaLog", payload: bytes):
        super().__init__(payload)
        self._owner = owner
        self._released = False

    def close(self) -> None:
        if not self._released:
            self._released = True
            self._owner.open_streams -= 1
        super().close()


class InMemoryDeltaLog:
    """A table root plus log files kept in memory.

    ``enumerate`` and ``open_stream`` satisfy the resolver's collaborator
    protocols and record how they were used.
    """

    def __init__(self, table_path: str = "tables/mytable"):
        self.table_path = table_path
        self.files: Dict[str, bytes] = {}
        self.listing_order: List[str] = []
        self.opened: List[str] = []
        self.open_streams = 0
        self.max_open_streams = 0

    def log_path(self, name: str) -> str:
        return f"{self.table_path}/_delta_log/{name}"

    def put(self, path: str, payload: bytes) -> str:
        if path not in self.files:
            self.listing_order.append(path)
        self.files[path] = payload
        return path

    def add_commit(self, version: int, *actions: dict) -> str:
        return self.put(self.log_path(f"{version:020d}.json"), commit_bytes(*actions))

    def add_raw_commit(self, version: int, text: str) -> str:
        return self.put(self.log_path(f"{version:020d}.json"), text.encode("utf-8"))

    def add_checkpoint(
        self,
        version: int,
        add_paths: Iterable[str] = (),
        remove_paths: Iterable[str] = (),
        part: Optional[int] = None,
        total: Optional[int] = None,
    ) -> str:
        if part is None:
            name = f"{version:020d}.checkpoint.parquet"
        else:
            name = f"{version:020d}.checkpoint.{part:010d}.{total:010d}.parquet"
        return self.put(self.log_path(name), checkpoint_bytes(add_paths, remove_paths))

    async def enumerate(self, cancel: Optional[asyncio.Event]):
        for path in list(self.listing_order):
            descriptor = parse_log_file_name(path)
            if descriptor is not None:
                yield descriptor
            await asyncio.sleep(0)

    async def open_stream(self, path: str, cancel: Optional[asyncio.Event]) -> io.BytesIO:
        await asyncio.sleep(0)
        self.opened.append(path)
        self.open_streams += 1
        self.max_open_streams = max(self.max_open_streams, self.open_streams)
        return TrackingStream(self, self.files[path])


@pytest.fixture
def delta_log() -> InMemoryDeltaLog:
    return InMemoryDeltaLog()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Fresh settings for every test, unaffected by the caller's environment."""
    for name in ("DELTASNAP_APP_ENV", "DELTASNAP_LOG_LEVEL", "DELTASNAP_DELTA_LOG_DIR_NAME"):
        monkeypatch.delenv(name, raising=False)
    reload_settings()
    yield
    reload_settings()


@pytest.fixture
def make_checkpoint():
    return checkpoint_bytes


@pytest.fixture
def make_parquet():
    return parquet_bytes
