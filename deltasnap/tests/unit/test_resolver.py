"""Tests for snapshot resolution across checkpoints and commits."""

import asyncio
import io
from unittest.mock import Mock

import pytest

from deltasnap.common.exceptions import CommitLogError, DeltaSnapError, ErrorCode
from deltasnap.delta.resolver import SnapshotResolver, read_active_data_files
from deltasnap.types import LogDescriptor


def _add(path: str) -> dict:
    return {"add": {"path": path, "size": 100, "modificationTime": 1, "dataChange": True}}


def _remove(path: str) -> dict:
    return {"remove": {"path": path, "deletionTimestamp": 2, "dataChange": True}}


def _resolve(delta_log, cancel=None):
    resolver = SnapshotResolver(delta_log.enumerate, delta_log.open_stream)
    return asyncio.run(resolver.resolve(delta_log.table_path, cancel))


class TestSnapshotResolverScenarios:
    """End-to-end scenarios over an in-memory log."""

    def test_skips_retired_parquet_files(self, delta_log):
        delta_log.add_commit(0, _add("part-0000-A.parquet"))
        delta_log.add_commit(1, _remove("part-0000-A.parquet"))
        delta_log.add_commit(2, _add("part-0001-B.parquet"))

        result = _resolve(delta_log)

        assert result == ["tables/mytable/part-0001-B.parquet"]
        assert "tables/mytable/part-0000-A.parquet" not in result

    def test_checkpoint_then_commit(self, delta_log):
        delta_log.add_checkpoint(5, add_paths=["X.parquet"])
        delta_log.add_commit(5, _add("X.parquet"))
        delta_log.add_commit(6, _remove("X.parquet"), _add("Y.parquet"))

        assert _resolve(delta_log) == ["tables/mytable/Y.parquet"]

    def test_commits_at_or_below_checkpoint_are_not_replayed(self, delta_log):
        delta_log.add_commit(0, _add("from-commit-0.parquet"))
        delta_log.add_commit(1, _add("from-commit-1.parquet"))
        delta_log.add_checkpoint(1, add_paths=["from-checkpoint.parquet"])
        delta_log.add_commit(2, _add("from-commit-2.parquet"))

        result = _resolve(delta_log)

        assert result == [
            "tables/mytable/from-checkpoint.parquet",
            "tables/mytable/from-commit-2.parquet",
        ]
        assert delta_log.opened == [
            delta_log.log_path("00000000000000000001.checkpoint.parquet"),
            delta_log.log_path("00000000000000000002.json"),
        ]

    def test_newest_usable_checkpoint_is_chosen(self, delta_log):
        delta_log.add_checkpoint(2, add_paths=["old.parquet"])
        delta_log.add_checkpoint(4, add_paths=["newer.parquet"])
        delta_log.add_checkpoint(9, add_paths=["future.parquet"])
        for version in range(6):
            delta_log.add_commit(version, {"commitInfo": {"version": version}})

        result = _resolve(delta_log)

        assert result == ["tables/mytable/newer.parquet"]
        assert delta_log.log_path("00000000000000000009.checkpoint.parquet") not in delta_log.opened

    def test_checkpoint_at_latest_commit_replays_nothing(self, delta_log):
        delta_log.add_commit(3, _add("ignored.parquet"))
        delta_log.add_checkpoint(3, add_paths=["kept.parquet"])

        assert _resolve(delta_log) == ["tables/mytable/kept.parquet"]
        assert len(delta_log.opened) == 1

    def test_multi_part_checkpoint_applied_in_part_order(self, delta_log):
        # Part 2 retires a file that part 1 adds; listing order is reversed
        delta_log.add_checkpoint(1, remove_paths=["a.parquet"], add_paths=["b.parquet"], part=2, total=2)
        delta_log.add_checkpoint(1, add_paths=["a.parquet"], part=1, total=2)
        delta_log.add_commit(1, {"commitInfo": {}})

        result = _resolve(delta_log)

        assert result == ["tables/mytable/b.parquet"]
        assert delta_log.opened[:2] == [
            delta_log.log_path("00000000000000000001.checkpoint.0000000001.0000000002.parquet"),
            delta_log.log_path("00000000000000000001.checkpoint.0000000002.0000000002.parquet"),
        ]

    def test_partial_multi_part_checkpoint_is_accepted(self, delta_log):
        delta_log.add_checkpoint(2, add_paths=["a.parquet"], part=1, total=3)
        delta_log.add_commit(2, {"commitInfo": {}})
        delta_log.add_commit(3, _add("b.parquet"))

        assert _resolve(delta_log) == ["tables/mytable/a.parquet", "tables/mytable/b.parquet"]

    def test_commits_are_replayed_in_version_order(self, delta_log):
        delta_log.add_commit(2, _remove("a.parquet"))
        delta_log.add_commit(0, _add("a.parquet"))
        delta_log.add_commit(1, _add("a.parquet"))
        delta_log.add_commit(3, _add("b.parquet"))

        assert _resolve(delta_log) == ["tables/mytable/b.parquet"]

    def test_remove_after_repeated_adds_excludes_path(self, delta_log):
        for version in range(3):
            delta_log.add_commit(version, _add("p.parquet"))
        delta_log.add_commit(3, _remove("p.parquet"))

        assert _resolve(delta_log) == []

    def test_repeated_adds_collapse(self, delta_log):
        delta_log.add_commit(0, _add("p.parquet"), _add("p.parquet"))
        delta_log.add_commit(1, _add("P.parquet"))

        assert _resolve(delta_log) == ["tables/mytable/P.parquet"]

    def test_result_is_sorted_case_insensitively(self, delta_log):
        delta_log.add_commit(0, _add("c.parquet"), _add("B.parquet"), _add("a.parquet"))

        assert _resolve(delta_log) == [
            "tables/mytable/a.parquet",
            "tables/mytable/B.parquet",
            "tables/mytable/c.parquet",
        ]

    def test_partitioned_paths_are_joined_with_table_root(self, delta_log):
        delta_log.table_path = "/Tables/essays/"
        delta_log.add_commit(0, _add("year=2024/part-0.parquet"))

        assert _resolve(delta_log) == ["Tables/essays/year=2024/part-0.parquet"]

    def test_resolution_is_idempotent(self, delta_log):
        delta_log.add_checkpoint(1, add_paths=["a.parquet", "b.parquet"])
        delta_log.add_commit(1, {"commitInfo": {}})
        delta_log.add_commit(2, _remove("a.parquet"), _add("c.parquet"))

        assert _resolve(delta_log) == _resolve(delta_log)

    def test_at_most_one_stream_is_open(self, delta_log):
        delta_log.add_checkpoint(1, add_paths=["a.parquet"], part=1, total=2)
        delta_log.add_checkpoint(1, add_paths=["b.parquet"], part=2, total=2)
        for version in range(1, 5):
            delta_log.add_commit(version, _add(f"c{version}.parquet"))

        _resolve(delta_log)

        assert delta_log.max_open_streams == 1
        assert delta_log.open_streams == 0


class TestSnapshotResolverEdgeCases:

    def test_empty_log(self, delta_log):
        assert _resolve(delta_log) == []
        assert delta_log.opened == []

    def test_checkpoints_without_commits(self, delta_log):
        delta_log.add_checkpoint(3, add_paths=["a.parquet"])
        delta_log.add_checkpoint(7, add_paths=["b.parquet"])

        assert _resolve(delta_log) == []
        assert delta_log.opened == []

    def test_all_files_removed(self, delta_log):
        delta_log.add_commit(0, _add("a.parquet"))
        delta_log.add_commit(1, _remove("a.parquet"))

        assert _resolve(delta_log) == []

    def test_unrecognized_files_are_ignored(self, delta_log):
        delta_log.put(delta_log.log_path("_last_checkpoint"), b"{}")
        delta_log.put(delta_log.log_path("00000000000000000000.crc"), b"{}")
        delta_log.add_commit(0, _add("a.parquet"))

        assert _resolve(delta_log) == ["tables/mytable/a.parquet"]

    def test_malformed_commit_aborts_resolution(self, delta_log):
        delta_log.add_commit(0, _add("a.parquet"))
        delta_log.add_raw_commit(1, '{"add": {"path": "b.parquet"}}\nnot json\n')
        delta_log.add_commit(2, _add("c.parquet"))

        with pytest.raises(CommitLogError) as exc_info:
            _resolve(delta_log)

        assert exc_info.value.path == delta_log.log_path("00000000000000000001.json")
        assert delta_log.open_streams == 0

    def test_stream_open_failure_propagates_unchanged(self, delta_log):
        delta_log.add_commit(0, _add("a.parquet"))
        failure = OSError("storage unavailable")

        async def failing_open(path, cancel):
            raise failure

        resolver = SnapshotResolver(delta_log.enumerate, failing_open)

        with pytest.raises(OSError) as exc_info:
            asyncio.run(resolver.resolve(delta_log.table_path))

        assert exc_info.value is failure

    def test_listing_failure_propagates_unchanged(self):
        async def failing_listing(cancel):
            raise PermissionError("denied")
            yield  # pragma: no cover

        resolver = SnapshotResolver(failing_listing, Mock())

        with pytest.raises(PermissionError):
            asyncio.run(resolver.resolve("t"))

    def test_cancellation_before_start(self, delta_log):
        delta_log.add_commit(0, _add("a.parquet"))
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(asyncio.CancelledError):
            _resolve(delta_log, cancel)

        assert delta_log.opened == []

    def test_cancellation_between_files(self, delta_log):
        delta_log.add_commit(0, _add("a.parquet"))
        delta_log.add_commit(1, _add("b.parquet"))
        delta_log.add_commit(2, _add("c.parquet"))
        cancel = asyncio.Event()
        open_stream = delta_log.open_stream

        async def cancelling_open(path, token):
            stream = await open_stream(path, token)
            cancel.set()
            return stream

        resolver = SnapshotResolver(delta_log.enumerate, cancelling_open)

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(resolver.resolve(delta_log.table_path, cancel))

        assert len(delta_log.opened) == 1
        assert delta_log.open_streams == 0

    def test_descriptors_supplied_directly(self):
        payloads = {
            "log/0.json": b'{"add":{"path":"a.parquet"}}',
            "log/1.json": b'{"add":{"path":"b.parquet"}}',
        }

        async def listing(cancel):
            yield LogDescriptor.commit("log/1.json", 1)
            yield LogDescriptor.commit("log/0.json", 0)

        async def open_stream(path, cancel):
            return io.BytesIO(payloads[path])

        result = asyncio.run(read_active_data_files(listing, open_stream, "root"))

        assert result == ["root/a.parquet", "root/b.parquet"]

    def test_missing_collaborators_are_rejected(self, delta_log):
        with pytest.raises(DeltaSnapError) as exc_info:
            SnapshotResolver(None, delta_log.open_stream)

        assert exc_info.value.error_code == ErrorCode.VALIDATION_ERROR
        assert exc_info.value.details == {"field": "enumerate_log_descriptors"}

        with pytest.raises(DeltaSnapError):
            SnapshotResolver(delta_log.enumerate, None)

    def test_remove_of_expanded_spelling_keeps_file(self, delta_log):
        delta_log.add_commit(0, _add("straße.parquet"))
        delta_log.add_commit(1, _remove("STRASSE.parquet"))

        assert _resolve(delta_log) == ["tables/mytable/straße.parquet"]
