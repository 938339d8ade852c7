"""Tests for history ingest and snapshot loading."""
from __future__ import annotations

import copy
import json
from pathlib import Path

import pytest

from undograph_core.errors import MalformedHistory
from undograph_core.errors import UndoGraphError
from undograph_core.ingest import ingest
from undograph_core.ingest import load_raw_history
from undograph_core.models import HistoryRecord


# ---- Tree Building Tests ------------------------------------------------------------------------------------


class TestIngest:
    """Tests for ingest function."""

    def test_synthesizes_root(self) -> None:
        """Test that an empty snapshot yields the root alone."""
        tree = ingest([])
        assert tree.total == 1
        assert tree.root.seq == 0
        assert tree.current_seq == 0

    def test_accepts_none(self) -> None:
        """Test that a missing snapshot behaves like an empty one."""
        assert ingest(None).total == 1

    def test_sorts_children(self, raw_records) -> None:
        """Test that children come out ascending regardless of input order."""
        tree = ingest(raw_records({0: [5, 1, 3], 1: [4, 2]}))
        assert tree.root.children == [1, 3, 5]
        assert tree.nodes[1].children == [2, 4]

    def test_parentless_record_hangs_off_root(self) -> None:
        """Test that top-level forest entries attach to the root."""
        tree = ingest([{"seq": 4, "parent_seq": None}, {"seq": 7, "parent_seq": 4}])
        assert tree.nodes[4].parent == 0
        assert tree.root.children == [4]

    def test_explicit_root_record(self) -> None:
        """Test that a supplied root record is used as is."""
        tree = ingest([{"seq": 0, "parent_seq": None, "time": 5.0}, {"seq": 1, "parent_seq": 0}])
        assert tree.total == 2
        assert tree.root.time == 5.0

    def test_marks_current(self) -> None:
        """Test that the flagged record becomes current."""
        tree = ingest([{"seq": 1, "parent_seq": 0}, {"seq": 2, "parent_seq": 1, "is_current": True}])
        assert tree.current_seq == 2
        assert tree.current.is_current
        assert not tree.root.is_current

    def test_defaults_current_to_root(self) -> None:
        """Test that the root is current when nothing is flagged."""
        tree = ingest([{"seq": 1, "parent_seq": 0}])
        assert tree.current_seq == 0
        assert tree.root.is_current

    def test_accepts_history_records(self) -> None:
        """Test that HistoryRecord objects are accepted."""
        tree = ingest([HistoryRecord(seq=1, parent_seq=0, is_current=True)])
        assert tree.current_seq == 1

    def test_accepts_parent_alias(self) -> None:
        """Test that 'parent' works in place of 'parent_seq'."""
        tree = ingest([{"seq": 1, "parent": 0}, {"seq": 2, "parent": 1}])
        assert tree.nodes[2].parent == 1

    def test_eviction_gap(self, raw_records) -> None:
        """Test that missing seq numbers are not an error."""
        tree = ingest(raw_records({0: [13, 18], 13: [14, 19], 14: [15]}))
        assert tree.total == 6
        assert tree.last_seq == 19

    def test_does_not_mutate_input(self, raw_records) -> None:
        """Test that host data is left untouched."""
        records = raw_records({0: [1, 2], 1: [3]}, current=3)
        original = copy.deepcopy(records)
        ingest(records)
        assert records == original

    def test_rebuilds_from_scratch(self, raw_records) -> None:
        """Test that each call returns an independent tree."""
        records = raw_records({0: [1]})
        first = ingest(records)
        second = ingest(records)
        assert first is not second
        assert first.nodes[1] is not second.nodes[1]


# ---- Validation Tests ---------------------------------------------------------------------------------------


class TestIngestValidation:
    """Tests for MalformedHistory detection."""

    def test_dangling_parent(self) -> None:
        """Test that a parent absent from the snapshot is rejected."""
        with pytest.raises(MalformedHistory, match="missing parent"):
            ingest([{"seq": 1, "parent_seq": 0}, {"seq": 3, "parent_seq": 2}])

    def test_duplicate_seq(self) -> None:
        """Test that a repeated seq is rejected."""
        with pytest.raises(MalformedHistory, match="Duplicate"):
            ingest([{"seq": 1, "parent_seq": 0}, {"seq": 1, "parent_seq": 0}])

    def test_cycle(self) -> None:
        """Test that a parent loop is rejected."""
        with pytest.raises(MalformedHistory, match="Cycle"):
            ingest([{"seq": 5, "parent_seq": 6}, {"seq": 6, "parent_seq": 5}])

    def test_self_parent(self) -> None:
        """Test that a node cannot be its own parent."""
        with pytest.raises(MalformedHistory):
            ingest([{"seq": 2, "parent_seq": 2}])

    def test_parent_younger_than_child(self) -> None:
        """Test that a parent with a higher seq is rejected."""
        with pytest.raises(MalformedHistory, match="older than its parent"):
            ingest([{"seq": 3, "parent_seq": 5}, {"seq": 5, "parent_seq": 0}])

    def test_root_with_parent(self) -> None:
        """Test that the root may not declare a parent."""
        with pytest.raises(MalformedHistory, match="Root"):
            ingest([{"seq": 0, "parent_seq": 1}, {"seq": 1, "parent_seq": 0}])

    def test_multiple_current(self) -> None:
        """Test that only one record may be current."""
        with pytest.raises(MalformedHistory, match="current"):
            ingest([
                {"seq": 1, "parent_seq": 0, "is_current": True},
                {"seq": 2, "parent_seq": 0, "is_current": True},
            ])

    @pytest.mark.parametrize("seq", [-1, "3", True, None, 1.5])
    def test_invalid_seq(self, seq: object) -> None:
        """Test that seq must be a non-negative integer."""
        with pytest.raises(MalformedHistory, match="invalid seq"):
            ingest([{"seq": seq, "parent_seq": 0}])

    @pytest.mark.parametrize("flag", ["false", "true", 1, None])
    def test_non_boolean_current(self, flag: object) -> None:
        """Test that is_current must be a real boolean."""
        with pytest.raises(MalformedHistory, match="non-boolean is_current"):
            ingest([{"seq": 1, "parent_seq": 0, "is_current": flag}])

    def test_invalid_parent(self) -> None:
        """Test that parent_seq must be a non-negative integer."""
        with pytest.raises(MalformedHistory, match="invalid parent_seq"):
            ingest([{"seq": 1, "parent_seq": "zero"}])

    def test_non_mapping_record(self) -> None:
        """Test that records must be mappings."""
        with pytest.raises(MalformedHistory, match="not a mapping"):
            ingest([(1, 0)])

    def test_errors_share_base_class(self) -> None:
        """Test that callers can catch the whole error family."""
        with pytest.raises(UndoGraphError):
            ingest([{"seq": 1, "parent_seq": 9}])


# ---- Snapshot File Tests ------------------------------------------------------------------------------------


class TestLoadRawHistory:
    """Tests for load_raw_history function."""

    def test_loads_record_list(self, tmp_path: Path) -> None:
        """Test that a plain JSON list is returned unchanged."""
        path = tmp_path / "history.json"
        records = [{"seq": 1, "parent_seq": 0}]
        path.write_text(json.dumps(records))
        assert load_raw_history(path) == records

    def test_loads_records_object(self, tmp_path: Path) -> None:
        """Test that a {'records': [...]} wrapper is unwrapped."""
        path = tmp_path / "history.json"
        path.write_text(json.dumps({"records": [{"seq": 1, "parent_seq": 0}]}))
        assert load_raw_history(str(path)) == [{"seq": 1, "parent_seq": 0}]

    def test_loads_undotree_dump(self, tmp_path: Path) -> None:
        """Test that an editor undotree() dump is flattened."""
        path = tmp_path / "undotree.json"
        path.write_text(json.dumps({
            "seq_cur": 2,
            "seq_last": 2,
            "entries": [{"seq": 1, "time": 10}, {"seq": 2, "time": 20}],
        }))
        tree = ingest(load_raw_history(path))
        assert tree.current_seq == 2
        assert tree.nodes[2].parent == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that I/O failures surface as RuntimeError."""
        with pytest.raises(RuntimeError, match="Failed to load history"):
            load_raw_history(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        """Test that undecodable files surface as RuntimeError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(RuntimeError):
            load_raw_history(path)

    def test_unknown_shape(self, tmp_path: Path) -> None:
        """Test that JSON of the wrong shape is rejected."""
        path = tmp_path / "odd.json"
        path.write_text(json.dumps({"nodes": []}))
        with pytest.raises(MalformedHistory):
            load_raw_history(path)
